"""Application layer – use cases and pipeline orchestration."""

from article_video.application.assembler import VideoAssembler
from article_video.application.creator import VideoCreator
from article_video.application.duration import DurationEstimator
from article_video.application.pipeline import NarrationPipeline

__all__ = ["DurationEstimator", "NarrationPipeline", "VideoAssembler", "VideoCreator"]
