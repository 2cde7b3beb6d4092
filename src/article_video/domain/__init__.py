"""Domain models and value objects."""

from article_video.domain.models import (
    AudioFormat,
    CapturedAudio,
    ExtractionResult,
    JobPhase,
    MediaAssemblyJob,
    NarrationPayload,
    SummaryResult,
    SynthesisResult,
    VideoArtifact,
)

__all__ = [
    "AudioFormat",
    "CapturedAudio",
    "ExtractionResult",
    "JobPhase",
    "MediaAssemblyJob",
    "NarrationPayload",
    "SummaryResult",
    "SynthesisResult",
    "VideoArtifact",
]
