"""
Adapters – concrete implementations of ports.
default_adapters() wires the production set from Settings; pass overrides
(fetcher=..., synthesizer=..., engine_provider=...) for tests or other backends.
"""

from article_video.adapters.capture import EdgeSpeechCapture
from article_video.adapters.engine import FFmpegEngine, shared_engine
from article_video.adapters.extractor import ArticleExtractor
from article_video.adapters.fetcher import ResilientFetcher
from article_video.adapters.image import ImageResolver
from article_video.adapters.summarizer import Summarizer
from article_video.adapters.tts import ElevenLabsSynthesizer


def default_adapters(settings=None, **overrides):
    """
    Build default adapter instances.
    Keys: fetcher, extractor, summarizer, synthesizer, image_resolver, capture, engine_provider.
    """
    from article_video.config import Settings

    settings = settings or Settings.from_env()

    def engine_provider():
        return shared_engine(settings.ffmpeg_core_path, settings.engine_run_timeout)

    defaults = {
        "fetcher": ResilientFetcher(),
        "extractor": ArticleExtractor(),
        "summarizer": Summarizer.from_settings(settings),
        "synthesizer": ElevenLabsSynthesizer.from_settings(settings),
        "image_resolver": ImageResolver(),
        "capture": EdgeSpeechCapture.from_settings(settings),
        "engine_provider": engine_provider,
    }
    defaults.update(overrides)
    return defaults


__all__ = [
    "ArticleExtractor",
    "EdgeSpeechCapture",
    "ElevenLabsSynthesizer",
    "FFmpegEngine",
    "ImageResolver",
    "ResilientFetcher",
    "Summarizer",
    "default_adapters",
    "shared_engine",
]
