"""Ports (interfaces) – depend on these, implement in adapters."""

from article_video.ports.interfaces import (
    IPageFetcher,
    IArticleExtractor,
    ISummarizer,
    ISpeechSynthesizer,
    IImageResolver,
    IMediaEngine,
    ISpeechCapture,
)

__all__ = [
    "IPageFetcher",
    "IArticleExtractor",
    "ISummarizer",
    "ISpeechSynthesizer",
    "IImageResolver",
    "IMediaEngine",
    "ISpeechCapture",
]
