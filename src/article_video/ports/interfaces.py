"""
Port interfaces (SOLID – Dependency Inversion).
Implement these in adapters; the application layer depends only on these abstractions.
Tests inject fakes through default_adapters(**overrides).
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from article_video.domain.models import (
    CapturedAudio,
    ExtractionResult,
    SummaryResult,
    SynthesisResult,
)


class IPageFetcher(ABC):
    """Fetches article HTML over the network."""

    @abstractmethod
    def fetch_text(self, url: str) -> str:
        """Return the response body; raise FetchError once retries are exhausted."""
        pass

    @abstractmethod
    def fetch_bytes(self, url: str) -> Optional[bytes]:
        """Return the response body as bytes, or None on any failure."""
        pass


class IArticleExtractor(ABC):
    """Turns raw HTML into article text plus a representative image."""

    @abstractmethod
    def extract(self, html: str, base_url: str) -> ExtractionResult:
        pass


class ISummarizer(ABC):
    """Reduces article text to a narration of roughly target_words words."""

    @abstractmethod
    def summarize(self, text: str, target_words: int = 130) -> SummaryResult:
        pass


class ISpeechSynthesizer(ABC):
    """Server-side TTS. Failure is reported through SynthesisResult.fallback."""

    @abstractmethod
    def synthesize(self, text: str) -> SynthesisResult:
        pass


class IImageResolver(ABC):
    """Picks the thumbnail URL for the video (never returns None)."""

    @abstractmethod
    def resolve(self, scraped_url: Optional[str], summary: str) -> str:
        pass


class IMediaEngine(ABC):
    """
    Encoding engine with a private flat filesystem.
    File names are bare names (no directories); run() works inside that filesystem.
    """

    @abstractmethod
    def write_file(self, name: str, data: bytes) -> None:
        pass

    @abstractmethod
    def read_file(self, name: str) -> bytes:
        pass

    @abstractmethod
    def unlink(self, name: str) -> None:
        """Remove a file; raises FileNotFoundError if it does not exist."""
        pass

    @abstractmethod
    def exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def list_files(self) -> List[str]:
        pass

    @abstractmethod
    def run(self, *args: str) -> None:
        """Run one transcode to completion; raise EngineRunError on failure."""
        pass


class ISpeechCapture(ABC):
    """Local speech engine + recorder, used when the server produced no audio."""

    @abstractmethod
    def available(self) -> bool:
        pass

    @abstractmethod
    def capture(self, text: str) -> Optional[CapturedAudio]:
        """Speak text and return the recording, or None if nothing was recorded."""
        pass
