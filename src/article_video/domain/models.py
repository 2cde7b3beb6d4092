"""Domain models: the narration payload contract and the assembly job."""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class AudioFormat(str, Enum):
    WAV = "wav"
    MP3 = "mp3"
    WEBM = "webm"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AudioFormat"]:
        """Map a declared format or MIME type to an AudioFormat (None if unknown)."""
        if not value:
            return None
        v = str(value).lower()
        if "wav" in v or "pcm" in v:
            return cls.WAV
        if "mp3" in v or "mpeg" in v:
            return cls.MP3
        if "webm" in v:
            return cls.WEBM
        return None


MIN_ARTICLE_CHARS = 120


@dataclass(frozen=True)
class ExtractionResult:
    article_text: str
    image_url: Optional[str] = None

    def is_usable(self, min_chars: int = MIN_ARTICLE_CHARS) -> bool:
        """Near-empty text is an extraction failure, not a partial success."""
        return len(self.article_text.strip()) >= min_chars


@dataclass(frozen=True)
class SummaryResult:
    text: str
    used_language_model: bool = False


@dataclass(frozen=True)
class SynthesisResult:
    """TTS outcome. fallback=True means no audio and the capture path should run."""
    audio_data: Optional[bytes] = None
    audio_format: Optional["AudioFormat"] = None
    fallback: bool = True

    @classmethod
    def fallback_result(cls) -> "SynthesisResult":
        return cls(audio_data=None, audio_format=None, fallback=True)


@dataclass
class NarrationPayload:
    """
    The only contract between the content pipeline and the media pipeline.

    Serialized at the request boundary via to_dict()/from_dict(). Fields may be
    absent on the wire but never change meaning.
    """
    summary: str
    estimated_duration_sec: float
    image_url: str
    audio_data: Optional[bytes] = None
    audio_format: Optional[AudioFormat] = None
    used_language_model: bool = False
    tts_fallback: bool = True

    def __post_init__(self):
        if (self.audio_data is None) != (self.audio_format is None):
            raise ValueError("audio_format must be set exactly when audio_data is set")
        if self.audio_data is None:
            self.tts_fallback = True

    @property
    def has_audio(self) -> bool:
        return self.audio_data is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "audioBase64": base64.b64encode(self.audio_data).decode("ascii") if self.audio_data is not None else None,
            "audioFormat": self.audio_format.value if self.audio_format else None,
            "estimatedDurationSec": self.estimated_duration_sec,
            "usedLanguageModel": self.used_language_model,
            "ttsFallback": self.tts_fallback,
            "imageUrl": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NarrationPayload":
        audio_b64 = data.get("audioBase64")
        audio_data = base64.b64decode(audio_b64, validate=True) if audio_b64 else None
        audio_format = AudioFormat.parse(data.get("audioFormat")) if audio_data is not None else None
        if audio_data is not None and audio_format is None:
            # Untagged audio from older producers was always MPEG
            audio_format = AudioFormat.MP3
        used_lm = data.get("usedLanguageModel", data.get("usedOpenAI", False))
        return cls(
            summary=data.get("summary") or "",
            estimated_duration_sec=float(data.get("estimatedDurationSec") or 0),
            image_url=data.get("imageUrl") or "",
            audio_data=audio_data,
            audio_format=audio_format,
            used_language_model=bool(used_lm),
            tts_fallback=bool(data.get("ttsFallback", audio_data is None)),
        )


@dataclass(frozen=True)
class CapturedAudio:
    """A recording produced by the local capture path."""
    data: bytes
    audio_format: AudioFormat
    completed: bool = True  # False when the forced-stop timer ended the recording
    bitrate: Optional[int] = None  # bits per second, for constant-bitrate streams


@dataclass(frozen=True)
class VideoArtifact:
    path: str
    size_bytes: int
    codec: str
    duration_sec: int


class JobPhase(str, Enum):
    IDLE = "Idle"
    ACQUIRING_ENGINE = "AcquiringEngine"
    WRITING_AUDIO = "WritingAudio"
    PREPARING_THUMBNAIL = "PreparingThumbnail"
    ENCODING = "Encoding"
    DONE = "Done"
    FAILED = "Failed"


_TERMINAL = {JobPhase.DONE, JobPhase.FAILED}


@dataclass
class MediaAssemblyJob:
    """One video-creation attempt. Progress is advisory and never decreases."""
    phase: JobPhase = JobPhase.IDLE
    progress: int = 0
    status: str = ""
    artifact: Optional[VideoArtifact] = None
    codec: Optional[str] = None
    used_fallback_codec: bool = False
    error: Optional[str] = field(default=None, repr=False)

    @property
    def finished(self) -> bool:
        return self.phase in _TERMINAL

    def advance(self, phase: JobPhase, progress: int, status: str) -> None:
        if self.finished:
            raise RuntimeError(f"Job already finished ({self.phase.value})")
        self.phase = phase
        self.progress = max(self.progress, min(100, int(progress)))
        self.status = status

    def fail(self, message: str) -> None:
        if self.phase == JobPhase.IDLE:
            raise RuntimeError("Cannot fail a job that never started")
        self.phase = JobPhase.FAILED
        self.status = message
        self.error = message
