import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _getenv_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"⚠️  Ignoring invalid {key}={raw!r}, using {default}")
        return default


def _getenv_int(key: str, default: int) -> int:
    return int(_getenv_float(key, default))


@dataclass
class Settings:
    """Runtime configuration, read from the environment (and .env)."""

    # Language model (summaries). Without a key the extractive summarizer is used.
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: str = "https://api.openai.com/v1"

    # Optional local model; empty model name disables it
    ollama_model: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # ElevenLabs TTS. Both key and voice id are required, otherwise ttsFallback is set.
    elevenlabs_api_key: str = ""
    elevenlabs_voice_id: str = ""
    elevenlabs_model_id: str = "eleven_monolingual_v1"

    # Edge-TTS voice used by the local capture path when no server audio exists
    edge_tts_voice: str = "en-US-AriaNeural"

    # Ceiling for every duration estimate and for the encoded video (seconds)
    max_duration: float = 90.0

    # Overrides where the ffmpeg binary is loaded from; trusted as-is when set
    ffmpeg_core_path: Optional[str] = None
    engine_run_timeout: float = 600.0

    output_dir: str = "output"

    # Tuning constants
    summary_target_words: int = 130
    summary_position_weight: float = 0.25
    narration_wpm: float = 150.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
            openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
            ollama_model=os.getenv("OLLAMA_MODEL", ""),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            elevenlabs_api_key=os.getenv("ELEVENLABS_API_KEY", ""),
            elevenlabs_voice_id=os.getenv("ELEVENLABS_VOICE_ID", ""),
            elevenlabs_model_id=os.getenv("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1"),
            edge_tts_voice=os.getenv("EDGE_TTS_VOICE", "en-US-AriaNeural"),
            max_duration=_getenv_float("MAX_DURATION", 90.0),
            ffmpeg_core_path=os.getenv("FFMPEG_CORE_PATH") or None,
            engine_run_timeout=_getenv_float("ENGINE_RUN_TIMEOUT", 600.0),
            output_dir=os.getenv("OUTPUT_DIR", "output"),
            summary_target_words=_getenv_int("SUMMARY_TARGET_WORDS", 130),
            summary_position_weight=_getenv_float("SUMMARY_POSITION_WEIGHT", 0.25),
            narration_wpm=_getenv_float("NARRATION_WPM", 150.0),
        )

    @property
    def tts_configured(self) -> bool:
        return bool(self.elevenlabs_api_key and self.elevenlabs_voice_id)
