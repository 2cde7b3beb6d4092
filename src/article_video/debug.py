"""Synthetic narration payload (fixed tone) for exercising the media pipeline without any services."""

import io
import math

from pydub.generators import Sine

from article_video.domain.models import AudioFormat, NarrationPayload

DEBUG_TONE_SECONDS = 3
DEBUG_TONE_HZ = 440
DEBUG_SAMPLE_RATE = 44100
DEBUG_VOLUME = 0.6


def generate_tone_wav(
    duration_sec: float = DEBUG_TONE_SECONDS,
    freq: float = DEBUG_TONE_HZ,
    sample_rate: int = DEBUG_SAMPLE_RATE,
    volume: float = DEBUG_VOLUME,
) -> bytes:
    """Mono 16-bit PCM WAV sine tone. volume is linear (0-1]."""
    gain_db = 20 * math.log10(volume)
    tone = Sine(freq, sample_rate=sample_rate, bit_depth=16).to_audio_segment(
        duration=duration_sec * 1000, volume=gain_db
    )
    buf = io.BytesIO()
    tone.export(buf, format="wav")
    return buf.getvalue()


def debug_tone_payload() -> NarrationPayload:
    return NarrationPayload(
        summary=f"Debug tone audio ({DEBUG_TONE_SECONDS}s {DEBUG_TONE_HZ}Hz) - for testing.",
        estimated_duration_sec=float(DEBUG_TONE_SECONDS),
        image_url="",
        audio_data=generate_tone_wav(),
        audio_format=AudioFormat.WAV,
        used_language_model=False,
        tts_fallback=False,
    )
