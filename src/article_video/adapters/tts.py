"""ISpeechSynthesizer adapter using ElevenLabs. Never raises; failures set the fallback flag."""

from typing import Optional

from elevenlabs import VoiceSettings
from elevenlabs.client import ElevenLabs
from elevenlabs.core.api_error import ApiError

from article_video.domain.models import AudioFormat, SynthesisResult
from article_video.ports.interfaces import ISpeechSynthesizer

DEFAULT_MODEL_ID = "eleven_monolingual_v1"
DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"
VOICE_STABILITY = 0.6
VOICE_SIMILARITY_BOOST = 0.6


def output_audio_format(output_format: str) -> AudioFormat:
    """Container of an ElevenLabs output_format. Only mp3_* and wav_* carry a decodable container."""
    codec = (output_format or "").split("_", 1)[0].lower()
    if codec == "mp3":
        return AudioFormat.MP3
    if codec == "wav":
        return AudioFormat.WAV
    raise ValueError(f"Unsupported ElevenLabs output format: {output_format!r} (use mp3_* or wav_*)")


def _collect_audio(response) -> bytes:
    """convert() yields chunks of bytes; older SDKs may return bytes directly."""
    if isinstance(response, (bytes, bytearray)):
        return bytes(response)
    audio_bytes = b""
    for chunk in response:
        if isinstance(chunk, (bytes, bytearray)):
            audio_bytes += chunk
        elif hasattr(chunk, "read"):
            audio_bytes += chunk.read()
    return audio_bytes


class ElevenLabsSynthesizer(ISpeechSynthesizer):
    """
    One attempt per call, no retries: callers still have the local capture path.
    Missing credentials are not an error, just an immediate fallback.
    """

    def __init__(
        self,
        api_key: str = "",
        voice_id: str = "",
        model_id: str = DEFAULT_MODEL_ID,
        output_format: str = DEFAULT_OUTPUT_FORMAT,
        client: Optional[ElevenLabs] = None,
    ):
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.output_format = output_format
        self.audio_format = output_audio_format(output_format)
        self._client = client

    @classmethod
    def from_settings(cls, settings) -> "ElevenLabsSynthesizer":
        return cls(
            api_key=settings.elevenlabs_api_key,
            voice_id=settings.elevenlabs_voice_id,
            model_id=settings.elevenlabs_model_id,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.voice_id)

    def _get_client(self) -> ElevenLabs:
        if self._client is None:
            self._client = ElevenLabs(api_key=self.api_key)
        return self._client

    def synthesize(self, text: str) -> SynthesisResult:
        if not self.configured:
            print("  ⚠️  ElevenLabs not configured (API key and voice id required), using fallback")
            return SynthesisResult.fallback_result()

        try:
            response = self._get_client().text_to_speech.convert(
                voice_id=self.voice_id,
                text=text,
                model_id=self.model_id,
                output_format=self.output_format,
                voice_settings=VoiceSettings(
                    stability=VOICE_STABILITY,
                    similarity_boost=VOICE_SIMILARITY_BOOST,
                ),
            )
            audio_bytes = _collect_audio(response)
        except ApiError as e:
            print(f"  ⚠️  TTS failed (HTTP {e.status_code}): {str(e.body)[:300]}")
            return SynthesisResult.fallback_result()
        except Exception as e:
            print(f"  ⚠️  TTS error: {e}")
            return SynthesisResult.fallback_result()

        if not audio_bytes:
            print("  ⚠️  TTS returned no audio")
            return SynthesisResult.fallback_result()

        print(f"  ✅ Synthesized {len(audio_bytes)} bytes of {self.audio_format.value} audio")
        return SynthesisResult(audio_data=audio_bytes, audio_format=self.audio_format, fallback=False)
