import pytest
from elevenlabs.core.api_error import ApiError

from article_video.adapters.tts import ElevenLabsSynthesizer
from article_video.config import Settings
from article_video.domain.models import AudioFormat


class FakeTextToSpeech:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def convert(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class FakeClient:
    def __init__(self, outcome):
        self.text_to_speech = FakeTextToSpeech(outcome)


def make_synth(outcome, **kwargs):
    client = FakeClient(outcome)
    synth = ElevenLabsSynthesizer(api_key="key", voice_id="voice", client=client, **kwargs)
    return synth, client.text_to_speech


def test_unconfigured_falls_back_without_calling_api():
    client = FakeClient([b"never"])
    synth = ElevenLabsSynthesizer(api_key="key", voice_id="", client=client)
    result = synth.synthesize("Hello there.")

    assert result.fallback is True
    assert result.audio_data is None
    assert client.text_to_speech.calls == []

    assert ElevenLabsSynthesizer.from_settings(Settings()).configured is False


def test_success_collects_streamed_chunks():
    synth, tts = make_synth(iter([b"ID3", b"\x00\x01", b"\x02"]))
    result = synth.synthesize("Hello there.")

    assert result.fallback is False
    assert result.audio_data == b"ID3\x00\x01\x02"
    assert result.audio_format == AudioFormat.MP3

    call = tts.calls[0]
    assert call["voice_id"] == "voice"
    assert call["text"] == "Hello there."
    assert call["model_id"] == "eleven_monolingual_v1"
    assert call["voice_settings"].stability == 0.6
    assert call["voice_settings"].similarity_boost == 0.6


def test_wav_output_format_is_tagged_wav():
    synth, _tts = make_synth(b"RIFF....WAVE", output_format="wav_44100")
    assert synth.synthesize("Hi.").audio_format == AudioFormat.WAV


def test_upstream_error_status_sets_fallback():
    synth, _tts = make_synth(ApiError(status_code=503, body="service unavailable"))
    result = synth.synthesize("Hello there.")
    assert result.fallback is True
    assert result.audio_data is None


def test_transport_error_sets_fallback():
    synth, _tts = make_synth(ConnectionError("network down"))
    assert synth.synthesize("Hello there.").fallback is True


def test_empty_audio_sets_fallback():
    synth, _tts = make_synth(iter([]))
    assert synth.synthesize("Hello there.").fallback is True


def test_default_output_format_is_mp3():
    synth, _tts = make_synth(b"ID3")
    assert synth.audio_format == AudioFormat.MP3


@pytest.mark.parametrize("output_format", ["pcm_16000", "ulaw_8000", "opus_48000_64"])
def test_raw_output_formats_are_rejected(output_format):
    with pytest.raises(ValueError, match="mp3_\\* or wav_\\*"):
        ElevenLabsSynthesizer(api_key="key", voice_id="voice", client=FakeClient(b""), output_format=output_format)
