import asyncio

import pytest

from article_video.adapters import capture as capture_module
from article_video.adapters.capture import EdgeSpeechCapture
from article_video.domain.models import AudioFormat


def fake_communicate(chunks, stall=False, error=None):
    class FakeCommunicate:
        instances = []

        def __init__(self, text, voice):
            self.text = text
            self.voice = voice
            FakeCommunicate.instances.append(self)

        async def stream(self):
            for chunk in chunks:
                yield chunk
            if error:
                raise error
            if stall:
                await asyncio.sleep(30)

    return FakeCommunicate


def test_completed_utterance_is_recorded(monkeypatch):
    fake = fake_communicate([
        {"type": "audio", "data": b"ID3"},
        {"type": "WordBoundary", "offset": 0},
        {"type": "audio", "data": b"\xff\xfb"},
    ])
    monkeypatch.setattr(capture_module.edge_tts, "Communicate", fake)

    result = EdgeSpeechCapture(voice="en-GB-SoniaNeural").capture("Hello from the newsroom.")

    assert result.data == b"ID3\xff\xfb"
    assert result.audio_format == AudioFormat.MP3
    assert result.completed is True
    assert result.bitrate == 48000
    assert fake.instances[0].voice == "en-GB-SoniaNeural"
    assert fake.instances[0].text == "Hello from the newsroom."


def test_stalled_speech_is_stopped_by_timer(monkeypatch):
    monkeypatch.setattr(capture_module.edge_tts, "Communicate",
                        fake_communicate([{"type": "audio", "data": b"partial"}], stall=True))
    capture = EdgeSpeechCapture(max_duration=0, cap_margin_sec=0.2)

    result = capture.capture("This sentence never finishes speaking.")

    assert result.data == b"partial"
    assert result.completed is False


def test_engine_error_without_audio_returns_none(monkeypatch):
    monkeypatch.setattr(capture_module.edge_tts, "Communicate",
                        fake_communicate([], error=RuntimeError("no voices")))
    assert EdgeSpeechCapture().capture("Some words.") is None


def test_engine_error_keeps_partial_audio(monkeypatch):
    monkeypatch.setattr(capture_module.edge_tts, "Communicate",
                        fake_communicate([{"type": "audio", "data": b"abc"}], error=RuntimeError("dropped")))
    result = EdgeSpeechCapture().capture("Some words.")
    assert result.data == b"abc"
    assert result.completed is False


@pytest.mark.parametrize("text", ["", "   "])
def test_empty_text_is_not_spoken(monkeypatch, text):
    monkeypatch.setattr(capture_module.edge_tts, "Communicate", lambda *a: pytest.fail("spoke empty text"))
    assert EdgeSpeechCapture().capture(text) is None


def test_stop_after_seconds():
    capture = EdgeSpeechCapture(max_duration=90, words_per_minute=150)
    assert capture.stop_after_seconds("word " * 150) == pytest.approx(62.0)
    assert capture.stop_after_seconds("word " * 1000) == pytest.approx(95.0)
    assert capture.available()
    assert not EdgeSpeechCapture(voice="").available()
