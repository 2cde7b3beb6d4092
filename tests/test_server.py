import base64

import pytest
from fastapi.testclient import TestClient

from article_video.application.duration import DurationEstimator
from article_video.debug import generate_tone_wav
from article_video.domain.models import AudioFormat, NarrationPayload
from article_video.errors import ExtractionError
from article_video.server import create_app


class StubPipeline:
    def __init__(self, outcome):
        self.outcome = outcome
        self.urls = []

    def process(self, url):
        self.urls.append(url)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def client_for(outcome):
    pipeline = StubPipeline(outcome)
    return TestClient(create_app(pipeline=pipeline)), pipeline


def test_process_returns_payload():
    payload = NarrationPayload(
        summary="Narration.", estimated_duration_sec=12.0, image_url="https://cdn.example.com/a.jpg",
        audio_data=b"ID3", audio_format=AudioFormat.MP3, used_language_model=True, tts_fallback=False,
    )
    client, pipeline = client_for(payload)

    response = client.post("/api/process", json={"url": "https://news.example.com/a"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"summary", "audioBase64", "audioFormat", "estimatedDurationSec",
                         "usedLanguageModel", "ttsFallback", "imageUrl"}
    assert base64.b64decode(body["audioBase64"]) == b"ID3"
    assert body["audioFormat"] == "mp3"
    assert pipeline.urls == ["https://news.example.com/a"]


@pytest.mark.parametrize("kwargs", [
    {"json": {}},
    {"json": {"url": ""}},
    {"json": ["https://news.example.com/a"]},
    {"content": b"not json", "headers": {"Content-Type": "application/json"}},
])
def test_missing_url_is_400(kwargs):
    client, pipeline = client_for(None)
    response = client.post("/api/process", **kwargs)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing url"}
    assert pipeline.urls == []


def test_extraction_failure_is_422():
    client, _pipeline = client_for(ExtractionError("Failed to extract article text or article too short."))
    response = client.post("/api/process", json={"url": "https://news.example.com/a"})
    assert response.status_code == 422
    assert response.json()["error"] == "Failed to extract article text or article too short."


def test_unexpected_failure_is_500():
    client, _pipeline = client_for(RuntimeError("Failed to fetch URL (status 503)"))
    response = client.post("/api/process", json={"url": "https://news.example.com/a"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch URL (status 503)"}


def test_debug_tone():
    client, _pipeline = client_for(None)
    body = client.get("/api/debug-tone").json()

    audio = base64.b64decode(body["audioBase64"])
    assert audio[:4] == b"RIFF"
    assert body["audioFormat"] == "wav"
    assert body["ttsFallback"] is False
    assert body["imageUrl"] == ""
    assert body["estimatedDurationSec"] == 3.0
    assert DurationEstimator().estimate_from_audio(audio, AudioFormat.WAV) == pytest.approx(3.0, abs=0.01)


def test_tone_is_deterministic():
    assert generate_tone_wav() == generate_tone_wav()
