import struct
from typing import Callable, Dict, List, Optional

import pytest

from article_video.domain.models import CapturedAudio, SummaryResult, SynthesisResult
from article_video.errors import EngineRunError
from article_video.ports.interfaces import (
    IMediaEngine,
    IPageFetcher,
    ISpeechCapture,
    ISpeechSynthesizer,
    ISummarizer,
)


def make_wav(seconds: float, sample_rate: int = 8000, channels: int = 1, sample_width: int = 2, extra_chunk: bytes = b"") -> bytes:
    """Canonical PCM WAV; extra_chunk is inserted between fmt and data."""
    byte_rate = sample_rate * channels * sample_width
    data = b"\x00" * int(seconds * byte_rate)
    fmt = struct.pack("<HHIIHH", 1, channels, sample_rate, byte_rate, channels * sample_width, sample_width * 8)
    body = b"WAVE" + b"fmt " + struct.pack("<I", len(fmt)) + fmt + extra_chunk + b"data" + struct.pack("<I", len(data)) + data
    return b"RIFF" + struct.pack("<I", len(body)) + body


_MP3_LAYER3_KBPS = {
    True: (32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320),
    False: (8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160),
}
_MP3_SAMPLE_RATES = {True: (44100, 48000, 32000), False: (22050, 24000, 16000)}


def make_mp3(seconds: float, kbps: int, sample_rate: int, mono: bool = True, id3_tag: bytes = b"") -> bytes:
    """Constant-bitrate MPEG Layer III stream of silent frames, padded the way encoders pad.

    id3_tag, when given, is wrapped in an ID3v2.4 header in front of the first frame.
    """
    mpeg1 = sample_rate in _MP3_SAMPLE_RATES[True]
    samples_per_frame = 1152 if mpeg1 else 576
    bitrate_index = _MP3_LAYER3_KBPS[mpeg1].index(kbps) + 1
    rate_index = _MP3_SAMPLE_RATES[mpeg1].index(sample_rate)
    ideal = samples_per_frame / 8 * kbps * 1000 / sample_rate
    base = int(ideal)

    frames = []
    for i in range(round(seconds * sample_rate / samples_per_frame)):
        size = int((i + 1) * ideal) - int(i * ideal)
        padded = 1 if size > base else 0
        header = bytes([
            0xFF,
            0xFB if mpeg1 else 0xF3,
            (bitrate_index << 4) | (rate_index << 2) | (padded << 1),
            0xC0 if mono else 0x00,
        ])
        frames.append(header + b"\x00" * (base + padded - 4))

    tag = b""
    if id3_tag:
        n = len(id3_tag)
        syncsafe = bytes([(n >> 21) & 0x7F, (n >> 14) & 0x7F, (n >> 7) & 0x7F, n & 0x7F])
        tag = b"ID3\x04\x00\x00" + syncsafe + id3_tag
    return tag + b"".join(frames)


class FakeEngine(IMediaEngine):
    """In-memory engine. handler(args, files) may raise EngineRunError or write outputs."""

    def __init__(self, handler: Optional[Callable[[List[str], Dict[str, bytes]], None]] = None):
        self.files: Dict[str, bytes] = {}
        self.runs: List[List[str]] = []
        self.handler = handler

    def write_file(self, name, data):
        self.files[name] = bytes(data)

    def read_file(self, name):
        return self.files[name]

    def unlink(self, name):
        if name not in self.files:
            raise FileNotFoundError(name)
        del self.files[name]

    def exists(self, name):
        return name in self.files

    def list_files(self):
        return sorted(self.files)

    def run(self, *args):
        args = list(args)
        self.runs.append(args)
        if self.handler:
            self.handler(args, self.files)
        # The last argument is always the output name
        self.files.setdefault(args[-1], b"\x00\x00\x00\x18ftypmp42" if args[-1].endswith(".mp4") else b"PNG")


def failing_codecs(*codecs):
    def handler(args, files):
        for codec in codecs:
            if "-c:v" in args and args[args.index("-c:v") + 1] == codec:
                raise EngineRunError(f"Unknown encoder '{codec}'", returncode=1)
    return handler


class FakeFetcher(IPageFetcher):

    def __init__(self, html: str = "", image: Optional[bytes] = None):
        self.html = html
        self.image = image
        self.byte_requests: List[str] = []

    def fetch_text(self, url):
        return self.html

    def fetch_bytes(self, url):
        self.byte_requests.append(url)
        return self.image


class FakeSummarizer(ISummarizer):

    def __init__(self, text: str = "A short summary of the article for narration.", used_language_model: bool = False):
        self.result = SummaryResult(text=text, used_language_model=used_language_model)

    def summarize(self, text, target_words=130):
        return self.result


class FakeSynthesizer(ISpeechSynthesizer):

    def __init__(self, result: Optional[SynthesisResult] = None):
        self.result = result or SynthesisResult.fallback_result()
        self.calls = 0

    def synthesize(self, text):
        self.calls += 1
        return self.result


class FakeCapture(ISpeechCapture):

    def __init__(self, recording: Optional[CapturedAudio] = None, is_available: bool = True):
        self.recording = recording
        self.is_available = is_available
        self.spoken: List[str] = []

    def available(self):
        return self.is_available

    def capture(self, text):
        self.spoken.append(text)
        return self.recording


@pytest.fixture
def fake_engine():
    return FakeEngine()
