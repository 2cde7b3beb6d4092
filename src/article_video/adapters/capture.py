"""
ISpeechCapture adapter: speak with Edge-TTS and record the stream.

Used only when the server produced no audio. The utterance streams into a
recorder; the recorder stops when the utterance completes, or when a
single-shot safety timer fires first (stalled or silently failing engine).
Whichever trigger comes first disarms the other.
"""

import asyncio
from typing import List, Optional

import edge_tts

from article_video.domain.models import AudioFormat, CapturedAudio
from article_video.ports.interfaces import ISpeechCapture

DEFAULT_VOICE = "en-US-AriaNeural"
COMPLETION_MARGIN_SEC = 2.0
CAP_MARGIN_SEC = 5.0
# Edge-TTS streams audio-24khz-48kbitrate-mono-mp3
EDGE_TTS_BITRATE = 48000


class _Recorder:
    """Collects audio chunks between start() and the first stop()."""

    def __init__(self):
        self.chunks: List[bytes] = []
        self.state = "inactive"
        self._stopped = asyncio.Event()

    def start(self) -> None:
        self.state = "recording"

    def write(self, data: bytes) -> None:
        if self.state == "recording" and data:
            self.chunks.append(data)

    def stop(self) -> None:
        if self.state != "inactive":
            self.state = "inactive"
            self._stopped.set()

    async def wait_stopped(self) -> None:
        await self._stopped.wait()


class EdgeSpeechCapture(ISpeechCapture):

    def __init__(
        self,
        voice: str = DEFAULT_VOICE,
        max_duration: float = 90.0,
        words_per_minute: float = 150.0,
        completion_margin_sec: float = COMPLETION_MARGIN_SEC,
        cap_margin_sec: float = CAP_MARGIN_SEC,
    ):
        self.voice = voice
        self.max_duration = max_duration
        self.words_per_minute = words_per_minute
        self.completion_margin_sec = completion_margin_sec
        self.cap_margin_sec = cap_margin_sec

    @classmethod
    def from_settings(cls, settings) -> "EdgeSpeechCapture":
        return cls(
            voice=settings.edge_tts_voice,
            max_duration=settings.max_duration,
            words_per_minute=settings.narration_wpm,
        )

    def available(self) -> bool:
        return bool(self.voice)

    def stop_after_seconds(self, text: str) -> float:
        words = len(text.split())
        expected = words / self.words_per_minute * 60 + self.completion_margin_sec
        return min(expected, self.max_duration + self.cap_margin_sec)

    def capture(self, text: str) -> Optional[CapturedAudio]:
        if not text or not text.strip():
            print("  ⚠️  Nothing to speak")
            return None
        return asyncio.run(self._record(text))

    async def _record(self, text: str) -> Optional[CapturedAudio]:
        recorder = _Recorder()
        completed = False

        async def speak():
            nonlocal completed
            try:
                communicate = edge_tts.Communicate(text, self.voice)
                async for chunk in communicate.stream():
                    if chunk.get("type") == "audio":
                        recorder.write(chunk.get("data", b""))
                completed = True
            except Exception as e:
                print(f"  ⚠️  Speech engine failed: {e}")
            recorder.stop()

        limit = self.stop_after_seconds(text)
        recorder.start()
        speech = asyncio.ensure_future(speak())
        timer = asyncio.get_running_loop().call_later(limit, recorder.stop)
        try:
            await recorder.wait_stopped()
        finally:
            timer.cancel()
            if not speech.done():
                print(f"  ⚠️  Speech did not finish within {limit:.1f}s, recording stopped")
                speech.cancel()
                try:
                    await speech
                except asyncio.CancelledError:
                    pass

        data = b"".join(recorder.chunks)
        if not data:
            print("  ⚠️  Recording is empty")
            return None
        print(f"  ✅ Recorded {len(data)} bytes of narration")
        return CapturedAudio(data=data, audio_format=AudioFormat.MP3, completed=completed, bitrate=EDGE_TTS_BITRATE)
