"""
Client-side driver: narration payload → downloadable MP4.

Server audio goes straight to the assembler. A payload without audio is first
routed through the local capture path; the assembler never sees it otherwise.
"""

from typing import Optional

from article_video.application.assembler import VideoAssembler
from article_video.domain.models import CapturedAudio, MediaAssemblyJob, NarrationPayload
from article_video.ports.interfaces import ISpeechCapture


class VideoCreator:

    def __init__(self, assembler: VideoAssembler, capture: ISpeechCapture):
        self.assembler = assembler
        self.capture = capture
        self.status: str = ""

    @classmethod
    def from_adapters(cls, adapters: dict, settings) -> "VideoCreator":
        from article_video.application.duration import DurationEstimator

        assembler = VideoAssembler(
            engine_provider=adapters["engine_provider"],
            fetcher=adapters["fetcher"],
            estimator=DurationEstimator(settings.max_duration, settings.narration_wpm),
        )
        return cls(assembler=assembler, capture=adapters["capture"])

    def create(self, payload: NarrationPayload, output_path: str) -> Optional[MediaAssemblyJob]:
        """Return the finished job, or None when no audio could be obtained at all."""
        if payload.has_audio:
            self.status = "Server audio available, creating video..."
            print(f"\n{self.status}")
            return self.assembler.assemble(
                payload.audio_data, payload.audio_format, payload.image_url, output_path
            )

        recording = self.record_narration(payload)
        if recording is None:
            return None
        self.status = "Recording finished, converting..."
        print(f"\n{self.status}")
        return self.assembler.assemble(
            recording.data, recording.audio_format, payload.image_url, output_path, bitrate=recording.bitrate
        )

    def record_narration(self, payload: NarrationPayload) -> Optional[CapturedAudio]:
        if not payload.summary:
            self.status = "No summary to narrate."
            print(f"⚠️  {self.status}")
            return None
        if not self.capture.available():
            self.status = "Local speech capture is not available."
            print(f"⚠️  {self.status}")
            return None

        self.status = "No server audio, recording local speech..."
        print(f"\n{self.status}")
        recording = self.capture.capture(payload.summary)
        if recording is None:
            self.status = "Local speech recording failed."
            print(f"⚠️  {self.status}")
            return None
        if not recording.completed:
            print("  ⚠️  Speech was cut off by the safety timer, using the partial recording")
        return recording
