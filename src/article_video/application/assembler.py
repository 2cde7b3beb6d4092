"""
Video assembly – single responsibility: still image + narration track → MP4.

Job phases: Idle → AcquiringEngine → WritingAudio → PreparingThumbnail →
Encoding → Done, with Failed reachable from any started phase. A job owns the
engine filesystem while it runs and always removes its own files before returning.
Callers must not run two jobs at once against the same engine.
"""

import io
import os
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Callable, List, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from article_video.application.duration import DurationEstimator
from article_video.domain.models import AudioFormat, JobPhase, MediaAssemblyJob, VideoArtifact
from article_video.errors import ArticleVideoError, EncodingError, EngineRunError
from article_video.ports.interfaces import IMediaEngine, IPageFetcher

VIDEO_WIDTH = 1280
VIDEO_HEIGHT = 720
PRIMARY_CODEC = "libx264"
FALLBACK_CODEC = "mpeg4"
AUDIO_BITRATE = "192k"

THUMB_SOURCE = "thumb_src.jpg"
THUMB_PNG = "thumb.png"
OUTPUT_NAME = "output.mp4"

CARD_TITLE = "Article Video"
CARD_TOP = (0x1A, 0x1A, 0x1A)
CARD_BOTTOM = (0x2D, 0x3A, 0x4A)


def _card_font(size: int):
    for name in ("DejaVuSans.ttf", "Arial.ttf", "/System/Library/Fonts/Helvetica.ttc"):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default()


def default_thumbnail_png(width: int = VIDEO_WIDTH, height: int = VIDEO_HEIGHT, text: str = CARD_TITLE) -> bytes:
    """Dark gradient title card, used when the article has no usable image."""
    img = Image.new("RGB", (width, height), color=CARD_TOP)
    draw = ImageDraw.Draw(img)
    for y in range(height):
        t = y / max(1, height - 1)
        color = tuple(int(a + (b - a) * t) for a, b in zip(CARD_TOP, CARD_BOTTOM))
        draw.line([(0, y), (width, y)], fill=color)

    rule_y = height * 300 // 720
    draw.rectangle([width // 16, rule_y, width - width // 16, rule_y + 5], fill=(0x6E, 0x72, 0x78))

    font = _card_font(64)
    bbox = draw.textbbox((0, 0), text, font=font)
    text_width = bbox[2] - bbox[0]
    position = ((width - text_width) // 2, rule_y + 30)
    draw.text(position, text, fill="white", font=font)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def encode_args(audio_name: str, codec: str, duration_sec: int) -> List[str]:
    return [
        "-loop", "1",
        "-i", THUMB_PNG,
        "-i", audio_name,
        "-c:v", codec,
        "-t", str(duration_sec),
        "-vf", f"scale={VIDEO_WIDTH}:{VIDEO_HEIGHT}",
        "-pix_fmt", "yuv420p",
        "-c:a", "aac",
        "-b:a", AUDIO_BITRATE,
        "-shortest",
        OUTPUT_NAME,
    ]


class VideoAssembler:

    def __init__(
        self,
        engine_provider: Callable[[], IMediaEngine],
        fetcher: IPageFetcher,
        estimator: DurationEstimator,
        codecs: Sequence[str] = (PRIMARY_CODEC, FALLBACK_CODEC),
        on_progress: Optional[Callable[[MediaAssemblyJob], None]] = None,
    ):
        self._engine_provider = engine_provider
        self._fetcher = fetcher
        self._estimator = estimator
        self.codecs = list(codecs)
        self.on_progress = on_progress

    def assemble(
        self,
        audio_data: bytes,
        audio_format: AudioFormat,
        image_url: Optional[str],
        output_path: str,
        bitrate: Optional[int] = None,
    ) -> MediaAssemblyJob:
        """
        Run one job to Done or Failed. Errors end up in job.status, never raised.

        bitrate (bits per second) is the known rate of compressed audio; without it
        the duration comes from the stream itself.
        """
        job = MediaAssemblyJob()
        audio_name = f"input_audio.{AudioFormat(audio_format).value}"
        temp_names = [audio_name, THUMB_SOURCE, THUMB_PNG, OUTPUT_NAME]
        engine = None

        try:
            self._advance(job, JobPhase.ACQUIRING_ENGINE, 5, "Loading media engine...")
            engine = self._engine_provider()
            self._advance(job, JobPhase.ACQUIRING_ENGINE, 10, "Media engine ready.")

            self._advance(job, JobPhase.WRITING_AUDIO, 20, "Writing audio...")
            engine.write_file(audio_name, audio_data)

            self._advance(job, JobPhase.PREPARING_THUMBNAIL, 30, "Preparing thumbnail...")
            self._prepare_thumbnail(engine, job, image_url)

            duration = self._estimator.playback_seconds(audio_data, audio_format, bitrate)
            self._advance(job, JobPhase.ENCODING, 50, f"Encoding MP4 ({duration}s)...")
            codec = self._encode(engine, audio_name, duration)
            job.codec = codec
            job.used_fallback_codec = codec != self.codecs[0]

            self._advance(job, JobPhase.ENCODING, 90, "Reading video...")
            data = engine.read_file(OUTPUT_NAME)
            out_dir = os.path.dirname(os.path.abspath(output_path))
            os.makedirs(out_dir, exist_ok=True)
            with open(output_path, "wb") as f:
                f.write(data)

            job.artifact = VideoArtifact(path=output_path, size_bytes=len(data), codec=codec, duration_sec=duration)
            status = "Done - download the video"
            if job.used_fallback_codec:
                status += f" (encoded with fallback codec {codec})"
            self._advance(job, JobPhase.DONE, 100, status)
        except (ArticleVideoError, OSError, FuturesTimeoutError) as e:
            job.fail(f"Video creation failed: {e}")
            print(f"\n❌ {job.status}")
            self._publish(job)
        finally:
            if engine is not None:
                self._cleanup(engine, temp_names)

        return job

    def _advance(self, job: MediaAssemblyJob, phase: JobPhase, progress: int, status: str) -> None:
        job.advance(phase, progress, status)
        print(f"  [{job.progress:3d}%] {status}")
        self._publish(job)

    def _publish(self, job: MediaAssemblyJob) -> None:
        if self.on_progress:
            self.on_progress(job)

    # Thumbnail: source image, else the default title card

    def _prepare_thumbnail(self, engine: IMediaEngine, job: MediaAssemblyJob, image_url: Optional[str]) -> None:
        if image_url and self._thumbnail_from_url(engine, image_url):
            self._advance(job, JobPhase.PREPARING_THUMBNAIL, 40, "Thumbnail ready.")
            return

        self._advance(job, JobPhase.PREPARING_THUMBNAIL, 40, "Using default thumbnail...")
        engine.write_file(THUMB_PNG, default_thumbnail_png())

    def _thumbnail_from_url(self, engine: IMediaEngine, image_url: str) -> bool:
        print(f"  🖼️  Downloading thumbnail: {image_url}")
        data = self._fetcher.fetch_bytes(image_url)
        if not data:
            return False
        return self._rasterize(engine, THUMB_SOURCE, data)

    def _rasterize(self, engine: IMediaEngine, source_name: str, data: bytes) -> bool:
        """Scale source bytes to a single 1280x720 PNG frame. False on any failure."""
        try:
            engine.write_file(source_name, data)
            engine.run(
                "-i", source_name,
                "-vf", f"scale={VIDEO_WIDTH}:{VIDEO_HEIGHT}",
                "-frames:v", "1",
                THUMB_PNG,
            )
        except (EngineRunError, OSError) as e:
            print(f"  ⚠️  Image conversion failed: {e}")
            return False
        finally:
            self._discard(engine, source_name)
        return engine.exists(THUMB_PNG)

    def _encode(self, engine: IMediaEngine, audio_name: str, duration: int) -> str:
        last_error = None
        for codec in self.codecs:
            try:
                engine.run(*encode_args(audio_name, codec, duration))
            except EngineRunError as e:
                print(f"  ⚠️  {codec} failed, trying next codec: {e}")
                last_error = e
                self._discard(engine, OUTPUT_NAME)
                continue
            if engine.exists(OUTPUT_NAME):
                return codec
            last_error = EngineRunError(f"{codec} produced no output")
        raise EncodingError(f"FFmpeg encoding failed: {last_error}")

    def _discard(self, engine: IMediaEngine, name: str) -> None:
        try:
            if engine.exists(name):
                engine.unlink(name)
        except OSError as e:
            print(f"  ⚠️  Could not remove {name}: {e}")

    def _cleanup(self, engine: IMediaEngine, names: List[str]) -> None:
        for name in names:
            self._discard(engine, name)
