"""
IMediaEngine adapter around the ffmpeg binary.

The engine owns a private scratch directory that acts as its filesystem; every
run() executes inside it, so transcode arguments only ever use bare file names.
The process shares one engine through EngineHandle, loaded lazily on first use.
"""

import atexit
import os
import shutil
import subprocess
import tempfile
import threading
from concurrent.futures import Future
from typing import Callable, List, Optional

import imageio_ffmpeg

from article_video.errors import EngineLoadError, EngineRunError
from article_video.ports.interfaces import IMediaEngine

STDERR_TAIL_CHARS = 2000


def locate_ffmpeg(core_path: Optional[str] = None) -> str:
    """
    Find the engine core. An explicit override is used as-is; otherwise try a
    local ffmpeg on PATH, then the binary distributed with imageio-ffmpeg.
    """
    if core_path:
        return core_path
    local = shutil.which("ffmpeg")
    if local:
        return local
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as e:
        raise EngineLoadError(f"No ffmpeg binary found: {e}") from e


class FFmpegEngine(IMediaEngine):

    def __init__(self, binary: str, workdir: str, run_timeout: float = 600.0):
        self.binary = binary
        self.workdir = workdir
        self.run_timeout = run_timeout

    @classmethod
    def load(cls, core_path: Optional[str] = None, run_timeout: float = 600.0) -> "FFmpegEngine":
        binary = locate_ffmpeg(core_path)
        print(f"  🎬 Loading ffmpeg from {binary}")
        try:
            proc = subprocess.run(
                [binary, "-hide_banner", "-version"],
                capture_output=True,
                text=True,
                timeout=30,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise EngineLoadError(f"Failed to start ffmpeg at {binary}: {e}") from e
        if proc.returncode != 0:
            raise EngineLoadError(f"ffmpeg at {binary} exited with {proc.returncode}")

        workdir = tempfile.mkdtemp(prefix="article_video_fs_")
        atexit.register(shutil.rmtree, workdir, ignore_errors=True)
        print("  ✅ ffmpeg ready")
        return cls(binary=binary, workdir=workdir, run_timeout=run_timeout)

    def _path(self, name: str) -> str:
        if not name or name in (".", "..") or os.path.basename(name) != name:
            raise ValueError(f"Invalid engine file name: {name!r}")
        return os.path.join(self.workdir, name)

    def write_file(self, name: str, data: bytes) -> None:
        with open(self._path(name), "wb") as f:
            f.write(data)

    def read_file(self, name: str) -> bytes:
        with open(self._path(name), "rb") as f:
            return f.read()

    def unlink(self, name: str) -> None:
        os.remove(self._path(name))

    def exists(self, name: str) -> bool:
        return os.path.isfile(self._path(name))

    def list_files(self) -> List[str]:
        return sorted(os.listdir(self.workdir))

    def run(self, *args: str) -> None:
        cmd = [self.binary, "-hide_banner", "-nostdin", "-y", *args]
        try:
            proc = subprocess.run(
                cmd,
                cwd=self.workdir,
                capture_output=True,
                text=True,
                timeout=self.run_timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise EngineRunError(f"ffmpeg timed out after {self.run_timeout:.0f}s") from e
        except OSError as e:
            raise EngineRunError(f"ffmpeg could not be started: {e}") from e
        if proc.returncode != 0:
            tail = (proc.stderr or "")[-STDERR_TAIL_CHARS:]
            raise EngineRunError(
                f"ffmpeg exited with {proc.returncode}: {tail.strip().splitlines()[-1] if tail.strip() else 'no output'}",
                returncode=proc.returncode,
                stderr=tail,
            )


class EngineHandle:
    """
    Lazy singleton holder. The first caller loads the engine; callers arriving
    while it loads join the same future instead of starting a second load.
    A failed load clears the slot so a later acquire() tries again.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._future: Optional[Future] = None

    @property
    def ready(self) -> bool:
        future = self._future
        return future is not None and future.done() and future.exception() is None

    def acquire(self, loader: Callable[[], IMediaEngine], timeout: Optional[float] = None) -> IMediaEngine:
        with self._lock:
            future = self._future
            owner = future is None
            if owner:
                future = Future()
                self._future = future

        if not owner:
            return future.result(timeout=timeout)

        try:
            engine = loader()
        except BaseException as e:
            with self._lock:
                self._future = None
            future.set_exception(e)
            raise
        future.set_result(engine)
        return engine


ENGINE_HANDLE = EngineHandle()


def shared_engine(core_path: Optional[str] = None, run_timeout: float = 600.0, timeout: Optional[float] = None) -> IMediaEngine:
    """Return the process-wide engine, loading it on first use."""
    return ENGINE_HANDLE.acquire(lambda: FFmpegEngine.load(core_path, run_timeout), timeout=timeout)
