"""
Duration estimates for narration audio.

Before synthesis only the word count is known; after synthesis only the raw
bytes and their declared format. Every result is capped at max_duration.
"""

import math
import struct
from typing import Optional, Tuple, Union

from article_video.domain.models import AudioFormat

NARRATION_WPM = 150.0
GENERIC_BITRATE = 192000  # bits per second, also used for MP3 with no readable frame header
MP3_SYNC_SEARCH_BYTES = 8192

# kbps by bitrate index 1-14, keyed by (MPEG-1?, layer)
_MP3_BITRATES = {
    (True, 1): (32, 64, 96, 128, 160, 192, 224, 256, 288, 320, 352, 384, 416, 448),
    (True, 2): (32, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 384),
    (True, 3): (32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320),
    (False, 1): (32, 48, 56, 64, 80, 96, 112, 128, 144, 160, 176, 192, 224, 256),
    (False, 2): (8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160),
    (False, 3): (8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160),
}
_MP3_LAYERS = {3: 1, 2: 2, 1: 3}


def _id3v2_size(data: bytes) -> int:
    if len(data) < 10 or data[0:3] != b"ID3":
        return 0
    size = 0
    for b in data[6:10]:
        size = (size << 7) | (b & 0x7F)
    footer = 10 if data[5] & 0x10 else 0
    return 10 + size + footer


def parse_mp3_header(data: bytes) -> Optional[Tuple[int, int]]:
    """Return (bitrate_bps, audio_offset) from the first MPEG audio frame header, or None.

    audio_offset skips a leading ID3v2 tag and any junk before the first frame.
    """
    start = _id3v2_size(data)
    end = min(len(data) - 2, start + MP3_SYNC_SEARCH_BYTES)
    for offset in range(start, end):
        if data[offset] != 0xFF or data[offset + 1] & 0xE0 != 0xE0:
            continue
        b1, b2 = data[offset + 1], data[offset + 2]
        version = (b1 >> 3) & 0x03
        layer = _MP3_LAYERS.get((b1 >> 1) & 0x03)
        bitrate_index = b2 >> 4
        if version == 1 or layer is None or bitrate_index in (0, 15) or (b2 >> 2) & 0x03 == 3:
            continue
        kbps = _MP3_BITRATES[(version == 3, layer)][bitrate_index - 1]
        return kbps * 1000, offset
    return None


def parse_wav_header(data: bytes) -> Optional[Tuple[int, int]]:
    """Return (byte_rate, header_size) for a RIFF/WAVE buffer, or None if malformed.

    header_size is the offset of the first byte of the data chunk payload.
    """
    if len(data) < 12 or data[0:4] != b"RIFF" or data[8:12] != b"WAVE":
        return None
    offset = 12
    byte_rate = None
    while offset + 8 <= len(data):
        chunk_id = data[offset:offset + 4]
        (chunk_size,) = struct.unpack_from("<I", data, offset + 4)
        body = offset + 8
        if chunk_id == b"fmt ":
            if body + 12 > len(data):
                return None
            (byte_rate,) = struct.unpack_from("<I", data, body + 8)
        elif chunk_id == b"data":
            if not byte_rate:
                return None
            return byte_rate, body
        offset = body + chunk_size + (chunk_size % 2)
    return None


class DurationEstimator:

    def __init__(self, max_duration: float = 90.0, words_per_minute: float = NARRATION_WPM):
        self.max_duration = float(max_duration)
        self.words_per_minute = float(words_per_minute)

    def _cap(self, seconds: float) -> float:
        return min(max(0.0, seconds), self.max_duration)

    def estimate_from_words(self, text_or_count: Union[str, int]) -> float:
        words = text_or_count if isinstance(text_or_count, int) else len(str(text_or_count).split())
        return self._cap(words / self.words_per_minute * 60)

    def estimate_from_audio(
        self,
        data: bytes,
        audio_format: Optional[AudioFormat],
        bitrate: Optional[int] = None,
    ) -> float:
        """bitrate (bits per second) overrides whatever the MP3 frame header says."""
        size = len(data)
        fmt = AudioFormat.parse(audio_format.value if isinstance(audio_format, AudioFormat) else audio_format)

        if fmt == AudioFormat.MP3:
            if bitrate:
                return self._cap(size * 8 / bitrate)
            header = parse_mp3_header(data)
            if header:
                frame_bitrate, audio_offset = header
                return self._cap((size - audio_offset) * 8 / frame_bitrate)
            return self._cap(size * 8 / GENERIC_BITRATE)
        if fmt == AudioFormat.WAV:
            header = parse_wav_header(data)
            if header:
                byte_rate, header_size = header
                return self._cap((size - header_size) / byte_rate)
        return self._cap(size * 8 / GENERIC_BITRATE)

    def playback_seconds(self, data: bytes, audio_format: Optional[AudioFormat], bitrate: Optional[int] = None) -> int:
        """Whole seconds to encode: the estimate rounded up, still within the cap."""
        seconds = min(math.ceil(self.estimate_from_audio(data, audio_format, bitrate)), math.floor(self.max_duration))
        return max(1, int(seconds))
