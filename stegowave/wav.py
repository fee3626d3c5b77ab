# wav.py
"""16-bit PCM WAV container: parse to a sample buffer and back.

Only the data sub-chunk is decoded. Every other byte of the container
(RIFF header, fmt chunk, LIST/fact/... chunks before or after the data)
is kept verbatim so serialize() reproduces the file exactly, except for
sample values and the recomputed size fields.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .errors import FormatError

RIFF_HEADER = struct.Struct("<4sI4s")
CHUNK_HEADER = struct.Struct("<4sI")
FMT_PCM = struct.Struct("<HHIIHH")

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_EXTENSIBLE = 0xFFFE
SUPPORTED_BITS = 16
# KSDATAFORMAT_SUBTYPE_* GUIDs share these 14 bytes after the 2-byte format code
KSDATAFORMAT_BASE = bytes.fromhex("000000001000800000aa00389b71")


@dataclass(frozen=True)
class WavInfo:
    sample_rate: int
    channels: int
    bits_per_sample: int
    block_align: int
    head: bytes  # container bytes up to and including the data chunk header
    tail: bytes  # container bytes after the data payload


@dataclass
class SampleBuffer:
    info: WavInfo
    samples: np.ndarray  # flat interleaved int16, writable

    @property
    def sample_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frames(self) -> int:
        return self.sample_count // self.info.channels

    def __len__(self) -> int:
        return self.sample_count


def _parse_fmt(body: bytes) -> tuple[int, int, int, int]:
    if len(body) < FMT_PCM.size:
        raise FormatError("fmt chunk too short")
    audio_format, channels, sample_rate, _byte_rate, block_align, bits = FMT_PCM.unpack_from(body, 0)

    if audio_format == WAVE_FORMAT_EXTENSIBLE:
        # cbSize(2) validBits(2) channelMask(4) then the SubFormat GUID
        if len(body) < 40:
            raise FormatError("WAVE_FORMAT_EXTENSIBLE fmt chunk too short")
        if body[26:40] != KSDATAFORMAT_BASE:
            raise FormatError("Unsupported WAVE_FORMAT_EXTENSIBLE sub-format GUID")
        audio_format = struct.unpack_from("<H", body, 24)[0]

    if audio_format != WAVE_FORMAT_PCM:
        raise FormatError(f"Unsupported audio format tag 0x{audio_format:04x}, only PCM is supported")
    if bits != SUPPORTED_BITS:
        raise FormatError(f"Only 16-bit WAV file supported (got {bits}-bit)")
    if channels < 1:
        raise FormatError("WAV file declares zero channels")
    if block_align != channels * (bits // 8):
        raise FormatError(f"Inconsistent block_align {block_align} for {channels} channel(s)")
    return channels, sample_rate, block_align, bits


def parse(data: bytes) -> SampleBuffer:
    """
    Decode a RIFF/WAVE byte stream.
    Raises FormatError for anything that is not 16-bit PCM.
    """
    data = bytes(data)
    if len(data) < RIFF_HEADER.size:
        raise FormatError("File too short to be a WAV container")
    riff, _riff_size, wave = RIFF_HEADER.unpack_from(data, 0)
    if riff != b"RIFF" or wave != b"WAVE":
        raise FormatError("Not a RIFF/WAVE file")

    fmt = None
    pos = RIFF_HEADER.size
    while pos + CHUNK_HEADER.size <= len(data):
        chunk_id, size = CHUNK_HEADER.unpack_from(data, pos)
        body = pos + CHUNK_HEADER.size
        end = body + size

        if chunk_id == b"fmt ":
            if end > len(data):
                raise FormatError("Truncated fmt chunk")
            fmt = _parse_fmt(data[body:end])
        elif chunk_id == b"data":
            if fmt is None:
                raise FormatError("data chunk found before fmt chunk")
            if end > len(data):
                raise FormatError(f"Truncated data chunk: header says {size} bytes, {len(data) - body} present")
            channels, sample_rate, block_align, bits = fmt
            if size % block_align:
                raise FormatError(f"data chunk size {size} is not a whole number of frames")

            samples = np.frombuffer(data, dtype="<i2", count=size // 2, offset=body).astype(np.int16)
            info = WavInfo(
                sample_rate=sample_rate,
                channels=channels,
                bits_per_sample=bits,
                block_align=block_align,
                head=data[:body],
                tail=data[end:],
            )
            return SampleBuffer(info=info, samples=samples)

        # chunks are word aligned
        pos = end + (size & 1)

    if fmt is None:
        raise FormatError("Missing fmt chunk")
    raise FormatError("Missing data chunk")


def serialize(buffer: SampleBuffer) -> bytes:
    """Re-emit the container around buffer.samples with fresh size fields."""
    info = buffer.info
    payload = np.asarray(buffer.samples, dtype="<i2").tobytes()

    head = bytearray(info.head)
    struct.pack_into("<I", head, len(head) - 4, len(payload))
    out = head + payload + info.tail
    struct.pack_into("<I", out, 4, len(out) - 8)
    return bytes(out)


def read_wav(path) -> SampleBuffer:
    return parse(Path(path).read_bytes())


def write_wav(path, buffer: SampleBuffer) -> None:
    Path(path).write_bytes(serialize(buffer))
