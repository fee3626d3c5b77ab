from __future__ import annotations

import io
import math
import struct
import wave

import numpy as np
import pytest

from stegowave import ConfigBuilder, parse


def _wav_bytes(samples, *, channels: int = 1, sample_rate: int = 44100, sampwidth: int = 2) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(channels)
        w.setsampwidth(sampwidth)
        w.setframerate(sample_rate)
        w.setcomptype("NONE", "not compressed")
        if sampwidth == 2:
            w.writeframes(np.asarray(samples, dtype="<i2").tobytes())
        else:
            w.writeframes(bytes(samples))
    return buf.getvalue()


def _sine(n: int, amplitude: int = 16000) -> np.ndarray:
    t = np.arange(n)
    return (amplitude * np.sin(2 * math.pi * 440 * t / 44100)).astype(np.int16)


def _chunk(chunk_id: bytes, body: bytes) -> bytes:
    pad = b"\x00" if len(body) % 2 else b""
    return chunk_id + struct.pack("<I", len(body)) + body + pad


def _riff(*chunks: bytes) -> bytes:
    body = b"WAVE" + b"".join(chunks)
    return b"RIFF" + struct.pack("<I", len(body)) + body


@pytest.fixture
def make_wav():
    return _wav_bytes


@pytest.fixture
def sine():
    return _sine


@pytest.fixture
def chunk():
    return _chunk


@pytest.fixture
def riff():
    return _riff


@pytest.fixture
def noise_buffer():
    """Factory: parsed mono buffer of n pseudo-random samples."""
    def factory(n: int = 2000, seed: int = 7):
        rng = np.random.default_rng(seed)
        samples = rng.integers(-32768, 32768, size=n, dtype=np.int16)
        return parse(_wav_bytes(samples))
    return factory


@pytest.fixture
def config():
    """Factory: Config with the given password and depth."""
    def factory(password="qwerty1234", lsb_depth: int = 1, max_occupancy: int = 100):
        return (
            ConfigBuilder()
            .password(password)
            .lsb_depth(lsb_depth)
            .max_occupancy(max_occupancy)
            .build()
        )
    return factory
