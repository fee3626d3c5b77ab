# extract.py
import logging

import numpy as np

from .config import Config
from .errors import Corrupted, HeaderMismatch
from .indices import generate
from .payload import HEADER_BITS, HEADER_LEN, MARKER, groups_needed, parse_header, unpack_groups
from .wav import SampleBuffer, read_wav

logger = logging.getLogger(__name__)


def read_groups(samples: np.ndarray, indices: np.ndarray, lsb_depth: int) -> np.ndarray:
    mask = np.uint16((1 << lsb_depth) - 1)
    return samples.view(np.uint16)[indices] & mask


def locate_message(buffer: SampleBuffer, config: Config) -> tuple[np.ndarray, int]:
    """
    Two-step lookup shared by extraction and clearing.

    1. Read just enough samples to cover marker + length and check the marker.
    2. Regenerate the index sequence for the whole payload; the header
       indices are a prefix of it.

    Returns (indices covering header + message, message length in bytes).
    """
    depth = config.lsb_depth
    n = buffer.sample_count
    header_count = groups_needed(HEADER_BITS, depth)
    if header_count > config.usable_samples(n):
        raise HeaderMismatch("Audio too short to hold a hidden message")

    header_idx = generate(config.password, n, header_count)
    header = unpack_groups(read_groups(buffer.samples, header_idx, depth), depth, HEADER_LEN)
    marker, length = parse_header(header)
    if marker != MARKER:
        raise HeaderMismatch("Password is incorrect or no hidden message present")

    required = groups_needed(HEADER_BITS + 8 * length, depth)
    available = config.usable_samples(n)
    if required > available:
        raise Corrupted(
            f"Payload length {length} bytes needs {required} samples, only {available} usable"
        )
    return generate(config.password, n, required), length


def extract_message(buffer: SampleBuffer, config: Config) -> bytes:
    indices, length = locate_message(buffer, config)
    data = unpack_groups(read_groups(buffer.samples, indices, config.lsb_depth),
                         config.lsb_depth, HEADER_LEN + length)
    return data[HEADER_LEN:]


def extract_message_file(stego_wav_path, config: Config) -> bytes:
    payload = extract_message(read_wav(stego_wav_path), config)
    logger.info("Extracted payload of length %d bytes.", len(payload))
    return payload
