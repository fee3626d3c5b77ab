"""Hidden payload layout and bit-group packing.

Wire format (embedded through LSBs, never stored as plain container bytes):

    MARKER (4 bytes, b"STEG") | length (4 bytes, big-endian unsigned) | message

Bits are consumed most-significant first. Each indexed sample carries
``lsb_depth`` consecutive payload bits; the first of them lands in the
highest of the rewritten bits.
"""

from __future__ import annotations

import numpy as np

from .errors import CapacityError

MARKER = b"STEG"
LENGTH_BYTES = 4
HEADER_LEN = len(MARKER) + LENGTH_BYTES  # 8 bytes
HEADER_BITS = HEADER_LEN * 8
MAX_MESSAGE_LEN = (1 << (8 * LENGTH_BYTES)) - 1


def _bytes_to_bits(b: bytes) -> np.ndarray:
    return np.unpackbits(np.frombuffer(b, dtype=np.uint8)).astype(np.uint8)


def _bits_to_bytes(bits: np.ndarray) -> bytes:
    return np.packbits(bits.astype(np.uint8)).tobytes()


def groups_needed(n_bits: int, lsb_depth: int) -> int:
    """Samples required to carry n_bits at lsb_depth bits per sample."""
    return -(-n_bits // lsb_depth)


def build_payload(message: bytes) -> bytes:
    if len(message) > MAX_MESSAGE_LEN:
        # the length field bounds every payload, whatever the cover size
        raise CapacityError(len(message), MAX_MESSAGE_LEN)
    return MARKER + len(message).to_bytes(LENGTH_BYTES, "big") + message


def parse_header(header: bytes) -> tuple[bytes, int]:
    """Returns (marker, message_length)."""
    marker = header[:len(MARKER)]
    length = int.from_bytes(header[len(MARKER):HEADER_LEN], "big")
    return marker, length


def pack_groups(payload: bytes, lsb_depth: int) -> np.ndarray:
    """
    Split payload bits into lsb_depth-wide integers, one per carrier sample.
    The last group is zero padded.
    """
    bits = _bytes_to_bits(payload)
    n_groups = groups_needed(bits.size, lsb_depth)
    padded = np.zeros(n_groups * lsb_depth, dtype=np.uint32)
    padded[:bits.size] = bits
    weights = np.uint32(1) << np.arange(lsb_depth - 1, -1, -1, dtype=np.uint32)
    return (padded.reshape(n_groups, lsb_depth) * weights).sum(axis=1).astype(np.uint16)


def unpack_groups(values: np.ndarray, lsb_depth: int, n_bytes: int) -> bytes:
    """Inverse of pack_groups: read n_bytes back from the low bits of values."""
    shifts = np.arange(lsb_depth - 1, -1, -1, dtype=np.uint16)
    bits = ((values.astype(np.uint16)[:, None] >> shifts) & 1).astype(np.uint8).ravel()
    need = n_bytes * 8
    if bits.size < need:
        raise ValueError(f"Need {need} bits, only {bits.size} available")
    return _bits_to_bytes(bits[:need])
