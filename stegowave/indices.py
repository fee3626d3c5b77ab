import hashlib

import numpy as np

from .errors import CapacityError, ValidationError


def _hash_to_seed(key: bytes) -> int:
    h = hashlib.sha256(key).digest()
    # use 8 bytes for 64-bit seed
    return int.from_bytes(h[:8], 'big', signed=False)


def key_order(password: bytes, sample_count: int) -> np.ndarray:
    """
    Full key-dependent permutation of range(sample_count).
    The permutation does not depend on how many indices are consumed,
    so every shorter selection is a prefix of every longer one.
    """
    rng = np.random.default_rng(_hash_to_seed(password))
    return rng.permutation(sample_count).astype(np.int64)


def generate(password, sample_count: int, required_count: int) -> np.ndarray:
    """
    Produce required_count distinct sample indices in [0, sample_count),
    deterministically derived from the password.

    Algorithm (fixed, shared by hide/extract/clear):
      seed  = first 8 bytes of SHA-256(password), big-endian
      order = numpy.random.default_rng(seed).permutation(sample_count)
      return order[:required_count]

    The stream comes from numpy's PCG64 Generator, whose output numpy does
    not guarantee across major versions; tests/test_indices.py pins literal
    vectors so a change shows up before stego files become unreadable.
    """
    if isinstance(password, str):
        password = password.encode('utf-8')
    if not password:
        raise ValidationError("password must not be empty")
    if sample_count < 0 or required_count < 0:
        raise ValidationError("sample_count and required_count must be non-negative")
    if required_count > sample_count:
        raise CapacityError(required_count, sample_count)
    return key_order(password, sample_count)[:required_count]
