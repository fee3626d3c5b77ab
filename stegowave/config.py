# config.py
from __future__ import annotations

from dataclasses import dataclass

from .errors import ValidationError
from .settings import Settings

MIN_LSB_DEPTH = 1
MAX_LSB_DEPTH = 16


def _check_depth(lsb_depth) -> int:
    if isinstance(lsb_depth, bool) or not isinstance(lsb_depth, int):
        raise ValidationError(f"lsb_depth must be an integer, got {lsb_depth!r}")
    if not MIN_LSB_DEPTH <= lsb_depth <= MAX_LSB_DEPTH:
        raise ValidationError(
            f"lsb_depth must be between {MIN_LSB_DEPTH} and {MAX_LSB_DEPTH}, got {lsb_depth}"
        )
    return lsb_depth


def _password_bytes(password) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    if not isinstance(password, (bytes, bytearray)):
        raise ValidationError("password must be str or bytes")
    if len(password) == 0:
        raise ValidationError("password must not be empty")
    return bytes(password)


def _check_occupancy(max_occupancy) -> int:
    if isinstance(max_occupancy, bool) or not isinstance(max_occupancy, int):
        raise ValidationError(f"max_occupancy must be an integer, got {max_occupancy!r}")
    if not 1 <= max_occupancy <= 100:
        raise ValidationError(f"max_occupancy must be between 1 and 100, got {max_occupancy}")
    return max_occupancy


@dataclass(frozen=True)
class Config:
    """
    Parameters of one hide/extract/clear operation.
    password: str is accepted and stored UTF-8 encoded.
    max_occupancy: percentage of samples the codec is allowed to touch.
    """
    lsb_depth: int
    password: bytes
    max_occupancy: int = 100

    def __post_init__(self):
        _check_depth(self.lsb_depth)
        _check_occupancy(self.max_occupancy)
        # frozen: go through object.__setattr__ to store the normalised password
        object.__setattr__(self, "password", _password_bytes(self.password))

    @property
    def mask(self) -> int:
        return (1 << self.lsb_depth) - 1

    def usable_samples(self, sample_count: int) -> int:
        return sample_count * self.max_occupancy // 100


class ConfigBuilder:
    """Collects parameters and validates them eagerly; build() freezes a Config."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or Settings()
        self._lsb_depth = settings.default_lsb_depth
        self._max_occupancy = settings.max_occupancy
        self._password: bytes | None = None

    def lsb_depth(self, value: int) -> "ConfigBuilder":
        self._lsb_depth = _check_depth(value)
        return self

    def password(self, value) -> "ConfigBuilder":
        self._password = _password_bytes(value)
        return self

    def max_occupancy(self, value: int) -> "ConfigBuilder":
        self._max_occupancy = _check_occupancy(value)
        return self

    def build(self) -> Config:
        if self._password is None:
            raise ValidationError("password is required")
        return Config(
            lsb_depth=self._lsb_depth,
            password=self._password,
            max_occupancy=self._max_occupancy,
        )
