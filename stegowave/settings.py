# settings.py
"""Library-wide defaults.

Values come from (lowest to highest priority):
  - the built-in defaults below,
  - an optional TOML file with a ``[stego_wave_lib]`` table,
  - ``STEGOWAVE__<FIELD>`` environment variables.
"""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

from .errors import ValidationError

CONFIG_FILE = "stegowave.toml"
ENV_PREFIX = "STEGOWAVE__"
TABLE = "stego_wave_lib"


@dataclass(frozen=True)
class Settings:
    default_lsb_depth: int = 1
    max_occupancy: int = 100  # percent of samples the codec may touch

    def __post_init__(self):
        if not 1 <= self.default_lsb_depth <= 16:
            raise ValidationError("default_lsb_depth must be between 1 and 16")
        if not 1 <= self.max_occupancy <= 100:
            raise ValidationError("max_occupancy must be between 1 and 100")


def _coerce(name: str, value) -> int:
    # env values arrive as strings; TOML values must already be integers
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValidationError(f"{name} must be an integer, got {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    return value


def load_settings(config_file: str | Path | None = None, environ=None) -> Settings:
    """
    Build Settings from file + environment.
    config_file: explicit path (must exist) or None to look for ./stegowave.toml.
    """
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(Settings)}
    values = {}

    if config_file is not None:
        path = Path(config_file)
        if not path.is_file():
            raise ValidationError(f"Config file not found: {path}")
    else:
        path = Path(CONFIG_FILE)

    if path.is_file():
        try:
            with path.open("rb") as fh:
                table = tomllib.load(fh).get(TABLE, {})
        except tomllib.TOMLDecodeError as err:
            raise ValidationError(f"Invalid settings file {path}: {err}") from err
        for key, val in table.items():
            if key in known:
                values[key] = _coerce(key, val)

    for name in known:
        env_val = environ.get(ENV_PREFIX + name.upper())
        if env_val is not None:
            values[name] = _coerce(name, env_val)

    return replace(Settings(), **values)
