# embed.py
# Usage: hide_message(buffer, config, b"secret") or
#        hide_message_file(cover_path, out_path, b"secret", config)
import logging

import numpy as np

from .config import Config
from .errors import CapacityError
from .indices import generate
from .payload import build_payload, groups_needed, pack_groups
from .wav import SampleBuffer, read_wav, write_wav

logger = logging.getLogger(__name__)


def _as_bytes(message) -> bytes:
    if isinstance(message, str):
        return message.encode('utf-8')
    return bytes(message)


def write_groups(samples: np.ndarray, indices: np.ndarray, values: np.ndarray, lsb_depth: int) -> None:
    """Overwrite the low lsb_depth bits of samples[indices] with values, in place."""
    keep = np.uint16(~((1 << lsb_depth) - 1) & 0xFFFF)
    # unsigned view: masks apply to the raw 16-bit pattern
    flat = samples.view(np.uint16)
    flat[indices] = (flat[indices] & keep) | values.astype(np.uint16)


def hide_message(buffer: SampleBuffer, config: Config, message) -> SampleBuffer:
    """
    Embed message into buffer.samples in place and return the buffer.
    Capacity is checked before anything is written, so on CapacityError
    the samples are untouched.
    """
    payload = build_payload(_as_bytes(message))
    required = groups_needed(len(payload) * 8, config.lsb_depth)
    available = config.usable_samples(buffer.sample_count)
    if required > available:
        raise CapacityError(required, available)

    indices = generate(config.password, buffer.sample_count, required)
    values = pack_groups(payload, config.lsb_depth)
    write_groups(buffer.samples, indices, values, config.lsb_depth)
    return buffer


def hide_message_file(cover_wav_path, out_wav_path, message, config: Config) -> None:
    buffer = read_wav(cover_wav_path)
    message = _as_bytes(message)
    hide_message(buffer, config, message)
    write_wav(out_wav_path, buffer)
    logger.info("Embedded %d bytes into %s (lsb depth %d)", len(message), out_wav_path, config.lsb_depth)
