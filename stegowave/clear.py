# clear.py
import logging

import numpy as np

from .config import Config
from .errors import HeaderMismatch, NotFound
from .extract import locate_message
from .wav import SampleBuffer, read_wav, write_wav

logger = logging.getLogger(__name__)


def clear_message(buffer: SampleBuffer, config: Config) -> SampleBuffer:
    """
    Zero the low lsb_depth bits of every sample that carries the hidden
    header or message. Nothing is modified when no valid header is found.
    """
    try:
        indices, _ = locate_message(buffer, config)
    except HeaderMismatch as err:
        raise NotFound(str(err)) from err

    keep = np.uint16(~config.mask & 0xFFFF)
    flat = buffer.samples.view(np.uint16)
    flat[indices] &= keep
    return buffer


def clear_message_file(wav_path, config: Config, out_wav_path=None) -> None:
    """Clear in place unless out_wav_path is given."""
    buffer = read_wav(wav_path)
    clear_message(buffer, config)
    target = out_wav_path or wav_path
    write_wav(target, buffer)
    logger.info("Cleared hidden message from %s", target)
