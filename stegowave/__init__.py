"""Password-keyed LSB steganography for 16-bit PCM WAV files."""
from .clear import clear_message, clear_message_file
from .config import Config, ConfigBuilder
from .embed import hide_message, hide_message_file
from .errors import (
    CapacityError,
    Corrupted,
    FormatError,
    HeaderMismatch,
    NotFound,
    StegoError,
    ValidationError,
)
from .extract import extract_message, extract_message_file
from .indices import generate
from .settings import Settings, load_settings
from .wav import SampleBuffer, WavInfo, parse, read_wav, serialize, write_wav

__version__ = "0.1.0"
