# errors.py


class StegoError(Exception):
    """Base class for every failure raised by stegowave."""


class FormatError(StegoError, ValueError):
    """Container is not a RIFF/WAVE file with 16-bit PCM samples."""


class ValidationError(StegoError, ValueError):
    """Operation parameters are out of range (LSB depth, password, occupancy)."""


class CapacityError(StegoError, ValueError):
    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Payload too large for cover audio samples "
            f"(samples required: {required}, available: {available})."
        )


class HeaderMismatch(StegoError):
    """Marker bytes did not decode to b"STEG": wrong password or no message."""


class NotFound(HeaderMismatch):
    """No hidden message to clear."""


class Corrupted(StegoError):
    """Decoded length points past the end of the usable samples."""
