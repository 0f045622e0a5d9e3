"""User-facing failures of the generate/export pipeline.

All of them are recoverable: the caller reports the message and the
session is left exactly as it was before the call.
"""


class QRStudioError(ValueError):
    """Base class for pipeline errors."""


class EmptyInput(QRStudioError):
    """Nothing left to encode after trimming and sanitizing."""


class CapacityExceeded(QRStudioError):
    """The payload does not fit any symbol version at the chosen level."""


class EncodingUnavailable(QRStudioError):
    """The encoder rejected the request or produced a malformed matrix."""


class NoActiveSession(QRStudioError):
    """Export was requested before any successful generation."""
