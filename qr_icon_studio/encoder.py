"""Symbol encoders: turn a byte payload into a QR module matrix.

The matrix algorithm itself (patterns, Reed-Solomon, masking) belongs to the
underlying library. Every backend here takes the same inputs and returns a
plain ``SymbolMatrix`` so the compositor never touches library objects.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import qrcode
from qrcode.exceptions import DataOverflowError
from qrcode.util import BIT_LIMIT_TABLE, MODE_8BIT_BYTE, QRData, length_in_bits

from qr_icon_studio.capacity import ErrorCorrectionLevel
from qr_icon_studio.errors import CapacityExceeded, EncodingUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SymbolMatrix:
    """Square grid of modules, ``True`` meaning dark. Excludes the quiet zone."""

    modules: tuple[tuple[bool, ...], ...]
    version: int | None = None

    @classmethod
    def from_rows(cls, rows, version: int | None = None) -> "SymbolMatrix":
        return cls(tuple(tuple(bool(m) for m in row) for row in rows), version)

    @property
    def size(self) -> int:
        return len(self.modules)

    def is_dark(self, row: int, col: int) -> bool:
        return self.modules[row][col]

    def validate(self) -> None:
        """Raise EncodingUnavailable unless the grid is non-empty and square."""
        side = len(self.modules)
        if side == 0:
            raise EncodingUnavailable("Encoder returned an empty symbol matrix")
        for row in self.modules:
            if len(row) != side:
                raise EncodingUnavailable(
                    f"Encoder returned a non-square matrix ({side} rows, "
                    f"a row of {len(row)} modules)"
                )


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class SymbolEncoder(ABC):
    """Abstract base class for QR symbol encoding backends."""

    @abstractmethod
    def encode(
        self,
        payload: bytes,
        tier: int,
        level: ErrorCorrectionLevel,
    ) -> SymbolMatrix:
        """Encode payload in byte mode.

        ``tier`` is a suggested version; a backend may pick a larger one, so
        callers must read the size from the returned matrix.
        """

    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name."""


# ---------------------------------------------------------------------------
# python-qrcode backend
# ---------------------------------------------------------------------------

_QRCODE_LEVELS = {
    ErrorCorrectionLevel.L: qrcode.constants.ERROR_CORRECT_L,
    ErrorCorrectionLevel.M: qrcode.constants.ERROR_CORRECT_M,
    ErrorCorrectionLevel.Q: qrcode.constants.ERROR_CORRECT_Q,
    ErrorCorrectionLevel.H: qrcode.constants.ERROR_CORRECT_H,
}

MAX_VERSION = 40


def _fits_largest_version(payload: bytes, error_correction: int) -> bool:
    """Byte-mode bit count against the version 40 data limit.

    Checked up front because qrcode 7.x reports overflow as DataOverflowError
    while 8.x fails earlier with a ValueError about version 41.
    """
    needed_bits = 4 + length_in_bits(MODE_8BIT_BYTE, MAX_VERSION) + 8 * len(payload)
    return needed_bits <= BIT_LIMIT_TABLE[error_correction][MAX_VERSION]


class QRCodeEncoder(SymbolEncoder):
    """Encoder backed by python-qrcode.

    Fitting starts at the suggested version and grows only if the data really
    needs more room.
    """

    def name(self) -> str:
        return "python-qrcode"

    def encode(self, payload, tier, level):
        error_correction = _QRCODE_LEVELS[level]
        if not _fits_largest_version(payload, error_correction):
            raise CapacityExceeded(
                f"Text too long for a QR code at level {level.value} "
                f"({len(payload)} bytes). Shorten the text or lower the "
                "error correction level."
            )

        qr = qrcode.QRCode(
            version=tier,
            error_correction=error_correction,
            border=0,
        )
        try:
            qr.add_data(QRData(payload, mode=MODE_8BIT_BYTE))
            qr.make(fit=True)
        except DataOverflowError as e:
            raise CapacityExceeded(
                f"Text too long for a QR code at level {level.value} "
                f"({len(payload)} bytes)."
            ) from e
        except (ValueError, TypeError) as e:
            raise EncodingUnavailable(f"QR encoding failed: {e}") from e

        if qr.version != tier:
            logger.debug("Encoder grew version %d -> %d", tier, qr.version)

        matrix = SymbolMatrix.from_rows(qr.modules, version=qr.version)
        matrix.validate()
        return matrix


# ---------------------------------------------------------------------------
# segno backend
# ---------------------------------------------------------------------------

class SegnoEncoder(SymbolEncoder):
    """Encoder backed by segno, pinned to exactly the suggested version."""

    def __init__(self):
        try:
            import segno  # noqa: F401
        except ImportError:
            raise ImportError("segno package not installed. Run: pip install segno")

    def name(self) -> str:
        return "segno"

    def encode(self, payload, tier, level):
        import segno

        try:
            qr = segno.make_qr(
                payload,
                error=level.value.lower(),
                version=tier,
                mode="byte",
                boost_error=False,
            )
        except segno.DataOverflowError as e:
            raise CapacityExceeded(
                f"Text too long for version {tier} at level {level.value} "
                f"({len(payload)} bytes). Shorten the text or lower the "
                "error correction level."
            ) from e
        except (ValueError, TypeError) as e:
            raise EncodingUnavailable(f"QR encoding failed: {e}") from e

        matrix = SymbolMatrix.from_rows(qr.matrix, version=qr.version)
        matrix.validate()
        return matrix


def get_encoder(name: str = "qrcode") -> SymbolEncoder:
    """Factory function to get an encoder by name."""
    encoders = {
        "qrcode": QRCodeEncoder,
        "segno": SegnoEncoder,
    }
    if name not in encoders:
        raise ValueError(f"Unknown encoder '{name}'. Choose from: {', '.join(encoders.keys())}")
    return encoders[name]()
