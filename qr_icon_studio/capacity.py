"""Pick the smallest QR version that can hold a payload.

The encoder's real output length depends on mode indicators, length fields,
terminator and padding bits, none of which are known before encoding. Instead
of encoding, failing and retrying, the raw byte length is scaled by a fixed
overhead factor and compared against a byte-capacity table.
"""

import logging
import math
from enum import Enum

from qr_icon_studio import OVERHEAD_FACTOR
from qr_icon_studio.errors import CapacityExceeded

logger = logging.getLogger(__name__)


class ErrorCorrectionLevel(Enum):
    """QR error correction levels, from most capacity to most redundancy."""

    L = "L"  # ~7% recoverable
    M = "M"  # ~15%
    Q = "Q"  # ~25%
    H = "H"  # ~30%

    @property
    def index(self) -> int:
        return _LEVEL_ORDER.index(self)

    @classmethod
    def parse(cls, value: "str | ErrorCorrectionLevel") -> "ErrorCorrectionLevel":
        """Accept a level, its letter (any case) or its long name."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown error correction level '{value}'. Choose from: L, M, Q, H"
            ) from None


_LEVEL_ORDER = [
    ErrorCorrectionLevel.L,
    ErrorCorrectionLevel.M,
    ErrorCorrectionLevel.Q,
    ErrorCorrectionLevel.H,
]

_ALIASES = {
    "LOW": ErrorCorrectionLevel.L,
    "MEDIUM": ErrorCorrectionLevel.M,
    "QUARTILE": ErrorCorrectionLevel.Q,
    "HIGH": ErrorCorrectionLevel.H,
}


# Byte capacity per version, [L, M, Q, H]
CAPACITY_TABLE = {
    1: (17, 14, 11, 7),
    2: (32, 26, 20, 14),
    3: (53, 42, 32, 24),
    4: (78, 62, 46, 34),
    5: (106, 84, 60, 44),
    6: (134, 106, 74, 58),
    7: (154, 122, 86, 64),
    8: (192, 152, 108, 84),
    9: (230, 180, 130, 98),
    10: (271, 213, 151, 119),
    11: (321, 251, 177, 137),
    12: (367, 287, 203, 155),
    13: (425, 331, 241, 177),
    14: (458, 362, 258, 194),
    15: (520, 412, 292, 220),
    16: (586, 450, 322, 250),
    17: (644, 504, 364, 280),
    18: (718, 560, 394, 310),
    19: (792, 624, 442, 338),
    20: (858, 666, 482, 382),
    25: (1273, 977, 689, 545),
    30: (1852, 1425, 1009, 751),
    35: (2409, 1903, 1373, 1051),
    40: (2953, 2331, 1663, 1276),
}

TIERS = tuple(sorted(CAPACITY_TABLE))
MAX_TIER = TIERS[-1]


def capacity_for(tier: int, level: ErrorCorrectionLevel) -> int:
    """Byte capacity of a tabled version at the given level."""
    try:
        row = CAPACITY_TABLE[tier]
    except KeyError:
        raise ValueError(f"Version {tier} is not in the capacity table") from None
    return row[level.index]


def estimate_encoded_length(payload: bytes) -> int:
    """Conservative encoded size: raw length times the overhead factor, rounded up."""
    # round() first so float error cannot push an exact product up by one
    return math.ceil(round(len(payload) * OVERHEAD_FACTOR, 9))


def select_tier(
    payload: bytes,
    level: ErrorCorrectionLevel,
    strict: bool = False,
) -> int:
    """Return the smallest version whose capacity covers the estimated length.

    Args:
        payload: Encoded bytes to be placed in the symbol.
        level: Error correction level the symbol will use.
        strict: Raise instead of clamping when even the largest version is
            too small.

    Returns:
        A version number from ``TIERS``. An empty payload yields version 1.

    Raises:
        CapacityExceeded: Only when ``strict`` is set and nothing fits.
    """
    estimated = estimate_encoded_length(payload)

    for tier in TIERS:
        if capacity_for(tier, level) >= estimated:
            logger.debug(
                "Payload %d bytes (estimated %d) at level %s -> version %d (capacity %d)",
                len(payload), estimated, level.value, tier, capacity_for(tier, level),
            )
            return tier

    if strict:
        raise CapacityExceeded(
            f"Text too long: about {estimated} encoded bytes needed, but version "
            f"{MAX_TIER} holds {capacity_for(MAX_TIER, level)} at level {level.value}. "
            "Shorten the text or lower the error correction level."
        )

    logger.warning(
        "Payload %d bytes (estimated %d) exceeds the table at level %s; "
        "clamping to version %d",
        len(payload), estimated, level.value, MAX_TIER,
    )
    return MAX_TIER
