import pytest

from qr_icon_studio.capacity import (
    CAPACITY_TABLE,
    MAX_TIER,
    TIERS,
    ErrorCorrectionLevel,
    capacity_for,
    estimate_encoded_length,
    select_tier,
)
from qr_icon_studio.errors import CapacityExceeded

LEVELS = list(ErrorCorrectionLevel)


def test_hello_at_medium_selects_version_1() -> None:
    assert estimate_encoded_length(b"HELLO") == 9
    assert select_tier(b"HELLO", ErrorCorrectionLevel.M) == 1
    assert capacity_for(1, ErrorCorrectionLevel.M) == 14


@pytest.mark.parametrize("level", LEVELS)
def test_empty_payload_selects_smallest(level) -> None:
    assert select_tier(b"", level) == TIERS[0]


def test_estimate_rounds_up() -> None:
    assert estimate_encoded_length(b"x") == 2
    assert estimate_encoded_length(b"x" * 10) == 18


@pytest.mark.parametrize("level", LEVELS)
def test_table_is_monotonic(level) -> None:
    capacities = [capacity_for(t, level) for t in TIERS]
    assert capacities == sorted(capacities)


def test_capacity_decreases_with_stronger_levels() -> None:
    for tier, row in CAPACITY_TABLE.items():
        assert list(row) == sorted(row, reverse=True), tier


@pytest.mark.parametrize("level", LEVELS)
def test_selected_tier_fits_and_is_monotonic(level) -> None:
    max_len = capacity_for(MAX_TIER, level) * 10 // 18
    previous = TIERS[0]
    for length in range(0, max_len + 1, 7):
        tier = select_tier(b"a" * length, level)
        assert tier >= previous
        assert capacity_for(tier, level) >= -(-length * 18 // 10)
        previous = tier


@pytest.mark.parametrize("level", LEVELS)
def test_selected_tier_is_smallest_fitting(level) -> None:
    payload = b"a" * 100
    tier = select_tier(payload, level)
    needed = estimate_encoded_length(payload)
    smaller = [t for t in TIERS if t < tier]
    assert all(capacity_for(t, level) < needed for t in smaller)


def test_oversized_payload_clamps_by_default() -> None:
    payload = b"a" * 2000
    assert select_tier(payload, ErrorCorrectionLevel.H) == MAX_TIER


def test_oversized_payload_strict_raises() -> None:
    with pytest.raises(CapacityExceeded):
        select_tier(b"a" * 2000, ErrorCorrectionLevel.H, strict=True)


def test_capacity_for_unknown_tier() -> None:
    with pytest.raises(ValueError):
        capacity_for(21, ErrorCorrectionLevel.L)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("M", ErrorCorrectionLevel.M),
        ("q", ErrorCorrectionLevel.Q),
        ("HIGH", ErrorCorrectionLevel.H),
        ("low", ErrorCorrectionLevel.L),
        (ErrorCorrectionLevel.Q, ErrorCorrectionLevel.Q),
    ],
)
def test_level_parse(value, expected) -> None:
    assert ErrorCorrectionLevel.parse(value) is expected


def test_level_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        ErrorCorrectionLevel.parse("X")
