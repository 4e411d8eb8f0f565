from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from utils import (
    estimate_cost,
    first_available,
    month_label,
    normalize_address,
    short_address,
    trailing_month_labels,
)

HEX = "aBcDeF0123456789aBcDeF0123456789aBcDeF01"


@pytest.mark.parametrize(
    "value, expected",
    [
        (f"0x{HEX}", f"0x{HEX.lower()}"),
        (HEX, f"0x{HEX.lower()}"),
        (f" {HEX} ", f"0x{HEX.lower()}"),
        (HEX[:-1], None),
        (f"0X{HEX}", None),
        ("vitalik.eth", None),
        (None, None),
    ],
)
def test_normalize_address(value, expected):
    assert normalize_address(value) == expected


def test_short_address():
    assert short_address(f"0x{HEX}", 6, 4) == "0xaBcD...eF01"
    assert short_address("0x1234") == "0x1234"


def test_trailing_months_cross_year_boundary():
    now = datetime(2024, 2, 29, 23, 59, tzinfo=timezone.utc)
    assert trailing_month_labels(now, 4) == ["2023-11", "2023-12", "2024-01", "2024-02"]
    assert len(trailing_month_labels(now, 12)) == 12


def test_month_label_is_utc():
    east = timezone(timedelta(hours=9))
    assert month_label(datetime(2024, 3, 1, 5, tzinfo=east)) == "2024-02"


def test_estimate_cost():
    assert estimate_cost(3, Decimal("0.0001")) == Decimal("0.0003")
    assert estimate_cost(0, Decimal("0.0001")) == Decimal("0")


@pytest.mark.asyncio
async def test_first_available_skips_failures_and_empties():
    calls = []

    def make(result=None, error=None):
        async def call():
            calls.append(result)
            if error:
                raise error
            return result

        return call

    result = await first_available(
        [make(error=RuntimeError("x")), make(None), make("hit"), make("never")]
    )
    assert result == "hit"
    assert "never" not in calls

    assert await first_available([make(None)], default="fallback") == "fallback"
    assert await first_available([], default="fallback") == "fallback"
