import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

from loguru import logger

T = TypeVar("T")

PREFIXED_HEX_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")
PLAIN_HEX_ADDRESS = re.compile(r"^[a-fA-F0-9]{40}$")


def normalize_address(value: Optional[str]) -> Optional[str]:
    """Return the canonical 0x-prefixed lower-case form, or None if not an address."""
    if not value:
        return None
    value = value.strip()
    if PREFIXED_HEX_ADDRESS.match(value):
        return value.lower()
    if PLAIN_HEX_ADDRESS.match(value):
        return f"0x{value.lower()}"
    return None


def short_address(address: str, head: int = 6, tail: int = 6) -> str:
    """Truncate: 0x1234...abcd"""
    if len(address) <= head + tail + 3:
        return address
    return f"{address[:head]}...{address[-tail:]}"


def counterparty_label(address: str, chars: int = 6) -> str:
    """Prefix-only label used in rankings: 0x1234..."""
    return f"{address[:chars]}..."


def hex_to_int(value: str | int) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)


def timestamp_from_hex(value: str | int) -> datetime:
    return datetime.fromtimestamp(hex_to_int(value), tz=timezone.utc)


def month_label(ts: datetime) -> str:
    ts = ts.astimezone(timezone.utc)
    return f"{ts.year:04d}-{ts.month:02d}"


def trailing_month_labels(now: datetime, months: int) -> list[str]:
    """Labels of the `months` calendar months ending with `now`'s month, oldest first."""
    now = now.astimezone(timezone.utc)
    index = now.year * 12 + (now.month - 1)
    labels = []
    for i in range(index - months + 1, index + 1):
        year, month = divmod(i, 12)
        labels.append(f"{year:04d}-{month + 1:02d}")
    return labels


def estimate_cost(transactions: int, cost_per_transaction: Decimal) -> Decimal:
    return (Decimal(transactions) * cost_per_transaction).quantize(
        Decimal("0.0001"), rounding=ROUND_HALF_UP
    )


async def first_available(
    calls: Iterable[Callable[[], Awaitable[Optional[T]]]],
    default: Optional[T] = None,
    what: str = "lookup",
) -> Optional[T]:
    """Await each call in order and return the first non-empty result.

    A call that raises is logged and skipped; the next one is tried.
    """
    for call in calls:
        try:
            result = await call()
        except Exception as e:
            logger.debug("{} attempt failed: {}", what, e)
            continue
        if result:
            return result
    return default
