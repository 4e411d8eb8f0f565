"""Block timestamps and everything derived from them.

Block metadata is fetched once per distinct (network, block) pair. A block
that cannot be resolved is dropped: its transfers count toward neither the
monthly history nor the wallet age.
"""

import asyncio
from collections import Counter
from datetime import datetime
from typing import Iterable, Mapping, Optional

from loguru import logger

from chain_providers import ChainProvider
from models import NetworkId, RawTransfer, TimeBucketCount
from utils import month_label, trailing_month_labels

BlockKey = tuple[NetworkId, str]


async def resolve_block_times(
    transfers: Iterable[RawTransfer],
    providers: Mapping[NetworkId, ChainProvider],
    concurrency: int = 16,
) -> dict[BlockKey, datetime]:
    keys = list(dict.fromkeys((t.network, t.block_reference) for t in transfers))
    if not keys:
        return {}

    semaphore = asyncio.Semaphore(concurrency)

    async def lookup(key: BlockKey) -> Optional[datetime]:
        network, block_reference = key
        provider = providers.get(network)
        if provider is None:
            return None
        async with semaphore:
            try:
                return await provider.get_block_timestamp(block_reference)
            except Exception as e:
                logger.debug("Skipping block {} on {}: {}", block_reference, network.value, e)
                return None

    timestamps = await asyncio.gather(*(lookup(key) for key in keys))

    resolved = {key: ts for key, ts in zip(keys, timestamps) if ts is not None}
    if len(resolved) < len(keys):
        logger.warning(
            "Resolved {}/{} block timestamps; the rest are excluded",
            len(resolved), len(keys),
        )
    return resolved


def transfer_timestamps(
    transfers: Iterable[RawTransfer], block_times: Mapping[BlockKey, datetime]
) -> list[datetime]:
    """Timestamps in transfer order, unresolved transfers dropped."""
    stamps = []
    for t in transfers:
        ts = block_times.get((t.network, t.block_reference))
        if ts is not None:
            stamps.append(ts)
    return stamps


def build_history(
    timestamps: Iterable[datetime], now: datetime, months: int = 12
) -> tuple[TimeBucketCount, ...]:
    counts = Counter(month_label(ts) for ts in timestamps)
    return tuple(
        TimeBucketCount(label=label, count=counts.get(label, 0))
        for label in trailing_month_labels(now, months)
    )


def earliest_timestamp(timestamps: Iterable[datetime]) -> Optional[datetime]:
    return min(timestamps, default=None)


def wallet_age_days(timestamps: Iterable[datetime], now: datetime) -> int:
    first = earliest_timestamp(timestamps)
    if first is None:
        return 0
    return max((now - first).days, 0)


def activity_peak_year(timestamps: Iterable[datetime]) -> Optional[int]:
    """Year with the most transfers; the earlier year wins a tie."""
    years = Counter(ts.year for ts in timestamps)
    if not years:
        return None
    return min(years, key=lambda year: (-years[year], year))
