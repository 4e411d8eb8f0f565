from typing import Iterable, Optional

from models import CounterpartyRank, RawTransfer
from utils import counterparty_label


def rank_counterparties(
    transfers: Iterable[RawTransfer], limit: int = 5
) -> tuple[CounterpartyRank, ...]:
    """Most frequent counterparties first; ties keep first-seen order."""
    counts: dict[str, int] = {}
    for t in transfers:
        if not t.counterparty:
            continue
        key = t.counterparty.lower()
        counts[key] = counts.get(key, 0) + 1

    # sorted() is stable and dicts keep insertion order, so equal counts stay first-seen.
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    return tuple(
        CounterpartyRank(
            label=counterparty_label(address),
            address=address,
            interaction_count=count,
        )
        for address, count in ranked
    )


def top_counterparty(transfers: Iterable[RawTransfer]) -> Optional[str]:
    ranked = rank_counterparties(transfers, limit=1)
    return ranked[0].address if ranked else None
