from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from models import (
    SECONDARY_NETWORK,
    AccountIdentity,
    CounterpartyRank,
    NetworkId,
    TimeBucketCount,
    WalletAnalytics,
    WalletHighlights,
    WalletOverview,
)


def build_analytics(
    identity: AccountIdentity,
    transfer_counts: Mapping[NetworkId, int],
    history: tuple[TimeBucketCount, ...],
    wallet_age_days: int,
    launch_participant: bool,
    top_counterparties: tuple[CounterpartyRank, ...],
    notable_asset: str,
    estimated_cost: Decimal,
    highlights: Optional[WalletHighlights] = None,
    generated_at: Optional[datetime] = None,
) -> WalletAnalytics:
    """Assemble the final record. Computation belongs upstream."""
    overview = WalletOverview(
        wallet_age_days=wallet_age_days,
        total_transactions=sum(transfer_counts.values()),
        estimated_cost_native=estimated_cost,
        secondary_network_transactions=transfer_counts.get(SECONDARY_NETWORK, 0),
        secondary_network_launch_participant=launch_participant,
        notable_asset=notable_asset,
    )
    return WalletAnalytics(
        identity=identity,
        overview=overview,
        history=tuple(history),
        top_counterparties=tuple(top_counterparties),
        highlights=highlights or WalletHighlights(),
        generated_at=generated_at,
    )
