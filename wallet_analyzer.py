import asyncio
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional, Sequence

from loguru import logger

from aggregate import build_analytics
from assets import find_notable_asset
from chain_providers import ChainProvider, NameService, build_name_services, get_providers
from collector import collect_transfers
from config import Settings
from identity import resolve_identity
from models import (
    PRIMARY_NETWORK,
    SECONDARY_NETWORK,
    NetworkId,
    WalletAnalytics,
    WalletHighlights,
)
from participation import is_launch_participant
from ranking import rank_counterparties, top_counterparty
from temporal import (
    activity_peak_year,
    build_history,
    resolve_block_times,
    transfer_timestamps,
    wallet_age_days,
)
from utils import estimate_cost


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WalletAnalyzer:
    """Runs identity resolution, collection and derivation for one wallet."""

    def __init__(
        self,
        providers: Mapping[NetworkId, ChainProvider],
        name_services: Sequence[NameService],
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.providers = dict(providers)
        self.name_services = list(name_services)
        self.settings = settings or Settings()
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "WalletAnalyzer":
        return cls(get_providers(settings), build_name_services(settings), settings)

    async def aclose(self) -> None:
        await asyncio.gather(*(p.aclose() for p in self.providers.values()))

    async def analyze(self, raw_input: str) -> WalletAnalytics:
        cfg = self.settings

        # ── Identity (only fatal stage) ───────────────────────────────────
        identity = await resolve_identity(raw_input, self.name_services)
        logger.info("Analyzing {} ({})", identity.address, identity.display_label)

        # ── Transfers per network ─────────────────────────────────────────
        by_network = await collect_transfers(
            identity.address, self.providers, cfg.max_transfers
        )
        all_transfers = [t for transfers in by_network.values() for t in transfers]

        # ── Block times + notable asset, concurrently ─────────────────────
        asset_order = [
            self.providers[n]
            for n in (SECONDARY_NETWORK, PRIMARY_NETWORK)
            if n in self.providers
        ]
        block_times, notable_asset = await asyncio.gather(
            resolve_block_times(
                all_transfers, self.providers, cfg.block_lookup_concurrency
            ),
            find_notable_asset(
                identity.address, asset_order, cfg.notable_asset_default
            ),
        )

        # ── Derive ────────────────────────────────────────────────────────
        now = self.clock()
        timestamps = transfer_timestamps(all_transfers, block_times)
        secondary = by_network.get(SECONDARY_NETWORK, ())
        transfer_counts = {n: len(t) for n, t in by_network.items()}
        total = sum(transfer_counts.values())

        highlights = WalletHighlights(
            activity_peak_year=activity_peak_year(timestamps),
            top_primary_counterparty=top_counterparty(by_network.get(PRIMARY_NETWORK, ())),
            top_secondary_counterparty=top_counterparty(secondary),
        )

        return build_analytics(
            identity=identity,
            transfer_counts=transfer_counts,
            history=build_history(timestamps, now, cfg.history_months),
            wallet_age_days=wallet_age_days(timestamps, now),
            launch_participant=is_launch_participant(
                secondary, block_times, cfg.launch_reference, cfg.launch_grace
            ),
            top_counterparties=rank_counterparties(all_transfers, cfg.top_counterparties),
            notable_asset=notable_asset,
            estimated_cost=estimate_cost(total, cfg.cost_per_transaction),
            highlights=highlights,
            generated_at=now,
        )
