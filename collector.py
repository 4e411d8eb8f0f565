import asyncio
from typing import Mapping

from loguru import logger

from chain_providers import ChainProvider
from models import NetworkId, RawTransfer


async def collect_transfers(
    address: str,
    providers: Mapping[NetworkId, ChainProvider],
    max_count: int = 10_000,
) -> dict[NetworkId, tuple[RawTransfer, ...]]:
    """Fetch incoming transfers on every network concurrently.

    A network that errors contributes an empty tuple; the others are unaffected.
    """
    networks = list(providers)
    results = await asyncio.gather(
        *(
            _fetch_network(providers[network], address, max_count)
            for network in networks
        )
    )
    return dict(zip(networks, results))


async def _fetch_network(
    provider: ChainProvider, address: str, max_count: int
) -> tuple[RawTransfer, ...]:
    try:
        transfers = await provider.list_incoming_transfers(address, max_count)
    except Exception as e:
        logger.warning(
            "Error fetching {} transfers (may be unsupported): {}",
            provider.network.value, e,
        )
        return ()

    logger.debug("{}: {} transfers for {}", provider.network.value, len(transfers), address)
    return tuple(transfers[:max_count])
