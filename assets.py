from typing import Optional, Sequence

from chain_providers import ChainProvider
from models import OwnedAsset
from utils import first_available

UNNAMED_ASSET = "a notable NFT"


def describe_asset(asset: OwnedAsset) -> str:
    return asset.title or asset.collection_name or UNNAMED_ASSET


async def find_notable_asset(
    address: str, providers: Sequence[ChainProvider], default: str = "N/A"
) -> str:
    """First owned asset on the first network (in the given order) that has any."""

    def lookup(provider: ChainProvider):
        async def call() -> Optional[str]:
            assets = await provider.list_owned_assets(address)
            return describe_asset(assets[0]) if assets else None

        return call

    return await first_available(
        [lookup(p) for p in providers],
        default=default,
        what=f"owned assets of {address}",
    )
