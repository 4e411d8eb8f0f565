"""In-memory providers and name services for exercising the pipeline offline."""

import asyncio
from datetime import datetime
from typing import Optional

from chain_providers import ChainProvider, NameService
from errors import MetadataLookupFailed, NetworkCapabilityUnavailable
from models import AssetKind, NetworkId, OwnedAsset, RawTransfer

ADDRESS = "0xdead" + "0" * 32 + "beef"


def transfer(
    block: str,
    counterparty: Optional[str] = None,
    network: NetworkId = NetworkId.ETHEREUM,
    kind: AssetKind = AssetKind.ERC20,
) -> RawTransfer:
    return RawTransfer(
        block_reference=block,
        counterparty=counterparty,
        network=network,
        asset_kind=kind,
    )


class FakeProvider(ChainProvider):
    def __init__(
        self,
        network: NetworkId,
        transfers: Optional[list[RawTransfer]] = None,
        block_times: Optional[dict[str, datetime]] = None,
        assets: Optional[list[OwnedAsset]] = None,
        transfer_error: Optional[Exception] = None,
        asset_error: Optional[Exception] = None,
        failing_blocks: Optional[set[str]] = None,
        delay: float = 0.0,
        delays: Optional[dict[str, float]] = None,
    ):
        self.network = network
        self.transfers = transfers or []
        self.block_times = block_times or {}
        self.assets = assets or []
        self.transfer_error = transfer_error
        self.asset_error = asset_error
        self.failing_blocks = failing_blocks or set()
        self.delay = delay
        self.delays = delays or {}

        self.transfer_calls = 0
        self.block_calls: list[str] = []
        self.completed: list[str] = []
        self.asset_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def list_incoming_transfers(self, address, max_count):
        self.transfer_calls += 1
        if self.transfer_error:
            raise self.transfer_error
        return list(self.transfers)

    async def get_block_timestamp(self, block_reference):
        self.block_calls.append(block_reference)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(block_reference, self.delay)
            if delay:
                await asyncio.sleep(delay)
            self.completed.append(block_reference)
            if block_reference in self.failing_blocks:
                raise MetadataLookupFailed(f"block {block_reference} unavailable")
            return self.block_times.get(block_reference)
        finally:
            self.in_flight -= 1

    async def list_owned_assets(self, address):
        self.asset_calls += 1
        if self.asset_error:
            raise self.asset_error
        return list(self.assets)

    async def aclose(self):
        self.closed = True

    @property
    def total_calls(self) -> int:
        return self.transfer_calls + len(self.block_calls) + self.asset_calls


class UnsupportedProvider(FakeProvider):
    def __init__(self, network: NetworkId):
        super().__init__(
            network,
            transfer_error=NetworkCapabilityUnavailable(f"{network.value} unsupported"),
            asset_error=NetworkCapabilityUnavailable(f"{network.value} unsupported"),
        )


class FakeNameService(NameService):
    def __init__(
        self,
        names: Optional[dict[str, str]] = None,
        reverse: Optional[dict[str, str]] = None,
        error: Optional[Exception] = None,
    ):
        self.names = names or {}
        self.reverse = reverse or {}
        self.error = error
        self.forward_calls: list[str] = []
        self.reverse_calls: list[str] = []

    async def resolve_name(self, name):
        self.forward_calls.append(name)
        if self.error:
            raise self.error
        return self.names.get(name)

    async def lookup_address(self, address):
        self.reverse_calls.append(address)
        if self.error:
            raise self.error
        return self.reverse.get(address)
