from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

import httpx
from loguru import logger

from config import Settings
from errors import MetadataLookupFailed, NetworkCapabilityUnavailable
from models import AssetKind, NetworkId, OwnedAsset, RawTransfer
from utils import normalize_address, timestamp_from_hex


# ── Alchemy ───────────────────────────────────────────────────────────────────
# One API key, per-network hosts. JSON-RPC for transfers and blocks, REST for NFTs.

ALCHEMY_NETWORKS: dict[NetworkId, str] = {
    NetworkId.ETHEREUM: "eth-mainnet",
    NetworkId.BASE: "base-mainnet",
}

TRANSFER_CATEGORIES = [kind.value for kind in AssetKind]

# alchemy_getAssetTransfers caps a single page at 1000 results
_PAGE_LIMIT = 1000


# ── ENS resolution services ───────────────────────────────────────────────────

ENSIDEAS_BASE = "https://api.ensideas.com/ens/resolve"
ENSDATA_BASE = "https://api.ensdata.net"


# ── Base Capabilities ─────────────────────────────────────────────────────────


class ChainProvider(ABC):
    """Read-only view of one network."""

    network: NetworkId

    @abstractmethod
    async def list_incoming_transfers(
        self, address: str, max_count: int
    ) -> list[RawTransfer]:
        ...

    @abstractmethod
    async def get_block_timestamp(self, block_reference: str) -> Optional[datetime]:
        ...

    @abstractmethod
    async def list_owned_assets(self, address: str) -> list[OwnedAsset]:
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""


class NameService(ABC):
    """Forward and reverse ENS-style name lookups."""

    @abstractmethod
    async def resolve_name(self, name: str) -> Optional[str]:
        ...

    @abstractmethod
    async def lookup_address(self, address: str) -> Optional[str]:
        ...


# ── Alchemy Provider ──────────────────────────────────────────────────────────


class AlchemyProvider(ChainProvider):
    def __init__(self, network: NetworkId, api_key: str, timeout: float = 30.0):
        self.network = network
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None
        host = ALCHEMY_NETWORKS.get(network)
        if api_key and host:
            self.rpc_url = f"https://{host}.g.alchemy.com/v2/{api_key}"
            self.nft_url = f"https://{host}.g.alchemy.com/nft/v3/{api_key}"
        else:
            self.rpc_url = ""
            self.nft_url = ""

    def _require_configured(self) -> None:
        if not self.rpc_url:
            raise NetworkCapabilityUnavailable(
                f"{self.network.value}: ALCHEMY_API_KEY is not set or network unsupported"
            )

    @property
    def client(self) -> httpx.AsyncClient:
        # One pool per provider, shared by every transfer page and block lookup.
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _rpc(self, method: str, params: list) -> dict | list | None:
        resp = await self.client.post(
            self.rpc_url,
            json={"jsonrpc": "2.0", "id": 1, "method": method, "params": params},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()

        if data.get("error"):
            message = data["error"].get("message", "unknown error")
            raise NetworkCapabilityUnavailable(
                f"{self.network.value}: {method} rejected: {message}"
            )
        return data.get("result")

    # ── Transfers ──────────────────────────────────────────────────────────

    async def list_incoming_transfers(
        self, address: str, max_count: int
    ) -> list[RawTransfer]:
        """Pages of newest-first transfers up to `max_count`.

        A failure on the first page propagates; a failure on a later page
        ends collection with the pages already received.
        """
        self._require_configured()

        transfers: list[RawTransfer] = []
        page_key: Optional[str] = None
        pages = 0
        while len(transfers) < max_count:
            params = {
                "fromBlock": "0x0",
                "toBlock": "latest",
                "toAddress": address,
                "category": TRANSFER_CATEGORIES,
                "order": "desc",
                "maxCount": hex(min(_PAGE_LIMIT, max_count - len(transfers))),
            }
            if page_key:
                params["pageKey"] = page_key

            try:
                result = await self._rpc("alchemy_getAssetTransfers", [params])
            except (httpx.HTTPError, NetworkCapabilityUnavailable) as e:
                if not pages:
                    raise
                logger.warning(
                    "{}: page {} failed, keeping {} transfers: {}",
                    self.network.value, pages + 1, len(transfers), e,
                )
                break

            pages += 1
            result = result or {}
            for item in result.get("transfers") or []:
                transfer = self._parse_transfer(item)
                if transfer:
                    transfers.append(transfer)

            page_key = result.get("pageKey")
            if not page_key:
                break

        return transfers[:max_count]

    def _parse_transfer(self, item: dict) -> Optional[RawTransfer]:
        block_num = item.get("blockNum")
        if not block_num:
            return None
        try:
            kind = AssetKind(item.get("category", ""))
        except ValueError:
            return None

        # Token transfers are keyed by the token contract, native ones by the sender.
        raw_contract = item.get("rawContract") or {}
        counterparty = normalize_address(raw_contract.get("address")) or normalize_address(
            item.get("from")
        )

        return RawTransfer(
            block_reference=block_num,
            counterparty=counterparty,
            network=self.network,
            asset_kind=kind,
        )

    # ── Blocks ─────────────────────────────────────────────────────────────

    async def get_block_timestamp(self, block_reference: str) -> Optional[datetime]:
        self._require_configured()
        try:
            block = await self._rpc("eth_getBlockByNumber", [block_reference, False])
        except (httpx.HTTPError, NetworkCapabilityUnavailable) as e:
            raise MetadataLookupFailed(
                f"{self.network.value}: block {block_reference}: {e}"
            ) from e

        if not block or not block.get("timestamp"):
            return None
        return timestamp_from_hex(block["timestamp"])

    # ── Owned NFTs ─────────────────────────────────────────────────────────

    async def list_owned_assets(self, address: str) -> list[OwnedAsset]:
        self._require_configured()
        try:
            resp = await self.client.get(
                f"{self.nft_url}/getNFTsForOwner",
                params={"owner": address, "withMetadata": "true", "pageSize": 10},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise MetadataLookupFailed(
                f"{self.network.value}: NFTs for {address}: {e}"
            ) from e

        assets: list[OwnedAsset] = []
        for nft in data.get("ownedNfts") or []:
            contract = nft.get("contract") or {}
            opensea = contract.get("openSeaMetadata") or {}
            assets.append(OwnedAsset(
                title=nft.get("name") or nft.get("title") or None,
                collection_name=contract.get("name") or opensea.get("collectionName") or None,
            ))
        return assets


# ── ENS Name Services ─────────────────────────────────────────────────────────


class EnsIdeasResolver(NameService):
    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    async def _resolve(self, query: str) -> dict:
        async with httpx.AsyncClient() as client:
            resp = await client.get(f"{ENSIDEAS_BASE}/{query}", timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()

    async def resolve_name(self, name: str) -> Optional[str]:
        data = await self._resolve(name)
        return data.get("address") or None

    async def lookup_address(self, address: str) -> Optional[str]:
        data = await self._resolve(address)
        return data.get("name") or None


class EnsDataResolver(NameService):
    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    async def _resolve(self, query: str) -> dict:
        async with httpx.AsyncClient() as client:
            resp = await client.get(f"{ENSDATA_BASE}/{query}", timeout=self.timeout)
            if resp.status_code == 404:
                return {}
            resp.raise_for_status()
            return resp.json()

    async def resolve_name(self, name: str) -> Optional[str]:
        data = await self._resolve(name)
        return data.get("address") or None

    async def lookup_address(self, address: str) -> Optional[str]:
        data = await self._resolve(address)
        return data.get("ens") or data.get("ens_primary") or None


# ── Factory ───────────────────────────────────────────────────────────────────


def get_provider(network: NetworkId, settings: Settings) -> ChainProvider:
    return AlchemyProvider(network, settings.alchemy_api_key, settings.request_timeout)


def get_providers(settings: Settings) -> dict[NetworkId, ChainProvider]:
    """Primary network first; collection and reporting follow this order."""
    if not settings.alchemy_api_key:
        logger.warning("ALCHEMY_API_KEY is not set; every network will report no transfers")
    return {network: get_provider(network, settings) for network in ALCHEMY_NETWORKS}


def build_name_services(settings: Settings) -> list[NameService]:
    return [
        EnsIdeasResolver(settings.request_timeout),
        EnsDataResolver(settings.request_timeout),
    ]
