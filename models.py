from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from utils import short_address


# ── Enums ─────────────────────────────────────────────────────────────────────


class NetworkId(str, Enum):
    ETHEREUM = "ethereum"
    BASE = "base"


PRIMARY_NETWORK = NetworkId.ETHEREUM
SECONDARY_NETWORK = NetworkId.BASE


class AssetKind(str, Enum):
    EXTERNAL = "external"  # native coin
    ERC20 = "erc20"
    ERC721 = "erc721"
    ERC1155 = "erc1155"


# ── Core Data Models ──────────────────────────────────────────────────────────


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class AccountIdentity(Record):
    address: str
    display_name: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.display_name or short_address(self.address, 6, 4)


class RawTransfer(Record):
    block_reference: str
    counterparty: Optional[str] = None
    network: NetworkId
    asset_kind: AssetKind


class OwnedAsset(Record):
    title: Optional[str] = None
    collection_name: Optional[str] = None


class TimeBucketCount(Record):
    label: str
    count: int = Field(0, ge=0)


class CounterpartyRank(Record):
    label: str
    address: str
    interaction_count: int = Field(0, ge=0)


class WalletOverview(Record):
    wallet_age_days: int = Field(0, ge=0)
    total_transactions: int = Field(0, ge=0)
    estimated_cost_native: Decimal = Field(Decimal("0"), ge=0)
    secondary_network_transactions: int = Field(0, ge=0)
    secondary_network_launch_participant: bool = False
    notable_asset: str = "N/A"


class WalletHighlights(Record):
    activity_peak_year: Optional[int] = None
    top_primary_counterparty: Optional[str] = None
    top_secondary_counterparty: Optional[str] = None


class WalletAnalytics(Record):
    identity: AccountIdentity
    overview: WalletOverview
    history: tuple[TimeBucketCount, ...] = ()
    top_counterparties: tuple[CounterpartyRank, ...] = ()
    highlights: WalletHighlights = WalletHighlights()
    generated_at: Optional[datetime] = None


# ── API Models ────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str


class AnalyzeRequest(BaseModel):
    wallet_address: str = Field(
        ..., description="Wallet address (0x..., or 40 hex chars) or ENS name"
    )


class AnalyticsResponse(BaseModel):
    success: bool
    input: str
    ens_name: Optional[str] = None
    error: Optional[str] = None
    key_insights: Optional[str] = None
    analytics: Optional[WalletAnalytics] = None
    processing_time_ms: Optional[int] = None


class StoryResponse(BaseModel):
    success: bool
    input: str
    ens_name: Optional[str] = None
    error: Optional[str] = None
    story_text: Optional[str] = None
    processing_time_ms: Optional[int] = None
