import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

# Base mainnet opened to the public on this date.
DEFAULT_LAUNCH_REFERENCE = datetime(2023, 8, 9, tzinfo=timezone.utc)


class Settings(BaseModel):
    alchemy_api_key: str = ""
    max_transfers: int = Field(10_000, gt=0)
    history_months: int = Field(12, gt=0)
    top_counterparties: int = Field(5, gt=0)
    launch_reference: datetime = DEFAULT_LAUNCH_REFERENCE
    launch_grace_days: int = Field(30, ge=0)
    block_lookup_concurrency: int = Field(16, gt=0)
    request_timeout: float = Field(30.0, gt=0)
    cost_per_transaction: Decimal = Decimal("0.0001")
    notable_asset_default: str = "N/A"

    @field_validator("launch_reference")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def launch_grace(self) -> timedelta:
        return timedelta(days=self.launch_grace_days)

    @classmethod
    def from_env(cls) -> "Settings":
        env = {
            "alchemy_api_key": os.getenv("ALCHEMY_API_KEY"),
            "max_transfers": os.getenv("MAX_TRANSFERS"),
            "history_months": os.getenv("HISTORY_MONTHS"),
            "top_counterparties": os.getenv("TOP_COUNTERPARTIES"),
            "launch_reference": os.getenv("LAUNCH_REFERENCE"),
            "launch_grace_days": os.getenv("LAUNCH_GRACE_DAYS"),
            "block_lookup_concurrency": os.getenv("BLOCK_LOOKUP_CONCURRENCY"),
            "request_timeout": os.getenv("REQUEST_TIMEOUT_SECONDS"),
            "cost_per_transaction": os.getenv("COST_PER_TRANSACTION"),
            "notable_asset_default": os.getenv("NOTABLE_ASSET_DEFAULT"),
        }
        return cls(**{k: v for k, v in env.items() if v not in (None, "")})
