"""HTTP API request and response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from feecache.models.fees import FeeSnapshot, TradeFee


class TxFeeResponse(BaseModel):
    """Transaction fee for a given transaction size."""

    size_in_bytes: int = Field(ge=0)
    tx_fee_per_byte: int
    tx_fee: int


class TradeFeeScheduleResponse(BaseModel):
    """Trade fee schedule entries."""

    fees: list[TradeFee]
    count: int


class RefreshResponse(BaseModel):
    """Outcome of a fee refresh request."""

    success: bool
    throttled: bool = False
    updated: bool = False
    message: str = ""
    snapshot: FeeSnapshot | None = None


class HealthResponse(BaseModel):
    """Health check response model."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    network: str
    provider: str
    refresh_active: bool
    fee_update_counter: int
    timestamp: datetime = Field(default_factory=datetime.utcnow)
