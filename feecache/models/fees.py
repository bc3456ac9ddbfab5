"""Fee-related domain models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from feecache.constants import FeeRole, SettlementCurrency


class FeeData(BaseModel):
    """Raw fee data as delivered by a fee provider."""

    timestamps: dict[str, int] = Field(
        default_factory=dict, description="Data timestamps reported by the source"
    )
    fees: dict[str, int] = Field(
        default_factory=dict, description="Fee per byte keyed by currency code"
    )


class FeeSnapshot(BaseModel):
    """Immutable view of the cached fee state."""

    model_config = ConfigDict(frozen=True)

    tx_fee_per_byte: int = Field(ge=0)
    epoch_seconds_at_source: int = Field(default=0, ge=0)
    version: int = Field(default=0, ge=0, description="Fee update counter value")

    @property
    def source_time(self) -> datetime | None:
        """Source timestamp as a datetime, None before the first update."""
        if not self.epoch_seconds_at_source:
            return None
        return datetime.fromtimestamp(self.epoch_seconds_at_source, tz=timezone.utc)


class FeeRequestResult(BaseModel):
    """Outcome of a single fee request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    snapshot: FeeSnapshot | None = None
    throttled: bool = False
    updated: bool = False
    defect: bool = False
    message: str = ""
    provider: str | None = None
    cause: BaseException | None = None

    @classmethod
    def ok(
        cls, snapshot: FeeSnapshot, throttled: bool = False, updated: bool = False
    ) -> "FeeRequestResult":
        """Create a successful result."""
        return cls(success=True, snapshot=snapshot, throttled=throttled, updated=updated)

    @classmethod
    def failed(
        cls,
        message: str,
        cause: BaseException,
        provider: str | None = None,
        defect: bool = False,
    ) -> "FeeRequestResult":
        """Create a failed result. Defects mark a provider that broke its contract."""
        return cls(success=False, message=message, cause=cause, provider=provider, defect=defect)


class TradeFee(BaseModel):
    """Single entry of the trade fee schedule."""

    role: FeeRole
    currency: SettlementCurrency
    amount: int = Field(ge=0, description="Fee per 1 BTC trade amount in smallest unit")
