"""Static fee provider. For development/testing only."""

import time
from typing import Any, Callable

from feecache.constants import SOURCE_TIMESTAMP_KEY
from feecache.core.provider import FeeProvider
from feecache.models.fees import FeeData


class StaticFeeProvider(FeeProvider):
    """Delivers a fixed fee rate stamped with the current time."""

    def __init__(
        self,
        fee_per_byte: int = 50,
        currency_code: str = "BTC",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._fee_per_byte = fee_per_byte
        self._currency_code = currency_code
        self._clock = clock
        self._request_count = 0

    @property
    def name(self) -> str:
        """Provider name identifier."""
        return "static"

    async def get_fees(self) -> FeeData:
        """Return the configured fee rate."""
        self._request_count += 1
        return FeeData(
            timestamps={SOURCE_TIMESTAMP_KEY: int(self._clock())},
            fees={self._currency_code: self._fee_per_byte},
        )

    async def close(self) -> None:
        """Nothing to release."""

    def get_request_count(self) -> int:
        return self._request_count

    async def health_check(self) -> dict[str, Any]:
        """Static provider is always available."""
        return {
            "status": "healthy",
            "provider": self.name,
            "request_count": self._request_count,
            "api_responsive": True,
            "currencies": [self._currency_code],
        }
