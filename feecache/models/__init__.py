"""Domain models package."""

from feecache.models.fees import FeeData, FeeRequestResult, FeeSnapshot, TradeFee

__all__ = [
    "FeeData",
    "FeeRequestResult",
    "FeeSnapshot",
    "TradeFee",
]
