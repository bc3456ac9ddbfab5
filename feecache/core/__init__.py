"""Core module for base interfaces and abstractions."""

from feecache.core.context import ServiceContext
from feecache.core.exceptions import (
    FeeCacheError,
    FeeContractError,
    FeeProviderError,
    FeeProviderRateLimitError,
    FeeProviderTimeoutError,
)
from feecache.core.provider import FeeProvider
from feecache.core.ticker import PeriodicTask

__all__ = [
    "FeeCacheError",
    "FeeContractError",
    "FeeProvider",
    "FeeProviderError",
    "FeeProviderRateLimitError",
    "FeeProviderTimeoutError",
    "PeriodicTask",
    "ServiceContext",
]
