"""Fee providers package."""

from feecache.providers.pricenode import PriceNodeFeeProvider
from feecache.providers.static import StaticFeeProvider

__all__ = [
    "PriceNodeFeeProvider",
    "StaticFeeProvider",
]
