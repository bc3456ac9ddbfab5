"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends

from feecache.config import Settings, get_settings
from feecache.core.provider import FeeProvider
from feecache.providers.pricenode import PriceNodeFeeProvider
from feecache.providers.static import StaticFeeProvider
from feecache.services.fee_service import FeeService


_provider_instance: FeeProvider | None = None
_fee_service: FeeService | None = None


async def get_fee_provider(
    settings: Annotated[Settings, Depends(get_settings)]
) -> FeeProvider:
    """Get or create fee provider instance."""
    global _provider_instance

    if _provider_instance is None:
        if settings.fee_provider == "static":
            _provider_instance = StaticFeeProvider(
                fee_per_byte=settings.static_fee_per_byte,
                currency_code=settings.base_currency_network.currency_code,
            )
        else:
            _provider_instance = PriceNodeFeeProvider(
                base_url=settings.pricenode_base_url,
                max_retries=settings.pricenode_max_retries,
                retry_delay=settings.pricenode_retry_delay,
                timeout=settings.pricenode_timeout,
            )

    return _provider_instance


async def get_fee_service(
    settings: Annotated[Settings, Depends(get_settings)],
    provider: Annotated[FeeProvider, Depends(get_fee_provider)],
) -> FeeService:
    """Get or create the fee service instance."""
    global _fee_service

    if _fee_service is None:
        _fee_service = FeeService(provider=provider, settings=settings)

    return _fee_service


async def cleanup_dependencies() -> None:
    """Cleanup dependency instances on shutdown."""
    global _provider_instance, _fee_service

    if _fee_service:
        await _fee_service.stop()
        _fee_service = None

    if _provider_instance:
        await _provider_instance.close()
        _provider_instance = None
