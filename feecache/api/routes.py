"""API route definitions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from feecache.api.dependencies import get_fee_service
from feecache.config import Settings, get_settings
from feecache.constants import SettlementCurrency
from feecache.core.exceptions import FeeContractError
from feecache.models.api import (
    HealthResponse,
    RefreshResponse,
    TradeFeeScheduleResponse,
    TxFeeResponse,
)
from feecache.models.fees import FeeSnapshot
from feecache.services.fee_schedule import DEFAULT_FEE_SCHEDULE
from feecache.services.fee_service import FeeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["fees"])


@router.get(
    "/fees",
    response_model=FeeSnapshot,
    summary="Current Fee",
    description="Get the cached network fee per byte and its source timestamp.",
)
async def get_fees(
    fee_service: Annotated[FeeService, Depends(get_fee_service)],
) -> FeeSnapshot:
    """Return the current fee snapshot. Never contacts the provider."""
    return fee_service.snapshot


@router.get(
    "/fees/tx",
    response_model=TxFeeResponse,
    summary="Transaction Fee",
    description="Compute the fee for a transaction of the given size at the cached rate.",
)
async def get_tx_fee(
    fee_service: Annotated[FeeService, Depends(get_fee_service)],
    size: Annotated[int, Query(ge=0, description="Transaction size in bytes")],
) -> TxFeeResponse:
    """Compute the fee for a transaction size."""
    return TxFeeResponse(
        size_in_bytes=size,
        tx_fee_per_byte=fee_service.get_tx_fee_per_byte(),
        tx_fee=fee_service.get_tx_fee(size),
    )


@router.get(
    "/fees/trade",
    response_model=TradeFeeScheduleResponse,
    summary="Trade Fee Schedule",
    description="List maker and taker trade fees per settlement currency.",
)
async def get_trade_fees(
    currency: SettlementCurrency | None = None,
) -> TradeFeeScheduleResponse:
    """Return the static trade fee schedule, optionally for one currency."""
    fees = DEFAULT_FEE_SCHEDULE.entries()
    if currency is not None:
        fees = [fee for fee in fees if fee.currency == currency]
    return TradeFeeScheduleResponse(fees=fees, count=len(fees))


@router.post(
    "/fees/refresh",
    response_model=RefreshResponse,
    summary="Refresh Fees",
    description="Request a fee refresh from the provider, subject to throttling.",
)
async def refresh_fees(
    fee_service: Annotated[FeeService, Depends(get_fee_service)],
) -> RefreshResponse:
    """Request fresh fee data and wait for the outcome."""
    try:
        result = await fee_service.request_fees()
    except FeeContractError as e:
        logger.error(f"Fee provider contract violation: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Invalid fee data from provider: {e.message}",
        )

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{result.message}: {result.cause}",
        )

    return RefreshResponse(
        success=True,
        throttled=result.throttled,
        updated=result.updated,
        message="Fees are up to date" if result.throttled else "Fees refreshed",
        snapshot=result.snapshot,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check service health and refresh status.",
)
async def health_check(
    fee_service: Annotated[FeeService, Depends(get_fee_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Report whether the periodic refresh is running."""
    refresh_active = fee_service.is_running

    return HealthResponse(
        status="healthy" if refresh_active else "degraded",
        version=settings.app_version,
        network=settings.base_currency_network.value,
        provider=fee_service.provider_name,
        refresh_active=refresh_active,
        fee_update_counter=fee_service.fee_update_counter,
    )
