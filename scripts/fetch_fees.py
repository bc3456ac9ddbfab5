"""Manual check of the configured fee provider and the fee service."""

import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feecache.api.dependencies import cleanup_dependencies, get_fee_provider, get_fee_service
from feecache.config import get_settings
from feecache.constants import SettlementCurrency

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def check_fees() -> bool:
    """Fetch fees once through the fee service and print the cached values."""
    settings = get_settings()
    provider = await get_fee_provider(settings)
    service = await get_fee_service(settings, provider)

    print("\n" + "=" * 70)
    print(f"FEE PROVIDER CHECK ({provider})")
    print("=" * 70)

    print(f"\nDefault fee per byte: {service.get_tx_fee_per_byte()}")

    try:
        result = await service.request_fees()
    finally:
        await cleanup_dependencies()

    if not result.success:
        print(f"✗ {result.message}: {result.cause}")
        return False

    snapshot = result.snapshot
    print(f"✓ Fee per byte: {snapshot.tx_fee_per_byte}")
    print(f"  Source time: {snapshot.source_time}")
    print(f"  Fee for 250 bytes: {snapshot.tx_fee_per_byte * 250}")

    print("\nTrade fees:")
    for currency in SettlementCurrency:
        print(
            f"  {currency.value}: maker {service.get_maker_fee_per_btc(currency)} "
            f"(min {service.get_min_maker_fee(currency)}), "
            f"taker {service.get_taker_fee_per_btc(currency)} "
            f"(min {service.get_min_taker_fee(currency)})"
        )
    return True


if __name__ == "__main__":
    ok = asyncio.run(check_fees())
    sys.exit(0 if ok else 1)
