"""Services package."""

from feecache.services.fee_schedule import DEFAULT_FEE_SCHEDULE, FeeSchedule
from feecache.services.fee_service import FeeService
from feecache.services.publisher import FeeUpdatePublisher

__all__ = [
    "DEFAULT_FEE_SCHEDULE",
    "FeeSchedule",
    "FeeService",
    "FeeUpdatePublisher",
]
