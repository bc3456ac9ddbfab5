"""Test configuration and fixtures."""

import asyncio
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio

from feecache.config import Settings
from feecache.constants import SOURCE_TIMESTAMP_KEY, BaseCurrencyNetwork
from feecache.core.provider import FeeProvider
from feecache.models.fees import FeeData
from feecache.services.fee_service import FeeService

START_EPOCH = 1_700_000_000


def make_fee_data(fee_per_byte: int, epoch: int, currency_code: str = "BTC") -> FeeData:
    """Build provider payload for a fee rate and source timestamp."""
    return FeeData(
        timestamps={SOURCE_TIMESTAMP_KEY: epoch},
        fees={currency_code: fee_per_byte},
    )


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll until the predicate holds or fail after the timeout."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.01)


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = START_EPOCH, step: float = 0) -> None:
        self.now = now
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFeeProvider(FeeProvider):
    """Scriptable in-memory fee provider."""

    def __init__(self, clock: FakeClock, fee_per_byte: int = 40) -> None:
        self.clock = clock
        self.fee_per_byte = fee_per_byte
        self.responses: list[FeeData | BaseException | None] = []
        self.gate: asyncio.Event | None = None
        self.calls = 0
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    async def get_fees(self) -> FeeData | None:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, BaseException):
                raise response
            return response
        return make_fee_data(self.fee_per_byte, int(self.clock.now))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    """Provide settings isolated from the environment."""
    return Settings(
        _env_file=None,
        base_currency_network=BaseCurrencyNetwork.BTC_MAINNET,
        fee_provider="static",
        refresh_interval_seconds=3600,
        min_pause_between_requests_seconds=120,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock."""
    return FakeClock()


@pytest.fixture
def provider(clock: FakeClock) -> FakeFeeProvider:
    """Provide a scriptable fee provider."""
    return FakeFeeProvider(clock)


@pytest_asyncio.fixture
async def fee_service(
    provider: FakeFeeProvider, settings: Settings, clock: FakeClock
) -> AsyncGenerator[FeeService, None]:
    """Provide a fee service that is stopped after the test."""
    service = FeeService(provider=provider, settings=settings, clock=clock)
    yield service
    await service.stop()
