"""Rate-limited, periodically refreshed network fee cache."""

import asyncio
import logging
import time
from typing import Callable

from feecache.config import Settings, get_settings
from feecache.constants import SOURCE_TIMESTAMP_KEY, SettlementCurrency
from feecache.core.context import ServiceContext
from feecache.core.exceptions import FeeContractError
from feecache.core.provider import FeeProvider
from feecache.core.ticker import PeriodicTask
from feecache.models.fees import FeeData, FeeRequestResult, FeeSnapshot
from feecache.services.fee_schedule import DEFAULT_FEE_SCHEDULE
from feecache.services.publisher import FeeObserver, FeeUpdatePublisher

logger = logging.getLogger(__name__)

ResultHandler = Callable[[FeeRequestResult], None]


class FeeService:
    """
    Cache of the current network fee rate backed by a FeeProvider.

    Features:
    - Throttled provider requests (one accepted request per throttle window)
    - Periodic refresh once started
    - Safe default before the first update and a floor on every update
    - Versioned snapshots pushed to subscribed observers

    All cache mutation, throttle decisions and result delivery run on a
    single ServiceContext. Provider round trips run as separate tasks and
    never hold the context.
    """

    FAILURE_MESSAGE = "Could not load fees"

    def __init__(
        self,
        provider: FeeProvider,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the fee service.

        Args:
            provider: Source of fee data.
            settings: Application settings, defaults to the cached settings.
            clock: Returns the current time in epoch seconds.
        """
        self._provider = provider
        self._settings = settings or get_settings()
        self._clock = clock
        self._network = self._settings.base_currency_network
        self._min_pause = self._settings.min_pause_between_requests_seconds

        self._tx_fee_per_byte = self._network.default_fee_per_byte
        self._min_fee_per_byte = self._network.default_min_fee_per_byte
        self._epoch_seconds_at_source = 0
        self._last_request: float = 0
        self._fee_update_counter = 0

        self._context = ServiceContext(name="fee-service")
        self._publisher = FeeUpdatePublisher()
        self._ticker: PeriodicTask | None = None
        self._fetch_tasks: set[asyncio.Task] = set()
        self._pending: set[asyncio.Future] = set()

    @property
    def provider_name(self) -> str:
        return self._provider.name

    @property
    def is_running(self) -> bool:
        """Check if the periodic refresh is active."""
        return self._ticker is not None and self._ticker.is_running

    @property
    def min_fee_per_byte(self) -> int:
        return self._min_fee_per_byte

    @property
    def fee_update_counter(self) -> int:
        """Number of successful cache updates since construction."""
        return self._fee_update_counter

    @property
    def snapshot(self) -> FeeSnapshot:
        """Current cached fee state."""
        return FeeSnapshot(
            tx_fee_per_byte=self._tx_fee_per_byte,
            epoch_seconds_at_source=self._epoch_seconds_at_source,
            version=self._fee_update_counter,
        )

    async def start(self) -> None:
        """
        Start the service: apply the network minimum fee, request fees right
        away and refresh them periodically afterwards.

        Calling start() while the periodic refresh is active has no effect.
        """
        if self.is_running:
            logger.warning("[FeeService] start() called on a running service, ignored")
            return

        self._min_fee_per_byte = self._network.default_min_fee_per_byte
        logger.info(
            f"[FeeService] Starting on {self._network.value} with provider={self._provider}, "
            f"min fee per byte={self._min_fee_per_byte}"
        )

        initial = self._request(on_complete=None, force=True)
        initial.add_done_callback(self._report_defect)

        self._ticker = PeriodicTask(
            self._refresh,
            interval=self._settings.refresh_interval_seconds,
            name="fee-refresh",
        )
        self._ticker.start()

    async def stop(self) -> None:
        """Stop the periodic refresh, abort running fetches and cancel pending requests."""
        if self._ticker is not None:
            await self._ticker.stop()
            self._ticker = None

        for task in list(self._fetch_tasks):
            task.cancel()
        if self._fetch_tasks:
            await asyncio.gather(*self._fetch_tasks, return_exceptions=True)

        await self._context.stop()
        for future in list(self._pending):
            future.cancel()
        logger.info(f"[FeeService] Stopped after {self._fee_update_counter} fee updates")

    def request_fees(self, on_complete: ResultHandler | None = None) -> asyncio.Future:
        """
        Request a fee refresh.

        Requests within the throttle window of the last accepted request do
        not reach the provider and complete as successful, throttled results
        against the cached data.

        Args:
            on_complete: Optional handler invoked with the result on the
                service context.

        Returns:
            Future resolving to a FeeRequestResult. It raises
            FeeContractError if the provider broke its payload contract.
        """
        return self._request(on_complete, force=False)

    def get_tx_fee_per_byte(self) -> int:
        """Current cached fee per byte. Never triggers a fetch."""
        return self._tx_fee_per_byte

    def get_tx_fee(self, size_in_bytes: int) -> int:
        """Fee for a transaction of the given size at the cached rate."""
        if size_in_bytes < 0:
            raise ValueError(f"Transaction size must not be negative: {size_in_bytes}")
        return self._tx_fee_per_byte * size_in_bytes

    @staticmethod
    def get_maker_fee_per_btc(currency: SettlementCurrency) -> int:
        return DEFAULT_FEE_SCHEDULE.maker_fee_per_btc(currency)

    @staticmethod
    def get_min_maker_fee(currency: SettlementCurrency) -> int:
        return DEFAULT_FEE_SCHEDULE.min_maker_fee(currency)

    @staticmethod
    def get_taker_fee_per_btc(currency: SettlementCurrency) -> int:
        return DEFAULT_FEE_SCHEDULE.taker_fee_per_btc(currency)

    @staticmethod
    def get_min_taker_fee(currency: SettlementCurrency) -> int:
        return DEFAULT_FEE_SCHEDULE.min_taker_fee(currency)

    def subscribe(self, observer: FeeObserver) -> Callable[[], None]:
        """
        Register an observer receiving a FeeSnapshot after each cache update.

        Returns:
            A callable removing the observer.
        """
        return self._publisher.subscribe(observer)

    async def _refresh(self) -> None:
        try:
            result = await self.request_fees()
        except FeeContractError as e:
            logger.critical(f"[FeeService] Periodic refresh got invalid fee data: {e}. provider={self._provider}")
            return
        if not result.success:
            logger.debug(f"[FeeService] Periodic refresh failed, keeping fee {self._tx_fee_per_byte}")

    def _request(self, on_complete: ResultHandler | None, force: bool) -> asyncio.Future:
        if not self._context.is_running:
            self._context.start()
        future = asyncio.get_running_loop().create_future()
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)
        if on_complete is not None:
            # Defects reach on_complete too, so the future may go unawaited
            future.add_done_callback(self._retrieve_exception)
        self._context.submit(self._handle_request, future, on_complete, force)
        return future

    def _handle_request(
        self, future: asyncio.Future, on_complete: ResultHandler | None, force: bool
    ) -> None:
        now = self._clock()
        if not force and now - self._last_request <= self._min_pause:
            logger.debug(
                f"[FeeService] requestFees called again before min pause of "
                f"{self._min_pause}s has passed"
            )
            self._complete(future, on_complete, FeeRequestResult.ok(self.snapshot, throttled=True))
            return

        self._last_request = now
        task = asyncio.create_task(self._fetch(future, on_complete), name="fee-fetch")
        self._fetch_tasks.add(task)
        task.add_done_callback(self._fetch_tasks.discard)

    async def _fetch(self, future: asyncio.Future, on_complete: ResultHandler | None) -> None:
        try:
            data = await self._provider.get_fees()
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            raise
        except Exception as e:
            logger.warning(f"[FeeService] {self.FAILURE_MESSAGE}. provider={self._provider}, error={e!r}")
            result = FeeRequestResult.failed(self.FAILURE_MESSAGE, cause=e, provider=self._provider.name)
            self._context.submit(self._complete, future, on_complete, result)
            return

        self._context.submit(self._apply, data, future, on_complete)

    def _apply(
        self,
        data: FeeData | None,
        future: asyncio.Future,
        on_complete: ResultHandler | None,
    ) -> None:
        try:
            fee_per_byte, source_epoch = self._extract(data)
        except FeeContractError as e:
            logger.error(f"[FeeService] {e.message}. provider={self._provider}")
            if not future.done():
                future.set_exception(e)
            result = FeeRequestResult.failed(
                e.message, cause=e, provider=self._provider.name, defect=True
            )
            self._complete(future, on_complete, result)
            return

        if source_epoch < self._epoch_seconds_at_source:
            logger.info(
                f"[FeeService] Discarding fee data from {source_epoch}, "
                f"cache already holds data from {self._epoch_seconds_at_source}"
            )
            self._complete(future, on_complete, FeeRequestResult.ok(self.snapshot))
            return

        if fee_per_byte < self._min_fee_per_byte:
            logger.warning(
                f"[FeeService] The delivered fee per byte ({fee_per_byte}) is smaller than "
                f"the min. default fee of {self._min_fee_per_byte} per byte"
            )
            fee_per_byte = self._min_fee_per_byte

        self._tx_fee_per_byte = fee_per_byte
        self._epoch_seconds_at_source = source_epoch
        self._fee_update_counter += 1
        snapshot = self.snapshot
        logger.info(f"[FeeService] {self._network.currency_code} tx fee: txFeePerByte={fee_per_byte}")

        self._publisher.publish(snapshot)
        self._complete(future, on_complete, FeeRequestResult.ok(snapshot, updated=True))

    def _extract(self, data: FeeData | None) -> tuple[int, int]:
        if data is None:
            raise FeeContractError("Result must not be null at get_fees")
        currency_code = self._network.currency_code
        try:
            source_epoch = int(data.timestamps[SOURCE_TIMESTAMP_KEY])
            fee_per_byte = int(data.fees[currency_code])
        except KeyError as e:
            raise FeeContractError(f"Fee data is missing required key {e}") from e
        return fee_per_byte, source_epoch

    @staticmethod
    def _complete(
        future: asyncio.Future,
        on_complete: ResultHandler | None,
        result: FeeRequestResult,
    ) -> None:
        if not future.done():
            future.set_result(result)
        if on_complete is not None:
            on_complete(result)

    @staticmethod
    def _retrieve_exception(future: asyncio.Future) -> None:
        if not future.cancelled():
            future.exception()

    @staticmethod
    def _report_defect(future: asyncio.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.critical(f"[FeeService] Initial fee request failed: {error}")
