"""Tests for the service context and the periodic task."""

import asyncio
import logging
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from conftest import wait_until
from feecache.core.context import ServiceContext
from feecache.core.ticker import PeriodicTask


class TestServiceContext:
    """Tests for ServiceContext."""

    @pytest_asyncio.fixture
    async def context(self) -> AsyncGenerator[ServiceContext, None]:
        """Provide a running context."""
        ctx = ServiceContext(name="test-context")
        ctx.start()
        yield ctx
        await ctx.stop()

    @pytest.mark.asyncio
    async def test_jobs_run_in_submission_order(self, context: ServiceContext) -> None:
        """Test sync and async jobs never interleave."""
        events: list[str] = []

        async def slow(tag: str) -> None:
            events.append(f"{tag}-start")
            await asyncio.sleep(0.01)
            events.append(f"{tag}-end")

        context.submit(slow, "a")
        context.submit(events.append, "b")
        context.submit(slow, "c")
        await wait_until(lambda: len(events) == 5)

        assert events == ["a-start", "a-end", "b", "c-start", "c-end"]

    @pytest.mark.asyncio
    async def test_failed_job_does_not_stop_worker(
        self, context: ServiceContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a failing job is logged and the worker continues."""
        caplog.set_level(logging.ERROR)
        events: list[str] = []

        def fail() -> None:
            raise RuntimeError("job failed")

        context.submit(fail)
        context.submit(events.append, "still alive")
        await wait_until(lambda: events == ["still alive"])

        assert context.is_running is True
        assert any("job failed" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_stop_drops_pending_jobs(self) -> None:
        """Test stop() discards jobs that have not run."""
        ctx = ServiceContext()
        ctx.start()
        gate = asyncio.Event()
        events: list[str] = []
        ctx.submit(gate.wait)
        ctx.submit(events.append, "never")
        await asyncio.sleep(0)

        await ctx.stop()
        gate.set()
        await asyncio.sleep(0.01)

        assert ctx.is_running is False
        assert events == []

    @pytest.mark.asyncio
    async def test_restart_after_stop(self) -> None:
        """Test a stopped context can be started again."""
        ctx = ServiceContext()
        ctx.start()
        await ctx.stop()
        events: list[str] = []

        ctx.start()
        ctx.submit(events.append, "again")
        await wait_until(lambda: events == ["again"])
        await ctx.stop()

    @pytest.mark.asyncio
    async def test_submit_requires_running_context(self) -> None:
        """Test submitting to a stopped context fails."""
        ctx = ServiceContext()

        with pytest.raises(RuntimeError):
            ctx.submit(print)


class TestPeriodicTask:
    """Tests for PeriodicTask."""

    @pytest.mark.asyncio
    async def test_ticks_until_stopped(self) -> None:
        """Test the callback runs repeatedly."""
        calls: list[int] = []

        async def tick() -> None:
            calls.append(1)

        task = PeriodicTask(tick, interval=0.01, name="test-ticker")
        task.start()
        await wait_until(lambda: len(calls) >= 3)
        await task.stop()
        count = len(calls)
        await asyncio.sleep(0.03)

        assert task.is_running is False
        assert len(calls) == count

    @pytest.mark.asyncio
    async def test_first_tick_waits_for_interval(self) -> None:
        """Test no tick happens before the first interval."""
        calls: list[int] = []

        async def tick() -> None:
            calls.append(1)

        task = PeriodicTask(tick, interval=10)
        task.start()
        await asyncio.sleep(0.02)
        await task.stop()

        assert calls == []

    @pytest.mark.asyncio
    async def test_errors_do_not_stop_ticking(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test callback errors are logged and ticking continues."""
        caplog.set_level(logging.ERROR)
        calls: list[int] = []

        async def tick() -> None:
            calls.append(1)
            raise LookupError("broken tick")

        task = PeriodicTask(tick, interval=0.01)
        task.start()
        await wait_until(lambda: len(calls) >= 3)

        assert task.is_running is True
        assert any("broken tick" in r.getMessage() for r in caplog.records)
        await task.stop()

    @pytest.mark.asyncio
    async def test_start_twice(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a second start() is ignored with a warning."""
        caplog.set_level(logging.WARNING)

        async def tick() -> None:
            pass

        task = PeriodicTask(tick, interval=10, name="once")
        task.start()
        task.start()
        await task.stop()

        assert any("Already running" in r.getMessage() for r in caplog.records)

    def test_invalid_interval(self) -> None:
        """Test non-positive intervals are rejected."""

        async def tick() -> None:
            pass

        with pytest.raises(ValueError):
            PeriodicTask(tick, interval=0)
