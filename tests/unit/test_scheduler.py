"""Tests for CleanupScheduler (on-demand runs, timeout, periodic loop)."""

import asyncio
import logging

import pytest

from cachesweep.application.dtos.cleanup import CleanupRunResult
from cachesweep.domain.exceptions import CleanupTimeoutException
from cachesweep.infrastructure.scheduling.scheduler import CleanupScheduler
from cachesweep.shared.utils.datetime import utc_now


class _FakeAgent:
    agent_type = "CacheCleanupAgent"

    def __init__(
        self,
        *,
        delay: float = 0.0,
        errors: list[Exception] | None = None,
        poll_interval_seconds: float = 0.01,
        timeout_seconds: float = 1.0,
    ) -> None:
        self.delay = delay
        self.errors = list(errors or [])
        self.poll_interval_seconds = poll_interval_seconds
        self.timeout_seconds = timeout_seconds
        self.calls = 0
        self.active = 0
        self.max_active = 0

    async def run(self) -> CleanupRunResult:
        self.calls += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.errors:
                raise self.errors.pop(0)
            await asyncio.sleep(self.delay)
            return CleanupRunResult(started_at=utc_now(), finished_at=utc_now())
        finally:
            self.active -= 1


async def test_run_now_stores_last_result() -> None:
    scheduler = CleanupScheduler(_FakeAgent())
    assert scheduler.last_result is None

    result = await scheduler.run_now()

    assert scheduler.last_result is result


async def test_run_now_times_out() -> None:
    agent = _FakeAgent(delay=1.0, timeout_seconds=0.01)
    scheduler = CleanupScheduler(agent)
    with pytest.raises(CleanupTimeoutException) as exc_info:
        await scheduler.run_now()
    assert exc_info.value.error_code == "CLEANUP_TIMEOUT"
    assert scheduler.last_result is None


async def test_timeout_error_raised_inside_run_is_not_reported_as_run_timeout() -> None:
    """A driver-level TimeoutError within budget propagates unchanged."""
    agent = _FakeAgent(errors=[TimeoutError("statement timeout")], timeout_seconds=5.0)
    scheduler = CleanupScheduler(agent)
    with pytest.raises(TimeoutError, match="statement timeout") as exc_info:
        await scheduler.run_now()
    assert not isinstance(exc_info.value, CleanupTimeoutException)


async def test_tick_logs_inner_timeout_error_as_failed_run(caplog) -> None:
    agent = _FakeAgent(errors=[TimeoutError("statement timeout")], timeout_seconds=5.0)
    scheduler = CleanupScheduler(agent)

    with caplog.at_level(logging.WARNING):
        await scheduler._tick()

    messages = [r.getMessage() for r in caplog.records]
    assert "CacheCleanupAgent run failed" in messages
    assert not any("exceeded" in m for m in messages)


async def test_tick_logs_run_timeout_as_warning(caplog) -> None:
    agent = _FakeAgent(delay=1.0, timeout_seconds=0.01)
    scheduler = CleanupScheduler(agent)

    with caplog.at_level(logging.WARNING):
        await scheduler._tick()

    (record,) = [r for r in caplog.records if "exceeded" in r.getMessage()]
    assert record.levelno == logging.WARNING


async def test_concurrent_runs_are_serialized() -> None:
    agent = _FakeAgent(delay=0.01)
    scheduler = CleanupScheduler(agent)
    await asyncio.gather(scheduler.run_now(), scheduler.run_now(), scheduler.run_now())
    assert agent.calls == 3
    assert agent.max_active == 1


async def test_periodic_loop_survives_failed_run() -> None:
    agent = _FakeAgent(errors=[RuntimeError("registry unavailable")])
    scheduler = CleanupScheduler(agent)

    scheduler.start()
    assert scheduler.is_running
    for _ in range(100):
        if scheduler.last_result is not None:
            break
        await asyncio.sleep(0.01)
    await scheduler.stop()

    assert agent.calls >= 2
    assert scheduler.last_result is not None
    assert not scheduler.is_running


async def test_periodic_loop_survives_timeout() -> None:
    agent = _FakeAgent(delay=1.0, timeout_seconds=0.01)
    scheduler = CleanupScheduler(agent)
    scheduler.start()
    for _ in range(100):
        if agent.calls >= 2:
            break
        await asyncio.sleep(0.01)
    await scheduler.stop()
    assert agent.calls >= 2


async def test_start_is_idempotent_and_stop_without_start() -> None:
    scheduler = CleanupScheduler(_FakeAgent(poll_interval_seconds=10))
    await scheduler.stop()
    scheduler.start()
    task = scheduler._task
    scheduler.start()
    assert scheduler._task is task
    await scheduler.stop()
