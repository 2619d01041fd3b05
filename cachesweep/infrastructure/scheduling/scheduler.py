"""Periodic scheduler for the cache cleanup agent.

Runs the agent at a fixed rate (poll interval) under a timeout budget.
A run that times out is cancelled; whatever batches already committed
stay deleted and the next run removes the rest. A failed run is logged
and the next tick is the retry.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Protocol

from cachesweep.domain.exceptions import CleanupTimeoutException
from cachesweep.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from cachesweep.application.dtos.cleanup import CleanupRunResult

logger = get_logger(__name__)


class _ScheduledAgent(Protocol):
    """Minimal agent shape the scheduler drives."""

    @property
    def agent_type(self) -> str: ...

    poll_interval_seconds: int
    timeout_seconds: int

    async def run(self) -> CleanupRunResult: ...


class CleanupScheduler:
    """Drives one agent on an asyncio task; on-demand runs share its lock."""

    def __init__(self, agent: _ScheduledAgent) -> None:
        self._agent = agent
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self.last_result: CleanupRunResult | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_now(self) -> CleanupRunResult:
        """Run the agent once (waiting for an in-progress run), within the timeout.

        Raises:
            CleanupTimeoutException: If the run exceeds the agent's timeout.
                Any other TimeoutError raised inside the run propagates as is.
        """
        async with self._lock:
            deadline = asyncio.timeout(self._agent.timeout_seconds)
            try:
                async with deadline:
                    result = await self._agent.run()
            except TimeoutError as e:
                if deadline.expired():
                    raise CleanupTimeoutException(
                        self._agent.agent_type, self._agent.timeout_seconds
                    ) from e
                raise
            self.last_result = result
            return result

    async def _tick(self) -> None:
        try:
            await self.run_now()
        except CleanupTimeoutException:
            logger.warning(
                "%s exceeded its %ss timeout; remaining records are left for the next run",
                self._agent.agent_type,
                self._agent.timeout_seconds,
            )
        except Exception:
            logger.exception("%s run failed", self._agent.agent_type)

    async def run_forever(self) -> None:
        """Run the agent every poll interval until cancelled."""
        interval = self._agent.poll_interval_seconds
        logger.info(
            "Scheduling %s every %ds (timeout %ds)",
            self._agent.agent_type,
            interval,
            self._agent.timeout_seconds,
        )
        try:
            while True:
                started = time.monotonic()
                await self._tick()
                await asyncio.sleep(max(0.0, interval - (time.monotonic() - started)))
        except asyncio.CancelledError:
            logger.info("%s scheduler cancelled", self._agent.agent_type)
            raise

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self.run_forever(), name=self._agent.agent_type)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
