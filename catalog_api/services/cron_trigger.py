"""Recurring cron triggers for the keep-alive job.

``CronTrigger`` is the seam between the scheduler's bookkeeping and the clock:
``schedule(expr, callback)`` registers an async callback against a 5-field cron
expression and returns a handle whose ``cancel()`` stops future fires.
``AsyncioCronTrigger`` runs on the current event loop; tests substitute a
trigger that fires on demand.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Awaitable, Callable, Optional, Set

from croniter import croniter

logger = logging.getLogger("catalog_api.services.cron_trigger")

TickCallback = Callable[[], Awaitable[None]]

SHUTDOWN_GRACE_S = 5.0


def validate_cron_expression(expr: Optional[str]) -> bool:
    """Return True for a valid 5-field (minute hour dom month dow) expression."""
    if not isinstance(expr, str):
        return False
    if len(expr.split()) != 5:
        return False
    return croniter.is_valid(expr)


def next_fire_time(expr: str, base: Optional[datetime] = None) -> datetime:
    base = base or datetime.now().astimezone()
    return croniter(expr, base).get_next(datetime)


class CronHandle(ABC):
    @abstractmethod
    def cancel(self):
        """Stop future fires. Callbacks already running are left alone."""


class CronTrigger(ABC):
    @abstractmethod
    def schedule(self, expr: str, callback: TickCallback) -> CronHandle:
        pass

    async def aclose(self):
        """Release timers and callbacks still running. Called once at shutdown."""


class _AsyncioCronHandle(CronHandle):
    def __init__(self, task: asyncio.Task):
        self._task = task

    def cancel(self):
        if not self._task.done():
            self._task.cancel()


class AsyncioCronTrigger(CronTrigger):
    """Fires callbacks on the running asyncio loop at croniter-computed times.

    Every fire is spawned as its own task, so a slow callback never delays the
    next fire and two fires may overlap.
    """

    def __init__(self, shutdown_grace_s: float = SHUTDOWN_GRACE_S):
        self.shutdown_grace_s = shutdown_grace_s
        self._ticks: Set[asyncio.Task] = set()

    def schedule(self, expr: str, callback: TickCallback) -> CronHandle:
        loop = asyncio.get_running_loop()
        timer = loop.create_task(self._run(expr, callback), name=f"cron[{expr}]")
        return _AsyncioCronHandle(timer)

    async def _run(self, expr: str, callback: TickCallback):
        schedule = croniter(expr, datetime.now().astimezone())
        while True:
            fire_at = schedule.get_next(datetime)
            delay = (fire_at - datetime.now().astimezone()).total_seconds()
            if delay > 0:
                await asyncio.sleep(delay)
            tick = asyncio.get_running_loop().create_task(callback())
            # Keep a reference until done; the loop only holds weak ones
            self._ticks.add(tick)
            tick.add_done_callback(self._ticks.discard)

    async def aclose(self):
        """Wait up to ``shutdown_grace_s`` for running callbacks, then cancel the rest.

        Call after every handle has been cancelled.
        """
        ticks = list(self._ticks)
        if not ticks:
            return
        _, pending = await asyncio.wait(ticks, timeout=self.shutdown_grace_s)
        if pending:
            logger.warning("Cancelling %d cron tick(s) still running at shutdown", len(pending))
            for tick in pending:
                tick.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
