import asyncio
import time
from datetime import datetime, timedelta

import pytest

from catalog_api.services import cron_trigger
from catalog_api.services.cron_service import CronService
from catalog_api.services.cron_trigger import AsyncioCronTrigger, validate_cron_expression
from conftest import FakeHttpClient, make_settings


@pytest.mark.parametrize("expr", [
    "* * * * *",
    "*/5 * * * *",
    "0 */2 * * *",
    "30 9 * * 1-5",
    "0 0 1 jan *",
    "15,45 * * * *",
])
def test_valid_expressions(expr):
    assert validate_cron_expression(expr)


@pytest.mark.parametrize("expr", [
    None,
    "",
    "not-a-cron",
    "* * * *",
    "0 * * * * *",
    "99 * * * *",
    "* 25 * * *",
    "* * * 13 *",
])
def test_invalid_expressions(expr):
    assert not validate_cron_expression(expr)


class _EveryFewMs:
    """Stands in for croniter: next fire is always 10 ms from now."""

    is_valid = staticmethod(cron_trigger.croniter.is_valid)

    def __init__(self, expr, base):
        pass

    def get_next(self, _type):
        return datetime.now().astimezone() + timedelta(milliseconds=10)


def test_fires_repeatedly_until_cancelled(monkeypatch):
    monkeypatch.setattr(cron_trigger, "croniter", _EveryFewMs)
    fired = []

    async def callback():
        fired.append(1)

    async def scenario():
        handle = AsyncioCronTrigger().schedule("* * * * *", callback)
        await asyncio.sleep(0.15)
        handle.cancel()
        await asyncio.sleep(0.02)
        count = len(fired)
        await asyncio.sleep(0.05)
        return count

    count_at_cancel = asyncio.run(scenario())
    assert count_at_cancel >= 3
    assert len(fired) == count_at_cancel


def test_slow_callbacks_overlap(monkeypatch):
    monkeypatch.setattr(cron_trigger, "croniter", _EveryFewMs)
    state = {"running": 0, "peak": 0}

    async def callback():
        state["running"] += 1
        state["peak"] = max(state["peak"], state["running"])
        await asyncio.sleep(0.05)
        state["running"] -= 1

    async def scenario():
        handle = AsyncioCronTrigger().schedule("* * * * *", callback)
        await asyncio.sleep(0.1)
        handle.cancel()
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert state["peak"] >= 2
    assert state["running"] == 0


def test_schedule_requires_running_loop():
    async def callback():
        pass

    with pytest.raises(RuntimeError):
        AsyncioCronTrigger().schedule("* * * * *", callback)


def test_aclose_lets_quick_ticks_finish(monkeypatch):
    monkeypatch.setattr(cron_trigger, "croniter", _EveryFewMs)
    state = {"started": 0, "finished": 0}

    async def callback():
        state["started"] += 1
        await asyncio.sleep(0.05)
        state["finished"] += 1

    async def scenario():
        trigger = AsyncioCronTrigger(shutdown_grace_s=1)
        handle = trigger.schedule("* * * * *", callback)
        await asyncio.sleep(0.03)
        handle.cancel()
        await trigger.aclose()

    asyncio.run(scenario())
    assert state["started"] >= 1
    assert state["finished"] == state["started"]


def test_aclose_cancels_ticks_past_grace(monkeypatch):
    monkeypatch.setattr(cron_trigger, "croniter", _EveryFewMs)
    state = {"started": 0, "finished": 0, "cancelled": 0}

    async def callback():
        state["started"] += 1
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            state["cancelled"] += 1
            raise
        state["finished"] += 1

    async def scenario():
        trigger = AsyncioCronTrigger(shutdown_grace_s=0.05)
        handle = trigger.schedule("* * * * *", callback)
        await asyncio.sleep(0.03)
        handle.cancel()
        started = time.monotonic()
        await trigger.aclose()
        return time.monotonic() - started

    elapsed = asyncio.run(scenario())
    assert state["started"] >= 1
    assert state["cancelled"] == state["started"]
    assert state["finished"] == 0
    assert elapsed < 1


def test_shutdown_records_cancelled_keep_alive_as_failure(monkeypatch):
    monkeypatch.setattr(cron_trigger, "croniter", _EveryFewMs)
    # First request never answers; later ticks get the default 200
    http = FakeHttpClient(asyncio.Event())

    async def scenario():
        cron = CronService(make_settings(), AsyncioCronTrigger(shutdown_grace_s=0.05), http)
        cron.start(enabled=True, url="http://example.test/ping")
        await asyncio.sleep(0.03)
        await cron.aclose()
        return cron

    cron = asyncio.run(scenario())
    stats = cron.get_stats()
    assert not cron.is_running
    assert stats["failure_count"] == 1
    assert stats["success_count"] == stats["total_runs"] - 1
    assert stats["last_error"] == "cancelled"
