import asyncio

from pulsechart.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler


async def test_callback_runs_after_delay():
    fired = asyncio.Event()
    AsyncioScheduler().call_later(0.01, fired.set)
    await asyncio.wait_for(fired.wait(), timeout=1)


async def test_cancelled_timer_does_not_fire():
    fired = []
    handle = AsyncioScheduler().call_later(0.01, lambda: fired.append(True))
    handle.cancel()
    await asyncio.sleep(0.05)
    assert fired == []
    assert handle.cancelled
