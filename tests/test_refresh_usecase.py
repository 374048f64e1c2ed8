import asyncio

import pytest

from pulsechart.application.ports.candle_provider import ICandleProvider
from pulsechart.application.use_cases.refresh_chart_usecase import RefreshChartUseCase
from pulsechart.domain.exceptions import ValidationError
from tests.conftest import make_candles


class FakeProvider(ICandleProvider):
    def __init__(self):
        self.history = {"5m": make_candles([1, 2, 3]), "1h": make_candles([10, 20], step=3600)}
        self.latest = None
        self.gates = []
        self.calls = []

    async def get_candles(self, symbol, timeframe, limit=500):
        self.calls.append(("history", symbol, timeframe))
        if self.gates:
            await self.gates.pop(0).wait()
        return self.history[timeframe]

    async def get_latest_candle(self, symbol, timeframe):
        self.calls.append(("latest", symbol, timeframe))
        return self.latest


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def usecase(provider, chart):
    return RefreshChartUseCase(provider, chart, symbol="SOL", timeframe="5m", poll_interval=0.01)


async def test_load_sets_data(usecase, chart):
    assert await usecase.load() is True
    assert [c.close for c in chart.candles] == [1, 2, 3]
    assert usecase.loads_applied == 1


async def test_stale_response_dropped(usecase, provider, chart):
    slow_gate = asyncio.Event()
    provider.gates = [slow_gate]
    slow = asyncio.create_task(usecase.load())
    await asyncio.sleep(0)

    # un switch posterior supersede la carga lenta
    assert await usecase.switch_timeframe("1h") is True
    slow_gate.set()
    assert await slow is False

    assert [c.close for c in chart.candles] == [10, 20]
    assert usecase.stale_dropped == 1


async def test_refresh_latest_upserts(usecase, provider, chart):
    await usecase.load()
    provider.latest = dict(provider.history["5m"][-1], close=7.0)
    assert await usecase.refresh_latest() is True
    assert chart.candles[-1].close == 7.0
    assert len(chart.candles) == 3


async def test_refresh_latest_without_data(usecase):
    assert await usecase.refresh_latest() is False


async def test_switch_timeframe_refits(usecase, chart, surface):
    await usecase.load()
    chart.mark_user_interaction("wheel")
    await usecase.switch_timeframe("1h")
    assert surface.fit_count == 2
    assert usecase.timeframe == "1h"


async def test_switch_unknown_timeframe(usecase):
    with pytest.raises(ValidationError):
        await usecase.switch_timeframe("7m")


async def test_polling_lifecycle(usecase, provider, chart):
    await usecase.load()
    provider.latest = dict(provider.history["5m"][-1], close=42.0)
    await usecase.start_polling()
    await usecase.start_polling()
    assert usecase.is_polling

    for _ in range(100):
        if usecase.updates_applied:
            break
        await asyncio.sleep(0.01)

    await usecase.stop()
    assert not usecase.is_polling
    assert chart.candles[-1].close == 42.0


async def test_polling_survives_provider_errors(usecase, provider):
    async def failing(symbol, timeframe):
        provider.calls.append(("latest", symbol, timeframe))
        raise ConnectionError("down")

    provider.get_latest_candle = failing
    await usecase.start_polling()
    for _ in range(100):
        if len(provider.calls) >= 2:
            break
        await asyncio.sleep(0.01)
    await usecase.stop()
    assert len(provider.calls) >= 2


async def test_destroyed_chart_ignores_results(usecase, chart):
    chart.destroy()
    assert await usecase.load() is False
