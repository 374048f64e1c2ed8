"""Fixtures compartidos: reloj y scheduler manuales, fábricas de velas."""

from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from pulsechart.app.services.chart_facade import PriceChart
from pulsechart.app.services.indicator_service import IndicatorService
from pulsechart.application.dto.chart_config import ChartConfig
from pulsechart.application.ports.scheduler import IScheduler, ITimerHandle
from pulsechart.domain.entities.candle import Candle
from pulsechart.infrastructure.rendering.headless_surface import HeadlessSurface


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTimer(ITimerHandle):
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler(IScheduler):
    """Timers manuales atados a un FakeClock; advance() dispara los vencidos."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.timers: List[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.clock.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        self.clock.advance(seconds)
        for timer in list(self.timers):
            if not timer.cancelled and timer.due <= self.clock.now:
                timer.cancelled = True
                timer.callback()


def make_candles(
    closes: List[float],
    start: int = 1_700_000_000,
    step: int = 60,
    volume: Optional[float] = 10.0,
) -> List[dict]:
    """Registros crudos con open = close previo."""
    records = []
    previous = closes[0] if closes else 0.0
    for i, close in enumerate(closes):
        record = {
            "time": start + i * step,
            "open": previous,
            "high": max(previous, close) + 1,
            "low": min(previous, close) - 1,
            "close": close,
        }
        if volume is not None:
            record["volume"] = volume
        records.append(record)
        previous = close
    return records


def to_candles(records: List[dict]) -> List[Candle]:
    return [Candle.from_record(r) for r in records]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> FakeScheduler:
    return FakeScheduler(clock)


@pytest.fixture
def surface() -> HeadlessSurface:
    return HeadlessSurface()


@pytest.fixture
def chart_factory(surface: HeadlessSurface, scheduler: FakeScheduler, clock: FakeClock):
    created: List[PriceChart] = []

    def build(**options) -> PriceChart:
        chart = PriceChart(
            lambda: surface,
            config=ChartConfig.from_options(options),
            scheduler=scheduler,
            clock=clock,
            indicator_service=IndicatorService(),
        )
        created.append(chart)
        return chart

    yield build
    for chart in created:
        chart.destroy()


@pytest.fixture
def chart(chart_factory) -> PriceChart:
    return chart_factory()
