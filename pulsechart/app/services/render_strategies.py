"""
PulseChart – Render Strategies
================================
Una estrategia por variante de ChartType: qué datos recibe la serie
principal y con qué estilo.

- candlestick / bar → barras OHLC completas
- line / area       → {time, value=close}

La tabla STRATEGIES cubre TODAS las variantes; se verifica al importar.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Sequence

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.value_objects.chart_type import ChartType
from pulsechart.domain.value_objects.theme import ChartTheme


def _ohlc_point(candle: Candle) -> dict:
    return {
        "time": candle.time,
        "open": candle.open,
        "high": candle.high,
        "low": candle.low,
        "close": candle.close,
    }


def _close_point(candle: Candle) -> dict:
    return {"time": candle.time, "value": candle.close}


class RenderStrategy(ABC):
    series_kind: str

    @abstractmethod
    def point(self, candle: Candle) -> dict:
        """Un punto de la serie principal."""

    @abstractmethod
    def style(self, theme: ChartTheme) -> Dict[str, Any]:
        """Colores de la serie principal según el tema."""

    def data(self, candles: Sequence[Candle]) -> List[dict]:
        return [self.point(c) for c in candles]


class CandlestickStrategy(RenderStrategy):
    series_kind = "candlestick"

    def point(self, candle: Candle) -> dict:
        return _ohlc_point(candle)

    def style(self, theme: ChartTheme) -> Dict[str, Any]:
        return {
            "up_color": theme.up_color,
            "down_color": theme.down_color,
            "wick_up_color": theme.wick_up_color,
            "wick_down_color": theme.wick_down_color,
            "border_visible": False,
        }


class BarStrategy(RenderStrategy):
    series_kind = "bar"

    def point(self, candle: Candle) -> dict:
        return _ohlc_point(candle)

    def style(self, theme: ChartTheme) -> Dict[str, Any]:
        return {"up_color": theme.up_color, "down_color": theme.down_color}


class LineStrategy(RenderStrategy):
    series_kind = "line"

    def point(self, candle: Candle) -> dict:
        return _close_point(candle)

    def style(self, theme: ChartTheme) -> Dict[str, Any]:
        return {"color": theme.up_color, "line_width": 2}


class AreaStrategy(RenderStrategy):
    series_kind = "area"

    def point(self, candle: Candle) -> dict:
        return _close_point(candle)

    def style(self, theme: ChartTheme) -> Dict[str, Any]:
        return {
            "top_color": f"{theme.up_color}40",
            "bottom_color": f"{theme.up_color}05",
            "line_color": theme.up_color,
            "line_width": 2,
        }


STRATEGIES: Mapping[ChartType, RenderStrategy] = {
    ChartType.CANDLESTICK: CandlestickStrategy(),
    ChartType.BAR: BarStrategy(),
    ChartType.LINE: LineStrategy(),
    ChartType.AREA: AreaStrategy(),
}
assert set(STRATEGIES) == set(ChartType), "Falta una RenderStrategy para algún ChartType"


def strategy_for(chart_type: ChartType | str) -> RenderStrategy:
    return STRATEGIES[ChartType(chart_type)]


def volume_data(candles: Sequence[Candle], theme: ChartTheme) -> List[dict]:
    """Histograma de volumen coloreado por dirección de la vela."""
    return [
        {
            "time": c.time,
            "value": c.volume,
            "color": theme.volume_color(c.is_bullish),
        }
        for c in candles
    ]
