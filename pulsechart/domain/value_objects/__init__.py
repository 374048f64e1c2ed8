from pulsechart.domain.value_objects.chart_type import ChartType
from pulsechart.domain.value_objects.indicator import (
    BollingerResult,
    IndicatorPoint,
    IndicatorSeries,
    MacdResult,
)
from pulsechart.domain.value_objects.position_marker import PositionMarker, PositionMarkerType
from pulsechart.domain.value_objects.price_format import PriceFormatMode, PriceFormatSpec
from pulsechart.domain.value_objects.theme import ChartTheme, get_theme
from pulsechart.domain.value_objects.timeframe import TIMEFRAMES, Timeframe
from pulsechart.domain.value_objects.viewport import (
    GestureKind,
    InteractionMode,
    InteractionState,
    ViewportAction,
    ViewportDecision,
    ViewportRange,
)

__all__ = [
    "BollingerResult",
    "ChartTheme",
    "ChartType",
    "GestureKind",
    "IndicatorPoint",
    "IndicatorSeries",
    "InteractionMode",
    "InteractionState",
    "MacdResult",
    "PositionMarker",
    "PositionMarkerType",
    "PriceFormatMode",
    "PriceFormatSpec",
    "TIMEFRAMES",
    "Timeframe",
    "ViewportAction",
    "ViewportDecision",
    "ViewportRange",
    "get_theme",
]
