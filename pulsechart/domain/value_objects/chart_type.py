"""
PulseChart – Domain Value Object: ChartType
=============================================
Variantes cerradas del tipo de gráfico. Cada variante tiene exactamente una
RenderStrategy (ver app/services/render_strategies.py).
"""

from __future__ import annotations

from enum import Enum


class ChartType(str, Enum):
    CANDLESTICK = "candlestick"
    LINE = "line"
    AREA = "area"
    BAR = "bar"
