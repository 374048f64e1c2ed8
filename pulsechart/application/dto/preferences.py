"""
PulseChart – Application DTO: ChartPreferences
================================================
Preferencias persistidas entre sesiones (tema, tipo de gráfico, formato,
indicadores activos). Cualquier valor inválido se reemplaza por su default.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from pulsechart.domain.value_objects.chart_type import ChartType
from pulsechart.domain.value_objects.price_format import MAX_PRECISION, PriceFormatMode
from pulsechart.domain.value_objects.theme import THEMES


class ChartPreferences(BaseModel):
    theme: str = "dark"
    chart_type: ChartType = ChartType.CANDLESTICK
    price_format: PriceFormatMode = PriceFormatMode.AUTO
    price_precision: int = Field(default=9, ge=0, le=MAX_PRECISION)
    indicators: List[str] = Field(default_factory=list)
    show_volume: bool = True

    @property
    def is_known_theme(self) -> bool:
        return self.theme in THEMES
