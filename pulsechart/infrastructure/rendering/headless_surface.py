"""
PulseChart – Headless Rendering Surface
=========================================
Implementación en memoria de IRenderingSurface.

Guarda el último estado empujado por el núcleo (serie principal, volumen,
indicadores, marcas, rango visible) sin pintar nada. La API la usa para
devolver snapshots JSON del gráfico y los tests para inspeccionar qué se
habría renderizado.
"""

from __future__ import annotations

import itertools
from typing import Any, Dict, List, Optional

from pulsechart.application.ports.rendering_surface import (
    IRenderingSurface,
    PriceLabelFormatter,
)
from pulsechart.domain.value_objects.theme import ChartTheme
from pulsechart.domain.value_objects.viewport import ViewportRange


class HeadlessSurface(IRenderingSurface):
    def __init__(self) -> None:
        self.price_formatter: Optional[PriceLabelFormatter] = None
        self.theme: Optional[ChartTheme] = None
        self.main_series_kind: Optional[str] = None
        self.main_style: Dict[str, Any] = {}
        self.main_data: List[dict] = []
        self.volume_data: Optional[List[dict]] = None
        self.indicators: Dict[str, Dict[str, Any]] = {}
        self.price_lines: Dict[int, Dict[str, Any]] = {}
        self.markers: List[dict] = []
        self.comparisons: Dict[str, Dict[str, Any]] = {}
        self.visible_range: Optional[ViewportRange] = None
        self.fit_count = 0
        self.removed = False
        self._line_ids = itertools.count(1)

    def set_price_formatter(self, formatter: PriceLabelFormatter) -> None:
        self.price_formatter = formatter

    def apply_theme(self, theme: ChartTheme) -> None:
        self.theme = theme

    def set_main_series(self, series_kind: str, style: Dict[str, Any], data: List[dict]) -> None:
        self.main_series_kind = series_kind
        self.main_style = dict(style)
        self.main_data = list(data)

    def update_main_series(self, point: dict) -> None:
        for i, existing in enumerate(self.main_data):
            if existing["time"] == point["time"]:
                self.main_data[i] = point
                return
        self.main_data.append(point)
        self.main_data.sort(key=lambda p: p["time"])

    def set_volume_series(self, data: Optional[List[dict]]) -> None:
        self.volume_data = None if data is None else list(data)

    def set_indicator(
        self,
        name: str,
        pane: str,
        lines: Dict[str, List[dict]],
        style: Dict[str, Any],
    ) -> None:
        self.indicators[name] = {"pane": pane, "lines": lines, "style": style}

    def remove_indicator(self, name: str) -> None:
        self.indicators.pop(name, None)

    def add_price_line(self, price: float, options: Dict[str, Any]) -> int:
        handle = next(self._line_ids)
        self.price_lines[handle] = {"price": price, **options}
        return handle

    def remove_price_line(self, handle: Any) -> None:
        self.price_lines.pop(handle, None)

    def set_markers(self, markers: List[dict]) -> None:
        self.markers = list(markers)

    def set_comparison(self, symbol: str, data: List[dict], color: str) -> None:
        self.comparisons[symbol] = {"data": data, "color": color}

    def remove_comparison(self, symbol: str) -> None:
        self.comparisons.pop(symbol, None)

    def set_visible_range(self, visible_range: ViewportRange) -> None:
        self.visible_range = visible_range

    def fit_content(self) -> None:
        self.fit_count += 1

    def remove(self) -> None:
        self.removed = True
        self.indicators.clear()
        self.price_lines.clear()
        self.markers = []
        self.comparisons.clear()

    def format_label(self, price: Any) -> str:
        """Simula a la librería pidiendo una etiqueta de precio."""
        if self.price_formatter is None:
            return str(price)
        return self.price_formatter(price)

    def snapshot(self) -> dict:
        """Copia del estado actual; sobrevive a remove()."""
        return {
            "series_kind": self.main_series_kind,
            "theme": self.theme.name if self.theme else None,
            "main": list(self.main_data),
            "volume": None if self.volume_data is None else list(self.volume_data),
            "indicators": dict(self.indicators),
            "markers": list(self.markers),
            "price_lines": list(self.price_lines.values()),
            "comparisons": dict(self.comparisons),
            "visible_range": self.visible_range.to_dict() if self.visible_range else None,
        }
