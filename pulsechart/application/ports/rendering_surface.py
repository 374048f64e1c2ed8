"""
PulseChart – Application Port: Rendering Surface
==================================================
Interfaz hacia la librería de gráficos externa (p.ej. lightweight-charts).

El núcleo decide QUÉ mostrar (series, indicadores, rango visible); la
superficie decide CÓMO pintarlo. Los payloads son listas de dicts
JSON-serializables con `time` en segundos.

IMPLEMENTACIONES POSIBLES:
- Puente a lightweight-charts vía WebSocket (frontend)
- HeadlessSurface (memoria, usada por la API y los tests)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from pulsechart.domain.value_objects.theme import ChartTheme
from pulsechart.domain.value_objects.viewport import ViewportRange

PriceLabelFormatter = Callable[[Any], str]


class IRenderingSurface(ABC):
    """Superficie de renderizado de un único gráfico."""

    @abstractmethod
    def set_price_formatter(self, formatter: PriceLabelFormatter) -> None:
        """Registra el callback que la superficie usa para las etiquetas de precio."""

    @abstractmethod
    def apply_theme(self, theme: ChartTheme) -> None:
        """Aplica colores de fondo, grilla, crosshair y bordes."""

    # ─── Serie principal / volumen ──────────────────────────────────────

    @abstractmethod
    def set_main_series(self, series_kind: str, style: Dict[str, Any], data: List[dict]) -> None:
        """Crea (o recrea) la serie principal con su estilo y datos completos."""

    @abstractmethod
    def update_main_series(self, point: dict) -> None:
        """Actualiza o añade la última barra de la serie principal."""

    @abstractmethod
    def set_volume_series(self, data: Optional[List[dict]]) -> None:
        """Datos de volumen; None elimina la serie de volumen."""

    # ─── Indicadores ────────────────────────────────────────────────────

    @abstractmethod
    def set_indicator(
        self,
        name: str,
        pane: str,
        lines: Dict[str, List[dict]],
        style: Dict[str, Any],
    ) -> None:
        """Crea o reemplaza todas las líneas de un indicador."""

    @abstractmethod
    def remove_indicator(self, name: str) -> None:
        """Elimina las series de un indicador (no falla si no existe)."""

    # ─── Marcas y líneas de precio ──────────────────────────────────────

    @abstractmethod
    def add_price_line(self, price: float, options: Dict[str, Any]) -> Any:
        """Dibuja una línea horizontal; devuelve un handle opaco."""

    @abstractmethod
    def remove_price_line(self, handle: Any) -> None:
        """Elimina una línea creada con add_price_line."""

    @abstractmethod
    def set_markers(self, markers: List[dict]) -> None:
        """Reemplaza las marcas sobre barras de la serie principal."""

    # ─── Comparación ────────────────────────────────────────────────────

    @abstractmethod
    def set_comparison(self, symbol: str, data: List[dict], color: str) -> None:
        """Serie de comparación normalizada a % sobre su propia escala."""

    @abstractmethod
    def remove_comparison(self, symbol: str) -> None:
        """Elimina una serie de comparación."""

    # ─── Viewport ───────────────────────────────────────────────────────

    @abstractmethod
    def set_visible_range(self, visible_range: ViewportRange) -> None:
        """Fija el rango lógico visible."""

    @abstractmethod
    def fit_content(self) -> None:
        """Ajusta el rango para mostrar todas las barras."""

    @abstractmethod
    def remove(self) -> None:
        """Libera la superficie y todos sus listeners."""


# Fábrica que construye una superficie; lanza ImportError/RuntimeError si la
# librería de gráficos no está disponible.
RenderingSurfaceFactory = Callable[[], IRenderingSurface]
