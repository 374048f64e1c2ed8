"""
PulseChart – Chart Facade (PriceChart)
========================================
Compone SeriesStore + IndicatorService + ViewportController + formateador y
empuja el resultado a una superficie de renderizado externa.

FLUJO EN CADA MUTACIÓN:
  set_data / update_data
       → SeriesStore normaliza y mezcla
       → IndicatorService recalcula TODOS los indicadores activos
       → ViewportController decide el rango visible
       → IRenderingSurface recibe serie, indicadores y rango
       → EventBus(data_updated)

La superficie llama a format_price() como callback de etiquetas.

CICLO DE VIDA:
- Si la superficie no se puede construir, el constructor lanza
  ChartInitializationError ANTES de crear timers o listeners.
- destroy() cancela el timer de decay y libera la superficie. Idempotente.
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pulsechart.app.services.indicator_service import IndicatorService
from pulsechart.app.services.render_strategies import strategy_for, volume_data
from pulsechart.app.state.series_store import CandleRecord, MutationKind, SeriesStore
from pulsechart.app.state.viewport_controller import ViewportController
from pulsechart.application.dto.chart_config import ChartConfig
from pulsechart.application.ports.rendering_surface import (
    IRenderingSurface,
    RenderingSurfaceFactory,
)
from pulsechart.application.ports.scheduler import IScheduler
from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.exceptions import (
    ChartDestroyedError,
    ChartInitializationError,
    ValidationError,
)
from pulsechart.domain.services.price_formatter import (
    format_change_percent,
    format_price,
    format_volume,
)
from pulsechart.domain.value_objects.chart_type import ChartType
from pulsechart.domain.value_objects.position_marker import PositionMarker
from pulsechart.domain.value_objects.price_format import PriceFormatMode
from pulsechart.domain.value_objects.theme import ChartTheme, get_theme
from pulsechart.domain.value_objects.viewport import (
    GestureKind,
    InteractionState,
    ViewportAction,
    ViewportDecision,
    ViewportRange,
)
from pulsechart.infrastructure.event_bus import (
    CROSSHAIR_MOVE,
    DATA_UPDATED,
    VISIBLE_RANGE_CHANGED,
    WARNING,
    EventBus,
)
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("chart")

DASHED = 2


class PriceChart:
    """Gráfico de precios en vivo: núcleo de datos, indicadores y viewport."""

    def __init__(
        self,
        surface_factory: RenderingSurfaceFactory,
        config: Optional[ChartConfig] = None,
        scheduler: Optional[IScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        event_bus: Optional[EventBus] = None,
        indicator_service: Optional[IndicatorService] = None,
    ) -> None:
        # La superficie va primero: si falla no queda nada a medio construir
        self._surface = self._build_surface(surface_factory)

        self._config = config or ChartConfig()
        self._theme: ChartTheme = get_theme(self._config.theme)
        self._owns_event_bus = event_bus is None
        self._events = event_bus or EventBus()
        self._indicators = indicator_service or IndicatorService()
        self._config = self._config.model_copy(
            update={"indicators": self._known_indicators(self._config.indicators)}
        )

        self._store = SeriesStore(on_warning=self._emit_warning)
        self._viewport = ViewportController(
            scheduler=scheduler,
            clock=clock,
            decay_seconds=self._config.interaction_decay_seconds,
            right_offset=self._config.right_offset,
        )

        self._positions: List[tuple[PositionMarker, Any]] = []
        self._overlays: List[Any] = []
        self._comparisons: Dict[str, str] = {}
        self._destroyed = False

        self._surface.set_price_formatter(self.format_price)
        self._surface.apply_theme(self._theme)
        self._push_main_series()
        self._store.subscribe(self._on_store_mutation)

        logger.info(
            "PriceChart creado (tipo=%s, tema=%s, formato=%s/%d, indicadores=%s)",
            self._config.chart_type.value,
            self._theme.name,
            self._config.price_format.value,
            self._config.price_precision,
            ",".join(self._config.indicators) or "-",
        )

    @staticmethod
    def _build_surface(factory: RenderingSurfaceFactory) -> IRenderingSurface:
        try:
            surface = factory()
        except (ImportError, RuntimeError, OSError) as e:
            raise ChartInitializationError(
                f"Librería de gráficos no disponible: {e}"
            ) from e
        if surface is None:
            raise ChartInitializationError("La fábrica de superficie no devolvió nada")
        return surface

    def _known_indicators(self, kinds: Sequence[str]) -> tuple[str, ...]:
        known = []
        for kind in kinds:
            if self._indicators.registry.is_known(kind):
                known.append(kind)
            else:
                logger.warning("Indicador desconocido en configuración ignorado: %s", kind)
        return tuple(known)

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def config(self) -> ChartConfig:
        return self._config

    @property
    def theme(self) -> ChartTheme:
        return self._theme

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def candles(self) -> tuple[Candle, ...]:
        return self._store.candles

    @property
    def store(self) -> SeriesStore:
        return self._store

    @property
    def interaction_state(self) -> InteractionState:
        return self._viewport.state

    @property
    def visible_range(self) -> Optional[ViewportRange]:
        return self._viewport.visible_range

    @property
    def active_indicators(self) -> tuple[str, ...]:
        return self._config.indicators

    @property
    def positions(self) -> List[PositionMarker]:
        return [marker for marker, _ in self._positions]

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def indicator_results(self, kind: str):
        return self._indicators.last_results(kind.strip().lower())

    # ════════════════════════════════════════════════════════════════
    #  DATOS
    # ════════════════════════════════════════════════════════════════

    def set_data(self, records: Sequence[CandleRecord] | None) -> bool:
        """Reemplaza todas las velas. False (con warning) si la entrada es inválida."""
        self._ensure_alive("set_data")
        return self._store.set_data(records)

    def update_data(self, record: CandleRecord | None) -> bool:
        """Upsert de una vela en vivo. False (con warning) si es inválida."""
        self._ensure_alive("update_data")
        return self._store.update_data(record)

    def _on_store_mutation(self, kind: str, store: SeriesStore, candle: Optional[Candle]) -> None:
        candles = store.candles
        strategy = strategy_for(self._config.chart_type)

        if kind == MutationKind.UPSERT and candle is not None:
            self._surface.update_main_series(strategy.point(candle))
            if self._config.show_volume:
                self._surface.set_volume_series(volume_data(candles, self._theme))
        else:
            self._push_main_series()

        self._refresh_indicators(candles)
        self._apply_viewport(self._viewport.evaluate(len(candles)))
        self._events.publish(DATA_UPDATED, candles)

    def _push_main_series(self) -> None:
        strategy = strategy_for(self._config.chart_type)
        candles = self._store.candles
        self._surface.set_main_series(
            strategy.series_kind, strategy.style(self._theme), strategy.data(candles),
        )
        self._surface.set_volume_series(
            volume_data(candles, self._theme) if self._config.show_volume else None
        )

    # ════════════════════════════════════════════════════════════════
    #  INDICADORES
    # ════════════════════════════════════════════════════════════════

    def add_indicator(self, kind: str, options: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Activa un indicador y lo calcula sobre la serie completa.

        Raises:
            UnknownIndicatorError: si `kind` no está registrado.
            InvalidPeriodError: si las opciones traen un período inválido.

        Returns:
            False si aún no hay datos (no-op con warning).
        """
        self._ensure_alive("add_indicator")
        key = kind.strip().lower()
        self._indicators.registry.resolve(key)

        if self._store.is_empty:
            self._emit_warning(f"Sin datos para calcular el indicador '{key}'")
            return False

        previous = self._indicators.options_for(key)
        self._indicators.set_options(key, options)
        try:
            lines = self._indicators.compute(key, self._store.candles)
        except ValidationError:
            # Opciones inválidas: no dejar el indicador a medio activar
            if key in self._config.indicators:
                self._indicators.set_options(key, previous)
            else:
                self._indicators.forget(key)
            raise

        self._config = self._config.with_indicator(key)
        self._push_indicator(key, lines)
        return True

    def remove_indicator(self, kind: str) -> None:
        self._ensure_alive("remove_indicator")
        key = kind.strip().lower()
        self._surface.remove_indicator(key)
        self._indicators.forget(key)
        self._config = self._config.without_indicator(key)

    def _refresh_indicators(self, candles: Sequence[Candle]) -> None:
        for kind, lines in self._indicators.recompute_all(self._config.indicators, candles).items():
            self._push_indicator(kind, lines)

    def _push_indicator(self, kind: str, lines) -> None:
        pane, payload, style = self._indicators.build_payload(kind, lines, self._theme)
        self._surface.set_indicator(kind, pane, payload, style)

    # ════════════════════════════════════════════════════════════════
    #  FORMATO
    # ════════════════════════════════════════════════════════════════

    def format_price(self, price: Any) -> str:
        """Callback de etiquetas de precio. Nunca lanza."""
        return format_price(price, self._config.price_format_spec)

    def format_volume(self, volume: Any) -> str:
        return format_volume(volume, self._config.volume_precision)

    def set_price_format(self, mode: PriceFormatMode | str, precision: Optional[int] = None) -> None:
        self._ensure_alive("set_price_format")
        self._config = self._config.with_price_format(mode, precision)
        self._surface.set_price_formatter(self.format_price)

    # ════════════════════════════════════════════════════════════════
    #  RECONFIGURACIÓN
    # ════════════════════════════════════════════════════════════════

    def set_theme(self, name: str) -> None:
        """Cambia la paleta; indicadores y posiciones se conservan."""
        self._ensure_alive("set_theme")
        self._theme = get_theme(name)
        self._config = self._config.with_theme(self._theme.name)
        self._surface.apply_theme(self._theme)
        self._push_main_series()
        self._refresh_indicators(self._store.candles)
        self._redraw_positions()

    def set_chart_type(self, chart_type: ChartType | str) -> None:
        """Cambia la variante de la serie principal; indicadores y posiciones se conservan."""
        self._ensure_alive("set_chart_type")
        try:
            new_type = ChartType(chart_type)
        except ValueError as e:
            raise ValidationError(
                f"Tipo de gráfico desconocido: {chart_type!r}",
                field="chart_type",
                value=chart_type,
            ) from e
        if new_type is self._config.chart_type:
            return
        self._config = self._config.with_chart_type(new_type)
        self._push_main_series()
        self._redraw_positions()

    def set_volume_visible(self, visible: bool) -> None:
        self._ensure_alive("set_volume_visible")
        self._config = self._config.with_volume(visible)
        self._surface.set_volume_series(
            volume_data(self._store.candles, self._theme) if visible else None
        )

    # ════════════════════════════════════════════════════════════════
    #  POSICIONES Y OVERLAYS
    # ════════════════════════════════════════════════════════════════

    def add_position_marker(self, position: PositionMarker | Mapping[str, Any]) -> PositionMarker:
        self._ensure_alive("add_position_marker")
        marker = PositionMarker.from_dict(position)
        handle = self._surface.add_price_line(marker.price, {
            "color": self._theme.position_color(marker.type.value),
            "line_width": 1,
            "line_style": DASHED,
            "axis_label_visible": True,
            "title": marker.title,
        })
        self._positions.append((marker, handle))
        self._push_markers()
        return marker

    def set_positions(self, positions: Sequence[PositionMarker | Mapping[str, Any]]) -> None:
        self.clear_position_markers()
        for position in positions:
            self.add_position_marker(position)

    def clear_position_markers(self) -> None:
        for _, handle in self._positions:
            self._surface.remove_price_line(handle)
        self._positions = []
        self._surface.set_markers([])

    def _redraw_positions(self) -> None:
        markers = self.positions
        self.clear_position_markers()
        for marker in markers:
            self.add_position_marker(marker)

    def _push_markers(self) -> None:
        markers = [
            {
                "time": m.timestamp,
                "position": m.placement,
                "color": self._theme.position_color(m.type.value),
                "shape": m.shape,
                "text": m.label or "",
                "size": 1,
            }
            for m, _ in self._positions
            if m.timestamp
        ]
        markers.sort(key=lambda item: item["time"])
        self._surface.set_markers(markers)

    def add_horizontal_line(
        self,
        price: float,
        color: Optional[str] = None,
        label: str = "",
        style: int = 0,
        line_width: int = 1,
        show_label: bool = True,
    ) -> Any:
        self._ensure_alive("add_horizontal_line")
        handle = self._surface.add_price_line(price, {
            "color": color or self._theme.crosshair_color,
            "line_width": line_width,
            "line_style": style,
            "axis_label_visible": show_label,
            "title": label,
        })
        self._overlays.append(handle)
        return handle

    def remove_horizontal_line(self, handle: Any) -> None:
        if handle in self._overlays:
            self._surface.remove_price_line(handle)
            self._overlays.remove(handle)

    def clear_overlays(self) -> None:
        for handle in self._overlays:
            self._surface.remove_price_line(handle)
        self._overlays = []

    # ════════════════════════════════════════════════════════════════
    #  COMPARACIÓN
    # ════════════════════════════════════════════════════════════════

    def add_comparison(
        self,
        symbol: str,
        records: Sequence[CandleRecord],
        color: Optional[str] = None,
    ) -> bool:
        """Serie de comparación normalizada a % de cambio desde el primer cierre."""
        self._ensure_alive("add_comparison")
        if not records:
            return False
        try:
            candles = sorted((Candle.from_record(r) for r in records), key=lambda c: c.time)
        except ValidationError as e:
            self._emit_warning(f"Comparación '{symbol}' rechazada: {e.message}")
            return False

        first_close = candles[0].close
        if first_close == 0:
            self._emit_warning(f"Comparación '{symbol}' rechazada: primer cierre en 0")
            return False

        data = [
            {"time": c.time, "value": (c.close - first_close) / first_close * 100}
            for c in candles
        ]
        resolved_color = color or self._theme.text_color
        self._surface.set_comparison(symbol, data, resolved_color)
        self._comparisons[symbol] = resolved_color
        return True

    def remove_comparison(self, symbol: str) -> None:
        if self._comparisons.pop(symbol, None) is not None:
            self._surface.remove_comparison(symbol)

    def clear_comparisons(self) -> None:
        for symbol in list(self._comparisons):
            self._surface.remove_comparison(symbol)
        self._comparisons.clear()

    # ════════════════════════════════════════════════════════════════
    #  VIEWPORT
    # ════════════════════════════════════════════════════════════════

    def mark_user_interaction(self, gesture: GestureKind | str = GestureKind.WHEEL) -> None:
        """Gesto de zoom/pan del usuario (wheel, pointer-down, touch-start)."""
        self._ensure_alive("mark_user_interaction")
        self._viewport.mark_user_interaction(gesture)

    def reset_interaction(self) -> None:
        """Vuelve a auto-follow inmediatamente."""
        self._ensure_alive("reset_interaction")
        self._viewport.reset_interaction()

    def restart_follow(self) -> None:
        """La próxima carga ajusta todo de nuevo (cambio de símbolo/timeframe)."""
        self._ensure_alive("restart_follow")
        self._viewport.restart_follow()

    def on_visible_range_changed(self, visible_range: ViewportRange | Mapping[str, float] | None) -> None:
        """La superficie reporta el rango lógico visible."""
        if self._destroyed:
            return
        if isinstance(visible_range, Mapping):
            visible_range = ViewportRange(
                from_index=float(visible_range["from"]),
                to_index=float(visible_range["to"]),
            )
        self._viewport.on_visible_range_changed(visible_range)
        self._events.publish(VISIBLE_RANGE_CHANGED, visible_range)

    def fit_content(self) -> None:
        self._ensure_alive("fit_content")
        self._apply_viewport(self._viewport.fit_all(len(self._store)))

    def set_visible_bars(self, bars: int) -> Optional[ViewportRange]:
        """Muestra las últimas `bars` barras."""
        self._ensure_alive("set_visible_bars")
        new_range = self._viewport.bars_range(bars, len(self._store))
        if new_range is not None:
            self._surface.set_visible_range(new_range)
        return new_range

    def visible_data(self) -> List[Candle]:
        """Velas dentro del rango lógico visible (todas si no hay rango)."""
        visible_range = self._viewport.visible_range
        if visible_range is None:
            return list(self._store.candles)
        start = math.floor(visible_range.from_index)
        end = math.ceil(visible_range.to_index)
        return self._store.slice(start, end)

    def _apply_viewport(self, decision: ViewportDecision) -> None:
        if decision.action is ViewportAction.FIT_ALL:
            self._surface.fit_content()
        elif decision.action is ViewportAction.FOLLOW_LATEST and decision.visible_range:
            self._surface.set_visible_range(decision.visible_range)

    # ════════════════════════════════════════════════════════════════
    #  LEYENDA / TOOLTIP
    # ════════════════════════════════════════════════════════════════

    def _describe(self, candle: Candle) -> dict:
        return {
            "time": candle.time,
            "open": self.format_price(candle.open),
            "high": self.format_price(candle.high),
            "low": self.format_price(candle.low),
            "close": self.format_price(candle.close),
            "change": format_change_percent(candle.change_percent),
            "bullish": candle.is_bullish,
            "volume": self.format_volume(candle.volume) if candle.volume else None,
        }

    def legend(self) -> Optional[dict]:
        """Datos de la última vela + valores actuales de indicadores."""
        last = self._store.last
        if last is None:
            return None
        values = self._indicators.last_values()
        return {
            **self._describe(last),
            "indicators": [
                {
                    "name": kind,
                    "values": {
                        line: self.format_price(value) if value is not None else None
                        for line, value in values.get(kind, {}).items()
                    },
                }
                for kind in self._config.indicators
            ],
            "comparisons": list(self._comparisons),
        }

    def tooltip(self, time_key: Optional[int]) -> Optional[dict]:
        if time_key is None:
            return None
        candle = self._store.find(time_key)
        return self._describe(candle) if candle else None

    def on_crosshair_move(self, time_key: Optional[int]) -> Optional[dict]:
        """La superficie reporta el crosshair; devuelve el tooltip de esa barra."""
        if self._destroyed:
            return None
        info = self.tooltip(time_key)
        self._events.publish(CROSSHAIR_MOVE, info)
        return info

    # ════════════════════════════════════════════════════════════════
    #  CICLO DE VIDA
    # ════════════════════════════════════════════════════════════════

    def destroy(self) -> None:
        """Cancela timers, quita listeners y libera la superficie. Idempotente."""
        if self._destroyed:
            return
        self._viewport.destroy()
        self._store.clear_listeners()

        self.clear_position_markers()
        self.clear_overlays()
        self.clear_comparisons()
        for kind in self._config.indicators:
            self._surface.remove_indicator(kind)
            self._indicators.forget(kind)

        self._surface.remove()
        self._store.clear()
        if self._owns_event_bus:
            self._events.unsubscribe_all()
        self._destroyed = True
        logger.info("PriceChart destruido")

    def _ensure_alive(self, operation: str) -> None:
        if self._destroyed:
            raise ChartDestroyedError(operation)

    def _emit_warning(self, message: str) -> None:
        logger.warning(message)
        self._events.publish(WARNING, message)


def create_price_chart(
    surface_factory: RenderingSurfaceFactory,
    options: Optional[Mapping[str, Any]] = None,
    base: Optional[ChartConfig] = None,
    **kwargs: Any,
) -> PriceChart:
    """Atajo: opciones estilo frontend (`chartType`, `priceFormat`, ...) → PriceChart."""
    config = ChartConfig.from_options(options, base=base)
    return PriceChart(surface_factory, config=config, **kwargs)


__all__ = ["PriceChart", "create_price_chart"]
