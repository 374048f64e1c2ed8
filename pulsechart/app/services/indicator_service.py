"""
PulseChart – Indicator Service
================================
Registro de tipos de indicador y recálculo completo sobre el store.

TIPOS INCLUIDOS:
    sma9, sma50, sma200, ema9, ema21, rsi, macd, bollinger
    + cualquier `sma<N>` / `ema<N>` (se resuelve dinámicamente)
    + lo que se agregue con register_indicator()

NO INCREMENTAL:
Cada mutación del store recalcula TODOS los indicadores activos sobre el
historial completo. Es la opción simple y alcanza para ventanas de menos de
mil velas; los resultados se guardan para la leyenda.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.exceptions import UnknownIndicatorError, ValidationError
from pulsechart.domain.services.indicator_calculator import IndicatorCalculator
from pulsechart.domain.value_objects.indicator import IndicatorSeries
from pulsechart.domain.value_objects.theme import ChartTheme
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("indicator_service")

OVERLAY_PANE = "overlay"

_DYNAMIC_MA = re.compile(r"^(sma|ema)(\d+)$")


class IndicatorOptions(BaseModel):
    """Parámetros y estilo de un indicador; claves extra pasan al estilo."""

    model_config = ConfigDict(frozen=True, extra="allow")

    period: Optional[int] = None
    fast: Optional[int] = None
    slow: Optional[int] = None
    signal: Optional[int] = None
    std_dev: Optional[float] = None
    color: Optional[str] = None
    line_width: int = 1
    levels: Optional[Tuple[float, ...]] = None


IndicatorLines = Dict[str, IndicatorSeries]
ComputeFn = Callable[[Sequence[Candle], IndicatorOptions], IndicatorLines]


@dataclass(frozen=True)
class IndicatorDefinition:
    """
    Cómo calcular y presentar un tipo de indicador.

    `line_colors` asocia cada línea de salida con una clave de color del tema.
    """

    kind: str
    compute: ComputeFn
    pane: str = OVERLAY_PANE
    line_colors: Mapping[str, str] = field(default_factory=dict)
    levels: Tuple[float, ...] = ()


# ─── Definiciones incluidas ─────────────────────────────────────────────


def _or_default(value: Optional[int], default: int) -> int:
    return default if value is None else value


def _moving_average(kind: str, method: str, default_period: int) -> IndicatorDefinition:
    calc = IndicatorCalculator.sma if method == "sma" else IndicatorCalculator.ema

    def compute(candles: Sequence[Candle], options: IndicatorOptions) -> IndicatorLines:
        return {kind: calc(candles, _or_default(options.period, default_period))}

    return IndicatorDefinition(kind=kind, compute=compute, line_colors={kind: kind})


def _rsi(candles: Sequence[Candle], options: IndicatorOptions) -> IndicatorLines:
    return {"rsi": IndicatorCalculator.rsi(candles, _or_default(options.period, 14))}


def _macd(candles: Sequence[Candle], options: IndicatorOptions) -> IndicatorLines:
    result = IndicatorCalculator.macd(
        candles,
        fast=_or_default(options.fast, 12),
        slow=_or_default(options.slow, 26),
        signal=_or_default(options.signal, 9),
    )
    return {
        "macd_line": result.macd_line,
        "signal_line": result.signal_line,
        "histogram": result.histogram,
    }


def _bollinger(candles: Sequence[Candle], options: IndicatorOptions) -> IndicatorLines:
    std_dev = 2.0 if options.std_dev is None else options.std_dev
    result = IndicatorCalculator.bollinger(candles, _or_default(options.period, 20), std_dev)
    return {"upper": result.upper, "middle": result.middle, "lower": result.lower}


BUILTIN_DEFINITIONS: Tuple[IndicatorDefinition, ...] = (
    _moving_average("sma9", "sma", 9),
    _moving_average("sma50", "sma", 50),
    _moving_average("sma200", "sma", 200),
    _moving_average("ema9", "ema", 9),
    _moving_average("ema21", "ema", 21),
    IndicatorDefinition(
        kind="rsi",
        compute=_rsi,
        pane="rsi",
        line_colors={"rsi": "rsi"},
        levels=(30.0, 70.0),
    ),
    IndicatorDefinition(
        kind="macd",
        compute=_macd,
        pane="macd",
        line_colors={"macd_line": "macd_line", "signal_line": "signal_line"},
    ),
    IndicatorDefinition(
        kind="bollinger",
        compute=_bollinger,
        line_colors={
            "upper": "bollinger_upper",
            "middle": "bollinger_middle",
            "lower": "bollinger_lower",
        },
    ),
)


class IndicatorRegistry:
    """Tipos de indicador conocidos."""

    def __init__(self, definitions: Sequence[IndicatorDefinition] = BUILTIN_DEFINITIONS) -> None:
        self._definitions: Dict[str, IndicatorDefinition] = {d.kind: d for d in definitions}

    def register(self, definition: IndicatorDefinition) -> None:
        if definition.kind in self._definitions:
            logger.info("Indicador '%s' redefinido", definition.kind)
        self._definitions[definition.kind] = definition

    def resolve(self, kind: str) -> IndicatorDefinition:
        key = kind.strip().lower()
        if key in self._definitions:
            return self._definitions[key]

        # sma<N>/ema<N> se arman al vuelo; solo register() agrega tipos
        match = _DYNAMIC_MA.match(key)
        if match and int(match.group(2)) > 0:
            return _moving_average(key, match.group(1), int(match.group(2)))

        raise UnknownIndicatorError(kind)

    def is_known(self, kind: str) -> bool:
        try:
            self.resolve(kind)
        except UnknownIndicatorError:
            return False
        return True

    @property
    def definitions(self) -> Tuple[IndicatorDefinition, ...]:
        return tuple(self._definitions.values())

    @property
    def kinds(self) -> List[str]:
        return sorted(self._definitions)


default_registry = IndicatorRegistry()


def register_indicator(definition: IndicatorDefinition) -> None:
    """Agrega un tipo de indicador al registro global."""
    default_registry.register(definition)


class IndicatorService:
    """
    Recalcula los indicadores activos de un gráfico y arma los payloads
    para la superficie de renderizado.
    """

    def __init__(self, registry: Optional[IndicatorRegistry] = None) -> None:
        self._registry = registry or default_registry
        self._options: Dict[str, IndicatorOptions] = {}
        self._results: Dict[str, IndicatorLines] = {}

    @property
    def registry(self) -> IndicatorRegistry:
        return self._registry

    def options_for(self, kind: str) -> IndicatorOptions:
        return self._options.get(kind, IndicatorOptions())

    def set_options(
        self,
        kind: str,
        options: IndicatorOptions | Mapping | None = None,
    ) -> IndicatorOptions:
        if isinstance(options, IndicatorOptions):
            parsed = options
        else:
            try:
                parsed = IndicatorOptions.model_validate(dict(options or {}))
            except PydanticValidationError as e:
                raise ValidationError(
                    f"Opciones inválidas para '{kind}': {e.error_count()} error(es)",
                    field="options",
                    value=options,
                ) from e
        self._options[kind] = parsed
        return parsed

    def forget(self, kind: str) -> None:
        self._options.pop(kind, None)
        self._results.pop(kind, None)

    def compute(self, kind: str, candles: Sequence[Candle]) -> IndicatorLines:
        """Calcula un indicador sobre la serie completa y guarda el resultado."""
        definition = self._registry.resolve(kind)
        lines = definition.compute(candles, self.options_for(kind))
        self._results[kind] = lines
        return lines

    def recompute_all(self, kinds: Sequence[str], candles: Sequence[Candle]) -> Dict[str, IndicatorLines]:
        return {kind: self.compute(kind, candles) for kind in kinds}

    def last_results(self, kind: str) -> Optional[IndicatorLines]:
        return self._results.get(kind)

    def last_values(self) -> Dict[str, Dict[str, Optional[float]]]:
        """Último valor definido de cada línea (para leyenda)."""
        return {
            kind: {name: series.last_value for name, series in lines.items()}
            for kind, lines in self._results.items()
        }

    # ─── Payloads para la superficie ────────────────────────────────────

    def build_payload(
        self,
        kind: str,
        lines: IndicatorLines,
        theme: ChartTheme,
    ) -> Tuple[str, Dict[str, List[dict]], Dict[str, object]]:
        """
        Devuelve (pane, líneas, estilo). Los puntos ausentes se filtran: la
        superficie nunca recibe un None como si fuera un valor.
        """
        definition = self._registry.resolve(kind)
        options = self.options_for(kind)

        payload: Dict[str, List[dict]] = {}
        for name, series in lines.items():
            points = series.defined_points()
            if name == "histogram":
                for point in points:
                    point["color"] = theme.indicator_color(
                        "histogram_up" if point["value"] >= 0 else "histogram_down"
                    )
            payload[name] = points

        colors = {
            name: options.color or theme.indicator_color(color_key)
            for name, color_key in definition.line_colors.items()
        }
        extra = options.model_extra or {}
        style: Dict[str, object] = {
            "colors": colors,
            "line_width": options.line_width,
            "levels": list(options.levels if options.levels is not None else definition.levels),
            **extra,
        }
        return definition.pane, payload, style
