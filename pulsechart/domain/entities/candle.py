"""
PulseChart – Domain Entity: Candle
====================================
Vela OHLCV inmutable. `time` (segundos epoch, entero) es la clave única
dentro del SeriesStore.

Decisiones de diseño:
- frozen=True → una vela almacenada no se altera; un upsert la REEMPLAZA.
- Se usa dataclass por rendimiento (más ligera que Pydantic para hot-path).
- from_record() normaliza los registros del proveedor de datos, que pueden
  traer la clave de tiempo como `time` o como `timestamp`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from pulsechart.domain.exceptions import ValidationError

_PRICE_FIELDS = ("open", "high", "low", "close")


@dataclass(frozen=True, slots=True)
class Candle:
    """Vela OHLCV con timestamp de apertura."""

    time: int        # epoch de apertura en segundos
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def is_bullish(self) -> bool:
        return self.close >= self.open

    @property
    def change_percent(self) -> float | None:
        """Variación % de la vela; None si open == 0."""
        if self.open == 0:
            return None
        return (self.close - self.open) / self.open * 100

    @classmethod
    def from_record(cls, record: Candle | Mapping[str, Any]) -> Candle:
        """
        Normaliza un registro externo a Candle.

        Acepta `time` numérico o, en su defecto, `timestamp`. `volume` es
        opcional (0 si falta o es None).

        Raises:
            ValidationError: si el registro no es un mapping, falta un campo
                o algún valor no es numérico/finito.
        """
        if isinstance(record, Candle):
            return record
        if not isinstance(record, Mapping):
            raise ValidationError(
                f"Registro de vela inválido: {type(record).__name__}",
                field="record",
                value=record,
            )

        raw_time = record.get("time")
        if not _is_number(raw_time):
            raw_time = record.get("timestamp")
        time = _coerce_time(raw_time)

        prices = {name: _coerce_float(record.get(name), name) for name in _PRICE_FIELDS}

        raw_volume = record.get("volume")
        volume = 0.0 if raw_volume is None else _coerce_float(raw_volume, "volume")
        if volume < 0:
            raise ValidationError("El volumen no puede ser negativo", field="volume", value=raw_volume)

        return cls(time=time, volume=volume, **prices)

    def to_dict(self) -> dict:
        """Serialización para la superficie de renderizado / API."""
        return {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _coerce_time(value: Any) -> int:
    if not _is_number(value) or not math.isfinite(value):
        raise ValidationError("La vela no tiene `time` ni `timestamp` numérico", field="time", value=value)
    if value != int(value):
        raise ValidationError("El tiempo de la vela debe ser entero (segundos)", field="time", value=value)
    return int(value)


def _coerce_float(value: Any, field: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Campo `{field}` ausente o inválido", field=field, value=value)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Campo `{field}` no numérico", field=field, value=value) from e
    if not math.isfinite(number):
        raise ValidationError(f"Campo `{field}` no finito", field=field, value=value)
    return number
