"""
PulseChart – Domain Value Objects: IndicatorPoint / IndicatorSeries
=====================================================================
Salida de un indicador: una secuencia alineada 1:1 con las velas de origen.

`value is None` significa "historial insuficiente", NUNCA cero. Por eso el
tipo es `float | None` y no un número mágico: cualquier aritmética sobre un
punto ausente falla de forma explícita en vez de silenciosa.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence


@dataclass(frozen=True, slots=True)
class IndicatorPoint:
    time: int
    value: float | None = None

    @property
    def is_defined(self) -> bool:
        return self.value is not None

    def to_dict(self) -> dict:
        return {"time": self.time, "value": self.value}


@dataclass(frozen=True)
class IndicatorSeries:
    """Serie nombrada de IndicatorPoint, ordenada por tiempo ascendente."""

    name: str
    points: tuple[IndicatorPoint, ...] = ()

    @classmethod
    def from_values(
        cls,
        name: str,
        times: Sequence[int],
        values: Sequence[float | None],
    ) -> IndicatorSeries:
        return cls(
            name=name,
            points=tuple(IndicatorPoint(t, v) for t, v in zip(times, values)),
        )

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[IndicatorPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> IndicatorPoint:
        return self.points[index]

    @property
    def values(self) -> list[float | None]:
        return [p.value for p in self.points]

    @property
    def last_value(self) -> float | None:
        """Último valor definido (para leyenda), o None."""
        for point in reversed(self.points):
            if point.value is not None:
                return point.value
        return None

    def defined_points(self) -> list[dict]:
        """Puntos con valor, en el formato que consume la superficie."""
        return [p.to_dict() for p in self.points if p.value is not None]


@dataclass(frozen=True)
class MacdResult:
    macd_line: IndicatorSeries
    signal_line: IndicatorSeries
    histogram: IndicatorSeries


@dataclass(frozen=True)
class BollingerResult:
    upper: IndicatorSeries
    middle: IndicatorSeries
    lower: IndicatorSeries
