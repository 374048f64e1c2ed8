"""
PulseChart – Domain Value Object: PositionMarker
==================================================
Marcas de posición (entrada, salida, DCA, SL, TP) sobre el gráfico.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from pulsechart.domain.exceptions import ValidationError


class PositionMarkerType(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    DCA = "dca"
    STOP_LOSS = "stopLoss"
    TAKE_PROFIT = "takeProfit"


_SHAPES = {
    PositionMarkerType.ENTRY: "arrowUp",
    PositionMarkerType.EXIT: "arrowDown",
    PositionMarkerType.DCA: "circle",
    PositionMarkerType.STOP_LOSS: "square",
    PositionMarkerType.TAKE_PROFIT: "square",
}


@dataclass(frozen=True, slots=True)
class PositionMarker:
    type: PositionMarkerType
    price: float
    timestamp: int | None = None
    label: str | None = None

    @property
    def title(self) -> str:
        return self.label or self.type.value.upper()

    @property
    def shape(self) -> str:
        return _SHAPES[self.type]

    @property
    def placement(self) -> str:
        return "aboveBar" if self.type is PositionMarkerType.EXIT else "belowBar"

    @classmethod
    def from_dict(cls, data: PositionMarker | Mapping[str, Any]) -> PositionMarker:
        if isinstance(data, PositionMarker):
            return data
        try:
            marker_type = PositionMarkerType(data["type"])
            price = float(data["price"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Marca de posición inválida: {e}", field="position", value=data) from e
        timestamp = data.get("timestamp")
        return cls(
            type=marker_type,
            price=price,
            timestamp=int(timestamp) if timestamp else None,
            label=data.get("label"),
        )

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "price": self.price,
            "timestamp": self.timestamp,
            "label": self.label,
        }
