"""
PulseChart – Domain Value Object: PriceFormatSpec
===================================================
Configuración inmutable del formateo de precios.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pulsechart.domain.exceptions import ValidationError

# toFixed del navegador admite hasta 100 decimales
MAX_PRECISION = 100


class PriceFormatMode(str, Enum):
    AUTO = "auto"
    FIXED = "fixed"
    SCIENTIFIC = "scientific"
    SUBSCRIPT = "subscript"


@dataclass(frozen=True, slots=True)
class PriceFormatSpec:
    mode: PriceFormatMode = PriceFormatMode.AUTO
    precision: int = 9

    def __post_init__(self) -> None:
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise ValidationError("precision debe ser entero", field="precision", value=self.precision)
        if not 0 <= self.precision <= MAX_PRECISION:
            raise ValidationError(
                f"precision fuera de rango [0, {MAX_PRECISION}]",
                field="precision",
                value=self.precision,
            )
        # Aceptar el string ("auto") además del enum
        try:
            mode = PriceFormatMode(self.mode)
        except ValueError as e:
            raise ValidationError(f"Modo de formato desconocido: {self.mode!r}", field="mode", value=self.mode) from e
        object.__setattr__(self, "mode", mode)
