"""
PulseChart – Domain Service: Price Formatter
==============================================
Texto de precio adaptado a la magnitud del número.

Todas las funciones son TOTALES: ningún valor de entrada (NaN, ±inf, None,
tipos no numéricos) lanza excepción. Los no finitos devuelven PLACEHOLDER.

NOTACIÓN SUBSCRIPT:
    0.0₁₀12345  ≡  0.000000000012345
El número en subíndice es la cantidad de ceros tras el punto decimal en la
representación de 20 decimales; le siguen hasta 5 dígitos significativos.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Callable, Dict

from pulsechart.domain.value_objects.price_format import PriceFormatMode, PriceFormatSpec

PLACEHOLDER = "—"
SUBSCRIPT_DIGITS = "₀₁₂₃₄₅₆₇₈₉"

SUBSCRIPT_THRESHOLD = 1e-6
EXPONENTIAL_THRESHOLD = 1e-4
SUBSCRIPT_FIXED_DIGITS = 20
SUBSCRIPT_SIGNIFICANT_DIGITS = 5

# Cubre 1e308 con 100 decimales sin perder dígitos
_DECIMAL_PRECISION = 500


def _as_float(value: Any) -> float | None:
    """float finito o None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _round_decimal(value: float, digits: int, rounding: str, shortest: bool = False) -> Decimal:
    # shortest: redondea la forma decimal más corta (repr), no el valor binario exacto
    source = Decimal(repr(value)) if shortest else Decimal(value)
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return source.quantize(Decimal(1).scaleb(-digits), rounding=rounding)


def to_fixed(value: float, digits: int) -> str:
    """Punto fijo con `digits` decimales, redondeo half-up sobre el valor exacto."""
    return format(_round_decimal(value, digits, ROUND_HALF_UP), "f")


def to_exponential(value: float, digits: int) -> str:
    """Notación exponencial estilo `1.2345e-5` (exponente sin ceros a la izquierda)."""
    mantissa, exponent = f"{value:.{digits}e}".split("e")
    return f"{mantissa}e{int(exponent):+d}"


def trim_zeros(text: str) -> str:
    """Quita ceros finales de la parte decimal (y el punto si queda solo)."""
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


def to_grouped(value: float, max_fraction_digits: int = 2) -> str:
    """Separador de miles y hasta `max_fraction_digits` decimales (en-US, empates lejos de cero)."""
    rounded = _round_decimal(value, max_fraction_digits, ROUND_HALF_UP, shortest=True)
    return trim_zeros(format(rounded, ",f"))


def format_subscript(price: Any, precision: int = 9) -> str:
    """
    Formatea con notación subscript para precios diminutos.

    - 0                 → "0"
    - no finito         → "—"
    - |price| >= 1e-4   → punto fijo a `precision` decimales, sin ceros finales
    - resto             → "0.0" + Z en subíndice + hasta 5 dígitos significativos
    """
    number = _as_float(price)
    if number is None:
        return PLACEHOLDER
    if number == 0:
        return "0"

    sign = "-" if number < 0 else ""
    absolute = abs(number)

    if absolute >= EXPONENTIAL_THRESHOLD:
        return sign + trim_zeros(to_fixed(absolute, precision))

    fraction = to_fixed(absolute, SUBSCRIPT_FIXED_DIGITS).split(".")[1]
    significant_part = fraction.lstrip("0")
    leading_zeros = len(fraction) - len(significant_part)
    significant = significant_part[:SUBSCRIPT_SIGNIFICANT_DIGITS]

    subscript = "".join(SUBSCRIPT_DIGITS[int(ch)] for ch in str(leading_zeros))
    return f"{sign}0.0{subscript}{significant}"


def format_auto(price: Any, precision: int = 9) -> str:
    """
    Formato según magnitud:

    |price| < 1e-6           → subscript
    [1e-6, 1e-4)             → exponencial, 4 decimales
    [1e-4, 1)                → fijo a `precision`, sin ceros finales
    [1, 1000)                → fijo a min(4, precision)
    >= 1000                  → agrupado con hasta 2 decimales
    """
    number = _as_float(price)
    if number is None:
        return PLACEHOLDER
    if number == 0:
        return "0"

    absolute = abs(number)
    if absolute < SUBSCRIPT_THRESHOLD:
        return format_subscript(number, precision)
    if absolute < EXPONENTIAL_THRESHOLD:
        return to_exponential(number, 4)
    if absolute < 1:
        return trim_zeros(to_fixed(number, precision))
    if absolute < 1000:
        return to_fixed(number, min(4, precision))
    return to_grouped(number)


def _format_fixed(number: float, precision: int) -> str:
    return to_fixed(number, precision)


def _format_scientific(number: float, precision: int) -> str:
    if abs(number) < EXPONENTIAL_THRESHOLD:
        return to_exponential(number, 4)
    return to_fixed(number, precision)


_FORMATTERS: Dict[PriceFormatMode, Callable[[float, int], str]] = {
    PriceFormatMode.AUTO: format_auto,
    PriceFormatMode.FIXED: _format_fixed,
    PriceFormatMode.SCIENTIFIC: _format_scientific,
    PriceFormatMode.SUBSCRIPT: format_subscript,
}
assert set(_FORMATTERS) == set(PriceFormatMode)


def format_price(price: Any, spec: PriceFormatSpec | None = None) -> str:
    """Punto de entrada: formatea `price` según el modo del spec."""
    spec = spec or PriceFormatSpec()
    number = _as_float(price)
    if number is None:
        return PLACEHOLDER
    if number == 0:
        return "0"
    return _FORMATTERS[spec.mode](number, spec.precision)


def format_volume(volume: Any, precision: int = 2) -> str:
    """Volumen con sufijos B / M / K."""
    number = _as_float(volume)
    if number is None:
        return PLACEHOLDER
    if number >= 1e9:
        return to_fixed(number / 1e9, 2) + "B"
    if number >= 1e6:
        return to_fixed(number / 1e6, 2) + "M"
    if number >= 1e3:
        return to_fixed(number / 1e3, 2) + "K"
    return to_fixed(number, precision)


def format_change_percent(percent: float | None) -> str:
    """Variación porcentual con signo explícito: +1.25% / -0.40%."""
    number = _as_float(percent)
    if number is None:
        return PLACEHOLDER
    prefix = "+" if number >= 0 else ""
    return f"{prefix}{to_fixed(number, 2)}%"


class PriceFormatter:
    """Formateador ligado a un PriceFormatSpec; se usa como callback de etiquetas."""

    def __init__(self, spec: PriceFormatSpec | None = None) -> None:
        self._spec = spec or PriceFormatSpec()

    @property
    def spec(self) -> PriceFormatSpec:
        return self._spec

    def __call__(self, price: Any) -> str:
        return format_price(price, self._spec)
