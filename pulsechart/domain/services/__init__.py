from pulsechart.domain.services.indicator_calculator import IndicatorCalculator
from pulsechart.domain.services.price_formatter import (
    PLACEHOLDER,
    PriceFormatter,
    format_auto,
    format_price,
    format_subscript,
    format_volume,
)

__all__ = [
    "IndicatorCalculator",
    "PLACEHOLDER",
    "PriceFormatter",
    "format_auto",
    "format_price",
    "format_subscript",
    "format_volume",
]
