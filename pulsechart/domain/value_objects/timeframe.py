"""
PulseChart – Domain Value Object: Timeframes
==============================================
Temporalidades soportadas por el selector del gráfico.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class Timeframe:
    key: str
    label: str
    seconds: int


TIMEFRAMES: Mapping[str, Timeframe] = MappingProxyType({
    tf.key: tf
    for tf in (
        Timeframe("1m", "1M", 60),
        Timeframe("5m", "5M", 300),
        Timeframe("15m", "15M", 900),
        Timeframe("30m", "30M", 1800),
        Timeframe("1h", "1H", 3600),
        Timeframe("4h", "4H", 14400),
        Timeframe("12h", "12H", 43200),
        Timeframe("1d", "1D", 86400),
    )
})
