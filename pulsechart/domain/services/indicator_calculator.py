"""
PulseChart – Domain Service: Indicator Calculator
===================================================
Cálculos de indicadores técnicos puros sobre la serie completa de velas.

Cada función recibe TODAS las velas y devuelve una IndicatorSeries de la
misma longitud, alineada índice a índice. Los índices sin historial
suficiente llevan `value=None` (ausente), nunca 0.

VENTAJA:
- Testeo unitario sin mocks
- Sin dependencias de librerías externas en el dominio
- Fórmulas explícitas y auditables

COSTE:
El recálculo es completo en cada mutación del store: O(n) a O(n·period).
Aceptable para ventanas de menos de mil velas.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.exceptions import InvalidPeriodError
from pulsechart.domain.value_objects.indicator import (
    BollingerResult,
    IndicatorSeries,
    MacdResult,
)


def validate_period(period: object, field: str = "period") -> int:
    """Un período válido es un entero > 0 (bool no cuenta como entero)."""
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise InvalidPeriodError(period, field=field)
    return period


def sma_values(values: Sequence[float], period: int) -> List[Optional[float]]:
    """Media simple de la ventana final de `period` valores en cada índice."""
    result: List[Optional[float]] = []
    for i in range(len(values)):
        if i < period - 1:
            result.append(None)
            continue
        window = values[i - period + 1:i + 1]
        result.append(sum(window) / period)
    return result


def ema_values(values: Sequence[Optional[float]], period: int) -> List[Optional[float]]:
    """
    EMA sobre una secuencia que puede tener huecos (None).

    FÓRMULA:
    EMA_t = (price_t - EMA_{t-1}) × k + EMA_{t-1}
    k = 2 / (period + 1)

    INICIALIZACIÓN:
    La EMA se siembra con la SMA de los primeros `period` valores definidos
    consecutivos. Un hueco reinicia la siembra: nunca se opera con None.
    """
    k = 2.0 / (period + 1)
    result: List[Optional[float]] = []
    run: List[float] = []
    ema: Optional[float] = None

    for value in values:
        if value is None:
            run = []
            ema = None
            result.append(None)
            continue

        if ema is None:
            run.append(value)
            if len(run) < period:
                result.append(None)
                continue
            ema = sum(run[-period:]) / period
        else:
            ema = (value - ema) * k + ema
        result.append(ema)

    return result


def _closes(candles: Sequence[Candle]) -> List[float]:
    return [c.close for c in candles]


def _times(candles: Sequence[Candle]) -> List[int]:
    return [c.time for c in candles]


class IndicatorCalculator:
    """
    Calculadora de indicadores técnicos puros.

    RESPONSABILIDAD:
    Implementar las fórmulas matemáticas de indicadores.
    NO mantiene estado (stateless). Una entrada vacía produce salida vacía.
    """

    @staticmethod
    def sma(candles: Sequence[Candle], period: int) -> IndicatorSeries:
        """
        Calcula SMA (Simple Moving Average) sobre `close`.

        Ausente para i < period-1; después, media de close[i-period+1..i].
        """
        validate_period(period)
        return IndicatorSeries.from_values(
            f"sma{period}", _times(candles), sma_values(_closes(candles), period),
        )

    @staticmethod
    def ema(candles: Sequence[Candle], period: int) -> IndicatorSeries:
        """
        Calcula EMA (Exponential Moving Average) sobre `close`.

        En i = period-1 el valor coincide exactamente con la SMA del mismo
        índice (semilla).
        """
        validate_period(period)
        return IndicatorSeries.from_values(
            f"ema{period}", _times(candles), ema_values(_closes(candles), period),
        )

    @staticmethod
    def rsi(candles: Sequence[Candle], period: int = 14) -> IndicatorSeries:
        """
        Calcula RSI (Relative Strength Index).

        FÓRMULA:
        RSI = 100 - (100 / (1 + RS))
        RS = avg_gain / avg_loss   (RS = 100 si avg_loss == 0)

        avg_gain / avg_loss son la media ARITMÉTICA de las últimas `period`
        ganancias/pérdidas, recalculada en cada índice. No es el suavizado
        recursivo de Wilder: los valores mostrados dependen de esta forma.
        """
        validate_period(period)
        closes = _closes(candles)
        gains: List[float] = [0.0] * len(closes)
        losses: List[float] = [0.0] * len(closes)
        values: List[Optional[float]] = []

        for i in range(len(closes)):
            if i > 0:
                change = closes[i] - closes[i - 1]
                gains[i] = max(change, 0.0)
                losses[i] = max(-change, 0.0)

            if i < period:
                values.append(None)
                continue

            avg_gain = sum(gains[i - period + 1:i + 1]) / period
            avg_loss = sum(losses[i - period + 1:i + 1]) / period

            rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
            values.append(100.0 - 100.0 / (1.0 + rs))

        return IndicatorSeries.from_values(f"rsi{period}", _times(candles), values)

    @staticmethod
    def macd(
        candles: Sequence[Candle],
        fast: int = 12,
        slow: int = 26,
        signal: int = 9,
    ) -> MacdResult:
        """
        Calcula MACD.

        macd_line   = EMA(fast) - EMA(slow) donde ambas existen
        signal_line = EMA(signal) aplicada sobre macd_line, sembrada con la SMA
                      de los primeros `signal` valores DEFINIDOS de macd_line
                      (sembrar con los huecos como 0 haría arrancar la señal en
                      el índice signal-1, con valores iniciales distintos)
        histogram   = macd_line - signal_line donde ambas existen
        """
        validate_period(fast, "fast")
        validate_period(slow, "slow")
        validate_period(signal, "signal")

        closes = _closes(candles)
        times = _times(candles)
        fast_ema = ema_values(closes, fast)
        slow_ema = ema_values(closes, slow)

        macd_line = [
            f - s if f is not None and s is not None else None
            for f, s in zip(fast_ema, slow_ema)
        ]
        signal_line = ema_values(macd_line, signal)
        histogram = [
            m - s if m is not None and s is not None else None
            for m, s in zip(macd_line, signal_line)
        ]

        return MacdResult(
            macd_line=IndicatorSeries.from_values("macd_line", times, macd_line),
            signal_line=IndicatorSeries.from_values("signal_line", times, signal_line),
            histogram=IndicatorSeries.from_values("histogram", times, histogram),
        )

    @staticmethod
    def bollinger(
        candles: Sequence[Candle],
        period: int = 20,
        std_dev: float = 2.0,
    ) -> BollingerResult:
        """
        Calcula Bandas de Bollinger.

        FÓRMULA:
        Middle = SMA(period)
        Upper = Middle + std_dev × σ
        Lower = Middle - std_dev × σ

        σ es la desviación estándar POBLACIONAL de la misma ventana.
        """
        validate_period(period)
        closes = _closes(candles)
        times = _times(candles)
        middle = sma_values(closes, period)
        upper: List[Optional[float]] = []
        lower: List[Optional[float]] = []

        for i, mid in enumerate(middle):
            if mid is None:
                upper.append(None)
                lower.append(None)
                continue
            window = closes[i - period + 1:i + 1]
            variance = sum((c - mid) ** 2 for c in window) / period
            sigma = math.sqrt(variance)
            upper.append(mid + std_dev * sigma)
            lower.append(mid - std_dev * sigma)

        return BollingerResult(
            upper=IndicatorSeries.from_values("bollinger_upper", times, upper),
            middle=IndicatorSeries.from_values("bollinger_middle", times, middle),
            lower=IndicatorSeries.from_values("bollinger_lower", times, lower),
        )
