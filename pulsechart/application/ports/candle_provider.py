"""
PulseChart – Application Port: Candle Provider
================================================
Fuente externa de velas OHLCV (histórico + última vela).

El transporte (HTTP, WebSocket, base de datos) queda fuera del núcleo:
los use cases solo consumen registros ya resueltos.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional


class ICandleProvider(ABC):
    """
    Interfaz para proveer velas.

    Los registros devueltos son mappings con `time` o `timestamp`,
    open/high/low/close y `volume` opcional, en cualquier orden.
    """

    @abstractmethod
    async def get_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 500,
    ) -> List[Mapping[str, Any]]:
        """
        Obtiene velas históricas.

        Args:
            symbol: Identificador del activo
            timeframe: Clave de TIMEFRAMES ("5m", "1h", ...)
            limit: Número máximo de velas

        Returns:
            Lista de registros de velas
        """

    @abstractmethod
    async def get_latest_candle(
        self,
        symbol: str,
        timeframe: str,
    ) -> Optional[Mapping[str, Any]]:
        """
        Obtiene la vela en construcción más reciente.

        Returns:
            Registro de vela, o None si no hay datos
        """
