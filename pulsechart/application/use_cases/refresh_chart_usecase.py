"""
PulseChart – Refresh Chart Use Case
=====================================
Caso de uso: mantener un PriceChart alimentado desde un ICandleProvider.

FLUJO:
  load()           → histórico completo → chart.set_data()
  start_polling()  → task asyncio que cada `poll_interval` segundos pide la
                     última vela → chart.update_data()
  switch_timeframe → invalida lo que esté en vuelo, re-ajusta el viewport
                     y vuelve a cargar

RESPUESTAS VIEJAS:
Cada request se etiqueta con una generación monotónica. Si al volver la
respuesta la generación ya no es la vigente (hubo un load/switch posterior),
el resultado se descarta sin tocar el gráfico.

El núcleo del gráfico es síncrono; el único punto de suspensión es el await
sobre el provider.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from pulsechart.app.services.chart_facade import PriceChart
from pulsechart.application.ports.candle_provider import ICandleProvider
from pulsechart.domain.value_objects.timeframe import TIMEFRAMES
from pulsechart.domain.exceptions import ValidationError
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("refresh_usecase")


class RefreshChartUseCase:
    """
    Ciclo de vida:
      1. load()           → carga inicial
      2. start_polling()  → lanza el task de actualización
      3. stop()           → cancela el task (shutdown limpio)
    """

    def __init__(
        self,
        provider: ICandleProvider,
        chart: PriceChart,
        symbol: str,
        timeframe: Optional[str] = None,
        poll_interval: float = 5.0,
        history_limit: int = 500,
    ) -> None:
        self._provider = provider
        self._chart = chart
        self._symbol = symbol
        self._timeframe = timeframe or chart.config.timeframe
        self._poll_interval = poll_interval
        self._history_limit = history_limit

        self._generation = 0
        self._running = False
        self._poll_task: Optional[asyncio.Task] = None

        # Estadísticas de monitoreo
        self.loads_applied: int = 0
        self.updates_applied: int = 0
        self.stale_dropped: int = 0

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def timeframe(self) -> str:
        return self._timeframe

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_polling(self) -> bool:
        return self._running

    # ─── Carga ──────────────────────────────────────────────────────────

    async def load(self) -> bool:
        """
        Carga el histórico y reemplaza la serie del gráfico.

        Returns:
            True si se aplicó; False si la respuesta quedó vieja o fue rechazada.
        """
        self._generation += 1
        generation = self._generation

        records = await self._provider.get_candles(
            self._symbol, self._timeframe, limit=self._history_limit,
        )

        if self._is_stale(generation) or self._chart.is_destroyed:
            return False

        applied = self._chart.set_data(records)
        if applied:
            self.loads_applied += 1
            logger.info(
                "Histórico cargado: %s %s (%d velas)",
                self._symbol, self._timeframe, len(self._chart.candles),
            )
        return applied

    async def refresh_latest(self) -> bool:
        """Pide la última vela y la aplica como upsert."""
        generation = self._generation
        record = await self._provider.get_latest_candle(self._symbol, self._timeframe)

        if self._is_stale(generation) or self._chart.is_destroyed:
            return False
        if record is None:
            return False

        applied = self._chart.update_data(record)
        if applied:
            self.updates_applied += 1
        return applied

    async def switch_timeframe(self, timeframe: str) -> bool:
        """Cambia de timeframe: lo que esté en vuelo queda viejo y se re-ajusta todo."""
        if timeframe not in TIMEFRAMES:
            raise ValidationError(
                f"Timeframe desconocido: {timeframe!r}",
                field="timeframe",
                value=timeframe,
            )
        self._timeframe = timeframe
        self._chart.restart_follow()
        logger.info("Timeframe cambiado a %s", timeframe)
        return await self.load()

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            self.stale_dropped += 1
            logger.debug(
                "Respuesta vieja descartada (gen %d, vigente %d)",
                generation, self._generation,
            )
            return True
        return False

    # ─── Polling ────────────────────────────────────────────────────────

    async def start_polling(self) -> None:
        """Iniciar el polling. Idempotente."""
        if self._running:
            logger.warning("Polling ya está corriendo, ignorando start_polling()")
            return

        self._running = True
        self._poll_task = asyncio.create_task(
            self._poll_loop(), name=f"pulsechart-poll-{self._symbol}"
        )
        logger.info(
            "Polling iniciado: %s %s cada %.1fs",
            self._symbol, self._timeframe, self._poll_interval,
        )

    async def stop(self) -> None:
        """Cancela el task de polling. Las respuestas en vuelo quedan viejas."""
        self._running = False
        self._generation += 1

        if self._poll_task and not self._poll_task.done():
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
        self._poll_task = None

        logger.info(
            "Polling detenido. Cargas: %d, updates: %d, descartadas: %d",
            self.loads_applied, self.updates_applied, self.stale_dropped,
        )

    async def _poll_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._poll_interval)
            if not self._running or self._chart.is_destroyed:
                break
            try:
                await self.refresh_latest()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # El provider puede fallar (red); el próximo ciclo reintenta
                logger.error("Error refrescando %s: %s", self._symbol, e, exc_info=True)
