"""
PulseChart – Asyncio Scheduler
================================
Adaptador de IScheduler sobre `loop.call_later` del event loop en curso.

Los callbacks corren en el hilo del loop, el mismo que muta el gráfico:
no hace falta sincronización.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from pulsechart.application.ports.scheduler import IScheduler, ITimerHandle


class AsyncioTimerHandle(ITimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(IScheduler):
    """
    Usa el loop indicado o, si no se indica, el loop en ejecución al
    programar. Fuera de un loop activo `call_later` lanza RuntimeError.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> AsyncioTimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioTimerHandle(loop.call_later(delay, callback))
