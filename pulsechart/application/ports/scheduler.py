"""
PulseChart – Application Port: Scheduler
==========================================
Temporizadores cancelables. El controlador de viewport los usa para el
decaimiento del control manual; destruir el gráfico DEBE cancelarlos.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class ITimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Cancela el temporizador. Idempotente."""


class IScheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ITimerHandle:
        """Ejecuta `callback` tras `delay` segundos en el hilo del gráfico."""
