"""
PulseChart – Event Bus (fan-out síncrono)
==========================================
Bus de eventos del gráfico para desacoplar el núcleo de sus observadores
(UI, toasts, logs de auditoría).

Arquitectura:
  ┌───────────┐           ┌───────────┐
  │ PriceChart│──evento──▸│ Event Bus │──▸ Handler 1 (UI)
  │           │           │ (fan-out) │──▸ Handler 2 (toast de warning)
  └───────────┘           └───────────┘──▸ Handler N ...

SÍNCRONO:
- El núcleo del gráfico corre completo en el hilo del llamador, sin puntos
  de suspensión; los handlers se invocan en orden de suscripción.
- Un handler que lanza excepción se registra en el log y NO corta la
  entrega al resto ni la operación que publicó el evento.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

from pulsechart.shared.logging.logger import get_logger

logger = get_logger("event_bus")

# Tópicos estándar
DATA_UPDATED = "data_updated"
WARNING = "warning"
VISIBLE_RANGE_CHANGED = "visible_range_changed"
CROSSHAIR_MOVE = "crosshair_move"

Handler = Callable[[Any], None]


class EventBus:
    """Fan-out event bus síncrono por tópico."""

    def __init__(self) -> None:
        # topic → lista de (handler, nombre_consumidor)
        self._subscribers: Dict[str, List[Tuple[Handler, str]]] = {}

    def subscribe(self, topic: str, handler: Handler, consumer_name: str = "anon") -> None:
        """Registrar un handler en un tópico."""
        self._subscribers.setdefault(topic, []).append((handler, consumer_name))
        logger.debug("Consumidor '%s' suscrito a tópico '%s'", consumer_name, topic)

    def unsubscribe(self, topic: str, handler: Handler) -> None:
        subscribers = self._subscribers.get(topic, [])
        self._subscribers[topic] = [(h, n) for h, n in subscribers if h != handler]

    def publish(self, topic: str, data: Any = None) -> int:
        """
        Publicar un evento a todos los suscriptores de un tópico.

        Returns:
            Cantidad de handlers que lo procesaron sin error.
        """
        delivered = 0
        for handler, consumer_name in list(self._subscribers.get(topic, [])):
            try:
                handler(data)
                delivered += 1
            except Exception:
                logger.exception(
                    "Handler '%s' falló procesando tópico '%s'", consumer_name, topic,
                )
        return delivered

    def unsubscribe_all(self, topic: str | None = None) -> None:
        """Desuscribir todos los consumidores (cleanup al destruir el gráfico)."""
        if topic:
            self._subscribers.pop(topic, None)
        else:
            self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        return sum(len(subs) for subs in self._subscribers.values())
