"""
PulseChart – Viewport / Interaction Controller
================================================
Decide, en cada refresco de datos, si el rango visible sigue a la última
barra o respeta el zoom/pan manual del usuario.

ESTADOS:
  AUTO_FOLLOW (inicial) ⇄ USER_CONTROLLED

TRANSICIONES:
  1. Primera carga de datos     → fit-all; queda en AUTO_FOLLOW
  2. Gesto (wheel/pointer/touch) → USER_CONTROLLED; reinicia el timer de decay
  3. Timer de decay sin gestos   → AUTO_FOLLOW
  4. Datos nuevos en AUTO_FOLLOW → conserva el ancho del rango previo y lo
                                   desplaza hasta la última barra + right_offset
                                   (fit-all si aún no hay rango previo)
  5. Datos nuevos en USER_CONTROLLED → el rango no se toca
  6. reset_interaction()         → AUTO_FOLLOW y cancela el timer

La tabla de transiciones es la fuente de verdad; el timer solo la dispara.
Si no hay scheduler (o el timer aún no corrió), el decay se evalúa también
con el reloj al llegar datos nuevos, con el mismo umbral.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from pulsechart.application.ports.scheduler import IScheduler, ITimerHandle
from pulsechart.domain.exceptions import ValidationError
from pulsechart.domain.value_objects.viewport import (
    GestureKind,
    InteractionMode,
    InteractionState,
    ViewportAction,
    ViewportDecision,
    ViewportRange,
)
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("viewport")

DEFAULT_DECAY_SECONDS = 30.0


class ViewportController:
    """Máquina de estados del rango visible de un gráfico."""

    def __init__(
        self,
        scheduler: Optional[IScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        decay_seconds: float = DEFAULT_DECAY_SECONDS,
        right_offset: int = 5,
    ) -> None:
        self._scheduler = scheduler
        self._clock = clock
        self._decay_seconds = decay_seconds
        self._right_offset = right_offset

        self._state = InteractionState()
        self._visible_range: Optional[ViewportRange] = None
        self._is_first_load = True
        self._decay_timer: Optional[ITimerHandle] = None
        self._destroyed = False

    # ─── Consultas ──────────────────────────────────────────────────────

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def mode(self) -> InteractionMode:
        return self._state.mode

    @property
    def visible_range(self) -> Optional[ViewportRange]:
        return self._visible_range

    @property
    def right_offset(self) -> int:
        return self._right_offset

    @property
    def has_pending_decay(self) -> bool:
        return self._decay_timer is not None

    @property
    def is_first_load(self) -> bool:
        return self._is_first_load

    # ─── Gestos ─────────────────────────────────────────────────────────

    def mark_user_interaction(self, gesture: GestureKind | str = GestureKind.WHEEL) -> None:
        """Transición 2: el usuario toma control del viewport."""
        if self._destroyed:
            return
        try:
            gesture = GestureKind(gesture)
        except ValueError as e:
            raise ValidationError(
                f"Gesto desconocido: {gesture!r}", field="gesture", value=gesture,
            ) from e
        was_auto = not self._state.is_user_controlled
        self._state = InteractionState(
            mode=InteractionMode.USER_CONTROLLED,
            last_gesture_at=self._clock(),
        )
        self._restart_decay_timer()
        if was_auto:
            logger.debug("Viewport bajo control del usuario (%s)", gesture.value)

    def reset_interaction(self) -> None:
        """Transición 6: vuelve a auto-follow sin importar el tiempo transcurrido."""
        self._cancel_decay_timer()
        self._state = InteractionState(mode=InteractionMode.AUTO_FOLLOW)

    def on_visible_range_changed(self, visible_range: Optional[ViewportRange]) -> None:
        """La superficie reporta el rango actual (zoom, pan o ajuste programático)."""
        self._visible_range = visible_range

    # ─── Evaluación en cada mutación de datos ───────────────────────────

    def evaluate(self, bar_count: int) -> ViewportDecision:
        """
        Decide el nuevo rango visible tras una mutación del store.

        Args:
            bar_count: cantidad de velas tras la mutación

        Returns:
            ViewportDecision con la acción y, si aplica, el rango a fijar
        """
        if bar_count <= 0 or self._destroyed:
            return ViewportDecision(ViewportAction.KEEP, self._visible_range)

        last_index = bar_count - 1

        if self._is_first_load:
            self._is_first_load = False
            self.reset_interaction()
            return self._fit_all(last_index)

        self._expire_if_idle()

        if self._state.is_user_controlled:
            return ViewportDecision(ViewportAction.KEEP, self._visible_range)

        if self._visible_range is None:
            return self._fit_all(last_index)

        visible_bars = self._visible_range.bar_count
        new_range = ViewportRange(
            from_index=max(0, last_index - visible_bars + self._right_offset),
            to_index=last_index + self._right_offset,
        )
        self._visible_range = new_range
        return ViewportDecision(ViewportAction.FOLLOW_LATEST, new_range)

    def fit_all(self, bar_count: int) -> ViewportDecision:
        """Ajuste explícito a todas las barras (botón "fit")."""
        if bar_count <= 0:
            return ViewportDecision(ViewportAction.KEEP, self._visible_range)
        return self._fit_all(bar_count - 1)

    def bars_range(self, bars: int, bar_count: int) -> Optional[ViewportRange]:
        """Rango que muestra las últimas `bars` barras más el right_offset."""
        if bar_count <= 0:
            return None
        last_index = bar_count - 1
        self._visible_range = ViewportRange(
            from_index=max(0, last_index - bars),
            to_index=last_index + self._right_offset,
        )
        return self._visible_range

    def restart_follow(self) -> None:
        """La próxima carga se trata como primera (cambio de símbolo/timeframe)."""
        self._is_first_load = True
        self._visible_range = None
        self.reset_interaction()

    # ─── Ciclo de vida ──────────────────────────────────────────────────

    def destroy(self) -> None:
        """Cancela el timer pendiente. Idempotente."""
        self._cancel_decay_timer()
        self._destroyed = True

    # ─── Internos ───────────────────────────────────────────────────────

    def _fit_all(self, last_index: int) -> ViewportDecision:
        self._visible_range = ViewportRange(from_index=0, to_index=last_index)
        return ViewportDecision(ViewportAction.FIT_ALL, self._visible_range)

    def _restart_decay_timer(self) -> None:
        self._cancel_decay_timer()
        if self._scheduler is not None:
            self._decay_timer = self._scheduler.call_later(
                self._decay_seconds, self._on_decay,
            )

    def _cancel_decay_timer(self) -> None:
        if self._decay_timer is not None:
            self._decay_timer.cancel()
            self._decay_timer = None

    def _on_decay(self) -> None:
        """Transición 3: el timer expiró sin gestos intermedios."""
        self._decay_timer = None
        if self._destroyed or not self._state.is_user_controlled:
            return
        self._state = InteractionState(mode=InteractionMode.AUTO_FOLLOW)
        logger.debug("Control del usuario expirado: vuelve auto-follow")

    def _expire_if_idle(self) -> None:
        last = self._state.last_gesture_at
        if not self._state.is_user_controlled or last is None:
            return
        if self._clock() - last >= self._decay_seconds:
            self._cancel_decay_timer()
            self._on_decay()
