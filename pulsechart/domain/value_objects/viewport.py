"""
PulseChart – Domain Value Objects: Viewport e interacción
===========================================================
ViewportRange usa coordenadas LÓGICAS (índice de barra), no píxeles ni tiempo.
Puede contener fracciones: la superficie reporta rangos como 12.4 → 80.6.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class ViewportRange:
    from_index: float
    to_index: float

    @property
    def bar_count(self) -> float:
        """Cantidad de barras que abarca el rango (to - from)."""
        return self.to_index - self.from_index

    def to_dict(self) -> dict:
        return {"from": self.from_index, "to": self.to_index}


class InteractionMode(str, Enum):
    AUTO_FOLLOW = "auto_follow"
    USER_CONTROLLED = "user_controlled"


class GestureKind(str, Enum):
    """Gestos del usuario que toman control del viewport."""

    WHEEL = "wheel"
    POINTER_DOWN = "pointer_down"
    TOUCH_START = "touch_start"


@dataclass(frozen=True, slots=True)
class InteractionState:
    mode: InteractionMode = InteractionMode.AUTO_FOLLOW
    last_gesture_at: float | None = None

    @property
    def is_user_controlled(self) -> bool:
        return self.mode is InteractionMode.USER_CONTROLLED


class ViewportAction(str, Enum):
    """Qué debe hacer la superficie con el rango visible tras una mutación."""

    FIT_ALL = "fit_all"
    FOLLOW_LATEST = "follow_latest"
    KEEP = "keep"


@dataclass(frozen=True, slots=True)
class ViewportDecision:
    action: ViewportAction
    visible_range: ViewportRange | None = None
