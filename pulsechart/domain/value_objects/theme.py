"""
PulseChart – Domain Value Object: ChartTheme
==============================================
Paletas de color dark/light. Un nombre desconocido cae en `dark`.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

DEFAULT_THEME = "dark"


@dataclass(frozen=True)
class ChartTheme:
    name: str
    background: str
    text_color: str
    grid_color: str
    border_color: str
    crosshair_color: str
    up_color: str
    down_color: str
    volume_up_color: str
    volume_down_color: str
    wick_up_color: str
    wick_down_color: str
    tooltip_background: str
    indicator_colors: Mapping[str, str]
    position_colors: Mapping[str, str]

    def indicator_color(self, key: str, fallback: str | None = None) -> str:
        return self.indicator_colors.get(key, fallback or self.crosshair_color)

    def position_color(self, kind: str) -> str:
        return self.position_colors.get(kind, self.position_colors["entry"])

    def volume_color(self, bullish: bool) -> str:
        return self.volume_up_color if bullish else self.volume_down_color


DARK = ChartTheme(
    name="dark",
    background="#0d1117",
    text_color="#8b949e",
    grid_color="#21262d",
    border_color="#30363d",
    crosshair_color="#58a6ff",
    up_color="#3fb950",
    down_color="#f85149",
    volume_up_color="rgba(63, 185, 80, 0.3)",
    volume_down_color="rgba(248, 81, 73, 0.3)",
    wick_up_color="#3fb950",
    wick_down_color="#f85149",
    tooltip_background="#161b22",
    indicator_colors=MappingProxyType({
        "ema9": "#f59e0b",
        "ema21": "#8b5cf6",
        "sma50": "#06b6d4",
        "sma200": "#ec4899",
        "rsi": "#58a6ff",
        "macd_line": "#3fb950",
        "signal_line": "#f85149",
        "histogram_up": "rgba(63, 185, 80, 0.5)",
        "histogram_down": "rgba(248, 81, 73, 0.5)",
        "bollinger_upper": "rgba(88, 166, 255, 0.5)",
        "bollinger_lower": "rgba(88, 166, 255, 0.5)",
        "bollinger_middle": "#58a6ff",
    }),
    position_colors=MappingProxyType({
        "entry": "#3fb950",
        "exit": "#f85149",
        "dca": "#f59e0b",
        "stopLoss": "#ef4444",
        "takeProfit": "#10b981",
    }),
)

LIGHT = ChartTheme(
    name="light",
    background="#ffffff",
    text_color="#374151",
    grid_color="#e5e7eb",
    border_color="#d1d5db",
    crosshair_color="#1565c0",
    up_color="#10b981",
    down_color="#ef4444",
    volume_up_color="rgba(16, 185, 129, 0.3)",
    volume_down_color="rgba(239, 68, 68, 0.3)",
    wick_up_color="#10b981",
    wick_down_color="#ef4444",
    tooltip_background="#ffffff",
    indicator_colors=MappingProxyType({
        "ema9": "#d97706",
        "ema21": "#7c3aed",
        "sma50": "#0891b2",
        "sma200": "#db2777",
        "rsi": "#1565c0",
        "macd_line": "#059669",
        "signal_line": "#dc2626",
        "histogram_up": "rgba(16, 185, 129, 0.5)",
        "histogram_down": "rgba(239, 68, 68, 0.5)",
        "bollinger_upper": "rgba(21, 101, 192, 0.4)",
        "bollinger_lower": "rgba(21, 101, 192, 0.4)",
        "bollinger_middle": "#1565c0",
    }),
    position_colors=MappingProxyType({
        "entry": "#059669",
        "exit": "#dc2626",
        "dca": "#d97706",
        "stopLoss": "#dc2626",
        "takeProfit": "#059669",
    }),
)

THEMES: Mapping[str, ChartTheme] = MappingProxyType({"dark": DARK, "light": LIGHT})


def get_theme(name: str | None) -> ChartTheme:
    """Paleta por nombre; fallback silencioso a dark."""
    return THEMES.get(name or DEFAULT_THEME, DARK)
