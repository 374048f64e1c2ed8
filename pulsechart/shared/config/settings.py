"""
PulseChart – Settings (Pydantic BaseSettings)
=============================================
Valores por defecto a nivel de proceso, cargados desde variables de entorno
(prefijo PULSECHART_) o `.env`.

La configuración POR GRÁFICO vive en ChartConfig (inmutable); estos settings
solo alimentan sus valores iniciales.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ─── Viewport / interacción ─────────────────────────────────────────
    interaction_decay_seconds: float = Field(
        default=30.0,
        description="Segundos sin gestos antes de volver a auto-follow",
    )
    right_offset: int = Field(
        default=5, description="Barras vacías a la derecha de la última vela",
    )
    bar_spacing: int = Field(default=12, description="Espaciado inicial entre barras (px)")
    min_bar_spacing: int = Field(default=4, description="Espaciado mínimo entre barras (px)")

    # ─── Formato ────────────────────────────────────────────────────────
    price_format: str = Field(
        default="auto", description="auto | fixed | scientific | subscript",
    )
    price_precision: int = Field(default=9, description="Decimales de precio")
    volume_precision: int = Field(default=2, description="Decimales de volumen")
    locale: str = Field(default="en-US")

    # ─── Apariencia ─────────────────────────────────────────────────────
    chart_type: str = Field(default="candlestick")
    theme: str = Field(default="dark")
    show_volume: bool = Field(default=True)
    timeframe: str = Field(default="5m")

    # ─── Refresco en vivo ───────────────────────────────────────────────
    poll_interval_seconds: float = Field(
        default=5.0, description="Intervalo de polling de la última vela",
    )

    # ─── Preferencias persistidas ───────────────────────────────────────
    preferences_path: str = Field(
        default="chart_preferences.json",
        description="Archivo JSON de preferencias de tema/tipo de gráfico",
    )

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8890)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO", description="Nivel del root logger")
    library_log_level: str = Field(
        default="INFO", description="Nivel de los loggers pulsechart.* (WARNING silencia la ingesta)",
    )

    model_config = {
        "env_prefix": "PULSECHART_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton global – se importa donde se necesite
settings = Settings()
