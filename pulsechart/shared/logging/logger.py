"""
PulseChart – Logging configuration
====================================
Logging legible para desarrollo. Los loggers de la librería cuelgan del
namespace `pulsechart.` para que la app anfitriona pueda subir o bajar
su nivel en bloque sin tocar el root logger.
"""

from __future__ import annotations

import logging
import sys

NAMESPACE = "pulsechart"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"


def resolve_level(level: int | str) -> int:
    """Nivel por nombre ("debug", "WARNING") o entero; INFO si no se reconoce."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configura el root logger una sola vez al arranque."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(resolve_level(level))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def set_library_level(level: int | str) -> None:
    """Nivel solo para los loggers `pulsechart.*` (p. ej. silenciar warnings de ingesta)."""
    logging.getLogger(NAMESPACE).setLevel(resolve_level(level))


def get_logger(name: str) -> logging.Logger:
    """Fábrica de loggers con namespace prefijado."""
    return logging.getLogger(f"{NAMESPACE}.{name}")
