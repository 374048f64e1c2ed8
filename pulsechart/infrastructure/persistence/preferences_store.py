"""
PulseChart – JSON Preferences Store
=====================================
Persistencia de ChartPreferences en un archivo JSON.

TOLERANCIA:
Un archivo ausente, JSON corrupto, tipos incorrectos o valores de enum
desconocidos NUNCA se propagan al llamador: load() devuelve los defaults.
Los campos válidos de un archivo parcialmente inválido se conservan.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from pulsechart.application.dto.preferences import ChartPreferences
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("preferences")


class JsonPreferencesStore:
    """Preferencias del gráfico en disco."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ChartPreferences:
        """Carga preferencias; defaults ante cualquier problema."""
        if not self._path.exists():
            logger.debug("Preferencias no existen en %s, usando defaults", self._path)
            return ChartPreferences()

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug("Preferencias ilegibles (%s), usando defaults", e)
            return ChartPreferences()

        if not isinstance(data, dict):
            logger.debug("Preferencias con formato inesperado, usando defaults")
            return ChartPreferences()

        return self._validate_per_field(data)

    def save(self, preferences: ChartPreferences) -> bool:
        """Guarda preferencias. Devuelve False si no se pudo escribir."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(preferences.model_dump(mode="json"), f, indent=2)
        except OSError as e:
            logger.error("Error guardando preferencias en %s: %s", self._path, e)
            return False
        return True

    @staticmethod
    def _validate_per_field(data: Dict[str, Any]) -> ChartPreferences:
        try:
            return ChartPreferences.model_validate(data)
        except PydanticValidationError as e:
            bad_fields = {err["loc"][0] for err in e.errors() if err.get("loc")}
            logger.debug("Preferencias inválidas en %s, se descartan", sorted(map(str, bad_fields)))

        cleaned = {
            key: value
            for key, value in data.items()
            if key in ChartPreferences.model_fields and key not in bad_fields
        }
        try:
            return ChartPreferences.model_validate(cleaned)
        except PydanticValidationError:
            return ChartPreferences()
