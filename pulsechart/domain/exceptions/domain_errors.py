"""
PulseChart – Domain Exceptions
================================
Excepciones específicas del núcleo del gráfico.

JERARQUÍA:
    DomainError (base)
    ├── ValidationError
    │   └── InvalidPeriodError
    ├── UnknownIndicatorError
    ├── ChartInitializationError
    └── ChartDestroyedError

Los errores de datos de entrada (velas vacías o mal formadas) NO se propagan
desde la ingesta: se registran como warning y el gráfico conserva su último
estado válido. Estas excepciones cubren errores de programación del llamador.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainError):
    """Error de validación general de datos de dominio."""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field
        self.value = value


class InvalidPeriodError(ValidationError):
    """Período de indicador no positivo o no entero."""

    def __init__(self, period: Any, field: str = "period"):
        super().__init__(
            f"El período debe ser un entero positivo, recibido: {period!r}",
            field=field,
            value=period,
        )


class UnknownIndicatorError(DomainError):
    """Tipo de indicador no registrado."""

    def __init__(self, kind: str):
        super().__init__(f"Indicador desconocido: {kind!r}", code="UNKNOWN_INDICATOR")
        self.kind = kind


class ChartInitializationError(DomainError):
    """La superficie de renderizado no está disponible al construir el gráfico."""

    def __init__(self, message: str):
        super().__init__(message, code="CHART_INIT_ERROR")


class ChartDestroyedError(DomainError):
    """Operación sobre un gráfico ya destruido."""

    def __init__(self, operation: str):
        super().__init__(
            f"No se puede ejecutar '{operation}' sobre un gráfico destruido",
            code="CHART_DESTROYED",
        )
        self.operation = operation
