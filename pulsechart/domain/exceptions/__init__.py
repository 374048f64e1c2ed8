from pulsechart.domain.exceptions.domain_errors import (
    ChartDestroyedError,
    ChartInitializationError,
    DomainError,
    InvalidPeriodError,
    UnknownIndicatorError,
    ValidationError,
)

__all__ = [
    "ChartDestroyedError",
    "ChartInitializationError",
    "DomainError",
    "InvalidPeriodError",
    "UnknownIndicatorError",
    "ValidationError",
]
