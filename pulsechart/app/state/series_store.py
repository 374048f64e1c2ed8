"""
PulseChart – Series Store
==========================
Dueño de la secuencia canónica de velas de un gráfico.

INVARIANTE:
- Las velas están ordenadas por `time` ascendente y `time` es clave única.
  Ninguna ruta de mutación deja dos velas con el mismo `time`.

MUTACIONES:
- set_data(records)  → normaliza, ordena y reemplaza TODO. Si hay tiempos
  repetidos en la entrada gana el último registro.
- update_data(record) → upsert: reemplaza en sitio si el `time` existe,
  si no añade y reordena.

Cada mutación exitosa notifica a los listeners (recalcular indicadores y
evaluar el viewport). Una entrada vacía o inválida es un no-op con warning:
el store conserva su último estado válido.

ESCALABILIDAD:
update_data reordena la lista completa en cada llamada: O(n log n) por tick.
Con ~1 tick/s y ventanas de menos de mil velas es despreciable; si crece la
cadencia o el historial, pasar a inserción ordenada con bisect.

THREADING:
Un único escritor (el ciclo de refresco) en el hilo del gráfico. Sin locks.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.exceptions import ValidationError
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("series_store")

CandleRecord = Candle | Mapping[str, Any]


class MutationKind:
    REPLACE = "replace"
    UPSERT = "upsert"


# Listener(kind, store, vela); la vela solo viene en UPSERT
StoreListener = Callable[[str, "SeriesStore", Optional[Candle]], None]
# Callback de warning no fatal (mensaje)
WarningSink = Callable[[str], None]


class SeriesStore:
    """Secuencia ordenada y sin duplicados de velas de un símbolo."""

    def __init__(self, on_warning: Optional[WarningSink] = None) -> None:
        self._candles: List[Candle] = []
        self._listeners: List[StoreListener] = []
        self._on_warning = on_warning

        # Contadores de monitoreo
        self.total_replacements: int = 0
        self.total_upserts: int = 0
        self.total_rejected: int = 0

    # ─── Consultas ──────────────────────────────────────────────────────

    @property
    def candles(self) -> tuple[Candle, ...]:
        return tuple(self._candles)

    def __len__(self) -> int:
        return len(self._candles)

    @property
    def is_empty(self) -> bool:
        return not self._candles

    @property
    def last_index(self) -> int:
        """Índice lógico de la última barra (-1 si está vacío)."""
        return len(self._candles) - 1

    @property
    def last(self) -> Optional[Candle]:
        return self._candles[-1] if self._candles else None

    def find(self, time: int) -> Optional[Candle]:
        for candle in self._candles:
            if candle.time == time:
                return candle
        return None

    def slice(self, start: int, end: int) -> List[Candle]:
        """Velas entre los índices [start, end] inclusive, acotados al rango válido."""
        if not self._candles:
            return []
        start = max(0, start)
        end = min(len(self._candles) - 1, end)
        return self._candles[start:end + 1]

    # ─── Listeners ──────────────────────────────────────────────────────

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def clear_listeners(self) -> None:
        self._listeners.clear()

    # ─── Mutaciones ─────────────────────────────────────────────────────

    def set_data(self, records: Sequence[CandleRecord] | None) -> bool:
        """
        Reemplaza la secuencia completa.

        Returns:
            True si se aplicó; False si la entrada estaba vacía, no era una
            secuencia o contenía registros inválidos (no-op).
        """
        if not isinstance(records, (list, tuple)) or not records:
            self._reject("set_data sin datos: se esperaba una lista no vacía de velas")
            return False

        try:
            normalized = [Candle.from_record(r) for r in records]
        except ValidationError as e:
            self._reject(f"set_data rechazado: {e.message} (campo={e.field})")
            return False

        by_time: Dict[int, Candle] = {}
        for candle in normalized:
            by_time[candle.time] = candle
        if len(by_time) != len(normalized):
            logger.debug(
                "set_data: %d velas duplicadas colapsadas por time",
                len(normalized) - len(by_time),
            )

        self._candles = sorted(by_time.values(), key=lambda c: c.time)
        self.total_replacements += 1
        logger.debug("Serie reemplazada: %d velas", len(self._candles))
        self._notify(MutationKind.REPLACE, None)
        return True

    def update_data(self, record: CandleRecord | None) -> bool:
        """
        Upsert de una vela por `time`.

        Returns:
            True si se aplicó; False si el registro era vacío o inválido.
        """
        if not record:
            self._reject("update_data sin datos")
            return False

        try:
            candle = Candle.from_record(record)
        except ValidationError as e:
            self._reject(f"update_data rechazado: {e.message} (campo={e.field})")
            return False

        for i, existing in enumerate(self._candles):
            if existing.time == candle.time:
                self._candles[i] = candle
                break
        else:
            self._candles.append(candle)
            self._candles.sort(key=lambda c: c.time)

        self.total_upserts += 1
        self._notify(MutationKind.UPSERT, candle)
        return True

    def clear(self) -> None:
        self._candles = []

    # ─── Internos ───────────────────────────────────────────────────────

    def _reject(self, message: str) -> None:
        self.total_rejected += 1
        logger.warning(message)
        if self._on_warning is not None:
            self._on_warning(message)

    def _notify(self, kind: str, candle: Optional[Candle]) -> None:
        for listener in list(self._listeners):
            listener(kind, self, candle)

    def snapshot(self) -> dict:
        """Snapshot para diagnóstico / API."""
        last = self.last
        return {
            "candles": len(self._candles),
            "first_time": self._candles[0].time if self._candles else None,
            "last_time": last.time if last else None,
            "total_replacements": self.total_replacements,
            "total_upserts": self.total_upserts,
            "total_rejected": self.total_rejected,
        }
