"""
PulseChart – API Routes (FastAPI)
===================================
Expone el núcleo del gráfico por HTTP.

Endpoints disponibles:
  GET  /api/health              → health check
  GET  /api/format-price        → formatea un precio (auto/fixed/scientific/subscript)
  POST /api/indicators/{kind}   → calcula un indicador sobre velas enviadas
  POST /api/chart/snapshot      → arma un gráfico headless y devuelve su estado
  GET  /api/timeframes          → temporalidades soportadas
  GET  /api/preferences         → preferencias persistidas
  PUT  /api/preferences         → guardar preferencias

Los DomainError se traducen a 422 en main.py (exception handler).
"""

from __future__ import annotations

import math
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from pulsechart import __version__
from pulsechart.app.services.indicator_service import IndicatorService
from pulsechart.app.state.series_store import SeriesStore
from pulsechart.application.dto.preferences import ChartPreferences
from pulsechart.domain.exceptions import ValidationError
from pulsechart.domain.services.price_formatter import format_price as format_price_value
from pulsechart.domain.value_objects.price_format import PriceFormatSpec
from pulsechart.domain.value_objects.timeframe import TIMEFRAMES
from pulsechart.infrastructure.event_bus import WARNING
from pulsechart.presentation.api.schemas import (
    FormatPriceResponse,
    HealthResponse,
    IndicatorRequest,
    IndicatorResponse,
    SnapshotRequest,
    SnapshotResponse,
    TimeframeSchema,
    TimeframesResponse,
)
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Referencia al contenedor inyectada desde main.py
_container = None


def init_routes(container) -> None:
    """Inyectar dependencias desde main.py al arrancar."""
    global _container
    _container = container


def _require_container():
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    return _container


def _normalize_candles(records: List[dict]) -> SeriesStore:
    """Mismas reglas de ingesta que el gráfico; acá una entrada inválida es un 422."""
    warnings: List[str] = []
    store = SeriesStore(on_warning=warnings.append)
    if not store.set_data(records):
        raise ValidationError(warnings[-1] if warnings else "Velas inválidas", field="candles")
    return store


# ─── Estado ─────────────────────────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    """Health check para monitoreo."""
    return {"status": "ok", "service": "pulsechart", "version": __version__}


@router.get("/api/timeframes", response_model=TimeframesResponse)
async def get_timeframes() -> dict:
    container = _require_container()
    return {
        "default": container.settings.timeframe,
        "timeframes": [
            TimeframeSchema(key=tf.key, label=tf.label, seconds=tf.seconds)
            for tf in TIMEFRAMES.values()
        ],
    }


# ─── Formato ────────────────────────────────────────────────────────────

@router.get("/api/format-price", response_model=FormatPriceResponse)
async def format_price(
    price: Optional[float] = None,
    mode: str = Query(default="auto"),
    precision: int = Query(default=9),
) -> dict:
    """Formatea un precio; un precio ausente o no finito devuelve el placeholder."""
    spec = PriceFormatSpec(mode=mode, precision=precision)
    return {
        "price": price if price is not None and math.isfinite(price) else None,
        "mode": spec.mode.value,
        "precision": spec.precision,
        "formatted": format_price_value(price, spec),
    }


# ─── Indicadores ────────────────────────────────────────────────────────

@router.post("/api/indicators/{kind}", response_model=IndicatorResponse)
async def compute_indicator(kind: str, body: IndicatorRequest) -> dict:
    """
    Calcula un indicador sobre la serie enviada.
    Los puntos sin valor se devuelven con `value: null` (ausente, no cero).
    """
    container = _require_container()
    store = _normalize_candles(body.candles)

    service = IndicatorService(container.indicator_registry)
    key = kind.strip().lower()
    definition = service.registry.resolve(key)
    service.set_options(key, body.options)
    lines = service.compute(key, store.candles)

    return {
        "kind": key,
        "pane": definition.pane,
        "lines": {
            name: [point.to_dict() for point in series]
            for name, series in lines.items()
        },
    }


# ─── Gráfico headless ───────────────────────────────────────────────────

@router.post("/api/chart/snapshot", response_model=SnapshotResponse)
async def chart_snapshot(body: SnapshotRequest) -> dict:
    """Arma un gráfico en memoria con las velas/opciones enviadas y devuelve su estado."""
    container = _require_container()
    chart, surface = container.create_headless_chart(body.options)

    warnings: List[str] = []
    chart.events.subscribe(WARNING, warnings.append, consumer_name="api.snapshot")
    try:
        if not chart.set_data(body.candles):
            raise ValidationError(warnings[-1] if warnings else "Velas inválidas", field="candles")
        for spec in body.indicators:
            chart.add_indicator(spec.kind, spec.options)
        chart.set_positions(body.positions)
        if body.visible_bars is not None:
            chart.set_visible_bars(body.visible_bars)

        return {
            "config": chart.config.model_dump(mode="json"),
            "chart": surface.snapshot(),
            "legend": chart.legend(),
            "warnings": warnings,
        }
    finally:
        chart.destroy()


# ─── Preferencias ───────────────────────────────────────────────────────

@router.get("/api/preferences", response_model=ChartPreferences)
async def get_preferences() -> ChartPreferences:
    container = _require_container()
    return container.preferences_store.load()


@router.put("/api/preferences", response_model=ChartPreferences)
async def save_preferences(preferences: ChartPreferences) -> ChartPreferences:
    container = _require_container()
    if not container.preferences_store.save(preferences):
        raise HTTPException(status_code=500, detail="No se pudieron guardar las preferencias")
    logger.info("Preferencias guardadas (tema=%s, tipo=%s)", preferences.theme, preferences.chart_type.value)
    return preferences
