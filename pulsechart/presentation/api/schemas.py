"""
PulseChart – API Schemas (Pydantic)
=====================================
Schemas de request/response de la API REST.

Las velas entran como mappings crudos: la validación y normalización
(`time` vs `timestamp`, volumen opcional) es la misma del núcleo.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


class FormatPriceResponse(BaseModel):
    price: Optional[float]
    mode: str
    precision: int
    formatted: str


class IndicatorRequest(BaseModel):
    candles: List[Dict[str, Any]]
    options: Dict[str, Any] = Field(default_factory=dict)


class IndicatorResponse(BaseModel):
    kind: str
    pane: str
    lines: Dict[str, List[Dict[str, Any]]]


class IndicatorSpec(BaseModel):
    kind: str
    options: Dict[str, Any] = Field(default_factory=dict)


class SnapshotRequest(BaseModel):
    candles: List[Dict[str, Any]]
    options: Dict[str, Any] = Field(default_factory=dict)
    indicators: List[IndicatorSpec] = Field(default_factory=list)
    positions: List[Dict[str, Any]] = Field(default_factory=list)
    visible_bars: Optional[int] = Field(default=None, gt=0)


class SnapshotResponse(BaseModel):
    config: Dict[str, Any]
    chart: Dict[str, Any]
    legend: Optional[Dict[str, Any]]
    warnings: List[str]


class TimeframeSchema(BaseModel):
    key: str
    label: str
    seconds: int


class TimeframesResponse(BaseModel):
    default: str
    timeframes: List[TimeframeSchema]
