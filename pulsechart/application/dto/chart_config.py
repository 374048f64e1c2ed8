"""
PulseChart – Application DTO: ChartConfig
===========================================
Configuración inmutable de UN gráfico.

Se construye una vez (desde Settings, opciones del llamador o preferencias
persistidas) y cada reconfiguración produce un ChartConfig NUEVO; nunca se
mutan mapas compartidos.

`from_options` acepta las claves camelCase del frontend (`chartType`,
`priceFormat`, `pricePrecision`, `barSpacing`, `rightOffset`) y snake_case.
"""

from __future__ import annotations

from typing import Any, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pulsechart.domain.value_objects.chart_type import ChartType
from pulsechart.domain.value_objects.price_format import MAX_PRECISION, PriceFormatMode, PriceFormatSpec
from pulsechart.shared.config.settings import Settings


class ChartConfig(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    chart_type: ChartType = ChartType.CANDLESTICK
    theme: str = "dark"
    price_format: PriceFormatMode = PriceFormatMode.AUTO
    price_precision: int = Field(default=9, ge=0, le=MAX_PRECISION)
    volume_precision: int = Field(default=2, ge=0, le=MAX_PRECISION)
    indicators: Tuple[str, ...] = ()
    bar_spacing: int = Field(default=12, gt=0)
    min_bar_spacing: int = Field(default=4, gt=0)
    right_offset: int = Field(default=5, ge=0)
    show_volume: bool = True
    locale: str = "en-US"
    timeframe: str = "5m"
    interaction_decay_seconds: float = Field(default=30.0, gt=0)

    @field_validator("indicators", mode="before")
    @classmethod
    def _normalize_indicators(cls, value: Any) -> Tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        seen: list[str] = []
        for kind in value:
            key = str(kind).strip().lower()
            if key and key not in seen:
                seen.append(key)
        return tuple(seen)

    # ─── Construcción ───────────────────────────────────────────────────

    @classmethod
    def from_settings(cls, settings: Settings) -> ChartConfig:
        return cls(
            chart_type=settings.chart_type,
            theme=settings.theme,
            price_format=settings.price_format,
            price_precision=settings.price_precision,
            volume_precision=settings.volume_precision,
            bar_spacing=settings.bar_spacing,
            min_bar_spacing=settings.min_bar_spacing,
            right_offset=settings.right_offset,
            show_volume=settings.show_volume,
            locale=settings.locale,
            timeframe=settings.timeframe,
            interaction_decay_seconds=settings.interaction_decay_seconds,
        )

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any] | None = None,
        base: ChartConfig | None = None,
    ) -> ChartConfig:
        """Combina `options` sobre `base` (o los defaults) y valida el resultado."""
        aliases = {info.alias: name for name, info in cls.model_fields.items() if info.alias}
        merged = (base or cls()).model_dump()
        for key, value in (options or {}).items():
            merged[aliases.get(key, key)] = value
        return cls.model_validate(merged)

    # ─── Reconfiguración (devuelve copia) ───────────────────────────────

    @property
    def price_format_spec(self) -> PriceFormatSpec:
        return PriceFormatSpec(mode=self.price_format, precision=self.price_precision)

    def with_indicator(self, kind: str) -> ChartConfig:
        key = kind.strip().lower()
        if key in self.indicators:
            return self
        return self.model_copy(update={"indicators": self.indicators + (key,)})

    def without_indicator(self, kind: str) -> ChartConfig:
        key = kind.strip().lower()
        return self.model_copy(
            update={"indicators": tuple(k for k in self.indicators if k != key)}
        )

    def with_theme(self, theme: str) -> ChartConfig:
        return self.model_copy(update={"theme": theme})

    def with_chart_type(self, chart_type: ChartType | str) -> ChartConfig:
        return self.model_copy(update={"chart_type": ChartType(chart_type)})

    def with_price_format(
        self,
        mode: PriceFormatMode | str,
        precision: int | None = None,
    ) -> ChartConfig:
        spec = PriceFormatSpec(
            mode=mode,
            precision=self.price_precision if precision is None else precision,
        )
        return self.model_copy(
            update={"price_format": spec.mode, "price_precision": spec.precision}
        )

    def with_volume(self, visible: bool) -> ChartConfig:
        return self.model_copy(update={"show_volume": bool(visible)})
