"""
Dependency Injection Container.

Único lugar donde se crean dependencias concretas: settings, registro de
indicadores, store de preferencias y fábricas de gráficos / casos de uso.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from pulsechart.app.services.chart_facade import PriceChart
from pulsechart.app.services.indicator_service import (
    IndicatorRegistry,
    IndicatorService,
    default_registry,
)
from pulsechart.application.dto.chart_config import ChartConfig
from pulsechart.application.ports.candle_provider import ICandleProvider
from pulsechart.application.ports.rendering_surface import RenderingSurfaceFactory
from pulsechart.application.ports.scheduler import IScheduler
from pulsechart.application.use_cases.refresh_chart_usecase import RefreshChartUseCase
from pulsechart.infrastructure.persistence.preferences_store import JsonPreferencesStore
from pulsechart.infrastructure.rendering.headless_surface import HeadlessSurface
from pulsechart.shared.config.settings import Settings
from pulsechart.shared.logging.logger import get_logger

logger = get_logger("container")


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Los gráficos NO son singletons: cada llamada a create_chart() devuelve
    uno nuevo con su propio store, viewport e indicadores.
    """

    settings: Settings = field(default_factory=Settings)

    _indicator_registry: Optional[IndicatorRegistry] = None
    _preferences_store: Optional[JsonPreferencesStore] = None

    # ==================== Servicios compartidos ====================

    @property
    def indicator_registry(self) -> IndicatorRegistry:
        if self._indicator_registry is None:
            # copia: lo registrado acá no se filtra al registro global
            self._indicator_registry = IndicatorRegistry(default_registry.definitions)
        return self._indicator_registry

    @property
    def preferences_store(self) -> JsonPreferencesStore:
        if self._preferences_store is None:
            self._preferences_store = JsonPreferencesStore(self.settings.preferences_path)
        return self._preferences_store

    # ==================== Configuración ====================

    def default_chart_config(self) -> ChartConfig:
        """Settings del proceso + preferencias persistidas del usuario."""
        base = ChartConfig.from_settings(self.settings)
        prefs = self.preferences_store.load()
        return base.model_copy(update={
            "theme": prefs.theme if prefs.is_known_theme else base.theme,
            "chart_type": prefs.chart_type,
            "price_format": prefs.price_format,
            "price_precision": prefs.price_precision,
            "indicators": ChartConfig(indicators=prefs.indicators).indicators,
            "show_volume": prefs.show_volume,
        })

    # ==================== Fábricas ====================

    def create_chart(
        self,
        surface_factory: RenderingSurfaceFactory,
        options: Optional[Mapping[str, Any]] = None,
        scheduler: Optional[IScheduler] = None,
    ) -> PriceChart:
        config = ChartConfig.from_options(options, base=self.default_chart_config())
        return PriceChart(
            surface_factory,
            config=config,
            scheduler=scheduler,
            indicator_service=IndicatorService(self.indicator_registry),
        )

    def create_headless_chart(
        self,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[PriceChart, HeadlessSurface]:
        surface = HeadlessSurface()
        return self.create_chart(lambda: surface, options), surface

    def create_refresh_usecase(
        self,
        provider: ICandleProvider,
        chart: PriceChart,
        symbol: str,
        timeframe: Optional[str] = None,
    ) -> RefreshChartUseCase:
        return RefreshChartUseCase(
            provider,
            chart,
            symbol=symbol,
            timeframe=timeframe,
            poll_interval=self.settings.poll_interval_seconds,
        )

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._indicator_registry = None
        self._preferences_store = None

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests).

        Args:
            name: Nombre de la dependencia (ej: 'preferences_store')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """Obtiene la instancia global del contenedor."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    global _container
    if _container is not None:
        _container.reset()
    _container = None


def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Inicializa el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa valores por defecto.
    """
    global _container
    _container = Container(settings=settings or Settings())
    logger.debug("Container inicializado (prefs=%s)", _container.settings.preferences_path)
    return _container
