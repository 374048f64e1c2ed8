from pulsechart.application.ports.candle_provider import ICandleProvider
from pulsechart.application.ports.rendering_surface import (
    IRenderingSurface,
    PriceLabelFormatter,
    RenderingSurfaceFactory,
)
from pulsechart.application.ports.scheduler import IScheduler, ITimerHandle

__all__ = [
    "ICandleProvider",
    "IRenderingSurface",
    "IScheduler",
    "ITimerHandle",
    "PriceLabelFormatter",
    "RenderingSurfaceFactory",
]
