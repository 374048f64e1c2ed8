from pulsechart.infrastructure.rendering.headless_surface import HeadlessSurface

__all__ = ["HeadlessSurface"]
