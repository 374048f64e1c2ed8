from pulsechart.domain.entities.candle import Candle

__all__ = ["Candle"]
