from pulsechart.application.dto.chart_config import ChartConfig
from pulsechart.application.dto.preferences import ChartPreferences

__all__ = ["ChartConfig", "ChartPreferences"]
