"""
PulseChart
==========
Núcleo de cálculo y estado del gráfico de precios en vivo:
indicadores técnicos, formateo de precios adaptativo y control de viewport.
"""

__version__ = "0.9.0"
