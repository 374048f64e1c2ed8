import pytest
from pydantic import ValidationError as PydanticValidationError

from pulsechart.application.dto.chart_config import ChartConfig
from pulsechart.domain.value_objects.chart_type import ChartType
from pulsechart.domain.value_objects.price_format import PriceFormatMode
from pulsechart.shared.config.settings import Settings


def test_defaults_from_settings():
    config = ChartConfig.from_settings(Settings(right_offset=8, price_format="fixed"))
    assert config.right_offset == 8
    assert config.price_format is PriceFormatMode.FIXED
    assert config.interaction_decay_seconds == 30.0


def test_camel_and_snake_keys():
    config = ChartConfig.from_options({"chartType": "bar", "bar_spacing": 6, "pricePrecision": 4})
    assert config.chart_type is ChartType.BAR
    assert config.bar_spacing == 6
    assert config.price_precision == 4


def test_options_layer_over_base():
    base = ChartConfig(theme="light", right_offset=2)
    config = ChartConfig.from_options({"rightOffset": 7}, base=base)
    assert config.theme == "light"
    assert config.right_offset == 7


def test_indicators_normalized():
    assert ChartConfig(indicators=["RSI", " ema9 ", "rsi"]).indicators == ("rsi", "ema9")


def test_invalid_option():
    with pytest.raises(PydanticValidationError):
        ChartConfig.from_options({"chartType": "renko"})


def test_reconfiguration_returns_new_value():
    config = ChartConfig()
    with_rsi = config.with_indicator("RSI")
    assert config.indicators == ()
    assert with_rsi.indicators == ("rsi",)
    assert with_rsi.with_indicator("rsi") is with_rsi
    assert with_rsi.without_indicator("rsi").indicators == ()
    assert config.with_price_format("subscript", 5).price_format_spec.precision == 5
    with pytest.raises(PydanticValidationError):
        config.theme = "light"
