import pytest

from pulsechart.app.services.indicator_service import (
    IndicatorDefinition,
    IndicatorRegistry,
    IndicatorService,
    default_registry,
)
from pulsechart.container import Container
from pulsechart.domain.exceptions import UnknownIndicatorError, ValidationError
from pulsechart.domain.services.indicator_calculator import IndicatorCalculator
from pulsechart.domain.value_objects.theme import DARK
from tests.conftest import make_candles, to_candles


@pytest.fixture
def registry():
    return IndicatorRegistry()


@pytest.fixture
def service(registry):
    return IndicatorService(registry)


class TestRegistry:
    @pytest.mark.parametrize("kind", ["sma9", "sma50", "sma200", "ema9", "ema21", "rsi", "macd", "bollinger"])
    def test_builtin_kinds(self, registry, kind):
        assert registry.is_known(kind)

    def test_dynamic_moving_averages(self, registry):
        definition = registry.resolve("EMA34")
        assert definition.kind == "ema34"
        assert registry.is_known("sma1234")

    def test_dynamic_kinds_are_not_stored(self, registry):
        before = list(registry.kinds)
        registry.resolve("sma1234")
        for period in range(1000, 1050):
            registry.resolve(f"ema{period}")
        assert registry.kinds == before
        assert "sma1234" not in registry.kinds

    @pytest.mark.parametrize("kind", ["sma0", "wma10", "ichimoku", ""])
    def test_unknown(self, registry, kind):
        with pytest.raises(UnknownIndicatorError):
            registry.resolve(kind)

    def test_register_custom_kind(self, registry, service):
        def highest(candles, options):
            return {"highest": IndicatorCalculator.sma(candles, 1)}

        registry.register(IndicatorDefinition(kind="highest", compute=highest, pane="custom"))
        lines = service.compute("highest", to_candles(make_candles([1, 2])))
        assert lines["highest"].values == [1, 2]


class TestService:
    def test_options_override_defaults(self, service):
        candles = to_candles(make_candles([float(i) for i in range(10)]))
        service.set_options("rsi", {"period": 3})
        lines = service.compute("rsi", candles)
        assert lines["rsi"].values[:3] == [None, None, None]
        assert lines["rsi"].values[3] is not None

    def test_invalid_options_wrapped(self, service):
        with pytest.raises(ValidationError):
            service.set_options("rsi", {"period": "often"})

    def test_last_values(self, service):
        service.compute("sma2", to_candles(make_candles([1, 3])))
        assert service.last_values() == {"sma2": {"sma2": 2.0}}

    def test_forget(self, service):
        service.compute("sma2", to_candles(make_candles([1, 3])))
        service.forget("sma2")
        assert service.last_results("sma2") is None

    def test_payload_colors_and_extra_style(self, service):
        service.set_options("bollinger", {"period": 2, "dash": True})
        lines = service.compute("bollinger", to_candles(make_candles([1, 2, 3])))
        pane, payload, style = service.build_payload("bollinger", lines, DARK)
        assert pane == "overlay"
        assert len(payload["middle"]) == 2
        assert style["colors"]["middle"] == DARK.indicator_colors["bollinger_middle"]
        assert style["dash"] is True

    def test_custom_color_applies_to_all_lines(self, service):
        service.set_options("ema9", {"color": "#123456"})
        lines = service.compute("ema9", to_candles(make_candles([1] * 10)))
        _, _, style = service.build_payload("ema9", lines, DARK)
        assert style["colors"] == {"ema9": "#123456"}


def test_container_registry_is_isolated_from_global():
    container = Container()
    container.indicator_registry.register(
        IndicatorDefinition(kind="local_only", compute=lambda candles, options: {})
    )
    assert "local_only" in container.indicator_registry.kinds
    assert "local_only" not in default_registry.kinds
