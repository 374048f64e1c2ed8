import math

import pytest

from pulsechart.domain.exceptions import ValidationError
from pulsechart.domain.services.price_formatter import (
    PLACEHOLDER,
    SUBSCRIPT_DIGITS,
    PriceFormatter,
    format_auto,
    format_change_percent,
    format_price,
    format_subscript,
    format_volume,
)
from pulsechart.domain.value_objects.price_format import PriceFormatMode, PriceFormatSpec


def decode_subscript(text: str) -> int:
    return int("".join(str(SUBSCRIPT_DIGITS.index(ch)) for ch in text if ch in SUBSCRIPT_DIGITS))


@pytest.mark.parametrize("mode", list(PriceFormatMode))
class TestTotality:
    def test_zero(self, mode):
        assert format_price(0, PriceFormatSpec(mode=mode)) == "0"

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None, "abc", object()])
    def test_non_finite_is_placeholder(self, mode, value):
        assert format_price(value, PriceFormatSpec(mode=mode)) == PLACEHOLDER


class TestSubscript:
    def test_example(self):
        assert format_subscript(1.2345e-11, 5) == "0.0₁₀12345"

    def test_zero_count_decodes(self):
        text = format_subscript(1.2345e-11, 5)
        assert decode_subscript(text) == 10
        assert text.endswith("12345")

    def test_negative(self):
        assert format_subscript(-1.2345e-11) == "-0.0₁₀12345"

    def test_single_digit_count(self):
        assert format_subscript(0.00000001234) == "0.0₇12340"

    def test_normal_magnitude_is_trimmed_fixed(self):
        assert format_subscript(0.5) == "0.5"
        assert format_subscript(12.25, 4) == "12.25"

    def test_subscript_mode_uses_subscript_for_tiny_values(self):
        spec = PriceFormatSpec(mode="subscript", precision=9)
        assert format_price(1.2345e-11, spec) == "0.0₁₀12345"


class TestAuto:
    def test_sub_micro_uses_subscript(self):
        assert format_auto(1.2345e-11) == "0.0₁₀12345"

    def test_micro_range_is_exponential(self):
        assert format_auto(1.5e-5) == "1.5000e-5"

    def test_below_one_trims_zeros(self):
        assert format_auto(0.00123, 9) == "0.00123"

    def test_mid_range_four_decimals(self):
        assert format_auto(42.5) == "42.5000"

    def test_mid_range_respects_smaller_precision(self):
        assert format_auto(42.5, 2) == "42.50"

    def test_large_values_grouped(self):
        assert format_auto(1234567.891) == "1,234,567.89"
        assert format_auto(1000) == "1,000"

    def test_grouped_ties_round_away_from_zero(self):
        assert format_auto(1000.125) == "1,000.13"
        assert format_auto(1000.005) == "1,000.01"
        assert format_auto(-2500.125) == "-2,500.13"

    def test_negative_below_one(self):
        assert format_auto(-0.5) == "-0.5"


class TestModes:
    def test_fixed(self):
        assert format_price(3.14159, PriceFormatSpec(mode="fixed", precision=2)) == "3.14"

    def test_fixed_keeps_zeros(self):
        assert format_price(2, PriceFormatSpec(mode="fixed", precision=3)) == "2.000"

    def test_scientific_small(self):
        assert format_price(0.00001234, PriceFormatSpec(mode="scientific")) == "1.2340e-5"

    def test_scientific_regular(self):
        assert format_price(12.5, PriceFormatSpec(mode="scientific", precision=2)) == "12.50"

    def test_default_spec_is_auto(self):
        assert format_price(42.5) == "42.5000"


class TestSpec:
    @pytest.mark.parametrize("precision", [-1, 101, 2.5, True])
    def test_invalid_precision(self, precision):
        with pytest.raises(ValidationError):
            PriceFormatSpec(precision=precision)

    def test_unknown_mode(self):
        with pytest.raises(ValidationError) as exc_info:
            PriceFormatSpec(mode="roman")
        assert exc_info.value.field == "mode"

    def test_mode_string_is_converted(self):
        assert PriceFormatSpec(mode="fixed").mode is PriceFormatMode.FIXED


class TestVolumeAndChange:
    @pytest.mark.parametrize(
        "volume, expected",
        [(3e9, "3.00B"), (1_500_000, "1.50M"), (2500, "2.50K"), (12.5, "12.50")],
    )
    def test_volume_suffixes(self, volume, expected):
        assert format_volume(volume) == expected

    def test_volume_non_finite(self):
        assert format_volume(math.nan) == PLACEHOLDER

    def test_change_percent_sign(self):
        assert format_change_percent(1.25) == "+1.25%"
        assert format_change_percent(-0.4) == "-0.40%"
        assert format_change_percent(None) == PLACEHOLDER


def test_formatter_callable():
    formatter = PriceFormatter(PriceFormatSpec(mode="fixed", precision=1))
    assert formatter(1.25) == "1.3"
    assert formatter(math.nan) == PLACEHOLDER
