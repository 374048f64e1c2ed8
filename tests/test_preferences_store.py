import json

import pytest

from pulsechart.application.dto.preferences import ChartPreferences
from pulsechart.domain.value_objects.chart_type import ChartType
from pulsechart.infrastructure.persistence.preferences_store import JsonPreferencesStore


@pytest.fixture
def path(tmp_path):
    return tmp_path / "prefs.json"


def test_missing_file_gives_defaults(path):
    assert JsonPreferencesStore(path).load() == ChartPreferences()


def test_round_trip(path):
    store = JsonPreferencesStore(path)
    prefs = ChartPreferences(theme="light", chart_type="line", indicators=["rsi"], show_volume=False)
    assert store.save(prefs) is True
    assert store.load() == prefs


def test_corrupt_json(path):
    path.write_text("{not json", encoding="utf-8")
    assert JsonPreferencesStore(path).load() == ChartPreferences()


def test_non_object_json(path):
    path.write_text("[1, 2]", encoding="utf-8")
    assert JsonPreferencesStore(path).load() == ChartPreferences()


def test_invalid_fields_dropped_valid_kept(path):
    path.write_text(
        json.dumps({"theme": "light", "chart_type": "renko", "price_precision": "many"}),
        encoding="utf-8",
    )
    prefs = JsonPreferencesStore(path).load()
    assert prefs.theme == "light"
    assert prefs.chart_type is ChartType.CANDLESTICK
    assert prefs.price_precision == 9


def test_save_failure_returns_false(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = JsonPreferencesStore(blocker / "prefs.json")
    assert store.save(ChartPreferences()) is False
