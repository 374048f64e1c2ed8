import pytest

from pulsechart.app.state.series_store import MutationKind, SeriesStore
from pulsechart.domain.entities.candle import Candle
from pulsechart.domain.exceptions import ValidationError
from tests.conftest import make_candles


@pytest.fixture
def warnings():
    return []


@pytest.fixture
def store(warnings):
    return SeriesStore(on_warning=warnings.append)


class TestSetData:
    def test_sorts_descending_input(self, store):
        records = list(reversed(make_candles([1, 2, 3, 4])))
        assert store.set_data(records) is True
        times = [c.time for c in store.candles]
        assert times == sorted(times)

    def test_duplicate_times_last_wins(self, store):
        records = make_candles([1, 2, 3])
        duplicate = dict(records[1], close=99.0)
        store.set_data(records + [duplicate])
        assert len(store) == 3
        assert store.find(records[1]["time"]).close == 99.0

    def test_timestamp_fallback_and_default_volume(self, store):
        record = {"timestamp": 120, "open": 1, "high": 2, "low": 0.5, "close": 1.5}
        store.set_data([record])
        assert store.last == Candle(time=120, open=1, high=2, low=0.5, close=1.5, volume=0.0)

    @pytest.mark.parametrize("records", [None, [], "candles", {"time": 1}])
    def test_empty_or_wrong_type_is_noop(self, store, warnings, records):
        store.set_data(make_candles([1, 2]))
        assert store.set_data(records) is False
        assert len(store) == 2
        assert warnings

    def test_invalid_record_rejects_whole_batch(self, store, warnings):
        store.set_data(make_candles([1, 2]))
        bad = make_candles([5, 6, 7])
        bad[1]["close"] = "abc"
        assert store.set_data(bad) is False
        assert [c.close for c in store.candles] == [1, 2]
        assert store.total_rejected == 1
        assert "close" in warnings[-1]


class TestUpdateData:
    def test_upsert_replaces_existing_time(self, store):
        records = make_candles([1, 2, 3])
        store.set_data(records)
        assert store.update_data(dict(records[-1], close=10.0)) is True
        assert len(store) == 3
        assert store.last.close == 10.0

    def test_append_keeps_order(self, store):
        records = make_candles([1, 2, 3], step=60)
        store.set_data(records)
        store.update_data(dict(records[0], time=records[-1]["time"] + 60))
        store.update_data(dict(records[0], time=records[0]["time"] + 30))
        times = [c.time for c in store.candles]
        assert times == sorted(times)
        assert len(set(times)) == len(times) == 5

    def test_update_on_empty_store(self, store):
        assert store.update_data(make_candles([4])[0]) is True
        assert store.last_index == 0

    @pytest.mark.parametrize("record", [None, {}])
    def test_empty_record_is_noop(self, store, warnings, record):
        assert store.update_data(record) is False
        assert store.is_empty
        assert warnings

    def test_nan_price_rejected(self, store):
        record = dict(make_candles([1])[0], high=float("nan"))
        assert store.update_data(record) is False


class TestListeners:
    def test_notified_with_kind_and_candle(self, store):
        calls = []
        store.subscribe(lambda kind, s, candle: calls.append((kind, candle)))
        records = make_candles([1, 2])
        store.set_data(records)
        store.update_data(records[-1])
        assert calls[0] == (MutationKind.REPLACE, None)
        assert calls[1][0] == MutationKind.UPSERT
        assert calls[1][1].time == records[-1]["time"]

    def test_no_notification_on_rejection(self, store):
        calls = []
        store.subscribe(lambda *args: calls.append(args))
        store.set_data([])
        store.update_data(None)
        assert calls == []

    def test_clear_listeners(self, store):
        calls = []
        store.subscribe(lambda *args: calls.append(args))
        store.clear_listeners()
        store.set_data(make_candles([1]))
        assert calls == []


class TestQueries:
    def test_slice_is_clamped(self, store):
        store.set_data(make_candles([1, 2, 3, 4]))
        assert [c.close for c in store.slice(-3, 1)] == [1, 2]
        assert [c.close for c in store.slice(2, 50)] == [3, 4]

    def test_snapshot(self, store):
        records = make_candles([1, 2])
        store.set_data(records)
        snapshot = store.snapshot()
        assert snapshot["candles"] == 2
        assert snapshot["last_time"] == records[-1]["time"]


class TestCandleRecord:
    def test_fractional_time_rejected(self):
        with pytest.raises(ValidationError):
            Candle.from_record({"time": 1.5, "open": 1, "high": 1, "low": 1, "close": 1})

    def test_negative_volume_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Candle.from_record({"time": 1, "open": 1, "high": 1, "low": 1, "close": 1, "volume": -1})
        assert exc_info.value.field == "volume"

    def test_change_percent_absent_on_zero_open(self):
        candle = Candle(time=1, open=0, high=1, low=0, close=1)
        assert candle.change_percent is None
        assert candle.is_bullish
