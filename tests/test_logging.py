import logging

from pulsechart.shared.logging.logger import get_logger, resolve_level, set_library_level


def test_namespaced_logger():
    assert get_logger("chart").name == "pulsechart.chart"


def test_resolve_level():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("chatty") == logging.INFO


def test_library_level_only_touches_namespace():
    root_level = logging.getLogger().level
    set_library_level("ERROR")
    try:
        assert logging.getLogger("pulsechart").level == logging.ERROR
        assert not get_logger("series_store").isEnabledFor(logging.WARNING)
        assert logging.getLogger().level == root_level
    finally:
        set_library_level(logging.NOTSET)
