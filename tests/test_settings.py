import logging
from pathlib import Path

from depthchart.config import load_settings
from depthchart.correlation import CorrelationIdFilter, reset_correlation_id, set_correlation_id


def test_defaults(monkeypatch):
    for name in ("DEPTHCHART_DB_PATH", "DEPTHCHART_POSITIONS_FILE", "DEPTHCHART_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()
    assert settings.db_path == Path("depthchart.sqlite")
    assert settings.positions_file is None
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DEPTHCHART_DB_PATH", str(tmp_path / "charts.sqlite"))
    monkeypatch.setenv("DEPTHCHART_POSITIONS_FILE", str(tmp_path / "positions.json"))
    monkeypatch.setenv("DEPTHCHART_LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.db_path == tmp_path / "charts.sqlite"
    assert settings.positions_file == tmp_path / "positions.json"
    assert settings.log_level == "DEBUG"


def test_uri_db_path_and_invalid_log_level(monkeypatch):
    monkeypatch.setenv("DEPTHCHART_DB_PATH", "file:charts?mode=memory&cache=shared")
    monkeypatch.setenv("DEPTHCHART_LOG_LEVEL", "chatty")

    settings = load_settings()
    assert settings.db_path == "file:charts?mode=memory&cache=shared"
    assert settings.log_level == "INFO"


def test_correlation_filter_tags_records():
    record = logging.LogRecord("uvicorn.error", logging.INFO, __file__, 1, "hello", None, None)
    CorrelationIdFilter().filter(record)
    assert record.correlation_id == "-"

    token = set_correlation_id("req-42")
    try:
        CorrelationIdFilter().filter(record)
    finally:
        reset_correlation_id(token)
    assert record.correlation_id == "req-42"
