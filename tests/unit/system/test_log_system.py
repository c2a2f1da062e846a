"""Tests for centralized logging configuration."""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from qanalytics.system import LoggerFactory, LoggingConfig


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before and after each test."""
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


def test_default_configuration():
    """Test logger factory with default configuration."""
    logger = LoggerFactory.get_logger()

    assert LoggerFactory.is_configured()
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")

    config = LoggerFactory.get_config()
    assert config.level == "INFO"
    assert config.format == "console"
    # Library default: console only
    assert config.enable_file is False
    assert config.file_level == "WARNING"


def test_explicit_configuration():
    """Test configuring logger factory explicitly."""
    config = LoggingConfig(level="DEBUG", format="json", enable_file=False)

    LoggerFactory.configure(config)

    assert LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "DEBUG"
    assert LoggerFactory.get_config().format == "json"


def test_auto_configure_on_first_use():
    """Test that logger auto-configures with defaults on first use."""
    assert not LoggerFactory.is_configured()

    logger = LoggerFactory.get_logger("qanalytics.test")

    assert LoggerFactory.is_configured()
    assert hasattr(logger, "info")


def test_file_logging_writes_json_lines(tmp_path):
    """Test file output is one JSON object per event."""
    log_file = tmp_path / "analytics.log"
    config = LoggingConfig(
        level="INFO",
        enable_file=True,
        file_path=log_file,
        file_level="DEBUG",
        file_rotation=False,
    )

    LoggerFactory.configure(config)
    logger = LoggerFactory.get_logger()
    logger.info("statement.built", positions=3)

    entry = json.loads(log_file.read_text().strip())
    assert entry["event"] == "statement.built"
    assert entry["positions"] == 3
    assert "log_timestamp" in entry
    assert entry["level"].upper() == "INFO"


def test_file_logging_default_path(tmp_path, monkeypatch):
    """Test that enabling file logging without a path uses logs/qanalytics.log."""
    monkeypatch.chdir(tmp_path)
    config = LoggingConfig(level="INFO", enable_file=True, file_path=None)

    LoggerFactory.configure(config)

    assert LoggerFactory.get_config().file_path == Path("logs/qanalytics.log")
    assert (tmp_path / "logs").is_dir()


def test_file_logging_creates_directory(tmp_path):
    """Test that file logging creates parent directories."""
    log_file = tmp_path / "logs" / "nested" / "analytics.log"
    config = LoggingConfig(enable_file=True, file_path=log_file, file_rotation=False)

    LoggerFactory.configure(config)
    LoggerFactory.get_logger().warning("cash_flow.position_skipped", entry_index=3)

    assert log_file.exists()


def test_rotating_file_handler(tmp_path):
    """Test rotating file handler configuration."""
    log_file = tmp_path / "rotating.log"
    config = LoggingConfig(
        enable_file=True,
        file_path=log_file,
        file_rotation=True,
        max_file_size_mb=1,
        backup_count=3,
    )

    LoggerFactory.configure(config)

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    handler = next((h for h in handlers if str(log_file) in str(h.baseFilename)), None)
    assert handler is not None
    assert handler.maxBytes == 1 * 1024 * 1024
    assert handler.backupCount == 3


def test_file_level_independent_from_console_level(tmp_path):
    """Test that file log level can be lower than the console level."""
    log_file = tmp_path / "debug.log"
    config = LoggingConfig(
        level="WARNING",
        enable_file=True,
        file_path=log_file,
        file_level="DEBUG",
        file_rotation=False,
    )

    LoggerFactory.configure(config)
    logger = LoggerFactory.get_logger()
    logger.debug("cumulative_pnl.calculated", bars=6)
    logger.warning("cash_flow.position_skipped", entry_index=2)

    events = [json.loads(line)["event"] for line in log_file.read_text().splitlines() if line.strip()]
    assert "cumulative_pnl.calculated" in events
    assert "cash_flow.position_skipped" in events


def test_different_log_levels():
    """Test every log level is accepted."""
    for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        LoggerFactory.reset()
        LoggerFactory.configure(LoggingConfig(level=level))

        assert LoggerFactory.get_config().level == level


def test_invalid_level_rejected():
    """Test pydantic rejects unknown log levels."""
    with pytest.raises(ValueError):
        LoggingConfig(level="VERBOSE")


def test_reset_clears_configuration():
    """Test that reset clears configuration."""
    LoggerFactory.configure(LoggingConfig(level="DEBUG"))
    assert LoggerFactory.get_config().level == "DEBUG"

    LoggerFactory.reset()

    assert not LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "INFO"


def test_console_renderer_formats_event():
    """Test console renderer output contains level, event and sorted context."""
    renderer = LoggerFactory._console_renderer()

    line = renderer(
        None,
        "info",
        {"log_timestamp": "241001-120000.00", "level": "info", "event": "statement.built", "b": 2, "a": 1},
    )

    assert "statement.built" in line
    assert "a=1 b=2" in line
    assert "241001-120000.00" in line
