"""Tests for structured logging configuration."""

import json
import logging
import sys

import pytest

from tickprof.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="tickprof.tracer",
            level=logging.WARNING,
            pathname=__file__,
            lineno=10,
            msg="Panic flushing at %s",
            args=(950,),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_fields(self):
        """Test the JSON document carries the record fields."""
        data = json.loads(JSONFormatter().format(self._record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "tickprof.tracer"
        assert data["message"] == "Panic flushing at 950"
        assert data["line"] == 10
        assert "timestamp" in data
        assert "context" not in data

    def test_context_extra(self):
        """Test the optional context extra is included."""
        data = json.loads(JSONFormatter().format(self._record(context={"turn": 7})))
        assert data["context"] == {"turn": 7}

    def test_exception_info(self):
        """Test exceptions are formatted into the document."""
        try:
            raise ValueError("bad ratio")
        except ValueError:
            record = self._record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad ratio" in data["exception"]


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_console_only(self, restore_root_logger):
        """Test the default configuration has a single console handler."""
        setup_logging(log_level="debug")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_file_handler(self, restore_root_logger, tmp_path):
        """Test a rotating file handler is added when a file is given."""
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(log_level="INFO", log_file=str(log_file))

        get_logger("tickprof.test").info("written")
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "written"

    def test_level_from_env(self, restore_root_logger, monkeypatch):
        """Test LOG_LEVEL is honoured."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging()
        assert restore_root_logger.level == logging.ERROR
