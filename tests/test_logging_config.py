"""Tests for logging setup and helpers."""

import logging
import logging.handlers
from unittest.mock import Mock

import pytest

from kegg_tool.logging_config import (
    LevelColorFormatter, LogTimer, ProgressLogger, get_logger, log_api_call, setup_logging,
)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_creates_daily_log_file(self, tmp_path, restore_root_logger):
        setup_logging(log_dir=str(tmp_path / "logs"), console=False)

        get_logger('gateway').info("hello from the gateway")
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_files = list((tmp_path / "logs").glob("kegg_tool_*.log"))
        assert len(log_files) == 1
        assert "hello from the gateway" in log_files[0].read_text()

    def test_rotation_settings(self, tmp_path, restore_root_logger):
        setup_logging(log_dir=str(tmp_path), max_bytes=2048, backup_count=2, console=False)

        rotating = [h for h in logging.getLogger().handlers
                    if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(rotating) == 1
        assert rotating[0].maxBytes == 2048
        assert rotating[0].backupCount == 2

    def test_level_applies_to_file(self, tmp_path, restore_root_logger):
        setup_logging(level="warning", log_dir=str(tmp_path), console=False)

        get_logger('router').info("not written")
        get_logger('router').warning("written")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = next(tmp_path.glob("kegg_tool_*.log")).read_text()
        assert "written" in text
        assert "not written" not in text

    def test_console_goes_to_stderr(self, tmp_path, restore_root_logger):
        setup_logging(log_dir=str(tmp_path), quiet=True)

        console = [h for h in logging.getLogger().handlers
                   if type(h) is logging.StreamHandler]
        assert len(console) == 1
        assert console[0].level == logging.ERROR


class TestHelpers:
    """Test cases for logging helpers."""

    def test_get_logger(self):
        assert get_logger('router').name == 'kegg_tool.router'

    def test_color_formatter_restores_levelname(self):
        formatter = LevelColorFormatter('%(levelname)s - %(message)s', colors=True)
        formatter.colors = True
        record = logging.LogRecord('kegg_tool', logging.WARNING, __file__, 1, "careful", None, None)

        output = formatter.format(record)

        assert '\033[33m' in output
        assert record.levelname == 'WARNING'

    def test_color_formatter_plain(self):
        formatter = LevelColorFormatter('%(levelname)s - %(message)s', colors=False)
        record = logging.LogRecord('kegg_tool', logging.ERROR, __file__, 1, "broken", None, None)

        assert formatter.format(record) == 'ERROR - broken'

    def test_progress_logger(self):
        logger = Mock()
        progress = ProgressLogger(logger, total=2, operation="batch_entry_lookup[info]")

        progress.update(success=True, item="C00031")
        progress.update(success=False, item="C99999")
        progress.complete()

        assert progress.processed == 2
        assert progress.failed == 1
        assert "C99999 failed (2/2)" in logger.debug.call_args.args[0]
        assert "1/2 succeeded" in logger.info.call_args.args[0]

    def test_log_api_call(self, caplog):
        with caplog.at_level("DEBUG", logger="kegg_tool.api"):
            log_api_call('/info/kegg', 200, 0.5, True)
            log_api_call('/get/C99999', 404, 0.1, False)
            log_api_call('/get/C00031', None, 0.1, False)

        assert [r.levelname for r in caplog.records] == ["DEBUG", "ERROR", "ERROR"]
        assert caplog.records[0].getMessage() == "GET /info/kegg -> 200 in 0.50s"
        assert caplog.records[1].getMessage() == "KEGG call failed: GET /get/C99999 -> 404 in 0.10s"
        assert "no response" in caplog.records[2].getMessage()

    def test_log_timer(self):
        logger = Mock()

        with LogTimer("GET /info/kegg", logger) as timer:
            pass

        assert timer.elapsed >= 0
        assert "GET /info/kegg took" in logger.debug.call_args.args[0]

    def test_log_timer_failure(self):
        logger = Mock()

        with pytest.raises(ValueError):
            with LogTimer("GET /info/kegg", logger):
                raise ValueError("x")

        assert "failed after" in logger.debug.call_args.args[0]
