"""Logging setup for the KEGG tool.

Everything logs under the ``kegg_tool`` namespace. The CLI routes it to a
size-rotated file and, unless quiet, to stderr; stdout is kept for JSON
payloads.
"""

import logging
import logging.handlers
import sys
import time
from datetime import date
from pathlib import Path
from typing import Optional

NAMESPACE = 'kegg_tool'
FILE_FORMAT = '%(asctime)s %(name)s %(levelname)s [%(funcName)s:%(lineno)d] %(message)s'
CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'


class LevelColorFormatter(logging.Formatter):
    """Console formatter that tints the level name when stderr is a terminal."""

    PALETTE = {
        logging.DEBUG: '36',
        logging.INFO: '32',
        logging.WARNING: '33',
        logging.ERROR: '31',
        logging.CRITICAL: '35',
    }

    def __init__(self, fmt: str = CONSOLE_FORMAT, colors: bool = True):
        super().__init__(fmt)
        self.colors = colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        code = self.PALETTE.get(record.levelno)
        if not (self.colors and code):
            return super().format(record)

        plain = record.levelname
        record.levelname = f"\033[{code}m{plain}\033[0m"
        try:
            return super().format(record)
        finally:
            # The record is shared with the file handler
            record.levelname = plain


class ProgressLogger:
    """Per-item debug lines and one summary line for a sequential loop."""

    def __init__(self, logger: logging.Logger, total: int, operation: str):
        self.logger = logger
        self.total = total
        self.operation = operation
        self.processed = 0
        self.failed = 0
        self._started = time.monotonic()

    def update(self, success: bool = True, item: Optional[str] = None):
        self.processed += 1
        if not success:
            self.failed += 1
        self.logger.debug(
            f"{self.operation}: {item or 'item'} {'ok' if success else 'failed'} "
            f"({self.processed}/{self.total})"
        )

    def complete(self):
        elapsed = time.monotonic() - self._started
        self.logger.info(
            f"{self.operation}: {self.processed - self.failed}/{self.processed} succeeded in {elapsed:.2f}s"
        )


def setup_logging(level: str = "INFO",
                  log_dir: str = ".kegg_logs",
                  max_bytes: int = 10 * 1024 * 1024,
                  backup_count: int = 5,
                  console: bool = True,
                  colors: bool = True,
                  quiet: bool = False) -> None:
    """Route ``kegg_tool`` logs to a rotating daily file and optionally stderr.

    Replaces whatever handlers the root logger already had. In quiet mode
    the console only shows errors; the file still receives ``level``.

    Args:
        level: Threshold name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the log files, created if missing
        max_bytes: Size at which the log file is rotated
        backup_count: Rotated files to keep
        console: Also log to stderr
        colors: Tint level names on a terminal
        quiet: Errors only on the console
    """
    threshold = getattr(logging, level.upper())
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"{NAMESPACE}_{date.today():%Y%m%d}.log"

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(logging.DEBUG)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count
    )
    file_handler.setLevel(threshold)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR if quiet else threshold)
        console_handler.setFormatter(LevelColorFormatter(colors=colors))
        root.addHandler(console_handler)

    get_logger('setup').debug(f"Logging to {log_file} at {level.upper()}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{NAMESPACE}.{name}")


def log_api_call(endpoint: str, status: Optional[int], elapsed: float, success: bool):
    """One line per KEGG call on the ``kegg_tool.api`` logger."""
    logger = get_logger('api')
    summary = f"GET {endpoint} -> {status if status is not None else 'no response'} in {elapsed:.2f}s"
    if success:
        logger.debug(summary)
    else:
        logger.error(f"KEGG call failed: {summary}")


class LogTimer:
    """Context manager that logs how long a block took at debug level."""

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None):
        self.operation = operation
        self.logger = logger or get_logger('performance')
        self.elapsed = 0.0
        self._started = 0.0

    def __enter__(self):
        self._started = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.monotonic() - self._started
        outcome = 'failed after' if exc_type else 'took'
        self.logger.debug(f"{self.operation} {outcome} {self.elapsed:.2f}s")
