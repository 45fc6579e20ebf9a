# src/config/logging_config.py

"""Per-run logging for catalog_sync.

Every launch writes a ``logs/run_<timestamp>.log`` file that receives all
``catalog_sync.*`` records at DEBUG: pull query failures, push channel
reconnects and ignored notifications.

A stderr handler at WARNING is attached only when ``console`` is true,
which is the headless search mode.  While the Textual UI owns the
terminal nothing is written to stderr; connection status is shown in the
app's status line and the details stay in the run file.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

LOGGER_NAME = "catalog_sync"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)
_CONSOLE_FORMAT = "%(levelname)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _run_file_handler(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def _stderr_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    return handler


def setup_logging(console: bool = True) -> Path:
    """Configure the ``catalog_sync`` logger for this run.

    Args:
        console: Also echo WARNING and above to stderr.  Pass ``False``
            when a full-screen UI is about to take over the terminal.

    Returns:
        Path of the run's log file.  Repeated calls keep the handlers
        installed by the first one.
    """
    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    log_file = Settings.LOGS_DIR / (
        f"run_{datetime.now():%Y%m%d_%H%M%S}.log"
    )

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)
    if package_logger.handlers:
        return log_file

    package_logger.addHandler(_run_file_handler(log_file))
    if console:
        package_logger.addHandler(_stderr_handler())

    package_logger.info(
        "Logging to %s (console %s)", log_file, "on" if console else "off"
    )
    return log_file
