# src/config/logging_config.py

"""Per-run logging for the storefront catalog.

Each CLI command or API server start writes ``logs/run_<timestamp>.log``
at DEBUG.  Everything below the ``storefront`` logger (cache, store,
filters, recommender, api) shares that file.  Only the newest
``Settings.LOG_KEEP_RUNS`` run logs are kept.

The stderr handler level comes from ``STOREFRONT_LOG_LEVEL`` (WARNING
unless set) so a noisy seed import can be watched live with ``INFO``.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "storefront"


def _handler(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def console_level(name: str | None = None) -> int:
    """Resolve a level name such as ``"info"``; unknown names give WARNING."""
    level = logging.getLevelName((name or Settings.LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.WARNING


def prune_run_logs(logs_dir: Path, keep: int) -> int:
    """Delete all but the *keep* newest ``run_*.log`` files.

    File names sort chronologically, so the name is the age.  Returns
    the number of files removed.
    """
    runs = sorted(logs_dir.glob("run_*.log"), reverse=True)
    stale = runs[max(keep, 0):]
    for path in stale:
        path.unlink(missing_ok=True)
    return len(stale)


def setup_logging(
    logs_dir: Path | None = None,
    level: str | None = None,
) -> Path:
    """Attach the run-file and stderr handlers to ``storefront``.

    Args:
        logs_dir: Where run logs live. Defaults to ``Settings.LOGS_DIR``.
        level: Console level name. Defaults to ``Settings.LOG_LEVEL``.

    Returns:
        Path of this run's log file.  When the logger already has
        handlers (tests, a second call in one process) nothing is
        attached and the would-be path is returned.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    if root_logger.handlers:
        return log_file

    pruned = prune_run_logs(target_dir, Settings.LOG_KEEP_RUNS - 1)

    root_logger.addHandler(_handler(
        logging.FileHandler(log_file, encoding="utf-8"),
        logging.DEBUG,
        _FILE_FORMAT,
    ))
    root_logger.addHandler(_handler(
        logging.StreamHandler(sys.stderr),
        console_level(level),
        _CONSOLE_FORMAT,
    ))

    root_logger.info(
        "Run log %s (pruned %d old run logs)", log_file.name, pruned,
    )
    return log_file
