# src/commission_builder/shared/logging_conf.py
"""
Logging Configuration - Root Logger Setup

Configures the root logger once at startup: stdout output (unless disabled
through COMMISSION_LOG_STDOUT) plus an optional size-rotated log file. Every
module logs through logging.getLogger(__name__) and inherits this setup.

Files that USE this module:
- commission_builder.app (setup_logging at startup)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "commission_builder.log"

# Third-party loggers that flood DEBUG output (HTTP connection pool, image plugins)
NOISY_LOGGERS = ("urllib3", "PIL")

PathLike = Union[str, Path]


def _resolve_log_path(log_file: Optional[PathLike], log_dir: Optional[PathLike]) -> Optional[Path]:
    """A log directory wins over an explicit file; None means no file logging."""
    if log_dir:
        return Path(log_dir) / LOG_FILENAME
    if log_file:
        return Path(log_file)
    return None


def _build_handlers(log_path: Optional[Path], max_bytes: int, backup_count: int) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if os.environ.get("COMMISSION_LOG_STDOUT", "true").lower() == "true":
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))

    # Never leave the process without output
    if not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Logging level or level name such as "DEBUG"
        log_file: Optional log file path
        log_dir: Optional directory; logs go to commission_builder.log inside it
        max_bytes: Size at which the log file is rotated (default: 10MB)
        backup_count: Rotated files to keep (default: 5)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    log_path = _resolve_log_path(log_file, log_dir)
    logging.basicConfig(level=level, handlers=_build_handlers(log_path, max_bytes, backup_count), force=True)

    if level <= logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.INFO)

    logging.getLogger(__name__).info(
        "Logging configured: level=%s, file=%s", logging.getLevelName(level), log_path or "none")
