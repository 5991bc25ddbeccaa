"""Logging utilities for yarnlock."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


LOG_FILE_TEMPLATE = "yarnlock_{timestamp}.log"


class YarnLockLogger:
    """Leveled logger with rich console formatting.

    Parsers and readers only need ``warning``/``info``/``debug``; anything
    exposing those methods (including a plain ``logging.Logger``) can be
    passed in its place.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self._file_handler: Optional[logging.FileHandler] = None
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Setup rich console handler with custom theme."""
        console = Console(stderr=True, theme=Theme({
            "info": "cyan",
            "warning": "yellow",
            "error": "red",
            "critical": "red bold",
            "debug": "dim",
        }))

        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
        )

        formatter = logging.Formatter(
            fmt="%(name)s: %(message)s",
            datefmt="[%X]"
        )
        handler.setFormatter(formatter)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def set_log_file(self, log_file: Optional[Path]) -> None:
        """Mirror this logger's records into a plain text file, or stop doing so."""
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        if log_file is None:
            return

        self._file_handler = logging.FileHandler(log_file, encoding="utf-8")
        self._file_handler.setFormatter(logging.Formatter(
            "[%(levelname)s] %(asctime)s %(name)s: %(message)s"
        ))
        self.logger.addHandler(self._file_handler)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log critical message."""
        self.logger.critical(msg, extra=kwargs)


def default_log_file(directory: Path) -> Path:
    """Build a timestamped log file path inside ``directory``.

    Args:
        directory: Directory that will hold the log file

    Returns:
        Path of the form ``<directory>/yarnlock_<timestamp>.log``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    return directory / LOG_FILE_TEMPLATE.format(timestamp=timestamp)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Setup logging configuration for yarnlock.

    Args:
        level: Logging level
        log_file: Optional log file, or a directory to hold a timestamped one
        verbose: Enable verbose logging
    """
    if verbose:
        level = logging.DEBUG

    if log_file is not None and log_file.is_dir():
        log_file = default_log_file(log_file)

    # Configure root logger
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            *([logging.FileHandler(log_file)] if log_file else [])
        ],
        force=True,
    )

    # yarnlock loggers do not propagate, so settings are pushed down to them
    _settings["level"] = level
    _settings["log_file"] = log_file
    for instance in _loggers.values():
        instance.set_level(level)
        instance.set_log_file(log_file)


_settings: Dict[str, Any] = {"level": logging.INFO, "log_file": None}
_loggers: Dict[str, YarnLockLogger] = {}


def get_logger(name: str) -> YarnLockLogger:
    """Get a yarnlock logger instance.

    Instances are shared per name so later ``setup_logging`` calls reach them.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    if name not in _loggers:
        instance = YarnLockLogger(name, level=_settings["level"])
        instance.set_log_file(_settings["log_file"])
        _loggers[name] = instance
    return _loggers[name]
