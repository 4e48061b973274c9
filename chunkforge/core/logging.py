"""
Structured Logging for ChunkForge.

Every module gets its logger from here rather than from the logging module
directly:

    from chunkforge.core.logging import get_logger
    logger = get_logger(__name__)

    logger.debug("Chunked file", path="src/app.py", chunks=12)
    # -> "Chunked file | path=src/app.py | chunks=12"

Logger Types
------------
**StructuredLogger**
    Renders keyword arguments as ``key=value`` fields after the message.
    ``bind()`` returns a logger view that adds fixed fields to every call
    without touching the original:

        flog = logger.bind(path="src/app.py")
        flog.debug("Skipped node", node_type="class_definition")

**ScanLogger**
    Tracks a batch of files (as the CLI chunks a directory): per-file
    outcome, totals and elapsed time.

Loggers are cached by name; configure_logging() resets the level and
handlers of every cached logger and of loggers created afterwards.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True


class StructuredLogger:
    """
    Structured logger with context support.

    Wraps a stdlib logger; the handlers are installed once per name.
    """

    def __init__(
        self,
        name: str,
        config: Optional[LogConfig] = None,
        context: Optional[Dict[str, Any]] = None,
        _configure: bool = True,
    ) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or _ConfigHolder.get_config()
        self._context: Dict[str, Any] = dict(context or {})
        if _configure:
            self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger."""
        level = getattr(logging, self.config.level.upper(), logging.WARNING)
        self.logger.setLevel(level)

        self.logger.handlers.clear()

        if self.config.console:
            console_handler = RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            console_handler.setLevel(level)
            self.logger.addHandler(console_handler)

        if self.config.file_path:
            formatter = logging.Formatter(
                self.config.format,
                datefmt=self.config.date_format,
            )
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Return a view of this logger with extra context fields."""
        return StructuredLogger(
            self.logger.name,
            self.config,
            context={**self._context, **kwargs},
            _configure=False,
        )

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Format message with context and extra fields."""
        fields = {**self._context, **kwargs}
        if fields:
            field_str = " | ".join(f"{k}={v}" for k, v in fields.items())
            return f"{message} | {field_str}"
        return message

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a record at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(self._format_message(message, **kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message, **kwargs))


class _ConfigHolder:
    """Holds default logging configuration."""

    _config: LogConfig = LogConfig()

    @classmethod
    def get_config(cls) -> LogConfig:
        """Get the default config."""
        return cls._config

    @classmethod
    def set_config(cls, config: LogConfig) -> None:
        """Set the default config."""
        cls._config = config


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name (typically __name__).
        config: Optional logging configuration.

    Returns:
        Configured StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, config)
    return _loggers[name]


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure global logging settings.

    Existing cached loggers are reconfigured so the new level applies
    everywhere.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        console: Whether to log to console.
    """
    config = LogConfig(
        level=level,
        file_path=log_file,
        console=console,
    )
    _ConfigHolder.set_config(config)

    for logger in _loggers.values():
        logger.config = config
        logger._setup_logger()


class ScanLogger:
    """
    Logger for a batch scan over many files.

    Records each file's outcome so one summary line can be written when the
    batch ends.
    """

    def __init__(self, root: str) -> None:
        self.root = root
        self.logger = get_logger("chunkforge.scan")
        self._started = time.monotonic()
        self.files_ok = 0
        self.files_failed = 0
        self.files_skipped = 0
        self.chunks = 0

    def file_done(self, path: str, chunks: int) -> None:
        """Record a successfully chunked file."""
        self.files_ok += 1
        self.chunks += chunks
        self.logger.debug("Chunked file", path=path, chunks=chunks)

    def file_skipped(self, path: str, reason: str) -> None:
        """Record a file that was deliberately not chunked."""
        self.files_skipped += 1
        self.logger.info("Skipped file", path=path, reason=reason)

    def file_failed(self, path: str, error: str) -> None:
        """Record a file whose chunking raised."""
        self.files_failed += 1
        self.logger.warning("Failed to chunk file", path=path, error=error)

    def finish(self) -> None:
        """Log the batch summary."""
        duration = time.monotonic() - self._started
        self.logger.info(
            "Scan completed",
            root=self.root,
            files=self.files_ok,
            skipped=self.files_skipped,
            failed=self.files_failed,
            chunks=self.chunks,
            duration_sec=f"{duration:.2f}",
        )


__all__ = [
    "LogConfig",
    "StructuredLogger",
    "ScanLogger",
    "get_logger",
    "configure_logging",
]
