"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import Processor

from nba_highlights.utils.config import get_settings

# Third-party loggers that are noisy at DEBUG/INFO while pages are fetched.
_CHATTY_LOGGERS = ("urllib3", "requests", "charset_normalizer")

_active_log_file: Path | None = None


def get_active_log_file() -> Path | None:
    """Return the path of the log file opened by the current process, if any."""
    return _active_log_file


def _open_log_file(log_dir: Path, level: int) -> logging.FileHandler | None:
    """Open ``nba_highlights_YYYYMMDD_HHMMSS.log`` in *log_dir*, or return None."""
    global _active_log_file  # noqa: PLW0603

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(
            f"Warning: Could not create log directory '{log_dir}': {e}. "
            "Falling back to stdout-only logging.",
            file=sys.stderr,
        )
        _active_log_file = None
        return None

    log_file = log_dir / f"nba_highlights_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    try:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        print(
            f"Warning: Could not open log file '{log_file}': {e}. File logging disabled.",
            file=sys.stderr,
        )
        _active_log_file = None
        return None

    handler.setLevel(level)
    _active_log_file = log_file
    return handler


def setup_logging(verbose: bool = False, log_to_file: bool = True) -> None:
    """Configure structured logging for the application.

    Output targets
    --------------
    1. **stdout** - console renderer (or JSON if ``log_format=json``).
    2. **logs/nba_highlights_YYYYMMDD_HHMMSS.log** - JSON lines, unless
       *log_to_file* is False. Classification misses end up here, one
       event per unmatched line or unresolved player name.

    Args:
        verbose: Force DEBUG level regardless of the configured level.
        log_to_file: Also write JSON lines to the log directory.
    """
    settings = get_settings()
    level_name = "DEBUG" if verbose else settings.log_level
    numeric_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    # Drop handlers from a previous call (repeated CLI invocations in tests).
    for h in root.handlers[:]:
        root.removeHandler(h)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        # Must precede wrap_for_formatter so stdlib doesn't render tracebacks twice.
        structlog.processors.ExceptionRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    console_renderer: Processor
    if settings.log_format == "json":
        console_renderer = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=console_renderer))
    root.addHandler(console_handler)

    file_handler = _open_log_file(Path(settings.log_dir), numeric_level) if log_to_file else None
    if file_handler is not None:
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
        )
        root.addHandler(file_handler)

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if file_handler is not None:
        structlog.get_logger(__name__).info("logging_initialized", log_file=str(_active_log_file))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Configured bound logger.
    """
    return structlog.get_logger(name).bind(logger=name)


def log_context(**kwargs: Any) -> None:
    """
    Add contextual information to all log messages.

    Used by the service to tag every event with the game being classified.

    Args:
        **kwargs: Key-value pairs to add to log context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context(*keys: str) -> None:
    """
    Clear contextual information from logs.

    Args:
        *keys: Keys to remove from context. If none provided, clears all.
    """
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()
