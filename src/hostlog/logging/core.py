"""
Core diagnostics configuration and logger factory.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog
from structlog.typing import EventDict, WrappedLogger

# =============================================================================
# Global State
# =============================================================================

_state: dict[str, Any] = {
    "level": logging.CRITICAL + 10,
    "stream": None,
}

_renderer = structlog.dev.ConsoleRenderer(colors=False)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to the diagnostic event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Move the bound ``_name`` into the ``logger`` key."""
    event_dict["logger"] = event_dict.pop("_name", "hostlog")
    return event_dict


def filter_by_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drop events below the configured level. Read on every call so reconfiguring applies to existing loggers."""
    level = getattr(logging, str(event_dict.get("level", "info")).upper(), logging.INFO)
    if level < _state["level"] or _state["stream"] is None:
        raise structlog.DropEvent
    return event_dict


def stream_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Render to the configured stream. Returns empty to suppress PrintLogger output."""
    stream = _state["stream"]
    try:
        stream.write(_renderer(logger, method_name, event_dict) + "\n")
        stream.flush()
    except Exception:
        pass  # Diagnostics must never raise into the host
    return ""


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()

_PROCESSORS = [
    structlog.processors.add_log_level,
    filter_by_level,
    add_timestamp,
    add_logger_name,
    structlog.processors.format_exc_info,
    stream_renderer,
]


# =============================================================================
# Public API
# =============================================================================


def get_logger(name: str | None = None) -> Any:
    """Get a diagnostics logger that is independent of the host's structlog setup."""
    return structlog.wrap_logger(
        structlog.PrintLogger(file=_NOP_FILE),
        processors=_PROCESSORS,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        cache_logger_on_first_use=False,
        _name=name or "hostlog",
    )


def configure_logging(*, level: str = "WARNING", stream: TextIO | None = None) -> None:
    """
    Enable or silence hostlog's own diagnostics.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Destination stream. Defaults to ``sys.stderr``; pass
            ``level="OFF"`` to silence diagnostics again.
    """
    if level.upper() == "OFF":
        _state["level"] = logging.CRITICAL + 10
        _state["stream"] = None
        return

    _state["level"] = getattr(logging, level.upper(), logging.WARNING)
    _state["stream"] = stream or sys.stderr
