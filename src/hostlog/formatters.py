"""
Entry formatters for fallback output.

File entries are multi-line blocks closed by a ``---`` separator; process
log entries are a single line. Both share the header
``[{UTC timestamp}][{ENV}] {LEVEL}: {message}`` where the environment tag
only appears outside production.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .constants import RECORD_SEPARATOR, TIMESTAMP_FORMAT
from .messages import format_context, format_message


def _single_line(text: str) -> str:
    return text.replace("\r\n", "\\n").replace("\n", "\\n").replace("\r", "\\n")


class EntryFormatter:
    """Formats log entries for the file and process-log sinks."""

    TIMESTAMP_FORMAT = TIMESTAMP_FORMAT
    SEPARATOR = RECORD_SEPARATOR

    def __init__(self, component_name: str, environment_type: str = "production"):
        self._component_name = component_name
        self._environment_type = (environment_type or "production").lower()

    @classmethod
    def _format_timestamp(cls, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return now.astimezone(timezone.utc).strftime(cls.TIMESTAMP_FORMAT)

    def _env_tag(self) -> str:
        if self._environment_type == "production":
            return ""
        return f"[{self._environment_type.upper()}]"

    def _header(self, level: str, message: Any, now: Optional[datetime]) -> str:
        return f"[{self._format_timestamp(now)}]{self._env_tag()} {level.upper()}: {format_message(message)}"

    def format_file_entry(
        self,
        level: str,
        message: Any,
        context: Mapping[str, Any],
        *,
        now: Optional[datetime] = None,
    ) -> str:
        """Format a block for the daily file."""
        lines = [self._header(level, message, now)]
        if context:
            lines.append(f"Context: {format_context(context)}")
        lines.append(self.SEPARATOR)
        return "\n".join(lines) + "\n"

    def format_process_line(
        self,
        level: str,
        message: Any,
        context: Mapping[str, Any],
        *,
        now: Optional[datetime] = None,
    ) -> str:
        """Format a single line for the process diagnostic stream.

        Line breaks inside the message or context are escaped as ``\\n``.
        """
        line = (
            f"[{self._format_timestamp(now)}]{self._env_tag()} "
            f"[{self._component_name}] {level.upper()}: {_single_line(format_message(message))}"
        )
        if context:
            line += f" | Context: {_single_line(format_context(context))}"
        return line
