"""
Fallback writer.

Used when no advanced backend is active. Entries go either to the
component's protected daily file or, in debug mode, to the process
diagnostic stream.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional, TextIO

from .constants import LOGS_SUBDIR, SWEEP_CHANCE
from .formatters import EntryFormatter
from .logging import get_logger
from .protection import DirectoryProtector
from .retention import RetentionSweeper, should_sweep
from .sinks import DailyFileSink, ProcessLogSink

if TYPE_CHECKING:
    from .config.resolver import LoggerConfig
    from .host import Host

logger = get_logger("hostlog.fallback")


class FallbackWriter:
    """Formats entries and hands them to the file or process-log sink."""

    def __init__(
        self,
        config: "LoggerConfig",
        host: "Host",
        *,
        stream: Optional[TextIO] = None,
        sweep_chance: int = SWEEP_CHANCE,
    ):
        self._config = config
        self._host = host
        self._formatter = EntryFormatter(config.component_name, host.environment_type)
        self._protector = DirectoryProtector(config)
        self._sweeper = RetentionSweeper(config.retention_days)
        self._process_sink = ProcessLogSink(stream)
        self._sweep_chance = sweep_chance

    @property
    def log_dir(self) -> Optional[Path]:
        """``{uploads}/{component}/logs``, or None without an uploads root."""
        base = self._host.upload_base_dir()
        if base is None:
            return None
        return base / self._config.component_name / LOGS_SUBDIR

    def log_file(self, now: Optional[datetime] = None) -> Optional[Path]:
        log_dir = self.log_dir
        if log_dir is None:
            return None
        return DailyFileSink(log_dir, self._config.component_name).path_for(now)

    def write_to_file(self, level: str, message: Any, context: Mapping[str, Any]) -> bool:
        """Append an entry to today's file, then maybe sweep old files."""
        log_dir = self.log_dir
        if log_dir is None:
            return False

        if not log_dir.exists() and not self._protector.ensure_protected(log_dir):
            return False

        sink = DailyFileSink(log_dir, self._config.component_name)
        written = sink.emit(self._formatter.format_file_entry(level, message, context))

        try:
            if should_sweep(self._host.randint, self._sweep_chance):
                self._sweeper.sweep(log_dir)
        except Exception as exc:
            logger.warning("retention_sweep_failed", path=str(log_dir), error=str(exc))
        return written

    def write_to_process_log(self, level: str, message: Any, context: Mapping[str, Any]) -> bool:
        return self._process_sink.emit(self._formatter.format_process_line(level, message, context))
