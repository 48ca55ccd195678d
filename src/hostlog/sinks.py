"""
Fallback output sinks.

``DailyFileSink`` appends to one file per component per UTC day, holding a
cross-process lock for every append so concurrent workers never interleave
entries. ``ProcessLogSink`` writes single lines to the process's standard
diagnostic stream.
"""

from __future__ import annotations

import hashlib
import sys
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

from filelock import FileLock, Timeout

from .constants import (
    DATE_FORMAT,
    FILE_HASH_LENGTH,
    LOCK_SUFFIX,
    LOCK_TIMEOUT_SECONDS,
    LOG_FILE_EXTENSION,
)
from .logging import get_logger

logger = get_logger("hostlog.sinks")


def component_hash(component_name: str) -> str:
    """Short stable hash used in output file names."""
    return hashlib.md5(component_name.encode("utf-8")).hexdigest()[:FILE_HASH_LENGTH]


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for fallback sinks."""

    @abstractmethod
    def emit(self, entry: str) -> bool:
        """Write a formatted entry. Returns False when nothing was written."""
        ...


class ProcessLogSink(BaseSink):
    """Process diagnostic stream sink.

    Args:
        stream: Output stream (default: ``sys.stderr``, resolved at emit time)
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def emit(self, entry: str) -> bool:
        stream = self._stream or sys.stderr
        try:
            stream.write(entry.rstrip("\n") + "\n")
            stream.flush()
        except (OSError, ValueError) as exc:
            logger.warning("process_log_write_failed", error=str(exc))
            return False
        return True


class DailyFileSink(BaseSink):
    """Date-partitioned append-only file sink.

    File name: ``{YYYY-MM-DD}_{md5(component)[:8]}.dat`` inside ``log_dir``.
    """

    def __init__(self, log_dir: str | Path, component_name: str, lock_timeout: float = LOCK_TIMEOUT_SECONDS):
        self._log_dir = Path(log_dir)
        self._hash = component_hash(component_name)
        self._lock_timeout = lock_timeout

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def path_for(self, now: Optional[datetime] = None) -> Path:
        now = now or datetime.now(timezone.utc)
        day = now.astimezone(timezone.utc).strftime(DATE_FORMAT)
        return self._log_dir / f"{day}_{self._hash}{LOG_FILE_EXTENSION}"

    def emit(self, entry: str, now: Optional[datetime] = None) -> bool:
        path = self.path_for(now)
        if not self._log_dir.is_dir():
            # Creating the directory is the protector's job
            logger.warning("log_dir_missing", path=str(self._log_dir))
            return False
        lock = FileLock(str(path) + LOCK_SUFFIX, timeout=self._lock_timeout)
        try:
            with lock:
                with open(path, "a", encoding="utf-8") as fh:
                    fh.write(entry)
        except Timeout:
            logger.warning("log_file_lock_timeout", path=str(path))
            return False
        except OSError as exc:
            logger.warning("log_file_write_failed", path=str(path), error=str(exc))
            return False
        return True
