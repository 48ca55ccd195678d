"""
Retention sweep for fallback output files.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, List, Optional

from .constants import DAY_IN_SECONDS, LOCK_SUFFIX, SWEEP_CHANCE, SWEPT_EXTENSIONS
from .logging import get_logger

logger = get_logger("hostlog.retention")


class RetentionSweeper:
    """Deletes output files whose mtime is older than the retention window."""

    def __init__(
        self,
        retention_days: int,
        *,
        extensions: tuple[str, ...] = SWEPT_EXTENSIONS,
        clock: Callable[[], float] = time.time,
    ):
        self._retention_days = retention_days
        self._extensions = extensions
        self._clock = clock

    @property
    def cutoff(self) -> float:
        return self._clock() - self._retention_days * DAY_IN_SECONDS

    def sweep(self, log_dir: str | Path) -> List[Path]:
        """
        Delete expired files in ``log_dir``.

        Returns:
            The files that were deleted. A missing directory is a no-op and
            deletion failures are skipped.
        """
        log_dir = Path(log_dir)
        if not log_dir.is_dir():
            return []

        cutoff = self.cutoff
        deleted: List[Path] = []
        try:
            candidates = [p for p in log_dir.iterdir() if p.suffix in self._extensions]
        except OSError as exc:
            logger.warning("retention_scan_failed", path=str(log_dir), error=str(exc))
            return []

        for path in candidates:
            try:
                if not path.is_file() or path.stat().st_mtime >= cutoff:
                    continue
                path.unlink()
            except OSError as exc:
                logger.warning("retention_delete_failed", path=str(path), error=str(exc))
                continue
            deleted.append(path)
            self._remove_lock(path)

        if deleted:
            logger.info("retention_sweep", path=str(log_dir), deleted=len(deleted))
        return deleted

    @staticmethod
    def _remove_lock(path: Path) -> None:
        lock = path.with_name(path.name + LOCK_SUFFIX)
        try:
            lock.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.debug("retention_lock_delete_failed", path=str(lock), error=str(exc))


def should_sweep(randint: Optional[Callable[[int, int], int]], chance: int = SWEEP_CHANCE) -> bool:
    """Roll the host's random source: True roughly once every ``chance`` calls."""
    if randint is None:
        return False
    return randint(1, chance) == 1
