"""
Severity levels and the minimum-level gate.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Level(str, Enum):
    """The eight standard severities, in ascending order."""

    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    ALERT = "alert"
    EMERGENCY = "emergency"


LevelLike = Union[Level, str]

_PRIORITIES = {level.value: index for index, level in enumerate(Level)}


def level_name(level: LevelLike) -> str:
    """Normalize a level to its lowercase name. Unknown names are kept."""
    if isinstance(level, Level):
        return level.value
    return str(level).strip().lower()


def priority(level: LevelLike) -> int:
    """Ordinal priority of a level.

    Unknown names map to 0 so a typo in configuration logs everything
    instead of nothing.
    """
    return _PRIORITIES.get(level_name(level), 0)


def is_known_level(level: LevelLike) -> bool:
    return level_name(level) in _PRIORITIES


def should_log(level: LevelLike, min_level: LevelLike) -> bool:
    """True when ``level`` meets or exceeds ``min_level``."""
    return priority(level) >= priority(min_level)
