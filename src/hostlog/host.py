"""
Host capabilities.

The logger never reaches for globals. Everything it needs from the
surrounding application arrives through a ``Host``: the hook bus,
environment and constant accessors, the uploads root, a random source
and the debug/environment flags. A capability left as ``None`` is
treated as unavailable and the dependent feature is silently disabled.
"""

from __future__ import annotations

import os
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, runtime_checkable

from .config.host import HostSettings
from .constants import DEFAULT_ENVIRONMENT_TYPE, TRUTHY_VALUES
from .hooks import HookBus, default_bus


@runtime_checkable
class Environment(Protocol):
    def get_string(self, key: str) -> Optional[str]: ...

    def get_int(self, key: str) -> int: ...

    def get_bool(self, key: str) -> bool: ...


@runtime_checkable
class Constants(Protocol):
    def is_defined(self, name: str) -> bool: ...

    def value(self, name: str) -> Any: ...


class MappingEnvironment:
    """Environment accessor over a mapping, read live on every lookup.

    Defaults to ``os.environ``.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._mapping = os.environ if mapping is None else mapping

    def get_string(self, key: str) -> Optional[str]:
        value = self._mapping.get(key)
        return None if value is None else str(value)

    def get_int(self, key: str) -> int:
        value = self.get_string(key)
        if value is None:
            return 0
        try:
            return int(value.strip())
        except ValueError:
            return 0

    def get_bool(self, key: str) -> bool:
        value = self.get_string(key)
        return value is not None and value.strip().lower() in TRUTHY_VALUES


class ConstantRegistry:
    """Named host constants. Once defined, a constant keeps its value."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    def define(self, name: str, value: Any) -> bool:
        if name in self._values:
            return False
        self._values[name] = value
        return True

    def is_defined(self, name: str) -> bool:
        return name in self._values

    def value(self, name: str) -> Any:
        return self._values.get(name)


@dataclass
class Host:
    """Capabilities supplied by the embedding application."""

    hooks: Optional[HookBus] = None
    environment: Environment = field(default_factory=MappingEnvironment)
    constants: Optional[Constants] = None
    uploads_dir: Optional[Path] = None
    randint: Optional[Callable[[int, int], int]] = random.randint
    debug: bool = False
    environment_type: str = DEFAULT_ENVIRONMENT_TYPE

    @classmethod
    def from_process(cls, settings: Optional[HostSettings] = None, **overrides: Any) -> "Host":
        """Build a host from ``HOST_*`` settings, ``os.environ`` and the process-wide hook bus."""
        settings = settings or HostSettings()
        values: Dict[str, Any] = {
            "hooks": default_bus,
            "environment": MappingEnvironment(),
            "constants": ConstantRegistry(),
            "uploads_dir": settings.uploads_dir or Path.cwd() / "uploads",
            "debug": settings.debug,
            "environment_type": settings.environment_type,
        }
        values.update(overrides)
        return cls(**values)

    @property
    def has_hooks(self) -> bool:
        return self.hooks is not None

    @property
    def can_track_actions(self) -> bool:
        return callable(getattr(self.hooks, "times_fired", None))

    def upload_base_dir(self) -> Optional[Path]:
        return Path(self.uploads_dir) if self.uploads_dir is not None else None
