"""
Advanced backend detection.

A backend is a Python module at the configured namespace that owns log
routing once it has been set up. It is considered active only when all
of these hold:

1. the host hook bus can report how often an action fired;
2. the module exposes a ``Configurator`` class;
3. the class carries an ``ACTION_SETUP`` marker;
4. that setup action has fired at least once.

The result and the resolved namespace are cached together until
``refresh()``.
"""

from __future__ import annotations

import importlib
import inspect
from dataclasses import dataclass
from types import ModuleType
from typing import TYPE_CHECKING, Any, Callable, Optional

from .constants import BACKEND_CONFIGURATOR, BACKEND_LOG_MARKER, BACKEND_SETUP_MARKER, HOOK_BACKEND_NAMESPACE
from .logging import get_logger

if TYPE_CHECKING:
    from .host import Host

logger = get_logger("hostlog.backend")


@dataclass
class BackendCache:
    """Lazily filled detection state. ``None`` means not yet computed."""

    active: Optional[bool] = None
    namespace: Optional[str] = None

    def invalidate(self) -> None:
        self.active = None
        self.namespace = None


class BackendDetector:
    """Decides whether log calls should be routed to the advanced backend."""

    def __init__(
        self,
        host: "Host",
        default_namespace: str,
        apply_filters: Callable[..., Any],
    ):
        self._host = host
        self._default_namespace = default_namespace
        self._apply_filters = apply_filters
        self._cache = BackendCache()

    @property
    def namespace(self) -> str:
        if self._cache.namespace is None:
            result = self._apply_filters(HOOK_BACKEND_NAMESPACE, self._default_namespace)
            self._cache.namespace = (
                result if isinstance(result, str) and result.strip() else self._default_namespace
            )
        return self._cache.namespace

    def refresh(self) -> None:
        self._cache.invalidate()

    def module(self) -> Optional[ModuleType]:
        """Import the backend module, or None when it is unavailable."""
        try:
            return importlib.import_module(self.namespace)
        except ImportError:
            return None
        except Exception as exc:
            logger.warning("backend_import_failed", namespace=self.namespace, error=str(exc))
            return None

    def is_active(self) -> bool:
        if self._cache.active is None:
            self._cache.active = self._detect()
            logger.debug("backend_detected", namespace=self.namespace, active=self._cache.active)
        return self._cache.active

    def log_prefix(self) -> Optional[str]:
        """The backend's ``LOG`` action prefix, if it defines one."""
        module = self.module()
        prefix = getattr(module, BACKEND_LOG_MARKER, None) if module is not None else None
        return prefix if isinstance(prefix, str) and prefix else None

    def _detect(self) -> bool:
        if not self._host.can_track_actions:
            return False

        module = self.module()
        if module is None:
            return False

        configurator = getattr(module, BACKEND_CONFIGURATOR, None)
        if not inspect.isclass(configurator):
            return False

        setup_action = getattr(configurator, BACKEND_SETUP_MARKER, None)
        if not isinstance(setup_action, str) or not setup_action:
            return False

        try:
            return self._host.hooks.times_fired(setup_action) > 0
        except Exception as exc:
            logger.warning("backend_action_check_failed", action=setup_action, error=str(exc))
            return False
