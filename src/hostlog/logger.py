"""
Logger facade.

Per call::

    level gate -> override hook -> backend path | fallback path -> "logged" notification

Messages rejected by the level gate produce no side effects at all. An
override that claims the call ends it without a "logged" notification.
Nothing but the constructor's ``ConfigError`` escapes this class.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .backend import BackendDetector
from .config.resolver import LoggerConfig, component_env_key, resolve_config
from .constants import (
    BACKEND_LOGGER_FACTORY,
    COMPONENT_ENV_DISABLED,
    ENV_DISABLED,
    HOOK_BACKEND_ACTION,
    HOOK_BACKEND_PREFIX,
    HOOK_FALLBACK,
    HOOK_FALLBACK_LEVEL,
    HOOK_LOGGED,
    HOOK_OVERRIDE_LOG,
)
from .fallback import FallbackWriter
from .host import Host
from .levels import Level, LevelLike, level_name, should_log
from .logging import get_logger

logger = get_logger("hostlog.logger")


class _NotHandled:
    """Marker for "no override took the call"."""

    _instance: Optional["_NotHandled"] = None

    def __new__(cls) -> "_NotHandled":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_HANDLED"

    def __bool__(self) -> bool:
        return False


NOT_HANDLED = _NotHandled()


def _as_context(context: Any) -> Dict[str, Any]:
    """Copy a context mapping; anything else is wrapped under ``"context"``."""
    if context is None:
        return {}
    if isinstance(context, Mapping):
        return dict(context)
    return {"context": context}


class Logger:
    """
    Leveled logger that routes to an advanced backend when one is active and
    otherwise to protected daily files (or stderr in debug mode).

    Args:
        config: Explicit configuration mapping (``component_name`` required
            unless ``LOGGER_COMPONENT_NAME`` is set)
        host: Host capabilities; defaults to ``Host.from_process()``
        **options: Merged over ``config``

    Raises:
        ConfigError: When the component name is missing or blank, or an
            explicitly passed value is invalid.
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None, *, host: Optional[Host] = None, **options: Any):
        self._host = host or Host.from_process()
        explicit = {**dict(config or {}), **options}
        self._config = resolve_config(explicit, self._host.environment, self._host.constants)
        self._backend = BackendDetector(self._host, self._config.backend_namespace, self._apply_filters)
        self._fallback = FallbackWriter(self._config, self._host)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_config(self) -> LoggerConfig:
        return self._config

    def refresh_backend_cache(self) -> None:
        """Forget the cached backend activation state and namespace."""
        self._backend.refresh()

    def is_backend_active(self) -> bool:
        return self._backend.is_active()

    def get_backend_logger(self) -> Any:
        """The backend's own logger from ``make_logger()``, or None."""
        if not self._backend.is_active():
            return None
        module = self._backend.module()
        factory = getattr(module, BACKEND_LOGGER_FACTORY, None)
        if not callable(factory):
            return None
        try:
            return factory()
        except Exception as exc:
            logger.warning("backend_logger_failed", namespace=self._backend.namespace, error=str(exc))
            return None

    def is_logging_disabled(self) -> bool:
        environment = self._host.environment
        if environment.get_bool(ENV_DISABLED):
            return True
        if environment.get_bool(component_env_key(self._config.component_name, COMPONENT_ENV_DISABLED)):
            return True
        constants = self._host.constants
        name = self._config.disabled_flag_name
        return bool(constants is not None and constants.is_defined(name) and constants.value(name))

    def get_log_directory(self) -> Optional[Path]:
        return self._fallback.log_dir

    def get_debug_info(self) -> Dict[str, Any]:
        config = self._config
        constants = self._host.constants
        log_dir = self.get_log_directory()

        def defined(name: str) -> bool:
            return bool(constants is not None and constants.is_defined(name))

        return {
            "component_name": config.component_name,
            "config": config.model_dump(),
            "backend_active": self._backend.is_active(),
            "backend_namespace": self._backend.namespace,
            "retention_days": config.retention_days,
            "min_level": config.min_level,
            "disable_flag": config.disabled_flag_name,
            "retention_flag": config.retention_flag_name,
            "debug": self._host.debug,
            "environment_type": self._host.environment_type,
            "logging_disabled": self.is_logging_disabled(),
            "log_directory": str(log_dir) if log_dir is not None else None,
            "constants_defined": {
                config.disabled_flag_name: defined(config.disabled_flag_name),
                config.retention_flag_name: defined(config.retention_flag_name),
            },
        }

    # ------------------------------------------------------------------
    # Leveled API
    # ------------------------------------------------------------------

    def emergency(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        """System is unusable."""
        self.log(Level.EMERGENCY, message, context)

    def alert(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        """Action must be taken immediately."""
        self.log(Level.ALERT, message, context)

    def critical(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(Level.CRITICAL, message, context)

    def error(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(Level.ERROR, message, context)

    def warning(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(Level.WARNING, message, context)

    def notice(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        """Normal but significant events."""
        self.log(Level.NOTICE, message, context)

    def info(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(Level.INFO, message, context)

    def debug(self, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(Level.DEBUG, message, context)

    def log(self, level: LevelLike, message: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        """Log at an arbitrary level. Never raises."""
        name: Any = level
        try:
            name = level_name(level)
            if not should_log(name, self._config.min_level):
                return

            context = _as_context(context)
            override = self._apply_filters(HOOK_OVERRIDE_LOG, NOT_HANDLED, name, message, context, self._config)
            if override is not NOT_HANDLED and override is not None:
                return

            if self._backend.is_active():
                self._log_via_backend(name, message, context)
            else:
                self._log_via_fallback(name, message, context)

            self._do_action(HOOK_LOGGED, name, message, context, self._config.component_name)
        except Exception as exc:
            logger.error("log_call_failed", level=name, error=str(exc))

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def _log_via_backend(self, level: str, message: Any, context: Dict[str, Any]) -> None:
        prefix = self._backend.log_prefix()
        if prefix is None:
            return

        prefix = self._apply_filters(HOOK_BACKEND_PREFIX, prefix, level, message, context, self._config)
        action = self._apply_filters(HOOK_BACKEND_ACTION, f"{prefix}.{level}", level, message, context, self._config)
        self._do_action(str(action), {"message": message, "context": context})

    def _log_via_fallback(self, level: str, message: Any, context: Dict[str, Any]) -> None:
        component = self._config.component_name
        self._do_action(HOOK_FALLBACK, level, message, context, component)
        self._do_action(HOOK_FALLBACK_LEVEL.format(level=level), message, context, component)

        # Debug visibility takes precedence over disablement
        if self._host.debug:
            self._fallback.write_to_process_log(level, message, context)
            return

        if self.is_logging_disabled():
            return

        self._fallback.write_to_file(level, message, context)

    # ------------------------------------------------------------------
    # Hook plumbing
    # ------------------------------------------------------------------

    def _apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        if not self._host.has_hooks:
            return value
        try:
            return self._host.hooks.apply_filters(name, value, *args)
        except Exception as exc:
            logger.warning("filter_failed", hook=name, error=str(exc))
            return value

    def _do_action(self, name: str, *args: Any) -> None:
        if not self._host.has_hooks:
            return
        try:
            self._host.hooks.do_action(name, *args)
        except Exception as exc:
            logger.warning("action_failed", hook=name, error=str(exc))
