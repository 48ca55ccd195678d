"""
Layered configuration resolution.

Sources, highest priority first:

1. Component environment variable (``{COMPONENT}_LOG_RETENTION_DAYS`` ...)
2. Global environment variable (``LOGGER_RETENTION_DAYS`` ...)
3. Host constant (retention days only, positive integers only)
4. Explicit configuration passed by the caller
5. Built-in defaults

Invalid environment and constant values are skipped so the next source
wins. Invalid explicit values are a caller bug and raise ``ConfigError``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..constants import (
    COMPONENT_ENV_BACKEND_NAMESPACE,
    COMPONENT_ENV_MIN_LEVEL,
    COMPONENT_ENV_RETENTION_DAYS,
    DEFAULT_BACKEND_NAMESPACE,
    DEFAULT_MIN_LEVEL,
    DEFAULT_RETENTION_DAYS,
    DISABLE_FLAG_SUFFIX,
    ENV_BACKEND_NAMESPACE,
    ENV_COMPONENT_NAME,
    ENV_MIN_LEVEL,
    ENV_RETENTION_DAYS,
    RETENTION_FLAG_SUFFIX,
)
from ..exceptions import ConfigError
from ..levels import level_name

if TYPE_CHECKING:
    from ..host import Constants, Environment

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def normalize_name(component_name: str) -> str:
    """Uppercase and replace every non-alphanumeric character with ``_``."""
    return _NON_ALNUM.sub("_", component_name).upper()


def derive_flag_name(component_name: str, suffix: str) -> str:
    """``"my-plugin"`` + ``"DISABLE_LOGGING"`` -> ``"MY_PLUGIN_DISABLE_LOGGING"``."""
    return f"{normalize_name(component_name)}_{suffix}"


def component_env_key(component_name: str, suffix: str) -> str:
    return derive_flag_name(component_name, suffix)


class LoggerConfig(BaseModel):
    """Immutable configuration snapshot, built once per logger."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    component_name: str
    retention_days: int = Field(default=DEFAULT_RETENTION_DAYS, gt=0)
    backend_namespace: str = DEFAULT_BACKEND_NAMESPACE
    min_level: str = DEFAULT_MIN_LEVEL
    disabled_flag_name: str
    retention_flag_name: str

    @field_validator("component_name")
    @classmethod
    def validate_component_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("component_name must not be blank")
        return v

    @field_validator("min_level", mode="before")
    @classmethod
    def normalize_min_level(cls, v: Any) -> str:
        # Unknown names are kept; the level gate fails open on them.
        return level_name(v) or DEFAULT_MIN_LEVEL

    @field_validator("backend_namespace")
    @classmethod
    def validate_backend_namespace(cls, v: str) -> str:
        return v.strip() or DEFAULT_BACKEND_NAMESPACE

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.component_name)


def _positive_int(value: Any) -> Optional[int]:
    """Coerce to a positive int, or None when the value is unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def _non_empty(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _resolve_component_name(explicit: Mapping[str, Any], environment: "Environment") -> str:
    raw = explicit.get("component_name")
    if raw is None:
        raw = environment.get_string(ENV_COMPONENT_NAME)
    if raw is None:
        raise ConfigError("component_name is required in configuration", field="component_name")
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError("component_name must be a non-empty string", field="component_name")
    return raw.strip()


def _layered(
    explicit_value: Any,
    *candidates: Optional[Any],
) -> Any:
    """First usable candidate wins (candidates are ordered highest priority first)."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return explicit_value


def resolve_config(
    explicit: Optional[Mapping[str, Any]],
    environment: "Environment",
    constants: Optional["Constants"] = None,
) -> LoggerConfig:
    """
    Merge defaults, explicit config, host constants and environment into one snapshot.

    Args:
        explicit: Caller-supplied configuration mapping
        environment: Environment accessor (``get_string``)
        constants: Host constant accessor (``is_defined``/``value``), optional

    Returns:
        The frozen ``LoggerConfig``.

    Raises:
        ConfigError: When no usable component name is available. Also when
            a value passed explicitly by the caller fails validation (for
            example ``retention_days=0``); the same value arriving from the
            environment or a host constant is skipped instead.
    """
    explicit = dict(explicit or {})
    component_name = _resolve_component_name(explicit, environment)

    disabled_flag = _non_empty(explicit.get("disabled_flag_name")) or derive_flag_name(
        component_name, DISABLE_FLAG_SUFFIX
    )
    retention_flag = _non_empty(explicit.get("retention_flag_name")) or derive_flag_name(
        component_name, RETENTION_FLAG_SUFFIX
    )

    def env_string(key: str) -> Optional[str]:
        return _non_empty(environment.get_string(key))

    def env_positive_int(key: str) -> Optional[int]:
        return _positive_int(environment.get_string(key))

    constant_retention: Optional[int] = None
    if constants is not None and constants.is_defined(retention_flag):
        constant_retention = _positive_int(constants.value(retention_flag))

    values: Dict[str, Any] = {
        key: explicit[key]
        for key in ("retention_days", "backend_namespace", "min_level")
        if explicit.get(key) is not None
    }

    retention = _layered(
        values.get("retention_days"),
        env_positive_int(component_env_key(component_name, COMPONENT_ENV_RETENTION_DAYS)),
        env_positive_int(ENV_RETENTION_DAYS),
        constant_retention,
    )
    min_level = _layered(
        values.get("min_level"),
        env_string(component_env_key(component_name, COMPONENT_ENV_MIN_LEVEL)),
        env_string(ENV_MIN_LEVEL),
    )
    namespace = _layered(
        values.get("backend_namespace"),
        env_string(component_env_key(component_name, COMPONENT_ENV_BACKEND_NAMESPACE)),
        env_string(ENV_BACKEND_NAMESPACE),
    )

    merged: Dict[str, Any] = {
        "component_name": component_name,
        "disabled_flag_name": disabled_flag,
        "retention_flag_name": retention_flag,
    }
    if retention is not None:
        merged["retention_days"] = retention
    if min_level is not None:
        merged["min_level"] = min_level
    if namespace is not None:
        merged["backend_namespace"] = namespace

    try:
        return LoggerConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(
            f"invalid logger configuration: {exc.errors()[0].get('msg', 'validation failed')}",
            details={"errors": exc.errors(include_url=False)},
        ) from exc
