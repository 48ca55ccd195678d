"""
hostlog Configuration Module.

Two concerns, kept orthogonal:

- ``LoggerConfig``: the per-logger snapshot produced by ``resolve_config``
  from layered sources (component env > global env > host constant >
  explicit config > defaults).
- ``HostSettings``: host process flags read with pydantic-settings
  (prefix ``HOST_``) when no host is injected.

Usage:
    from hostlog.config import resolve_config

    config = resolve_config({"component_name": "my-plugin"}, environment, constants)
    config.disabled_flag_name  # "MY_PLUGIN_DISABLE_LOGGING"
"""

from .host import HostSettings
from .resolver import (
    LoggerConfig,
    component_env_key,
    derive_flag_name,
    normalize_name,
    resolve_config,
)

__all__ = [
    "HostSettings",
    "LoggerConfig",
    "component_env_key",
    "derive_flag_name",
    "normalize_name",
    "resolve_config",
]
