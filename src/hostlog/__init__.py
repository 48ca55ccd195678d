"""
hostlog: leveled logger for host applications.

Routes log calls to an advanced backend when the host has one set up,
and otherwise to protected, date-partitioned files (or stderr in debug
mode). Logging never raises into the host; only a missing component name
fails, at construction.

Usage:
    from hostlog import Host, HookBus, Logger

    bus = HookBus()
    log = Logger({"component_name": "my-plugin"}, host=Host(hooks=bus, uploads_dir=path))
    log.warning("disk almost full", {"free_mb": 12})
"""

from .config import HostSettings, LoggerConfig, resolve_config
from .exceptions import ConfigError, HostlogError
from .hooks import HookBus, default_bus
from .host import ConstantRegistry, Host, MappingEnvironment
from .levels import Level, should_log
from .logger import NOT_HANDLED, Logger

__all__ = [
    "ConfigError",
    "ConstantRegistry",
    "HookBus",
    "Host",
    "HostSettings",
    "HostlogError",
    "Level",
    "Logger",
    "LoggerConfig",
    "MappingEnvironment",
    "NOT_HANDLED",
    "default_bus",
    "resolve_config",
    "should_log",
]
