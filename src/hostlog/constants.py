"""
hostlog constants.

Hook names, environment keys and defaults form the public extensibility
contract. Keep them here so every module reads the same names.
"""

from __future__ import annotations


# ================================
# Hook names
# ================================

HOOK_OVERRIDE_LOG = "hostlog_override_log"
HOOK_BACKEND_NAMESPACE = "hostlog_backend_namespace"
HOOK_BACKEND_PREFIX = "hostlog_backend_prefix"
HOOK_BACKEND_ACTION = "hostlog_backend_action"
HOOK_LOGGED = "hostlog_logged"
HOOK_FALLBACK = "hostlog_fallback"
# Formatted with the level name, e.g. "hostlog_fallback_error"
HOOK_FALLBACK_LEVEL = "hostlog_fallback_{level}"


# ================================
# Environment keys
# ================================

ENV_COMPONENT_NAME = "LOGGER_COMPONENT_NAME"
ENV_RETENTION_DAYS = "LOGGER_RETENTION_DAYS"
ENV_MIN_LEVEL = "LOGGER_MIN_LEVEL"
ENV_BACKEND_NAMESPACE = "LOGGER_BACKEND_NAMESPACE"
ENV_DISABLED = "LOGGER_DISABLED"

# Suffixes appended to the normalized component name
COMPONENT_ENV_RETENTION_DAYS = "LOG_RETENTION_DAYS"
COMPONENT_ENV_MIN_LEVEL = "LOG_MIN_LEVEL"
COMPONENT_ENV_BACKEND_NAMESPACE = "LOG_BACKEND_NAMESPACE"
COMPONENT_ENV_DISABLED = "LOGGER_DISABLED"

# Host constant suffixes
DISABLE_FLAG_SUFFIX = "DISABLE_LOGGING"
RETENTION_FLAG_SUFFIX = "LOG_RETENTION_DAYS"

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


# ================================
# Defaults
# ================================

DEFAULT_RETENTION_DAYS = 30
DEFAULT_BACKEND_NAMESPACE = "wonolog"
DEFAULT_MIN_LEVEL = "debug"
DEFAULT_ENVIRONMENT_TYPE = "production"

DAY_IN_SECONDS = 86400

# One sweep per this many file writes, on average
SWEEP_CHANCE = 100


# ================================
# Backend module contract
# ================================

BACKEND_CONFIGURATOR = "Configurator"
BACKEND_SETUP_MARKER = "ACTION_SETUP"
BACKEND_LOG_MARKER = "LOG"
BACKEND_LOGGER_FACTORY = "make_logger"


# ================================
# Output layout
# ================================

LOGS_SUBDIR = "logs"
LOG_FILE_EXTENSION = ".dat"
SWEPT_EXTENSIONS = (".dat", ".log")
LOCK_SUFFIX = ".lock"
FILE_HASH_LENGTH = 8
LOCK_TIMEOUT_SECONDS = 10.0

SENTINEL_FILENAME = "index.html"
APACHE_RULES_FILENAME = ".htaccess"
IIS_RULES_FILENAME = "web.config"
README_FILENAME = "README"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"
RECORD_SEPARATOR = "---"
