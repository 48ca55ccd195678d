"""
Protected output directory bootstrap.

The first time fallback logging needs a directory, it is created together
with deny rules for the common web servers, index sentinels that stop
directory browsing, and a README describing how to control logging for
this component. Existing directories are left alone.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

from .config.resolver import component_env_key
from .constants import (
    APACHE_RULES_FILENAME,
    COMPONENT_ENV_DISABLED,
    COMPONENT_ENV_MIN_LEVEL,
    COMPONENT_ENV_RETENTION_DAYS,
    ENV_DISABLED,
    ENV_MIN_LEVEL,
    ENV_RETENTION_DAYS,
    IIS_RULES_FILENAME,
    README_FILENAME,
    SENTINEL_FILENAME,
    TIMESTAMP_FORMAT,
)
from .logging import get_logger

if TYPE_CHECKING:
    from .config.resolver import LoggerConfig

logger = get_logger("hostlog.protection")


# =============================================================================
# Templates
# =============================================================================

APACHE_RULES = """\
# Log directory protection
Order deny,allow
Deny from all
<Files ~ "\\.(dat|log)$">
    deny from all
</Files>
"""

IIS_RULES = """\
<?xml version="1.0" encoding="UTF-8"?>
<configuration>
  <system.webServer>
    <authorization>
      <deny users="*" />
    </authorization>
  </system.webServer>
</configuration>
"""

SENTINEL = """\
<!DOCTYPE html>
<!-- Log directory protection: prevents directory browsing -->
<html><head><meta name="robots" content="noindex"><title>403 Forbidden</title></head>
<body>Access denied</body></html>
"""

README = """\
# LOG DIRECTORY PROTECTION CONFIGURATION
# ========================================

This directory contains {component} log files and should be protected from direct access.
The following configurations provide protection for different web servers:

## NGINX
location ~* /{component_folder}/logs/ {{
    deny all;
    return 403;
}}

## APACHE
# Already protected via .htaccess file (automatic)

## IIS
# Already protected via web.config file (automatic)

## LOGGING CONTROL
Environment variables (component-specific values win over global ones):

# Send fallback output to stderr instead of files:
HOST_DEBUG=true

# Disable all logging for this component:
{component_disabled}=true
{global_disabled}=true

# Customize log retention period (current: {retention_days} days):
{component_retention}={retention_days}
{global_retention}={retention_days}

# Minimum level to record (current: {min_level}):
{component_min_level}={min_level}
{global_min_level}={min_level}

Host constants:
{disable_flag} = True
{retention_flag} = {retention_days}

Generated: {generated} UTC
Component: {component}
Log retention: {retention_days} days
Minimum level: {min_level}
"""


def render_readme(config: "LoggerConfig", component_folder: str, now: Optional[datetime] = None) -> str:
    """Render the guide with the live retention and level values."""
    name = config.component_name
    now = now or datetime.now(timezone.utc)
    return README.format(
        component=name,
        component_folder=component_folder,
        component_disabled=component_env_key(name, COMPONENT_ENV_DISABLED),
        global_disabled=ENV_DISABLED,
        component_retention=component_env_key(name, COMPONENT_ENV_RETENTION_DAYS),
        global_retention=ENV_RETENTION_DAYS,
        component_min_level=component_env_key(name, COMPONENT_ENV_MIN_LEVEL),
        global_min_level=ENV_MIN_LEVEL,
        disable_flag=config.disabled_flag_name,
        retention_flag=config.retention_flag_name,
        retention_days=config.retention_days,
        min_level=config.min_level,
        generated=now.strftime(TIMESTAMP_FORMAT),
    )


class DirectoryProtector:
    """Creates and protects ``{uploads}/{component}/logs`` on first use."""

    def __init__(self, config: "LoggerConfig"):
        self._config = config

    def protection_files(self, component_dir: Path, log_dir: Path) -> Dict[Path, str]:
        """Every protection file path mapped to its content."""
        return {
            component_dir / SENTINEL_FILENAME: SENTINEL,
            log_dir / APACHE_RULES_FILENAME: APACHE_RULES,
            log_dir / IIS_RULES_FILENAME: IIS_RULES,
            log_dir / SENTINEL_FILENAME: SENTINEL,
            log_dir / README_FILENAME: render_readme(self._config, component_dir.name),
        }

    def ensure_protected(self, log_dir: str | Path) -> bool:
        """
        Create and protect ``log_dir`` unless it already exists.

        Returns:
            True when the directory exists afterwards. Failures are swallowed.
        """
        log_dir = Path(log_dir)
        if log_dir.is_dir():
            return True

        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("log_dir_create_failed", path=str(log_dir), error=str(exc))
            return False

        written = 0
        for path, content in self.protection_files(log_dir.parent, log_dir).items():
            try:
                path.write_text(content, encoding="utf-8")
                written += 1
            except OSError as exc:
                logger.warning("protection_file_write_failed", path=str(path), error=str(exc))

        logger.debug("log_dir_protected", path=str(log_dir), files=written)
        return True
