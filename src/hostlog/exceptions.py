"""
hostlog exception hierarchy.

Only configuration problems escape the logger. Every other fault degrades
functionality and is reported through the internal diagnostics instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class HostlogError(Exception):
    """Base class for hostlog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigError(HostlogError, ValueError):
    """Raised at construction time when the logger cannot be configured.

    The usual cause is a missing or blank component name.
    """

    def __init__(self, message: str, *, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        merged = dict(details or {})
        if field:
            merged["field"] = field
        super().__init__(message, code="CONFIG_ERROR", details=merged)
        self.field = field
