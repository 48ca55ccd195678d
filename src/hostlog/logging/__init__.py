"""
Internal diagnostics for hostlog.

hostlog must never crash its host, so write failures and misbehaving hooks
are swallowed. They are still reported here, through structlog, to a sink
that is silent until ``configure_logging`` points it at a stream.

Library: structlog. The global structlog configuration is never touched.
"""

from .core import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
