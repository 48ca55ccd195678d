"""
Fake advanced backend modules for tests.
"""

from __future__ import annotations

import sys
import types
import typing as t

SETUP_ACTION = "fake_backend.setup"


def install_backend(
    monkeypatch,
    name: str = "fake_backend",
    *,
    log_prefix: t.Optional[str] = "fake.log",
    with_configurator: bool = True,
    with_setup_marker: bool = True,
    make_logger: t.Optional[t.Callable[[], t.Any]] = None,
) -> types.ModuleType:
    """Register a module in ``sys.modules`` shaped like a logging backend."""
    module = types.ModuleType(name)
    if with_configurator:
        attrs = {"ACTION_SETUP": SETUP_ACTION} if with_setup_marker else {}
        module.Configurator = type("Configurator", (), attrs)
    if log_prefix is not None:
        module.LOG = log_prefix
    if make_logger is not None:
        module.make_logger = make_logger
    monkeypatch.setitem(sys.modules, name, module)
    return module
