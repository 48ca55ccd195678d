from __future__ import annotations

import typing as t
from pathlib import Path

import pytest

from hostlog import ConstantRegistry, HookBus, Host, Logger, MappingEnvironment


class Recorder:
    """Records every filter and action a HookBus dispatches."""

    def __init__(self, bus: HookBus):
        self.filters: list[tuple[str, t.Any, tuple]] = []
        self.actions: list[tuple[str, tuple]] = []
        original_apply = bus.apply_filters
        original_do = bus.do_action

        def apply_filters(name: str, value: t.Any, *args: t.Any) -> t.Any:
            self.filters.append((name, value, args))
            return original_apply(name, value, *args)

        def do_action(name: str, *args: t.Any) -> None:
            self.actions.append((name, args))
            original_do(name, *args)

        bus.apply_filters = apply_filters  # type: ignore[method-assign]
        bus.do_action = do_action  # type: ignore[method-assign]

    def action_names(self) -> list[str]:
        return [name for name, _ in self.actions]

    def filter_names(self) -> list[str]:
        return [name for name, _, _ in self.filters]

    def actions_named(self, name: str) -> list[tuple]:
        return [args for hook, args in self.actions if hook == name]


@pytest.fixture
def environ() -> dict[str, str]:
    return {}


@pytest.fixture
def constants() -> ConstantRegistry:
    return ConstantRegistry()


@pytest.fixture
def bus() -> HookBus:
    return HookBus()


@pytest.fixture
def recorder(bus: HookBus) -> Recorder:
    return Recorder(bus)


@pytest.fixture
def uploads(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def host(bus: HookBus, environ: dict[str, str], constants: ConstantRegistry, uploads: Path) -> Host:
    """Production host with a random source that never triggers a sweep."""
    return Host(
        hooks=bus,
        environment=MappingEnvironment(environ),
        constants=constants,
        uploads_dir=uploads,
        randint=lambda low, high: 50,
        debug=False,
        environment_type="production",
    )


@pytest.fixture
def make_logger(host: Host) -> t.Callable[..., Logger]:
    def factory(component_name: str = "test-plugin", **options: t.Any) -> Logger:
        return Logger({"component_name": component_name}, host=host, **options)

    return factory
