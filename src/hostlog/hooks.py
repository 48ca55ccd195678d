"""
In-process hook bus.

Two kinds of extension point, kept distinct:

- filters thread a value through every registered callback in order
  and return the final value;
- actions broadcast arguments to every registered callback and return
  nothing.

Callbacks run by ascending priority, then registration order. Every
``do_action`` call is counted so ``times_fired`` can tell whether an
action (for instance a backend's setup marker) has happened.
"""

from __future__ import annotations

import itertools
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, List

DEFAULT_PRIORITY = 10

_sequence = itertools.count()


@dataclass(order=True)
class _Registration:
    priority: int
    sequence: int
    callback: Callable[..., Any] = field(compare=False)


class HookBus:
    """Ordered registry of filter and action callbacks."""

    def __init__(self) -> None:
        self._filters: DefaultDict[str, List[_Registration]] = defaultdict(list)
        self._actions: DefaultDict[str, List[_Registration]] = defaultdict(list)
        self._fired: Counter[str] = Counter()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_filter(self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._register(self._filters, name, callback, priority)

    def add_action(self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._register(self._actions, name, callback, priority)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through each filter callback as ``callback(value, *args)``."""
        for registration in list(self._filters.get(name, ())):
            value = registration.callback(value, *args)
        return value

    def do_action(self, name: str, *args: Any) -> None:
        """Call every action callback with ``args``. The fire count grows even with no callbacks."""
        self._fired[name] += 1
        for registration in list(self._actions.get(name, ())):
            registration.callback(*args)

    def times_fired(self, name: str) -> int:
        return self._fired[name]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _register(
        table: DefaultDict[str, List[_Registration]],
        name: str,
        callback: Callable[..., Any],
        priority: int,
    ) -> None:
        registrations = table[name]
        registrations.append(_Registration(priority, next(_sequence), callback))
        registrations.sort()


# Process-wide bus used by ``Host.from_process()``
default_bus = HookBus()
