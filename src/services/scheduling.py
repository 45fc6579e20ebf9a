# src/services/scheduling.py

"""Timer abstraction shared by the debounce and reconnect logic.

The running :class:`asyncio.AbstractEventLoop` already satisfies
:class:`Scheduler`; tests substitute a manually advanced clock so the
300 ms debounce and the 5 s reconnect delay never need real waiting.
"""

from collections.abc import Callable
from typing import Any, Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything able to run a callback after a delay in seconds."""

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any,
    ) -> TimerHandle: ...
