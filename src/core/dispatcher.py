"""Action registry and the event dispatch loop.

Dispatch is strictly sequential: one event at a time, actions in
registration order. A slow action delays the next event.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Awaitable, Callable, Iterable, Optional, Tuple

from core.models import Event
from core.ports import TransportPort

LOGGER = logging.getLogger(__name__)

ActionHandler = Callable[[Event], Awaitable[None]]


@dataclass(frozen=True)
class Action:
    """A named handler bound to an optional event kind filter."""

    name: str
    handler: ActionHandler
    event_kind: Optional[str] = None

    def accepts(self, event: Event) -> bool:
        return self.event_kind is None or self.event_kind == event.kind


def unique_by_name(items: Iterable, label: str) -> tuple:
    """Freeze a registry, rejecting duplicate names."""

    frozen = tuple(items)
    seen: set[str] = set()
    for item in frozen:
        if item.name in seen:
            raise ValueError(f"Duplicate {label} name: {item.name}")
        seen.add(item.name)
    return frozen


class Dispatcher:
    """Runs every matching action for each inbound event."""

    def __init__(self, actions: Iterable[Action]) -> None:
        self._actions: Tuple[Action, ...] = unique_by_name(actions, "action")

    @property
    def actions(self) -> Tuple[Action, ...]:
        return self._actions

    async def dispatch(self, event: Event) -> None:
        """Invoke matching actions in order, isolating each one's failure."""

        for action in self._actions:
            if not action.accepts(event):
                continue
            try:
                await action.handler(event)
            except Exception:
                LOGGER.exception("Error running action %s", action.name)

    async def run(self, transport: TransportPort) -> int:
        """Consume the transport until it closes; return the event count.

        Transport errors are not caught: they end the loop and surface to
        the caller.
        """

        handled = 0
        while True:
            event = await transport.receive()
            if event is None:
                LOGGER.info("Event stream closed after %s events", handled)
                return handled
            await self.dispatch(event)
            handled += 1
