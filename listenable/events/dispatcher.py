"""Listener registry and fan-out dispatcher.

Each intercepted session owns one ``ListenerRegistry`` and one ``Dispatcher``.
The dispatcher turns a single event into calls on every registered listener
that implements the event's category, in registration order.

Failures are fail-fast: the first listener that raises stops the remaining
notifications for that event, and the exception propagates to the caller of
``dispatch`` (the interception layer treats it like any other failure of the
intercepted call).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from listenable.common.exceptions import (
    ListenerRegistrationError,
    UnknownEventError,
)
from listenable.events.api import Listener, event_names

logger = logging.getLogger(__name__)


class ListenerRegistry:
    """Ordered collection of listeners.

    Registration order is dispatch order and duplicates are kept. The only
    mutation is ``add``; listeners are never removed.

    Appends replace the stored tuple rather than mutating it, so a dispatch
    that is iterating over the previous snapshot is unaffected by listeners
    registered meanwhile.
    """

    def __init__(self, listeners: Iterable[Listener] = ()) -> None:
        self._listeners: tuple[Listener, ...] = ()
        self._lock = threading.Lock()
        self.add(listeners)

    def add(self, listeners: Iterable[Listener]) -> None:
        """Append *listeners* to the registry.

        The whole batch is validated before any of it is appended.

        Raises:
            ListenerRegistrationError: If any item is not a ``Listener``.
        """
        batch = tuple(listeners)
        for listener in batch:
            if not isinstance(listener, Listener):
                raise ListenerRegistrationError(listener)
        if not batch:
            return
        with self._lock:
            self._listeners = self._listeners + batch
        logger.debug(
            "Registered %d listener(s): %s",
            len(batch),
            ", ".join(type(listener).__name__ for listener in batch),
        )

    def snapshot(self) -> tuple[Listener, ...]:
        return self._listeners

    def subscribers(self, category: type[Listener]) -> Iterator[Listener]:
        """Yield the listeners implementing *category*, in order."""
        for listener in self._listeners:
            if isinstance(listener, category):
                yield listener

    def __len__(self) -> int:
        return len(self._listeners)

    def __iter__(self) -> Iterator[Listener]:
        return iter(self._listeners)


class Dispatcher:
    """Multiplexes events onto the listeners of a registry."""

    def __init__(self, registry: ListenerRegistry) -> None:
        self.registry = registry
        self._relays: dict[type[Listener], _CategoryRelay] = {}

    def dispatch(
        self, category: type[Listener], event_name: str, *args: Any
    ) -> None:
        """Call ``event_name(*args)`` on every listener implementing
        *category*.

        Args:
            category: The listener interface the event belongs to.
            event_name: Name of a hook declared by *category*.
            *args: Arguments forwarded unchanged to every listener.

        Raises:
            UnknownEventError: If *category* declares no such hook.
        """
        if event_name not in event_names(category):
            raise UnknownEventError(category, event_name)
        for listener in self.registry.subscribers(category):
            getattr(listener, event_name)(*args)

    def relay(self, category: type[Listener]) -> _CategoryRelay:
        """Return an object exposing *category*'s hooks as fan-out calls.

        Usage::

            dispatcher.relay(NavigationEventListener).before_navigate_to(
                url, driver
            )
        """
        relay = self._relays.get(category)
        if relay is None:
            relay = _CategoryRelay(self, category)
            self._relays[category] = relay
        return relay


class _CategoryRelay:
    """Stand-in for one listener interface that forwards to a dispatcher."""

    def __init__(self, dispatcher: Dispatcher, category: type[Listener]):
        self._dispatcher = dispatcher
        self._category = category
        self._names = frozenset(event_names(category))

    def __getattr__(self, name: str) -> Callable[..., None]:
        if name not in self._names:
            raise UnknownEventError(self._category, name)

        def fan_out(*args: Any) -> None:
            self._dispatcher.dispatch(self._category, name, *args)

        fan_out.__name__ = name
        return fan_out

    def __repr__(self) -> str:
        return f"<relay for {self._category.__name__}>"
