"""Ready-made listeners.

``LoggingListener`` writes every event to the standard logging system, and
``RecordingListener`` keeps events in memory for later inspection.

Example::

    from listenable.events.factory import create_intercepted_root
    from listenable.events.listeners import RecordingListener

    recorder = RecordingListener()
    driver = create_intercepted_root(raw_driver, [recorder])
    driver.get("https://example.com")
    print(recorder.names())  # ['before_navigate_to', 'after_navigate_to']
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from listenable.events.api import (
    CATEGORIES,
    WebDriverEventListener,
    event_names,
)

logger = logging.getLogger(__name__)


def _forward_all_events(
    cls: type[WebDriverEventListener],
) -> type[WebDriverEventListener]:
    """Route every declared hook of *cls* to ``cls._record``."""

    def make_hook(name: str) -> Callable[..., None]:
        def hook(self: Any, *args: Any) -> None:
            self._record(name, args)

        hook.__name__ = name
        return hook

    for category in CATEGORIES:
        for name in event_names(category):
            if name not in vars(cls):
                setattr(cls, name, make_hook(name))
    return cls


@_forward_all_events
class LoggingListener(WebDriverEventListener):
    """Logs every event; exceptions are logged at WARNING.

    Args:
        level: Logging level for regular events.
        log: Logger to write to (defaults to this module's logger).
    """

    def __init__(
        self, level: int = logging.INFO, log: logging.Logger | None = None
    ) -> None:
        self.level = level
        self.log = log or logger

    def _record(self, name: str, args: tuple[Any, ...]) -> None:
        self.log.log(self.level, "%s(%s)", name, _describe(args))

    def on_exception(self, throwable: BaseException, driver: Any) -> None:
        self.log.warning(
            "on_exception: %s: %s", type(throwable).__name__, throwable
        )


@dataclass(frozen=True)
class RecordedEvent:
    """One event seen by a ``RecordingListener``."""

    name: str
    args: tuple[Any, ...]


@_forward_all_events
class RecordingListener(WebDriverEventListener):
    """Keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[RecordedEvent] = []

    def _record(self, name: str, args: tuple[Any, ...]) -> None:
        self.events.append(RecordedEvent(name, args))

    def on_exception(self, throwable: BaseException, driver: Any) -> None:
        self._record("on_exception", (throwable, driver))

    def names(self) -> list[str]:
        return [event.name for event in self.events]

    def clear(self) -> None:
        self.events.clear()


def _describe(args: tuple[Any, ...]) -> str:
    parts = []
    for arg in args:
        text = repr(arg) if isinstance(arg, str) else str(arg)
        if len(text) > 80:
            text = text[:77] + "..."
        parts.append(text)
    return ", ".join(parts)
