"""Entry points for building intercepted sessions.

Example::

    from listenable.events.factory import add_listeners, create_intercepted_root

    driver = create_intercepted_root(raw_driver, [AuditListener()])
    add_listeners(driver, [ScreenshotOnFailure()])

    element = driver.find_element(By.id("login"))  # also intercepted
    element.click()
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from importlib.metadata import entry_points
from typing import Any

from listenable.common.exceptions import ListenerRegistrationError
from listenable.config import (
    DEFAULT_ENTRY_POINT_GROUP,
    InterceptionSettings,
)
from listenable.events.api import Listener
from listenable.events.listeners import LoggingListener
from listenable.events.proxy import (
    EventFiringProxy,
    Interceptor,
    interceptor_of,
    unwrap,
)

logger = logging.getLogger(__name__)

__all__ = [
    "add_listeners",
    "create_intercepted_root",
    "is_intercepted",
    "load_entry_point_listeners",
    "unwrap",
]


def create_intercepted_root(
    target: Any,
    listeners: Iterable[Listener] = (),
    settings: InterceptionSettings | None = None,
    driver: Any = None,
) -> Any:
    """Wrap *target* so that its operations fire listener events.

    Args:
        target: The object to intercept, usually a driver.
        listeners: Listeners registered first, in order.
        settings: Session settings; defaults to ``InterceptionSettings()``.
        driver: The raw driver handed to listeners; defaults to *target*.

    Returns:
        A proxy with the same operation surface as *target*.

    Raises:
        TypeError: If *target* plays none of the recognised roles.
        ListenerRegistrationError: If a listener is not a ``Listener``.
    """
    settings = settings or InterceptionSettings()
    target = unwrap(target)
    initial: list[Listener] = []
    if settings.log_events:
        initial.append(
            LoggingListener(level=logging.getLevelName(settings.log_level))
        )
    initial.extend(listeners)
    if settings.use_entry_points:
        initial.extend(load_entry_point_listeners(settings.entry_point_group))

    interceptor = Interceptor(
        unwrap(driver) if driver is not None else target,
        initial,
        settings=settings,
    )
    return interceptor.wrap(target)


def add_listeners(proxy: Any, listeners: Iterable[Listener]) -> None:
    """Append *listeners* to the session *proxy* belongs to.

    Any proxy of the session works: the root or one derived from it.

    Raises:
        TypeError: If *proxy* is not an intercepted object.
    """
    if not isinstance(proxy, EventFiringProxy):
        raise TypeError(f"{type(proxy).__name__} object is not intercepted")
    interceptor_of(proxy).add_listeners(listeners)


def is_intercepted(obj: Any) -> bool:
    return isinstance(obj, EventFiringProxy)


def load_entry_point_listeners(
    group: str = DEFAULT_ENTRY_POINT_GROUP,
) -> list[Listener]:
    """Instantiate the listener classes installed packages advertise.

    Each entry point in *group* must name a ``Listener`` subclass with a
    no-argument constructor. Entry points are loaded in name order.

    Raises:
        ListenerRegistrationError: If an entry point names anything else.
    """
    loaded: list[Listener] = []
    for ep in sorted(entry_points(group=group), key=lambda e: e.name):
        factory = ep.load()
        if not (isinstance(factory, type) and issubclass(factory, Listener)):
            raise ListenerRegistrationError(factory)
        loaded.append(factory())
        logger.debug("Loaded listener %s from entry point %s", factory, ep)
    return loaded
