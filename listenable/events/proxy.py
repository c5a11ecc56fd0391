"""Interception layer: transparent proxies that fire listener events.

An ``Interceptor`` owns everything one intercepted session shares: the raw
root driver, the listener registry and its dispatcher, the descriptor table
and a cache of the proxies it has handed out. ``EventFiringProxy`` wraps a
single target and routes every method call through ``Interceptor.invoke``:

1. fire the ``before`` hook of every matching descriptor;
2. call the real method, exactly once;
3. fire the ``after`` hooks (which may look at the result);
4. rewrap the result so objects derived from it are intercepted too.

Any failure along the way, whether raised by the operation, a listener or
the rewrapping, is reduced to its root cause, reported once to the
``ListensToException`` listeners, and re-raised as that root cause.

Listeners receive raw objects, never proxies, so a hook that calls back
into the driver does not fire events of its own. Proxies passed as call
arguments are unwrapped before they reach the real method.
"""

from __future__ import annotations

import functools
import inspect
import logging
import weakref
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from listenable.common.exceptions import get_root_cause
from listenable.config import InterceptionSettings
from listenable.events.api import Listener, ListensToException
from listenable.events.classifier import ROLE_ORDER, Role, classify
from listenable.events.descriptors import (
    DEFAULT_DESCRIPTORS,
    CategoryEventDescriptor,
    Invocation,
    match,
)
from listenable.events.dispatcher import Dispatcher, ListenerRegistry

logger = logging.getLogger(__name__)

_REWRAPPED_CONTAINERS = (list, tuple, set, frozenset)


class _UnreportedFailure(Exception):
    """Carries a hook failure that must bypass exception listeners."""

    def __init__(self, root: BaseException) -> None:
        self.root = root
        super().__init__(str(root))


class Interceptor:
    """Shared state and call logic of one intercepted session.

    Attributes:
        driver: The raw root driver handed to every listener.
        settings: Validated session settings.
        registry: Listeners of this session, in registration order.
        dispatcher: Fans events out over ``registry``.
        descriptors: Operation-to-event rules, in firing order.
    """

    def __init__(
        self,
        driver: Any,
        listeners: Iterable[Listener] = (),
        settings: InterceptionSettings | None = None,
        descriptors: Sequence[CategoryEventDescriptor] = DEFAULT_DESCRIPTORS,
        roles: Sequence[Role] = ROLE_ORDER,
    ) -> None:
        self.driver = driver
        self.settings = settings or InterceptionSettings()
        self.registry = ListenerRegistry(listeners)
        self.dispatcher = Dispatcher(self.registry)
        self.descriptors = tuple(descriptors)
        self.roles = tuple(roles)
        # Keyed by id(target). Each proxy keeps its target alive, so an id
        # cannot be reused while its entry exists.
        self._proxies: weakref.WeakValueDictionary[int, EventFiringProxy] = (
            weakref.WeakValueDictionary()
        )

    def add_listeners(self, listeners: Iterable[Listener]) -> None:
        self.registry.add(listeners)

    # -------------------------------------------------------------------------
    # Wrapping
    # -------------------------------------------------------------------------

    def classify(self, obj: object) -> Role | None:
        return classify(obj, self.roles)

    def wrap(self, target: Any, role: Role | None = None) -> EventFiringProxy:
        """Return the proxy for *target*, creating it on first use.

        Raises:
            TypeError: If *target* plays none of the recognised roles.
        """
        if isinstance(target, EventFiringProxy):
            return target
        cached = self._proxies.get(id(target))
        if cached is not None:
            return cached
        if role is None:
            role = self.classify(target)
        if role is None:
            raise TypeError(
                f"{type(target).__name__} object is not interceptable"
            )
        proxy = EventFiringProxy(target, role, self)
        self._proxies[id(target)] = proxy
        logger.debug("Wrapped %s as %s", type(target).__name__, role.name)
        return proxy

    def rewrap(self, value: Any) -> Any:
        """Replace interceptable values in a call result by their proxies.

        None and non-interceptable values come back unchanged; lists,
        tuples, sets and dict values are rewrapped element by element into
        a new container of the same type.
        """
        return self._rewrap(value, set())

    def _rewrap(self, value: Any, in_progress: set[int]) -> Any:
        if value is None or isinstance(value, EventFiringProxy):
            return value
        if isinstance(value, (str, bytes, bytearray)):
            return value
        if isinstance(value, (*_REWRAPPED_CONTAINERS, dict)):
            if id(value) in in_progress:
                return value
            in_progress.add(id(value))
            try:
                return self._rewrap_container(value, in_progress)
            finally:
                in_progress.discard(id(value))
        role = self.classify(value)
        if role is None:
            return value
        return self.wrap(value, role)

    def _rewrap_container(self, value: Any, in_progress: set[int]) -> Any:
        if isinstance(value, dict):
            return _rebuild(
                value,
                {k: self._rewrap(v, in_progress) for k, v in value.items()},
            )
        return _rebuild(value, [self._rewrap(v, in_progress) for v in value])

    # -------------------------------------------------------------------------
    # Calls
    # -------------------------------------------------------------------------

    def invoke(
        self,
        proxy: EventFiringProxy,
        method: str,
        func: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> Any:
        """Run one intercepted call on *proxy*'s target.

        Args:
            proxy: The proxy the caller invoked the method on.
            method: Name of the invoked method.
            func: The target's bound method.
            args: Positional arguments as passed by the caller.
            kwargs: Keyword arguments as passed by the caller.

        Returns:
            The rewrapped result of the real call.
        """
        try:
            call_args = tuple(unwrap_argument(a) for a in args)
            call_kwargs = {k: unwrap_argument(v) for k, v in kwargs.items()}
            invocation = Invocation(
                target=proxy._target,
                role=proxy._role,
                method=method,
                args=call_args,
                kwargs=call_kwargs,
                driver=self.driver,
            )
            matched = match(self.descriptors, invocation)
            for descriptor in matched:
                self._fire(
                    descriptor,
                    descriptor.before,
                    descriptor.arguments_before(invocation),
                )
            result = func(*call_args, **call_kwargs)
            invocation = replace(invocation, result=result)
            for descriptor in matched:
                self._fire(
                    descriptor,
                    descriptor.after,
                    descriptor.arguments_after(invocation),
                )
            rewrapped = self.rewrap(result)
        except _UnreportedFailure as unreported:
            failure = unreported.root
        except Exception as exc:
            failure = self.report_failure(exc)
        else:
            return rewrapped
        raise failure

    def read_attribute(self, proxy: EventFiringProxy, name: str) -> Any:
        """Resolve a non-method attribute of *proxy*'s target.

        Methods come back intercepted and interceptable values come back
        wrapped. Containers are returned as they are, so mutating them still
        mutates the target's state.

        ``AttributeError`` propagates untouched so ``hasattr`` keeps working;
        any other failure of a property getter is handled like a failed call.
        """
        try:
            value = getattr(proxy._target, name)
            if inspect.isroutine(value):
                return _intercepted(proxy, name, value)
            if isinstance(value, EventFiringProxy):
                return value
            role = self.classify(value)
            return value if role is None else self.wrap(value, role)
        except AttributeError:
            raise
        except Exception as exc:
            failure = self.report_failure(exc)
        raise failure

    def report_failure(self, exc: BaseException) -> BaseException:
        """Reduce *exc* to its root cause and tell exception listeners.

        If an exception listener itself fails, that failure (reduced to its
        own root cause) replaces the original one; it is not reported again.

        Returns:
            The exception the caller should see.
        """
        depth = self.settings.max_unwrap_depth
        root = get_root_cause(exc, depth)
        logger.debug(
            "Intercepted call failed with %s: %s", type(root).__name__, root
        )
        try:
            self.dispatcher.dispatch(
                ListensToException, "on_exception", root, self.driver
            )
        except Exception as listener_exc:
            return get_root_cause(listener_exc, depth)
        return root

    def _fire(
        self,
        descriptor: CategoryEventDescriptor,
        event: str,
        arguments: tuple[Any, ...],
    ) -> None:
        try:
            self.dispatcher.dispatch(descriptor.category, event, *arguments)
        except Exception as exc:
            if descriptor.around:
                raise
            raise _UnreportedFailure(
                get_root_cause(exc, self.settings.max_unwrap_depth)
            ) from None


class EventFiringProxy:
    """Transparent stand-in for one interceptable object.

    Method calls go through the owning ``Interceptor``; plain attribute
    reads return rewrapped values; attribute writes go to the target.
    Equality and hashing follow the target.
    """

    __slots__ = ("_target", "_role", "_interceptor", "__weakref__")

    def __init__(
        self, target: Any, role: Role, interceptor: Interceptor
    ) -> None:
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_role", role)
        object.__setattr__(self, "_interceptor", interceptor)

    def __getattr__(self, name: str) -> Any:
        if name in EventFiringProxy.__slots__:
            # Slots not yet set, e.g. on an instance built by copy.
            raise AttributeError(name)
        return self._interceptor.read_attribute(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._target, name, unwrap_argument(value))

    def __delattr__(self, name: str) -> None:
        delattr(self._target, name)

    def __dir__(self) -> Iterable[str]:
        return dir(self._target)

    def __repr__(self) -> str:
        return f"<EventFiringProxy {self._role.name} {self._target!r}>"

    def __eq__(self, other: object) -> bool:
        return bool(self._target == unwrap(other))

    def __hash__(self) -> int:
        return hash(self._target)

    def __enter__(self) -> Any:
        return self._call_special("__enter__")

    def __exit__(self, *exc_info: Any) -> Any:
        return self._call_special("__exit__", *exc_info)

    def _call_special(self, name: str, *args: Any) -> Any:
        func = getattr(self._target, name, None)
        if func is None:
            raise TypeError(
                f"'{type(self._target).__name__}' object does not support "
                "the context manager protocol"
            )
        return self._interceptor.invoke(self, name, func, args, {})


def _intercepted(
    proxy: EventFiringProxy, name: str, func: Callable[..., Any]
) -> Callable[..., Any]:
    @functools.wraps(func)
    def call(*args: Any, **kwargs: Any) -> Any:
        return proxy._interceptor.invoke(proxy, name, func, args, kwargs)

    return call


def _rebuild(original: Any, items: Any) -> Any:
    """Build a container of *original*'s type holding *items*."""
    if isinstance(original, tuple) and hasattr(original, "_fields"):
        return type(original)._make(items)
    try:
        return type(original)(items)
    except TypeError:
        # Subclasses with their own constructor signature.
        for base in (*_REWRAPPED_CONTAINERS, dict):
            if isinstance(original, base):
                return base(items)
        raise


def unwrap(obj: Any) -> Any:
    """Return the raw target behind *obj* if it is a proxy, else *obj*."""
    if isinstance(obj, EventFiringProxy):
        return obj._target
    return obj


def unwrap_argument(value: Any) -> Any:
    """Unwrap a call argument, looking one level into lists and tuples."""
    if isinstance(value, EventFiringProxy):
        return value._target
    if type(value) in (list, tuple) and any(
        isinstance(v, EventFiringProxy) for v in value
    ):
        return type(value)(unwrap(v) for v in value)
    return value


def interceptor_of(proxy: EventFiringProxy) -> Interceptor:
    return proxy._interceptor
