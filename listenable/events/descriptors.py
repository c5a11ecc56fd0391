"""Declarative mapping from intercepted operations to listener events.

Each ``CategoryEventDescriptor`` says: when a method named in ``methods`` is
called on an object playing one of ``roles``, fire ``before`` on the
``category`` listeners first and ``after`` once the operation returns, with
arguments computed from the ``Invocation``. Matching is additive: one call
may match several descriptors, and calls that match none still get the
generic exception handling and result rewrapping of the interception layer.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from listenable.events.api import (
    AlertEventListener,
    ContextEventListener,
    ElementEventListener,
    JavaScriptEventListener,
    Listener,
    NavigationEventListener,
    RotationEventListener,
    ScreenshotEventListener,
    SearchingEventListener,
    WindowEventListener,
    event_names,
)
from listenable.events.classifier import Role


@dataclass(frozen=True)
class Invocation:
    """One call on an intercepted object, as seen by argument extractors.

    Attributes:
        target: The raw object the method was called on.
        role: The role the target plays.
        method: Name of the called method.
        args: Positional arguments, with proxies already unwrapped.
        kwargs: Keyword arguments, with proxies already unwrapped.
        driver: The raw root driver of the session.
        result: The operation's return value (after hooks only).
    """

    target: Any
    role: Role
    method: str
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)
    driver: Any = None
    result: Any = None

    def arg(self, index: int, name: str, default: Any = None) -> Any:
        """Return a call argument by position, falling back to keyword."""
        if len(self.args) > index:
            return self.args[index]
        return self.kwargs.get(name, default)


ArgExtractor = Callable[[Invocation], tuple[Any, ...]]


@dataclass(frozen=True)
class CategoryEventDescriptor:
    """Rule mapping an operation pattern to a before/after event pair.

    Attributes:
        name: Short identifier, used in logs and the CLI.
        category: Listener interface notified.
        roles: Target roles the rule applies to.
        methods: Method names the rule applies to.
        before: Hook fired before the operation.
        after: Hook fired after the operation returns.
        before_args: Computes the before-hook arguments.
        after_args: Computes the after-hook arguments; defaults to
            ``before_args``.
        when: Optional extra predicate on the invocation.
        around: If False, a failing hook is re-raised without being
            reported to exception listeners.
    """

    name: str
    category: type[Listener]
    roles: frozenset[Role]
    methods: frozenset[str]
    before: str
    after: str
    before_args: ArgExtractor
    after_args: ArgExtractor | None = None
    when: Callable[[Invocation], bool] | None = None
    around: bool = True

    def __post_init__(self) -> None:
        declared = event_names(self.category)
        for hook in (self.before, self.after):
            if hook not in declared:
                raise ValueError(
                    f"Descriptor '{self.name}': {self.category.__name__} "
                    f"declares no event named '{hook}'"
                )

    def matches(self, invocation: Invocation) -> bool:
        if invocation.role not in self.roles:
            return False
        if invocation.method not in self.methods:
            return False
        return self.when is None or self.when(invocation)

    def arguments_before(self, invocation: Invocation) -> tuple[Any, ...]:
        return self.before_args(invocation)

    def arguments_after(self, invocation: Invocation) -> tuple[Any, ...]:
        extractor = self.after_args or self.before_args
        return extractor(invocation)


def match(
    descriptors: Iterable[CategoryEventDescriptor], invocation: Invocation
) -> list[CategoryEventDescriptor]:
    """Return every descriptor applying to *invocation*, in table order."""
    return [d for d in descriptors if d.matches(invocation)]


def _descriptor(
    name: str,
    category: type[Listener],
    roles: Iterable[Role],
    methods: Iterable[str],
    event: str,
    before_args: ArgExtractor,
    after_args: ArgExtractor | None = None,
    when: Callable[[Invocation], bool] | None = None,
) -> CategoryEventDescriptor:
    return CategoryEventDescriptor(
        name=name,
        category=category,
        roles=frozenset(roles),
        methods=frozenset(methods),
        before=f"before_{event}",
        after=f"after_{event}",
        before_args=before_args,
        after_args=after_args,
        when=when,
    )


# =============================================================================
# Argument extraction rules
# =============================================================================


def _url_and_driver(inv: Invocation) -> tuple[Any, ...]:
    return (str(inv.arg(0, "url")), inv.driver)


def _driver_only(inv: Invocation) -> tuple[Any, ...]:
    return (inv.driver,)


def _search(inv: Invocation) -> tuple[Any, ...]:
    element = inv.target if inv.role is Role.ELEMENT else None
    return (inv.arg(0, "by"), element, inv.driver)


def _element_and_driver(inv: Invocation) -> tuple[Any, ...]:
    return (inv.target, inv.driver)


def _keys_sent(inv: Invocation) -> Sequence[str] | None:
    if inv.method == "clear":
        return None
    if inv.method == "send_keys":
        return tuple(inv.args) or tuple(inv.kwargs.get("keys_to_send", ()))
    return (inv.arg(0, "value"),)


def _change_value(inv: Invocation) -> tuple[Any, ...]:
    return (inv.target, inv.driver, _keys_sent(inv))


def _text_after(inv: Invocation) -> tuple[Any, ...]:
    return (inv.target, inv.driver, inv.result)


def _script(inv: Invocation) -> tuple[Any, ...]:
    return (str(inv.arg(0, "script")), inv.driver)


def _driver_and_target(inv: Invocation) -> tuple[Any, ...]:
    return (inv.driver, inv.target)


def _alert_keys(inv: Invocation) -> tuple[Any, ...]:
    return (inv.driver, inv.target, str(inv.arg(0, "keys_to_send")))


def _window_size(inv: Invocation) -> tuple[Any, ...]:
    return (inv.driver, inv.target, inv.arg(0, "target_size"))


def _window_position(inv: Invocation) -> tuple[Any, ...]:
    return (inv.driver, inv.target, inv.arg(0, "target_position"))


def _window_name(inv: Invocation) -> tuple[Any, ...]:
    return (inv.arg(0, "name_or_handle"), inv.driver)


def _rotation(inv: Invocation) -> tuple[Any, ...]:
    return (inv.driver, inv.arg(0, "orientation"))


def _context(inv: Invocation) -> tuple[Any, ...]:
    return (inv.driver, str(inv.arg(0, "name")))


def _has_context_name(inv: Invocation) -> bool:
    return inv.arg(0, "name") is not None


def _output_type(inv: Invocation) -> tuple[Any, ...]:
    return (inv.arg(0, "output_type"),)


def _screenshot(inv: Invocation) -> tuple[Any, ...]:
    return (inv.arg(0, "output_type"), inv.result)


DEFAULT_DESCRIPTORS: tuple[CategoryEventDescriptor, ...] = (
    _descriptor(
        "navigate-to",
        NavigationEventListener,
        [Role.DRIVER, Role.NAVIGATION],
        ["get", "to"],
        "navigate_to",
        _url_and_driver,
    ),
    _descriptor(
        "navigate-back",
        NavigationEventListener,
        [Role.NAVIGATION],
        ["back"],
        "navigate_back",
        _driver_only,
    ),
    _descriptor(
        "navigate-forward",
        NavigationEventListener,
        [Role.NAVIGATION],
        ["forward"],
        "navigate_forward",
        _driver_only,
    ),
    _descriptor(
        "navigate-refresh",
        NavigationEventListener,
        [Role.NAVIGATION],
        ["refresh"],
        "navigate_refresh",
        _driver_only,
    ),
    _descriptor(
        "search",
        SearchingEventListener,
        [Role.DRIVER, Role.ELEMENT],
        ["find_element", "find_elements"],
        "find_by",
        _search,
    ),
    _descriptor(
        "click",
        ElementEventListener,
        [Role.ELEMENT],
        ["click"],
        "click_on",
        _element_and_driver,
    ),
    _descriptor(
        "change-value",
        ElementEventListener,
        [Role.ELEMENT],
        ["send_keys", "clear", "set_value", "replace_value"],
        "change_value_of",
        _change_value,
    ),
    _descriptor(
        "get-text",
        ElementEventListener,
        [Role.ELEMENT],
        ["get_text"],
        "get_text",
        _element_and_driver,
        after_args=_text_after,
    ),
    _descriptor(
        "script",
        JavaScriptEventListener,
        [Role.DRIVER],
        ["execute_script", "execute_async_script"],
        "script",
        _script,
    ),
    _descriptor(
        "alert-accept",
        AlertEventListener,
        [Role.ALERT],
        ["accept"],
        "alert_accept",
        _driver_and_target,
    ),
    _descriptor(
        "alert-dismiss",
        AlertEventListener,
        [Role.ALERT],
        ["dismiss"],
        "alert_dismiss",
        _driver_and_target,
    ),
    _descriptor(
        "alert-send-keys",
        AlertEventListener,
        [Role.ALERT],
        ["send_keys"],
        "alert_send_keys",
        _alert_keys,
    ),
    _descriptor(
        "window-set-size",
        WindowEventListener,
        [Role.WINDOW],
        ["set_size"],
        "window_change_size",
        _window_size,
    ),
    _descriptor(
        "window-set-position",
        WindowEventListener,
        [Role.WINDOW],
        ["set_position"],
        "window_is_moved",
        _window_position,
    ),
    _descriptor(
        "window-maximize",
        WindowEventListener,
        [Role.WINDOW],
        ["maximize"],
        "window_is_maximized",
        _driver_and_target,
    ),
    _descriptor(
        "switch-to-window",
        WindowEventListener,
        [Role.TARGET_LOCATOR],
        ["window"],
        "switch_to_window",
        _window_name,
    ),
    _descriptor(
        "rotation",
        RotationEventListener,
        [Role.DRIVER],
        ["rotate"],
        "rotation",
        _rotation,
    ),
    _descriptor(
        "context",
        ContextEventListener,
        [Role.DRIVER],
        ["context"],
        "switching_to_context",
        _context,
        when=_has_context_name,
    ),
    _descriptor(
        "screenshot",
        ScreenshotEventListener,
        [Role.DRIVER, Role.ELEMENT],
        ["get_screenshot_as"],
        "get_screenshot_as",
        _output_type,
        after_args=_screenshot,
    ),
)
