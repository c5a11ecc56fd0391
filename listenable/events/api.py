"""Listener interfaces, one per category of intercepted operation.

A listener opts into a category by subclassing its interface and overriding
the hooks it cares about; every hook has a no-op default, so a listener never
has to implement a full interface. A single listener may subclass any number
of interfaces, and new categories can be added without touching existing
listeners.

Usage::

    class Audit(NavigationEventListener, ListensToException):
        def before_navigate_to(self, url, driver):
            print("going to", url)

        def on_exception(self, throwable, driver):
            print("failed:", throwable)

    driver = create_intercepted_root(raw_driver, [Audit()])

Hooks receive the raw (unproxied) driver and targets, so calling back into
them from a hook does not fire further events.
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from listenable.common.roles import (
        Alert,
        By,
        Dimension,
        OutputType,
        Point,
        ScreenOrientation,
        WebElement,
        Window,
    )


class Listener:
    """Marker base class of every listener interface."""


class NavigationEventListener(Listener):
    def before_navigate_to(self, url: str, driver: Any) -> None:
        """Called before ``get(url)`` or ``navigate().to(url)``."""

    def after_navigate_to(self, url: str, driver: Any) -> None:
        """Called after ``get(url)`` or ``navigate().to(url)``."""

    def before_navigate_back(self, driver: Any) -> None:
        """Called before ``navigate().back()``."""

    def after_navigate_back(self, driver: Any) -> None:
        """Called after ``navigate().back()``."""

    def before_navigate_forward(self, driver: Any) -> None:
        """Called before ``navigate().forward()``."""

    def after_navigate_forward(self, driver: Any) -> None:
        """Called after ``navigate().forward()``."""

    def before_navigate_refresh(self, driver: Any) -> None:
        """Called before ``navigate().refresh()``."""

    def after_navigate_refresh(self, driver: Any) -> None:
        """Called after ``navigate().refresh()``."""


class SearchingEventListener(Listener):
    def before_find_by(
        self, by: By, element: WebElement | None, driver: Any
    ) -> None:
        """Called before ``find_element``/``find_elements``.

        Args:
            by: The locator being searched for.
            element: The element the search starts from, or None when
                searching from the driver.
            driver: The raw driver.
        """

    def after_find_by(
        self, by: By, element: WebElement | None, driver: Any
    ) -> None:
        """Called after ``find_element``/``find_elements`` return."""


class ElementEventListener(Listener):
    def before_click_on(self, element: WebElement, driver: Any) -> None:
        pass

    def after_click_on(self, element: WebElement, driver: Any) -> None:
        pass

    def before_change_value_of(
        self,
        element: WebElement,
        driver: Any,
        keys_to_send: Sequence[str] | None = None,
    ) -> None:
        """Called before ``send_keys``, ``clear``, ``set_value`` or
        ``replace_value``.

        ``keys_to_send`` is None for ``clear``.
        """

    def after_change_value_of(
        self,
        element: WebElement,
        driver: Any,
        keys_to_send: Sequence[str] | None = None,
    ) -> None:
        pass

    def before_get_text(self, element: WebElement, driver: Any) -> None:
        pass

    def after_get_text(
        self, element: WebElement, driver: Any, text: str
    ) -> None:
        pass


class JavaScriptEventListener(Listener):
    def before_script(self, script: str, driver: Any) -> None:
        pass

    def after_script(self, script: str, driver: Any) -> None:
        pass


class AlertEventListener(Listener):
    def before_alert_accept(self, driver: Any, alert: Alert) -> None:
        pass

    def after_alert_accept(self, driver: Any, alert: Alert) -> None:
        pass

    def before_alert_dismiss(self, driver: Any, alert: Alert) -> None:
        pass

    def after_alert_dismiss(self, driver: Any, alert: Alert) -> None:
        pass

    def before_alert_send_keys(
        self, driver: Any, alert: Alert, keys: str
    ) -> None:
        pass

    def after_alert_send_keys(
        self, driver: Any, alert: Alert, keys: str
    ) -> None:
        pass


class WindowEventListener(Listener):
    def before_window_change_size(
        self, driver: Any, window: Window, target_size: Dimension
    ) -> None:
        pass

    def after_window_change_size(
        self, driver: Any, window: Window, target_size: Dimension
    ) -> None:
        pass

    def before_window_is_moved(
        self, driver: Any, window: Window, target_point: Point
    ) -> None:
        pass

    def after_window_is_moved(
        self, driver: Any, window: Window, target_point: Point
    ) -> None:
        pass

    def before_window_is_maximized(self, driver: Any, window: Window) -> None:
        pass

    def after_window_is_maximized(self, driver: Any, window: Window) -> None:
        pass

    def before_switch_to_window(self, window_name: str, driver: Any) -> None:
        pass

    def after_switch_to_window(self, window_name: str, driver: Any) -> None:
        pass


class ContextEventListener(Listener):
    def before_switching_to_context(self, driver: Any, context: str) -> None:
        pass

    def after_switching_to_context(self, driver: Any, context: str) -> None:
        pass


class RotationEventListener(Listener):
    def before_rotation(
        self, driver: Any, orientation: ScreenOrientation
    ) -> None:
        pass

    def after_rotation(
        self, driver: Any, orientation: ScreenOrientation
    ) -> None:
        pass


class ScreenshotEventListener(Listener):
    def before_get_screenshot_as(self, output_type: OutputType) -> None:
        pass

    def after_get_screenshot_as(
        self, output_type: OutputType, screenshot: bytes | str
    ) -> None:
        pass


class ListensToException(Listener):
    def on_exception(self, throwable: BaseException, driver: Any) -> None:
        """Called once per failing call with the extracted root cause."""


CATEGORIES: tuple[type[Listener], ...] = (
    NavigationEventListener,
    SearchingEventListener,
    ElementEventListener,
    JavaScriptEventListener,
    AlertEventListener,
    WindowEventListener,
    ContextEventListener,
    RotationEventListener,
    ScreenshotEventListener,
    ListensToException,
)


class WebDriverEventListener(*CATEGORIES):  # type: ignore[misc]
    """Convenience base implementing every category."""


def event_names(category: type[Listener]) -> tuple[str, ...]:
    """Return the hook names *category* declares, in declaration order.

    Args:
        category: One of the interfaces in ``CATEGORIES``.

    Returns:
        Names of the public methods defined directly on the interface.
    """
    return tuple(
        name
        for name, member in vars(category).items()
        if not name.startswith("_") and inspect.isfunction(member)
    )


def implemented_categories(listener: object) -> list[type[Listener]]:
    """Return the categories *listener* (an instance or class) opts into."""
    cls = listener if isinstance(listener, type) else type(listener)
    return [category for category in CATEGORIES if issubclass(cls, category)]
