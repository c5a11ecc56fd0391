"""Capability roles for interceptable automation objects.

This module describes, as structural protocols, the operation surface of every
object the interception layer knows how to proxy: the driver itself, the
elements it finds, and the helper handles it hands out (navigation, alerts,
windows, options and the target locator). The interception layer never
defines these objects; any class exposing the right methods belongs to the
role, whatever its base classes.

It also holds the small value objects listeners receive as hook arguments.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class By:
    """A locator handed to ``find_element``/``find_elements``.

    The interception layer treats locators as opaque values; it only passes
    them through to search listeners. The bundled drivers understand the
    strategies built by the class methods below.

    Attributes:
        strategy: Locator strategy name (``"id"``, ``"xpath"``, ...).
        value: The selector or key for the strategy.
    """

    strategy: str
    value: str

    @classmethod
    def id(cls, value: str) -> By:
        return cls("id", value)

    @classmethod
    def name(cls, value: str) -> By:
        return cls("name", value)

    @classmethod
    def tag_name(cls, value: str) -> By:
        return cls("tag name", value)

    @classmethod
    def class_name(cls, value: str) -> By:
        return cls("class name", value)

    @classmethod
    def xpath(cls, value: str) -> By:
        return cls("xpath", value)

    @classmethod
    def css_selector(cls, value: str) -> By:
        return cls("css selector", value)

    @classmethod
    def link_text(cls, value: str) -> By:
        return cls("link text", value)

    def __str__(self) -> str:
        return f"By.{self.strategy}: {self.value}"


@dataclass(frozen=True)
class Dimension:
    """Width and height of a window or element, in pixels."""

    width: int
    height: int


@dataclass(frozen=True)
class Point:
    """A screen position, in pixels."""

    x: int
    y: int


class ScreenOrientation(Enum):
    """Device orientation accepted by ``Rotatable.rotate``."""

    LANDSCAPE = "LANDSCAPE"
    PORTRAIT = "PORTRAIT"


class OutputType(Enum):
    """Format requested from ``TakesScreenshot.get_screenshot_as``."""

    BYTES = "bytes"
    BASE64 = "base64"


# =============================================================================
# Roles
# =============================================================================


@runtime_checkable
class WebDriver(Protocol):
    """The root automation session."""

    def get(self, url: str) -> None: ...

    def get_current_url(self) -> str | None: ...

    def get_title(self) -> str | None: ...

    def find_element(self, by: By) -> WebElement: ...

    def find_elements(self, by: By) -> Sequence[WebElement]: ...

    def get_page_source(self) -> str: ...

    def close(self) -> None: ...

    def quit(self) -> None: ...

    def get_window_handles(self) -> set[str]: ...

    def get_window_handle(self) -> str: ...

    def switch_to(self) -> TargetLocator: ...

    def navigate(self) -> Navigation: ...

    def manage(self) -> Options: ...


@runtime_checkable
class WebElement(Protocol):
    """An element found by a driver or by another element."""

    def click(self) -> None: ...

    def submit(self) -> None: ...

    def send_keys(self, *keys_to_send: str) -> None: ...

    def clear(self) -> None: ...

    def get_tag_name(self) -> str: ...

    def get_attribute(self, name: str) -> str | None: ...

    def get_text(self) -> str: ...

    def is_displayed(self) -> bool: ...

    def find_element(self, by: By) -> WebElement: ...

    def find_elements(self, by: By) -> Sequence[WebElement]: ...


@runtime_checkable
class Navigation(Protocol):
    """Browser history handle returned by ``WebDriver.navigate``."""

    def back(self) -> None: ...

    def forward(self) -> None: ...

    def to(self, url: str) -> None: ...

    def refresh(self) -> None: ...


@runtime_checkable
class Alert(Protocol):
    """A modal dialog returned by ``TargetLocator.alert``."""

    def accept(self) -> None: ...

    def dismiss(self) -> None: ...

    def get_text(self) -> str: ...

    def send_keys(self, keys_to_send: str) -> None: ...


@runtime_checkable
class Window(Protocol):
    """Window geometry handle returned by ``Options.window``."""

    def get_size(self) -> Dimension: ...

    def set_size(self, target_size: Dimension) -> None: ...

    def get_position(self) -> Point: ...

    def set_position(self, target_position: Point) -> None: ...

    def maximize(self) -> None: ...


@runtime_checkable
class Options(Protocol):
    """Session options handle returned by ``WebDriver.manage``."""

    def add_cookie(self, cookie: dict[str, Any]) -> None: ...

    def delete_cookie_named(self, name: str) -> None: ...

    def delete_all_cookies(self) -> None: ...

    def get_cookies(self) -> list[dict[str, Any]]: ...

    def window(self) -> Window: ...


@runtime_checkable
class TargetLocator(Protocol):
    """Frame/window/alert switcher returned by ``WebDriver.switch_to``."""

    def frame(self, frame_reference: int | str | WebElement) -> WebDriver: ...

    def parent_frame(self) -> WebDriver: ...

    def window(self, name_or_handle: str) -> WebDriver: ...

    def default_content(self) -> WebDriver: ...

    def active_element(self) -> WebElement: ...

    def alert(self) -> Alert: ...


# =============================================================================
# Driver capabilities
# =============================================================================
# These are not roles of their own; drivers may implement them in addition to
# WebDriver and the interception layer reports their operations as events.


@runtime_checkable
class JavascriptExecutor(Protocol):
    def execute_script(self, script: str, *args: Any) -> Any: ...

    def execute_async_script(self, script: str, *args: Any) -> Any: ...


@runtime_checkable
class TakesScreenshot(Protocol):
    def get_screenshot_as(self, output_type: OutputType) -> bytes | str: ...


@runtime_checkable
class ContextAware(Protocol):
    def context(self, name: str) -> Any: ...

    def get_context(self) -> str: ...

    def get_context_handles(self) -> set[str]: ...


@runtime_checkable
class Rotatable(Protocol):
    def rotate(self, orientation: ScreenOrientation) -> None: ...

    def get_orientation(self) -> ScreenOrientation: ...
