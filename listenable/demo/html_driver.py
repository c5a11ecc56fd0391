"""An in-memory automation driver over static HTML pages.

``HtmlDriver`` serves a fixed mapping of ``url -> html`` parsed with lxml
and implements every role the interception layer recognises: navigation
with history, element search, clicks that follow links and submit forms,
typing into inputs, alerts opened from scripts, windows, frames, cookies,
contexts and rotation. Nothing touches the network, which makes it handy
for demos and tests of listeners.

Usage::

    driver = HtmlDriver({
        "https://example.test/": "<html><body><a href='/next'>Next</a></body></html>",
        "https://example.test/next": "<html><title>Next</title></html>",
    })
    driver.get("https://example.test/")
    driver.find_element(By.link_text("Next")).click()
    assert driver.get_title() == "Next"
"""

from __future__ import annotations

import base64
import hashlib
import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urljoin

from lxml import html
from lxml.html import HtmlElement
from typing_extensions import assert_never

from listenable.common.exceptions import (
    DriverException,
    NoAlertPresentException,
    NoSuchElementException,
    NoSuchWindowException,
)
from listenable.common.roles import (
    By,
    Dimension,
    OutputType,
    Point,
    ScreenOrientation,
)

logger = logging.getLogger(__name__)

_ALERT_SCRIPT = re.compile(r"""^\s*alert\((['"])(?P<text>.*)\1\)\s*;?\s*$""")
_RETURN_ARGUMENT = re.compile(
    r"^\s*return\s+arguments\[(?P<index>\d+)\]\s*;?\s*$"
)
_RETURN_TITLE = re.compile(r"^\s*return\s+document\.title\s*;?\s*$")

NATIVE_CONTEXT = "NATIVE_APP"
WEBVIEW_CONTEXT = "WEBVIEW_1"
MAIN_WINDOW = "main"
MAXIMIZED_SIZE = Dimension(1920, 1080)


class HtmlDriver:
    """Driver over a fixed set of HTML pages.

    Args:
        pages: Page sources keyed by absolute URL.
        windows: Window handles the session reports (the first is current).
    """

    def __init__(
        self,
        pages: Mapping[str, str],
        windows: tuple[str, ...] = (MAIN_WINDOW,),
    ) -> None:
        self._pages = dict(pages)
        self._history: list[str] = []
        self._position = -1
        self._document: HtmlElement | None = None
        self._active: HtmlElement | None = None
        self._frame: HtmlElement | None = None
        self._alert_text: str | None = None
        self._alert_input: str | None = None
        self._cookies: list[dict[str, Any]] = []
        self._window_handles = tuple(windows)
        self._current_window = windows[0]
        self._window = HtmlWindow()
        self._context = NATIVE_CONTEXT
        self._orientation = ScreenOrientation.PORTRAIT
        self.closed = False

    # -------------------------------------------------------------------------
    # WebDriver
    # -------------------------------------------------------------------------

    def get(self, url: str) -> None:
        self._check_open()
        self._render(url)
        self._history = self._history[: self._position + 1]
        self._history.append(url)
        self._position = len(self._history) - 1

    def get_current_url(self) -> str | None:
        if self._position < 0:
            return None
        return self._history[self._position]

    def get_title(self) -> str | None:
        if self._document is None:
            return None
        titles = self._document.xpath("//title/text()")
        return titles[0].strip() if titles else ""

    def find_element(self, by: By) -> HtmlElementHandle:
        return _first(self.find_elements(by), by)

    def find_elements(self, by: By) -> list[HtmlElementHandle]:
        return [
            HtmlElementHandle(self, el)
            for el in _query(self._require_document(), by)
        ]

    def get_page_source(self) -> str:
        return html.tostring(self._require_document(), encoding="unicode")

    def close(self) -> None:
        self.closed = True

    def quit(self) -> None:
        self.closed = True
        self._document = None

    def get_window_handles(self) -> set[str]:
        return set(self._window_handles)

    def get_window_handle(self) -> str:
        return self._current_window

    def switch_to(self) -> HtmlTargetLocator:
        return HtmlTargetLocator(self)

    def navigate(self) -> HtmlNavigation:
        return HtmlNavigation(self)

    def manage(self) -> HtmlOptions:
        return HtmlOptions(self)

    def __enter__(self) -> HtmlDriver:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.quit()

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------

    def execute_script(self, script: str, *args: Any) -> Any:
        """Evaluate the handful of scripts this driver understands.

        ``alert('text')`` opens an alert, ``return arguments[N]`` echoes an
        argument back and ``return document.title`` returns the title.
        Anything else evaluates to None.
        """
        self._check_open()
        if m := _ALERT_SCRIPT.match(script):
            self._alert_text = m.group("text")
            self._alert_input = None
            return None
        if m := _RETURN_ARGUMENT.match(script):
            index = int(m.group("index"))
            if index >= len(args):
                raise DriverException(
                    "Script argument out of range",
                    {"index": index, "arguments": len(args)},
                )
            return args[index]
        if _RETURN_TITLE.match(script):
            return self.get_title()
        return None

    def execute_async_script(self, script: str, *args: Any) -> Any:
        return self.execute_script(script, *args)

    def get_screenshot_as(self, output_type: OutputType) -> bytes | str:
        return _screenshot(self.get_page_source(), output_type)

    def context(self, name: str) -> HtmlDriver:
        if name not in self.get_context_handles():
            raise NoSuchWindowException(
                "No such context", {"context": name}
            )
        self._context = name
        return self

    def get_context(self) -> str:
        return self._context

    def get_context_handles(self) -> set[str]:
        return {NATIVE_CONTEXT, WEBVIEW_CONTEXT}

    def rotate(self, orientation: ScreenOrientation) -> None:
        self._orientation = ScreenOrientation(orientation)

    def get_orientation(self) -> ScreenOrientation:
        return self._orientation

    # -------------------------------------------------------------------------
    # Internals shared with the handles
    # -------------------------------------------------------------------------

    def _check_open(self) -> None:
        if self.closed:
            raise DriverException("Session is closed")

    def _require_document(self) -> HtmlElement:
        self._check_open()
        if self._document is None:
            raise DriverException("No page loaded")
        return self._document

    def _render(self, url: str) -> None:
        try:
            source = self._pages[url]
        except KeyError:
            raise DriverException(
                "No page registered for url", {"url": url}
            ) from None
        self._document = html.fromstring(source)
        self._active = None
        self._frame = None
        logger.debug("Rendered %s", url)

    def _open(self, href: str) -> None:
        self.get(urljoin(self.get_current_url() or "", href))

    def _move(self, step: int) -> None:
        self._check_open()
        position = self._position + step
        if 0 <= position < len(self._history):
            self._render(self._history[position])
            self._position = position

    def _require_alert(self) -> str:
        if self._alert_text is None:
            raise NoAlertPresentException("No alert is open")
        return self._alert_text


class HtmlElementHandle:
    """An element of the page currently loaded in an ``HtmlDriver``."""

    def __init__(self, driver: HtmlDriver, element: HtmlElement) -> None:
        self._driver = driver
        self._element = element

    def click(self) -> None:
        element = self._live()
        self._driver._active = element
        tag = element.tag
        kind = (element.get("type") or "").lower()
        if tag == "a" and element.get("href") is not None:
            self._driver._open(element.get("href"))
        elif tag == "input" and kind in ("checkbox", "radio"):
            if element.get("checked") is None:
                element.set("checked", "checked")
            elif kind == "checkbox":
                del element.attrib["checked"]
        elif (tag == "button" and kind in ("", "submit")) or (
            tag == "input" and kind == "submit"
        ):
            self.submit()

    def submit(self) -> None:
        form = self._form()
        if form is None:
            raise DriverException(
                "Element is not inside a form", {"tag": self._element.tag}
            )
        self._driver._open(form.get("action") or "")

    def send_keys(self, *keys_to_send: str) -> None:
        element = self._live()
        self._driver._active = element
        typed = "".join(str(k) for k in keys_to_send)
        if element.tag == "textarea":
            element.text = (element.text or "") + typed
        else:
            element.set("value", (element.get("value") or "") + typed)

    def clear(self) -> None:
        element = self._live()
        if element.tag == "textarea":
            element.text = ""
        else:
            element.set("value", "")

    def get_tag_name(self) -> str:
        return str(self._live().tag)

    def get_attribute(self, name: str) -> str | None:
        element = self._live()
        if name == "value" and element.tag == "textarea":
            return element.text or ""
        return element.get(name)

    def get_text(self) -> str:
        return " ".join(self._live().text_content().split())

    def is_displayed(self) -> bool:
        element = self._live()
        style = (element.get("style") or "").replace(" ", "")
        return element.get("hidden") is None and "display:none" not in style

    def is_enabled(self) -> bool:
        return self._live().get("disabled") is None

    def is_selected(self) -> bool:
        element = self._live()
        return (
            element.get("checked") is not None
            or element.get("selected") is not None
        )

    def find_element(self, by: By) -> HtmlElementHandle:
        return _first(self.find_elements(by), by)

    def find_elements(self, by: By) -> list[HtmlElementHandle]:
        return [
            HtmlElementHandle(self._driver, el)
            for el in _query(self._live(), by)
        ]

    def get_screenshot_as(self, output_type: OutputType) -> bytes | str:
        source = html.tostring(self._live(), encoding="unicode")
        return _screenshot(source, output_type)

    def __repr__(self) -> str:
        return f"<HtmlElementHandle {self._element.tag}>"

    def _live(self) -> HtmlElement:
        document = self._driver._require_document()
        root = self._element.getroottree().getroot()
        if root is not document.getroottree().getroot():
            raise DriverException(
                "Stale element reference", {"tag": self._element.tag}
            )
        return self._element

    def _form(self) -> HtmlElement | None:
        element: HtmlElement | None = self._live()
        while element is not None and element.tag != "form":
            element = element.getparent()
        return element


class HtmlNavigation:
    def __init__(self, driver: HtmlDriver) -> None:
        self._driver = driver

    def back(self) -> None:
        self._driver._move(-1)

    def forward(self) -> None:
        self._driver._move(1)

    def to(self, url: str) -> None:
        self._driver.get(str(url))

    def refresh(self) -> None:
        self._driver._move(0)


class HtmlAlert:
    def __init__(self, driver: HtmlDriver) -> None:
        self._driver = driver

    def accept(self) -> None:
        self._driver._require_alert()
        self._driver._alert_text = None

    def dismiss(self) -> None:
        self._driver._require_alert()
        self._driver._alert_text = None
        self._driver._alert_input = None

    def get_text(self) -> str:
        return self._driver._require_alert()

    def send_keys(self, keys_to_send: str) -> None:
        self._driver._require_alert()
        self._driver._alert_input = keys_to_send


class HtmlWindow:
    def __init__(self) -> None:
        self._size = Dimension(1024, 768)
        self._position = Point(0, 0)

    def get_size(self) -> Dimension:
        return self._size

    def set_size(self, target_size: Dimension) -> None:
        if target_size.width <= 0 or target_size.height <= 0:
            raise DriverException(
                "Window size must be positive", {"size": target_size}
            )
        self._size = target_size

    def get_position(self) -> Point:
        return self._position

    def set_position(self, target_position: Point) -> None:
        self._position = target_position

    def maximize(self) -> None:
        self._size = MAXIMIZED_SIZE
        self._position = Point(0, 0)


class HtmlOptions:
    def __init__(self, driver: HtmlDriver) -> None:
        self._driver = driver

    def add_cookie(self, cookie: dict[str, Any]) -> None:
        if "name" not in cookie or "value" not in cookie:
            raise DriverException(
                "Cookie needs a name and a value", {"cookie": cookie}
            )
        self.delete_cookie_named(cookie["name"])
        self._driver._cookies.append(dict(cookie))

    def delete_cookie_named(self, name: str) -> None:
        self._driver._cookies = [
            c for c in self._driver._cookies if c["name"] != name
        ]

    def delete_all_cookies(self) -> None:
        self._driver._cookies = []

    def get_cookies(self) -> list[dict[str, Any]]:
        return [dict(c) for c in self._driver._cookies]

    def get_cookie_named(self, name: str) -> dict[str, Any] | None:
        for cookie in self._driver._cookies:
            if cookie["name"] == name:
                return dict(cookie)
        return None

    def window(self) -> HtmlWindow:
        return self._driver._window


class HtmlTargetLocator:
    def __init__(self, driver: HtmlDriver) -> None:
        self._driver = driver

    def frame(
        self, frame_reference: int | str | HtmlElementHandle
    ) -> HtmlDriver:
        document = self._driver._require_document()
        frames = document.xpath("//iframe | //frame")
        if isinstance(frame_reference, HtmlElementHandle):
            candidates = [
                f for f in frames if f is frame_reference._live()
            ]
        elif isinstance(frame_reference, int):
            candidates = frames[frame_reference : frame_reference + 1]
        else:
            candidates = [
                f
                for f in frames
                if frame_reference in (f.get("id"), f.get("name"))
            ]
        if not candidates:
            raise NoSuchWindowException(
                "No such frame", {"frame": frame_reference}
            )
        self._driver._frame = candidates[0]
        return self._driver

    def parent_frame(self) -> HtmlDriver:
        self._driver._frame = None
        return self._driver

    def window(self, name_or_handle: str) -> HtmlDriver:
        if name_or_handle not in self._driver._window_handles:
            raise NoSuchWindowException(
                "No such window", {"window": name_or_handle}
            )
        self._driver._current_window = name_or_handle
        return self._driver

    def default_content(self) -> HtmlDriver:
        self._driver._frame = None
        return self._driver

    def active_element(self) -> HtmlElementHandle:
        document = self._driver._require_document()
        active = self._driver._active
        if active is None:
            bodies = document.xpath("//body")
            active = bodies[0] if bodies else document
        return HtmlElementHandle(self._driver, active)

    def alert(self) -> HtmlAlert:
        self._driver._require_alert()
        return HtmlAlert(self._driver)


# =============================================================================
# Helpers
# =============================================================================


def _query(root: HtmlElement, by: By) -> list[HtmlElement]:
    """Run locator *by* against *root*."""
    strategy, value = by.strategy, by.value
    if strategy == "id":
        found = root.xpath(".//*[@id=$v]", v=value)
    elif strategy == "name":
        found = root.xpath(".//*[@name=$v]", v=value)
    elif strategy == "tag name":
        found = root.xpath(".//*[local-name()=$v]", v=value)
    elif strategy == "class name":
        found = root.xpath(
            ".//*[contains(concat(' ', normalize-space(@class), ' '), $v)]",
            v=f" {value} ",
        )
    elif strategy == "link text":
        found = root.xpath(".//a[normalize-space(.)=$v]", v=value)
    elif strategy == "xpath":
        found = root.xpath(value)
    elif strategy == "css selector":
        found = root.cssselect(value)
    else:
        raise DriverException(
            "Unsupported locator strategy", {"strategy": strategy}
        )
    return [el for el in found if isinstance(el, HtmlElement)]


def _first(
    handles: list[HtmlElementHandle], by: By
) -> HtmlElementHandle:
    if not handles:
        raise NoSuchElementException("Unable to locate element", {"by": by})
    return handles[0]


def _screenshot(source: str, output_type: OutputType) -> bytes | str:
    """Deterministic stand-in for a rendered image of *source*."""
    png = b"\x89PNG\r\n\x1a\n" + hashlib.sha256(source.encode()).digest()
    output_type = OutputType(output_type)
    if output_type is OutputType.BYTES:
        return png
    elif output_type is OutputType.BASE64:
        return base64.b64encode(png).decode("ascii")
    else:
        assert_never(output_type)
