"""Stub automation objects and listeners for interception tests.

The stubs do nothing except append what happened to a shared ``log`` list, so
tests can assert the exact interleaving of listener hooks and real
operations.
"""

from __future__ import annotations

from typing import Any

from listenable.common.roles import (
    By,
    Dimension,
    OutputType,
    Point,
    ScreenOrientation,
)
from listenable.events.api import (
    AlertEventListener,
    ElementEventListener,
    ListensToException,
    NavigationEventListener,
    SearchingEventListener,
)

SCREENSHOT = b"\x01\x02"
BASE_URL = "https://example.test/"


class NotFoundError(Exception):
    """A domain failure raised by stub operations."""


class ListenerBug(Exception):
    """Raised by deliberately broken listeners."""


class StubElement:
    def __init__(self, log: list[str], name: str = "element") -> None:
        self.log = log
        self.name = name
        self.label = f"label of {name}"

    def click(self) -> None:
        self.log.append(f"{self.name}.click")

    def submit(self) -> None:
        self.log.append(f"{self.name}.submit")

    def send_keys(self, *keys_to_send: str) -> None:
        self.log.append(f"{self.name}.send_keys")

    def clear(self) -> None:
        self.log.append(f"{self.name}.clear")

    def set_value(self, value: str) -> None:
        self.log.append(f"{self.name}.set_value")

    def get_tag_name(self) -> str:
        return "div"

    def get_attribute(self, name: str) -> str | None:
        return None

    def get_text(self) -> str:
        self.log.append(f"{self.name}.get_text")
        return f"text of {self.name}"

    def is_displayed(self) -> bool:
        return True

    def find_element(self, by: By) -> StubElement:
        self.log.append(f"{self.name}.find_element")
        return StubElement(self.log, f"{self.name}>child")

    def find_elements(self, by: By) -> list[StubElement]:
        self.log.append(f"{self.name}.find_elements")
        return [
            StubElement(self.log, f"{self.name}>child{i}") for i in range(2)
        ]

    def get_screenshot_as(self, output_type: OutputType) -> bytes:
        return SCREENSHOT

    def __repr__(self) -> str:
        return f"StubElement({self.name})"


class StubNavigation:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def back(self) -> None:
        self.log.append("navigation.back")

    def forward(self) -> None:
        self.log.append("navigation.forward")

    def to(self, url: str) -> None:
        self.log.append(f"navigation.to {url}")

    def refresh(self) -> None:
        self.log.append("navigation.refresh")


class StubAlert:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def accept(self) -> None:
        self.log.append("alert.accept")

    def dismiss(self) -> None:
        self.log.append("alert.dismiss")

    def get_text(self) -> str:
        return "alert text"

    def send_keys(self, keys_to_send: str) -> None:
        self.log.append("alert.send_keys")


class StubWindow:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def get_size(self) -> Dimension:
        return Dimension(100, 100)

    def set_size(self, target_size: Dimension) -> None:
        self.log.append("window.set_size")

    def get_position(self) -> Point:
        return Point(0, 0)

    def set_position(self, target_position: Point) -> None:
        self.log.append("window.set_position")

    def maximize(self) -> None:
        self.log.append("window.maximize")


class StubOptions:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def add_cookie(self, cookie: dict[str, Any]) -> None:
        pass

    def delete_cookie_named(self, name: str) -> None:
        pass

    def delete_all_cookies(self) -> None:
        pass

    def get_cookies(self) -> list[dict[str, Any]]:
        return []

    def window(self) -> StubWindow:
        return StubWindow(self.log)


class StubTargetLocator:
    def __init__(self, driver: StubDriver) -> None:
        self.driver = driver

    def frame(self, frame_reference: Any) -> StubDriver:
        self.driver.log.append("target_locator.frame")
        self.driver.last_frame = frame_reference
        return self.driver

    def parent_frame(self) -> StubDriver:
        return self.driver

    def window(self, name_or_handle: str) -> StubDriver:
        self.driver.log.append(f"target_locator.window {name_or_handle}")
        return self.driver

    def default_content(self) -> StubDriver:
        return self.driver

    def active_element(self) -> StubElement:
        return StubElement(self.driver.log, "active")

    def alert(self) -> StubAlert:
        return StubAlert(self.driver.log)


class StubDriver:
    """A driver whose operations only record themselves.

    ``failure`` is raised by ``fail``; ``elements`` controls how many
    handles ``find_elements`` returns.
    """

    def __init__(self, log: list[str] | None = None) -> None:
        self.log: list[str] = log if log is not None else []
        self.failure: BaseException | None = None
        self.elements = 3
        self.last_frame: Any = None
        self.title = "stub"
        self.entered = False

    def get(self, url: str) -> None:
        self.log.append(f"driver.get {url}")

    def get_current_url(self) -> str | None:
        return None

    def get_title(self) -> str | None:
        return self.title

    def find_element(self, by: By) -> StubElement:
        self.log.append("driver.find_element")
        return StubElement(self.log)

    def find_elements(self, by: By) -> list[StubElement]:
        self.log.append("driver.find_elements")
        return [StubElement(self.log, f"e{i}") for i in range(self.elements)]

    def get_page_source(self) -> str:
        return "<html></html>"

    def close(self) -> None:
        self.log.append("driver.close")

    def quit(self) -> None:
        self.log.append("driver.quit")

    def get_window_handles(self) -> set[str]:
        return {"main"}

    def get_window_handle(self) -> str:
        return "main"

    def switch_to(self) -> StubTargetLocator:
        return StubTargetLocator(self)

    def navigate(self) -> StubNavigation:
        return StubNavigation(self.log)

    def manage(self) -> StubOptions:
        return StubOptions(self.log)

    def execute_script(self, script: str, *args: Any) -> Any:
        self.log.append("driver.execute_script")
        return args[0] if args else None

    def execute_async_script(self, script: str, *args: Any) -> Any:
        return self.execute_script(script, *args)

    def get_screenshot_as(self, output_type: OutputType) -> bytes:
        self.log.append("driver.get_screenshot_as")
        return SCREENSHOT

    def rotate(self, orientation: ScreenOrientation) -> None:
        self.log.append("driver.rotate")

    def get_orientation(self) -> ScreenOrientation:
        return ScreenOrientation.PORTRAIT

    def context(self, name: str) -> StubDriver:
        self.log.append(f"driver.context {name}")
        return self

    def get_context(self) -> str:
        return "NATIVE_APP"

    def get_context_handles(self) -> set[str]:
        return {"NATIVE_APP", "WEBVIEW_1"}

    def fail(self) -> None:
        self.log.append("driver.fail")
        assert self.failure is not None
        raise self.failure

    def mixed(self) -> list[Any]:
        element = StubElement(self.log, "m")
        return ["text", element, 3, None, StubAlert(self.log)]

    def same_element_twice(self) -> list[StubElement]:
        element = StubElement(self.log, "twice")
        return [element, element]

    def __enter__(self) -> StubDriver:
        self.entered = True
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.log.append("driver.exit")


# =============================================================================
# Listeners writing to the shared log
# =============================================================================


class LoggingNavigation(NavigationEventListener):
    def __init__(self, log: list[str], name: str) -> None:
        self.log = log
        self.name = name
        self.urls: list[str] = []

    def before_navigate_to(self, url: str, driver: Any) -> None:
        self.urls.append(url)
        self.log.append(f"{self.name}.before_navigate_to")

    def after_navigate_to(self, url: str, driver: Any) -> None:
        self.urls.append(url)
        self.log.append(f"{self.name}.after_navigate_to")


class LoggingSearch(SearchingEventListener):
    def __init__(self, log: list[str]) -> None:
        self.log = log
        self.seen: list[tuple[Any, Any, Any]] = []

    def before_find_by(self, by: By, element: Any, driver: Any) -> None:
        self.seen.append((by, element, driver))
        self.log.append("before_find_by")

    def after_find_by(self, by: By, element: Any, driver: Any) -> None:
        self.log.append("after_find_by")


class LoggingElement(ElementEventListener):
    def __init__(self, log: list[str]) -> None:
        self.log = log
        self.keys: list[Any] = []

    def before_click_on(self, element: Any, driver: Any) -> None:
        self.log.append("before_click_on")

    def after_click_on(self, element: Any, driver: Any) -> None:
        self.log.append("after_click_on")

    def before_change_value_of(
        self, element: Any, driver: Any, keys_to_send: Any = None
    ) -> None:
        self.keys.append(keys_to_send)
        self.log.append("before_change_value_of")

    def after_change_value_of(
        self, element: Any, driver: Any, keys_to_send: Any = None
    ) -> None:
        self.log.append("after_change_value_of")


class CollectingExceptions(ListensToException):
    def __init__(self, log: list[str] | None = None) -> None:
        self.log = log
        self.exceptions: list[BaseException] = []
        self.drivers: list[Any] = []

    def on_exception(self, throwable: BaseException, driver: Any) -> None:
        self.exceptions.append(throwable)
        self.drivers.append(driver)
        if self.log is not None:
            self.log.append(f"on_exception {type(throwable).__name__}")


class BrokenNavigation(NavigationEventListener):
    def before_navigate_to(self, url: str, driver: Any) -> None:
        raise ListenerBug("before hook exploded")


class BrokenAfterClick(ElementEventListener):
    def after_click_on(self, element: Any, driver: Any) -> None:
        raise ListenerBug("after hook exploded")


class BrokenExceptionListener(ListensToException):
    def on_exception(self, throwable: BaseException, driver: Any) -> None:
        raise RuntimeError("wrapped") from ListenerBug("exception hook")


class AlertRecorder(AlertEventListener):
    def __init__(self) -> None:
        self.alerts: list[Any] = []

    def before_alert_accept(self, driver: Any, alert: Any) -> None:
        self.alerts.append(alert)
