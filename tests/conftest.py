"""Shared fixtures for the interception tests."""

from collections.abc import Callable
from typing import Any

import pytest

from listenable.demo.html_driver import HtmlDriver
from listenable.events.api import Listener
from listenable.events.factory import create_intercepted_root
from listenable.events.listeners import RecordingListener
from tests.stubs import BASE_URL, StubDriver



@pytest.fixture
def log() -> list[str]:
    """Shared log of listener hooks and stub operations, in call order."""
    return []


@pytest.fixture
def stub_driver(log: list[str]) -> StubDriver:
    return StubDriver(log)


@pytest.fixture
def intercept(
    stub_driver: StubDriver,
) -> Callable[..., Any]:
    """Return a function wrapping ``stub_driver`` with the given listeners."""

    def build(*listeners: Listener, **kwargs: Any) -> Any:
        return create_intercepted_root(stub_driver, listeners, **kwargs)

    return build


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def pages() -> dict[str, str]:
    """A small site for HtmlDriver tests."""
    return {
        BASE_URL: """
        <html>
        <head><title>Home</title></head>
        <body>
            <div id="main">
                <table>
                    <tr class="row"><td>Cell 1</td><td>Cell 2</td></tr>
                    <tr class="row"><td>Cell 3</td><td>Cell 4</td></tr>
                    <tr class="row"><td>Cell 5</td><td>Cell 6</td></tr>
                </table>
                <a id="next" href="/next">Next page</a>
                <form id="login" action="/welcome">
                    <input type="text" name="user" value="" />
                    <input type="checkbox" name="remember" />
                    <textarea name="note"></textarea>
                    <button type="submit">Log in</button>
                </form>
                <p id="ghost" style="display: none">Hidden</p>
                <iframe id="ads" name="ads"></iframe>
            </div>
        </body>
        </html>
        """,
        BASE_URL + "next": """
        <html>
        <head><title>Next</title></head>
        <body><p class="greeting">You made it</p></body>
        </html>
        """,
        BASE_URL + "welcome": """
        <html>
        <head><title>Welcome</title></head>
        <body><p>Logged in</p></body>
        </html>
        """,
    }


@pytest.fixture
def html_driver(pages: dict[str, str]) -> HtmlDriver:
    driver = HtmlDriver(pages, windows=("main", "popup"))
    driver.get(BASE_URL)
    return driver
