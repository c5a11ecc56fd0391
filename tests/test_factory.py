"""Tests for building intercepted sessions."""

import logging
from importlib.metadata import EntryPoint

import pytest

from listenable.common.exceptions import ListenerRegistrationError
from listenable.common.roles import By
from listenable.config import InterceptionSettings
from listenable.events import factory
from listenable.events.factory import (
    add_listeners,
    create_intercepted_root,
    is_intercepted,
    load_entry_point_listeners,
)
from listenable.events.listeners import LoggingListener, RecordingListener
from listenable.events.proxy import interceptor_of, unwrap
from tests.stubs import LoggingNavigation, StubDriver, StubElement


def entry_point(name, value, group="listenable.listeners"):
    return EntryPoint(name=name, value=value, group=group)


@pytest.fixture
def installed(monkeypatch):
    """Replace installed entry points with the given ones."""
    seen_groups = []

    def install(*eps):
        def fake_entry_points(group):
            seen_groups.append(group)
            return [ep for ep in eps if ep.group == group]

        monkeypatch.setattr(factory, "entry_points", fake_entry_points)
        return seen_groups

    return install


class TestCreateInterceptedRoot:
    def test_returns_proxy_of_target(self, stub_driver):
        driver = create_intercepted_root(stub_driver)

        assert is_intercepted(driver)
        assert unwrap(driver) is stub_driver
        assert interceptor_of(driver).driver is stub_driver

    def test_rejects_non_interceptable_target(self):
        with pytest.raises(TypeError, match="not interceptable"):
            create_intercepted_root(object())

    def test_rejects_non_listeners(self, stub_driver):
        with pytest.raises(ListenerRegistrationError):
            create_intercepted_root(stub_driver, ["not a listener"])

    def test_element_root_with_separate_driver(self, log, stub_driver):
        recorder = RecordingListener()
        element = create_intercepted_root(
            StubElement(log), [recorder], driver=stub_driver
        )

        element.click()

        assert recorder.events[0].args[1] is stub_driver

    def test_default_settings(self, stub_driver):
        driver = create_intercepted_root(stub_driver)

        assert interceptor_of(driver).settings == InterceptionSettings()

    def test_log_events_registers_logging_listener_first(
        self, stub_driver, log
    ):
        settings = InterceptionSettings(log_events=True, log_level="DEBUG")
        mine = LoggingNavigation(log, "mine")
        driver = create_intercepted_root(stub_driver, [mine], settings)

        first, second = interceptor_of(driver).registry
        assert isinstance(first, LoggingListener)
        assert first.level == logging.DEBUG
        assert second is mine

    def test_unwrap_depth_from_settings(self, stub_driver):
        settings = InterceptionSettings(max_unwrap_depth=1)
        driver = create_intercepted_root(stub_driver, settings=settings)
        error = KeyError("deep")
        inner = RuntimeError("inner")
        inner.__cause__ = error
        outer = RuntimeError("outer")
        outer.__cause__ = inner
        stub_driver.failure = outer

        with pytest.raises(RuntimeError) as exc_info:
            driver.fail()

        assert exc_info.value is inner


class TestAddListeners:
    def test_adds_to_session(self, stub_driver, log):
        driver = create_intercepted_root(stub_driver)

        add_listeners(driver, [LoggingNavigation(log, "late")])
        driver.get("u")

        assert log == [
            "late.before_navigate_to",
            "driver.get u",
            "late.after_navigate_to",
        ]

    def test_rejects_plain_objects(self, stub_driver, log):
        with pytest.raises(TypeError, match="not intercepted"):
            add_listeners(stub_driver, [LoggingNavigation(log, "x")])

    def test_sessions_are_independent(self, log):
        first = create_intercepted_root(StubDriver(log))
        second = create_intercepted_root(StubDriver(log))

        add_listeners(first, [LoggingNavigation(log, "first")])
        second.get("u")

        assert log == ["driver.get u"]


class TestEntryPoints:
    def test_loads_listeners_in_name_order(self, installed):
        groups = installed(
            entry_point("zeta", "listenable.events.listeners:LoggingListener"),
            entry_point(
                "alpha", "listenable.events.listeners:RecordingListener"
            ),
            entry_point(
                "other",
                "listenable.events.listeners:RecordingListener",
                group="somewhere.else",
            ),
        )

        loaded = load_entry_point_listeners()

        assert [type(listener) for listener in loaded] == [
            RecordingListener,
            LoggingListener,
        ]
        assert groups == ["listenable.listeners"]

    def test_rejects_non_listener_entry_point(self, installed):
        installed(entry_point("bad", "listenable.config:InterceptionSettings"))

        with pytest.raises(ListenerRegistrationError):
            load_entry_point_listeners()

    def test_settings_enable_entry_points(self, installed, stub_driver, log):
        installed(
            entry_point(
                "recorder",
                "listenable.events.listeners:RecordingListener",
                group="custom.group",
            )
        )
        settings = InterceptionSettings(
            use_entry_points=True, entry_point_group="custom.group"
        )
        mine = LoggingNavigation(log, "mine")

        driver = create_intercepted_root(stub_driver, [mine], settings)
        driver.find_element(By.id("x"))

        first, second = interceptor_of(driver).registry
        assert first is mine
        assert isinstance(second, RecordingListener)
        assert second.names() == ["before_find_by", "after_find_by"]

    def test_entry_points_off_by_default(self, installed, stub_driver):
        groups = installed()

        create_intercepted_root(stub_driver)

        assert groups == []
