"""Tests for role classification of interceptable objects."""

import pytest

from listenable.events.classifier import ROLE_ORDER, Role, classify
from tests.stubs import (
    StubAlert,
    StubDriver,
    StubElement,
    StubNavigation,
    StubOptions,
    StubTargetLocator,
    StubWindow,
)


class DriverAndElement(StubDriver):
    """Plays both the driver and the element role."""

    def click(self) -> None:
        pass

    def submit(self) -> None:
        pass

    def send_keys(self, *keys_to_send: str) -> None:
        pass

    def clear(self) -> None:
        pass

    def get_tag_name(self) -> str:
        return "body"

    def get_attribute(self, name: str) -> str | None:
        return None

    def get_text(self) -> str:
        return ""

    def is_displayed(self) -> bool:
        return True


@pytest.mark.parametrize(
    ("factory", "expected"),
    [
        (lambda log: StubDriver(log), Role.DRIVER),
        (lambda log: StubElement(log), Role.ELEMENT),
        (lambda log: StubNavigation(log), Role.NAVIGATION),
        (lambda log: StubAlert(log), Role.ALERT),
        (lambda log: StubWindow(log), Role.WINDOW),
        (lambda log: StubOptions(log), Role.OPTIONS),
        (lambda log: StubTargetLocator(StubDriver(log)), Role.TARGET_LOCATOR),
    ],
)
def test_stub_roles(factory, expected, log):
    assert classify(factory(log)) is expected


@pytest.mark.parametrize("value", [None, "text", 3, b"raw", [], {}])
def test_plain_values_are_not_interceptable(value):
    assert classify(value) is None


def test_last_matching_role_wins(log):
    assert classify(DriverAndElement(log)) is Role.ELEMENT


def test_custom_order_changes_the_winner(log):
    order = (Role.ELEMENT, Role.DRIVER)

    assert classify(DriverAndElement(log), order) is Role.DRIVER


def test_roles_outside_the_order_are_ignored(log):
    assert classify(StubAlert(log), (Role.DRIVER, Role.ELEMENT)) is None


def test_default_order_is_general_to_specific():
    assert ROLE_ORDER[0] is Role.DRIVER
    assert ROLE_ORDER[1] is Role.ELEMENT
    assert set(ROLE_ORDER) == set(Role)


def test_structural_match_ignores_base_classes():
    class Pager:
        def back(self) -> None:
            pass

        def forward(self) -> None:
            pass

        def to(self, url: str) -> None:
            pass

        def refresh(self) -> None:
            pass

    assert classify(Pager()) is Role.NAVIGATION
