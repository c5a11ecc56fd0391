"""Proxy classifier: decide which role, if any, an object plays.

Roles are checked against the structural protocols in
``listenable.common.roles``. The role list is ordered from general to
specific and the last matching role wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from listenable.common import roles


class Role(Enum):
    DRIVER = "driver"
    ELEMENT = "element"
    NAVIGATION = "navigation"
    ALERT = "alert"
    WINDOW = "window"
    OPTIONS = "options"
    TARGET_LOCATOR = "target_locator"

    @property
    def protocol(self) -> type:
        return _PROTOCOLS[self]


_PROTOCOLS: dict[Role, type] = {
    Role.DRIVER: roles.WebDriver,
    Role.ELEMENT: roles.WebElement,
    Role.NAVIGATION: roles.Navigation,
    Role.ALERT: roles.Alert,
    Role.WINDOW: roles.Window,
    Role.OPTIONS: roles.Options,
    Role.TARGET_LOCATOR: roles.TargetLocator,
}

ROLE_ORDER: tuple[Role, ...] = tuple(Role)


def classify(obj: object, order: Sequence[Role] = ROLE_ORDER) -> Role | None:
    """Return the role *obj* plays, or None if it is not interceptable.

    Args:
        obj: Any value returned from an intercepted call, or a root target.
        order: Roles to test, general first.

    Returns:
        The last role in *order* whose protocol *obj* satisfies, or None.
    """
    if obj is None:
        return None
    match: Role | None = None
    for role in order:
        if isinstance(obj, role.protocol):
            match = role
    return match
