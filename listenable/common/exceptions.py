"""Exception types and root-cause extraction.

Two kinds of exceptions are treated as transparent wrappers around the real
failure: ``InvocationTargetError``, raised by adapters that invoke an
operation indirectly, and plain ``RuntimeError``, which code at the edges of
an automation session often uses to re-raise a lower-level failure. The
interception layer strips both before reporting a failure or re-raising it,
so callers see the same exception type they would get from the unwrapped
object.

Membership is decided on the exact class: ``NotImplementedError`` and
``RecursionError`` are ``RuntimeError`` subclasses but carry their own
meaning, and are never unwrapped.
"""

from typing import Any


class InvocationTargetError(Exception):
    """Raised when an indirectly invoked operation fails.

    The original failure is chained as ``__cause__`` and also exposed as
    ``target_exception``.
    """

    def __init__(self, target_exception: BaseException) -> None:
        self.target_exception = target_exception
        super().__init__(
            f"Invocation failed: {type(target_exception).__name__}: "
            f"{target_exception}"
        )
        self.__cause__ = target_exception


TRANSPARENT_WRAPPERS: tuple[type[BaseException], ...] = (
    InvocationTargetError,
    RuntimeError,
)

DEFAULT_MAX_UNWRAP_DEPTH = 32


def is_transparent_wrapper(exc: BaseException) -> bool:
    """Return True if *exc* is exactly one of the transparent wrapper types."""
    return type(exc) in TRANSPARENT_WRAPPERS


def get_root_cause(
    exc: BaseException, max_depth: int = DEFAULT_MAX_UNWRAP_DEPTH
) -> BaseException:
    """Strip transparent wrappers from *exc*.

    Follows ``__cause__`` while the current exception is a transparent
    wrapper that has a cause. Stops at the first exception that is not a
    wrapper, at a wrapper without a cause, when a cause repeats (a cycle),
    or after ``max_depth`` steps.

    Args:
        exc: The exception caught around an intercepted call.
        max_depth: Upper bound on the number of causes followed.

    Returns:
        The innermost exception reached.
    """
    current = exc
    seen = {id(current)}
    for _ in range(max_depth):
        if not is_transparent_wrapper(current):
            break
        cause = current.__cause__
        if cause is None or id(cause) in seen:
            break
        seen.add(id(cause))
        current = cause
    return current


# =============================================================================
# Errors raised by automation sessions
# =============================================================================


class DriverException(Exception):
    """Base class for failures reported by an automation session.

    Attributes:
        message: Human-readable description of the failure.
        context: Additional details (locator, handle, url, ...).
    """

    def __init__(
        self, message: str, context: dict[str, Any] | None = None
    ) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        for key, value in self.context.items():
            parts.append(f"  {key}: {value}")
        return "\n".join(parts)


class NoSuchElementException(DriverException):
    """Raised when a locator matches no element."""


class NoAlertPresentException(DriverException):
    """Raised when switching to an alert while none is open."""


class NoSuchWindowException(DriverException):
    """Raised when switching to an unknown window, frame or context."""


# =============================================================================
# Misuse of the interception layer
# =============================================================================


class ListenerRegistrationError(TypeError):
    """Raised when an object that is not a listener is registered."""

    def __init__(self, offender: object) -> None:
        self.offender = offender
        super().__init__(
            f"{type(offender).__name__} is not a Listener; listeners must "
            "subclass at least one listener interface"
        )


class UnknownEventError(AttributeError):
    """Raised when dispatching an event a category does not declare."""

    def __init__(self, category: type, event_name: str) -> None:
        self.category = category
        self.event_name = event_name
        super().__init__(
            f"{category.__name__} declares no event named '{event_name}'"
        )
