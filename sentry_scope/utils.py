import logging
from datetime import datetime

from sentry_scope.consts import FALSE_VALUES

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Optional

    from sentry_scope._types import ExcInfo


# The logger is created here but initialized in the debug support module
logger = logging.getLogger("sentry_scope.errors")


class TypeMismatch(TypeError):
    """Raised when a scope setter receives the wrong container type."""

    def __init__(self, expected: type, value: "Any") -> None:
        self.expected = expected
        self.actual = type(value)
        self.value = value
        super().__init__(
            "expected the argument to be a %s, got %s (%s)"
            % (expected.__name__, self.actual.__name__, safe_repr(value))
        )


def check_argument_type(argument: "Any", expected_type: type) -> None:
    if not isinstance(argument, expected_type):
        raise TypeMismatch(expected_type, argument)


def env_to_bool(value: "Any", *, strict: "Optional[bool]" = False) -> "Optional[bool]":
    """Casts an environment variable value to a bool.

    With ``strict`` set, values that are neither truthy nor falsy strings
    return None.
    """
    normalized = str(value).lower() if value is not None else None

    if normalized in FALSE_VALUES:
        return False

    if normalized in {"true", "yes", "on", "y", "1"}:
        return True

    return None if strict else bool(value)


def safe_repr(value: "Any") -> str:
    try:
        rv = repr(value)

        # At this point `rv` contains a bunch of literal escape codes, like
        # this (exaggerated example):
        #
        # "\\x2f"
        #
        # But we want to show this string as:
        #
        # "/"
        try:
            # unicode-escape does this job, but can only decode latin1. So we
            # attempt to encode in latin1.
            return rv.encode("latin1").decode("unicode-escape")
        except Exception:
            # Since usually strings aren't latin1 this can break. In those
            # cases we just give up.
            return rv
    except Exception:
        # If e.g. the call to `repr` already fails
        return "<broken repr>"


def to_timestamp(value: "datetime") -> float:
    return value.timestamp()


def capture_internal_exception(exc_info: "ExcInfo") -> None:
    """Logs an error raised inside the package instead of propagating it."""
    logger.error("Internal error in sentry_scope", exc_info=exc_info)
