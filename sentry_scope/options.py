import os

from sentry_scope.consts import DEFAULT_OPTIONS
from sentry_scope.utils import env_to_bool, logger

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Dict

    import sentry_scope.consts


def _get_options(**kwargs: "Any") -> "Dict[str, Any]":
    rv = dict(DEFAULT_OPTIONS)

    for key, value in kwargs.items():
        if key not in rv:
            raise TypeError("Unknown option %r" % (key,))
        rv[key] = value

    if rv["debug"] is None:
        rv["debug"] = env_to_bool(os.environ.get("SENTRY_DEBUG", "False"), strict=True)

    if rv["max_breadcrumbs"] < 0:
        raise ValueError(
            "max_breadcrumbs must not be negative, got %r" % (rv["max_breadcrumbs"],)
        )

    return rv


_options: "Dict[str, Any]" = _get_options()


def _init(**kwargs: "Any") -> "Dict[str, Any]":
    """Installs the process wide options used by new scopes.

    Scopes that already exist keep their breadcrumb buffers.
    """
    global _options
    _options = _get_options(**kwargs)
    logger.debug("Setting up scope options: %r", _options)
    return _options


if TYPE_CHECKING:
    # Make static analyzers pick up the accepted keyword arguments from
    # `ScopeOptions`.

    class init(sentry_scope.consts.ScopeOptions):  # noqa: N801
        pass

else:
    init = (lambda: _init)()


def get_options() -> "Dict[str, Any]":
    return _options


def reset_options() -> None:
    """Restores the default options."""
    global _options
    _options = _get_options()
