from enum import Enum

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Callable
    from typing import Dict
    from typing import Optional

    from sentry_scope._types import Breadcrumb, BreadcrumbHint


DEFAULT_MAX_BREADCRUMBS = 100

FALSE_VALUES = [
    "false",
    "no",
    "off",
    "n",
    "0",
]


class Level(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


DEFAULT_LEVEL = Level.ERROR


class ScopeOptions:
    """Declares the options accepted by :py:func:`sentry_scope.init`.

    Only the signature is used; the defaults become ``DEFAULT_OPTIONS``.
    """

    def __init__(
        self,
        *,
        debug: "Optional[bool]" = None,
        max_breadcrumbs: int = DEFAULT_MAX_BREADCRUMBS,
        before_breadcrumb: "Optional[Callable[[Breadcrumb, BreadcrumbHint], Optional[Breadcrumb]]]" = None,
    ) -> None:
        pass


def _get_default_options() -> "Dict[str, Any]":
    import inspect

    a = inspect.getfullargspec(ScopeOptions.__init__)
    return dict(a.kwonlydefaults or {})


DEFAULT_OPTIONS = _get_default_options()
del _get_default_options


VERSION = "0.1.0"
