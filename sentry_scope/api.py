import inspect

from sentry_scope.options import get_options, init
from sentry_scope.scope import Scope, new_scope, use_scope

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Callable
    from typing import Dict
    from typing import List
    from typing import Optional
    from typing import TypeVar
    from typing import Union

    from sentry_scope._types import Breadcrumb, BreadcrumbHint, EventProcessorFunc
    from sentry_scope.consts import Level
    from sentry_scope.event import Event
    from sentry_scope.processors import EventProcessor

    F = TypeVar("F", bound=Callable[..., Any])


# When changing this, update __all__ in __init__.py too
__all__ = [
    "init",
    "get_options",
    "add_breadcrumb",
    "add_event_processor",
    "apply_to_event",
    "clear_breadcrumbs",
    "get_current_scope",
    "new_scope",
    "set_context",
    "set_extra",
    "set_fingerprint",
    "set_level",
    "set_tag",
    "set_tags",
    "set_transaction_name",
    "set_user",
    "use_scope",
]


def scopemethod(f: "F") -> "F":
    f.__doc__ = "%s\n\n%s" % (
        "Alias for :py:meth:`sentry_scope.Scope.%s` on the current scope" % f.__name__,
        inspect.getdoc(getattr(Scope, f.__name__)),
    )
    return f


@scopemethod
def get_current_scope() -> "Scope":
    return Scope.get_current_scope()


@scopemethod
def add_breadcrumb(
    crumb: "Optional[Breadcrumb]" = None,
    hint: "Optional[BreadcrumbHint]" = None,
    **kwargs: "Any",
) -> None:
    return get_current_scope().add_breadcrumb(crumb, hint, **kwargs)


@scopemethod
def clear_breadcrumbs() -> None:
    return get_current_scope().clear_breadcrumbs()


@scopemethod
def add_event_processor(
    processor: "Union[EventProcessor, EventProcessorFunc]",
) -> None:
    return get_current_scope().add_event_processor(processor)


@scopemethod
def apply_to_event(event: "Event") -> "Optional[Event]":
    return get_current_scope().apply_to_event(event)


@scopemethod
def set_tag(key: str, value: "Any") -> None:
    return get_current_scope().set_tag(key, value)


@scopemethod
def set_tags(tags: "Dict[str, Any]") -> None:
    return get_current_scope().set_tags(tags)


@scopemethod
def set_context(key: str, value: "Dict[str, Any]") -> None:
    return get_current_scope().set_context(key, value)


@scopemethod
def set_extra(key: str, value: "Any") -> None:
    return get_current_scope().set_extra(key, value)


@scopemethod
def set_user(value: "Dict[str, Any]") -> None:
    return get_current_scope().set_user(value)


@scopemethod
def set_level(value: "Union[Level, str]") -> None:
    return get_current_scope().set_level(value)


@scopemethod
def set_fingerprint(fingerprint: "List[str]") -> None:
    return get_current_scope().set_fingerprint(fingerprint)


@scopemethod
def set_transaction_name(name: str) -> None:
    return get_current_scope().set_transaction_name(name)
