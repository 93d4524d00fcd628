from sentry_scope.scope import Scope
from sentry_scope.breadcrumbs import BreadcrumbBuffer
from sentry_scope.event import Event
from sentry_scope.processors import EventProcessor, FunctionEventProcessor
from sentry_scope.utils import TypeMismatch

from sentry_scope.api import *  # noqa

from sentry_scope.consts import VERSION, Level  # noqa

__all__ = [  # noqa
    "Scope",
    "BreadcrumbBuffer",
    "Event",
    "EventProcessor",
    "FunctionEventProcessor",
    "Level",
    "TypeMismatch",
    # From sentry_scope.api
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

# Initialize the debug support after everything is loaded
from sentry_scope.debug import init_debug_support

init_debug_support()
del init_debug_support
