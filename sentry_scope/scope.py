import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

from sentry_scope._copy import deepcopy_databag
from sentry_scope.breadcrumbs import BreadcrumbBuffer
from sentry_scope.consts import DEFAULT_LEVEL
from sentry_scope.facts import os_context, runtime_context
from sentry_scope.options import get_options
from sentry_scope.processors import as_event_processor
from sentry_scope.utils import (
    capture_internal_exception,
    check_argument_type,
    logger,
)

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Dict
    from typing import Generator
    from typing import List
    from typing import Optional
    from typing import Union

    from sentry_scope._types import (
        Breadcrumb,
        BreadcrumbHint,
        EventProcessorFunc,
    )
    from sentry_scope.consts import Level
    from sentry_scope.event import Event
    from sentry_scope.processors import EventProcessor


# Holds the scope of the running execution context (thread, task, request).
# Child contexts get a fork of it through `new_scope`.
_current_scope = ContextVar("sentry_scope_current", default=None)


def _merge(
    scope_value: "Dict[Any, Any]", event_value: "Optional[Dict[Any, Any]]"
) -> "Dict[Any, Any]":
    rv = deepcopy_databag(scope_value)
    if event_value:
        rv.update(event_value)
    return rv


class Scope:
    """The scope holds extra information that should be sent with all
    events that belong to it.

    A scope is not synchronized. Every execution context should hold its
    own scope and hand a :py:meth:`dup` of it to child contexts.
    """

    __slots__ = (
        "_transaction_names",
        "_contexts",
        "_extra",
        "_tags",
        "_user",
        "_level",
        "_breadcrumbs",
        "_fingerprint",
        "_event_processors",
        "_rack_env",
        "_max_breadcrumbs",
    )

    def __init__(self, max_breadcrumbs: "Optional[int]" = None) -> None:
        """
        :param max_breadcrumbs: Capacity of the breadcrumb buffer. Defaults to
            the `max_breadcrumbs` option at the time the scope is created.
        """
        if max_breadcrumbs is None:
            max_breadcrumbs = get_options()["max_breadcrumbs"]
        self._max_breadcrumbs: int = max_breadcrumbs

        self.clear()

    def clear(self) -> None:
        """Resets the scope to the state of a freshly created one.

        The breadcrumb buffer is replaced, not emptied, and keeps the
        capacity the scope was created with.
        """
        self._breadcrumbs: "BreadcrumbBuffer" = BreadcrumbBuffer(self._max_breadcrumbs)
        # copies, so nobody can edit the process wide facts through a scope
        self._contexts: "Dict[str, Dict[str, Any]]" = {
            "os": dict(os_context()),
            "runtime": dict(runtime_context()),
        }
        self._extra: "Dict[str, Any]" = {}
        self._tags: "Dict[str, Any]" = {}
        self._user: "Dict[str, Any]" = {}
        self._level: "Union[Level, str]" = DEFAULT_LEVEL
        self._fingerprint: "List[str]" = []
        self._transaction_names: "List[str]" = []
        self._event_processors: "List[EventProcessor]" = []
        self._rack_env: "Dict[str, Any]" = {}

    def dup(self) -> "Scope":
        """
        Returns a copy of this scope that shares no mutable data with it.

        The breadcrumb buffer is duplicated by the buffer itself, the dicts
        and lists are copied recursively. Event processors are shared.
        """
        rv: "Scope" = object.__new__(self.__class__)

        rv._breadcrumbs = self._breadcrumbs.duplicate()
        rv._contexts = deepcopy_databag(self._contexts)
        rv._extra = deepcopy_databag(self._extra)
        rv._tags = deepcopy_databag(self._tags)
        rv._user = deepcopy_databag(self._user)
        rv._transaction_names = deepcopy_databag(self._transaction_names)
        rv._fingerprint = deepcopy_databag(self._fingerprint)

        rv._level = self._level
        rv._max_breadcrumbs = self._max_breadcrumbs
        rv._rack_env = dict(self._rack_env)
        rv._event_processors = list(self._event_processors)

        return rv

    __copy__ = dup

    def fork(self) -> "Scope":
        """Returns a fork of this scope. Same as :py:meth:`dup`."""
        return self.dup()

    @classmethod
    def get_current_scope(cls) -> "Scope":
        """
        Returns the scope of the current execution context, creating it on
        first access.
        """
        current_scope = _current_scope.get()
        if current_scope is None:
            current_scope = cls()
            _current_scope.set(current_scope)

        return current_scope

    @classmethod
    def set_current_scope(cls, new_current_scope: "Scope") -> None:
        """
        Sets the given scope as the new current scope overwriting the existing current scope.

        :param new_current_scope: The scope to set as the new current scope.
        """
        _current_scope.set(new_current_scope)

    @property
    def tags(self) -> "Dict[str, Any]":
        return self._tags

    @property
    def user(self) -> "Dict[str, Any]":
        return self._user

    @property
    def extra(self) -> "Dict[str, Any]":
        return self._extra

    @property
    def contexts(self) -> "Dict[str, Dict[str, Any]]":
        return self._contexts

    @property
    def fingerprint(self) -> "List[str]":
        return self._fingerprint

    @property
    def level(self) -> "Union[Level, str]":
        return self._level

    @property
    def transaction_names(self) -> "List[str]":
        return self._transaction_names

    @property
    def transaction_name(self) -> "Optional[str]":
        """The most recently set transaction name, if any."""
        if self._transaction_names:
            return self._transaction_names[-1]
        return None

    @property
    def breadcrumbs(self) -> "BreadcrumbBuffer":
        return self._breadcrumbs

    @property
    def rack_env(self) -> "Dict[str, Any]":
        return self._rack_env

    @property
    def max_breadcrumbs(self) -> int:
        """Capacity of every breadcrumb buffer this scope creates."""
        return self._max_breadcrumbs

    @property
    def event_processors(self) -> "List[EventProcessor]":
        return self._event_processors

    def set_user(self, value: "Dict[str, Any]") -> None:
        """Replaces the user bound to the scope."""
        check_argument_type(value, dict)
        self._user = value

    def set_extras(self, extras: "Dict[str, Any]") -> None:
        """Replaces all extra data on the scope."""
        check_argument_type(extras, dict)
        self._extra = extras

    def set_extra(self, key: str, value: "Any") -> None:
        """Sets an extra key to a specific value."""
        self._extra[key] = value

    def remove_extra(self, key: str) -> None:
        """Removes a specific extra key."""
        self._extra.pop(key, None)

    def set_tags(self, tags: "Dict[str, Any]") -> None:
        """Replaces all tags on the scope.

        Unlike :py:meth:`set_tag`, tags that are not in ``tags`` are gone
        afterwards.

        :param tags: A dict of tag keys to tag values.
        """
        check_argument_type(tags, dict)
        self._tags = tags

    def set_tag(self, key: str, value: "Any") -> None:
        """
        Sets a tag for a key to a specific value.

        :param key: Key of the tag to set.

        :param value: Value of the tag to set.
        """
        self._tags[key] = value

    def remove_tag(self, key: str) -> None:
        """
        Removes a specific tag.

        :param key: Key of the tag to remove.
        """
        self._tags.pop(key, None)

    def set_contexts(self, contexts: "Dict[str, Dict[str, Any]]") -> None:
        """Replaces all contexts, including the seeded ``os`` and ``runtime`` ones."""
        check_argument_type(contexts, dict)
        self._contexts = contexts

    def set_context(self, key: str, value: "Dict[str, Any]") -> None:
        """
        Binds a context at a certain key to a specific value.
        """
        self._contexts[key] = value

    def remove_context(self, key: str) -> None:
        """Removes a context."""
        self._contexts.pop(key, None)

    def set_level(self, value: "Union[Level, str]") -> None:
        """
        Sets the level for the scope.

        :param value: The level to set.
        """
        self._level = value

    def set_transaction_name(self, name: str) -> None:
        """Pushes a transaction name. The last one pushed wins."""
        self._transaction_names.append(name)

    def set_fingerprint(self, fingerprint: "List[str]") -> None:
        """Overrides the default fingerprint of events from this scope."""
        check_argument_type(fingerprint, list)
        self._fingerprint = fingerprint

    def set_rack_env(self, env: "Optional[Dict[str, Any]]") -> None:
        """Binds the environment of the request being handled."""
        self._rack_env = env or {}

    def add_breadcrumb(
        self,
        crumb: "Optional[Breadcrumb]" = None,
        hint: "Optional[BreadcrumbHint]" = None,
        **kwargs: "Any",
    ) -> None:
        """
        Adds a breadcrumb.

        :param crumb: Dictionary with the breadcrumb data. Keyword arguments
            are merged into it.

        :param hint: An optional value that can be used by `before_breadcrumb`
            to customize the breadcrumbs that are recorded.
        """
        before_breadcrumb = get_options().get("before_breadcrumb")

        crumb = dict(crumb or ())  # type: ignore
        crumb.update(kwargs)  # type: ignore
        if not crumb:
            return

        hint = dict(hint or ())

        if crumb.get("timestamp") is None:
            crumb["timestamp"] = datetime.now(timezone.utc)
        if crumb.get("type") is None:
            crumb["type"] = "default"

        if before_breadcrumb is not None:
            new_crumb = before_breadcrumb(crumb, hint)
        else:
            new_crumb = crumb

        if new_crumb is not None:
            self._breadcrumbs.record(new_crumb)
        else:
            logger.info("before breadcrumb dropped breadcrumb (%s)", crumb)

    def clear_breadcrumbs(self) -> None:
        """Replaces the breadcrumb buffer with an empty one.

        Events already holding the old buffer keep their breadcrumbs.
        """
        self._breadcrumbs = BreadcrumbBuffer(self._max_breadcrumbs)

    def add_event_processor(
        self,
        processor: "Union[EventProcessor, EventProcessorFunc]",
    ) -> None:
        """Register a scope local event processor on the scope.

        :param processor: An :py:class:`EventProcessor` or a function taking
            and returning an event. Processors run in the order they were
            added.
        """
        self._event_processors.append(as_event_processor(processor))

    def _drop(self, cause: "Any", ty: str) -> "Optional[Any]":
        logger.info("%s (%s) dropped event", ty, cause)
        return None

    def run_event_processors(self, event: "Event") -> "Optional[Event]":
        """
        Runs the event processors on the event and returns the modified event.

        Exceptions raised by a processor are not caught.
        """
        for event_processor in self._event_processors:
            new_event = event_processor.process(event)
            if new_event is None:
                return self._drop(event_processor, "event processor")
            event = new_event

        return event

    def apply_to_event(self, event: "Event") -> "Optional[Event]":
        """Applies the information contained on the scope to the given event.

        Dict fields are merged with the event's values taking precedence.
        The level is only applied when the event has none. Fingerprint,
        transaction, breadcrumbs and request environment are replaced.

        The scope's dicts and fingerprint are copied recursively onto the
        event, so processors editing them cannot change the scope. The
        breadcrumb buffer and request environment are shared with it.

        Returns None if an event processor dropped the event.
        """
        event.tags = _merge(self._tags, event.tags)
        event.user = _merge(self._user, event.user)
        event.extra = _merge(self._extra, event.extra)
        event.contexts = _merge(self._contexts, event.contexts)
        event.fingerprint = list(self._fingerprint)
        if event.level is None:
            event.level = self._level
        event.transaction = self.transaction_name
        event.breadcrumbs = self._breadcrumbs
        event.rack_env = self._rack_env

        return self.run_event_processors(event)

    def __repr__(self) -> str:
        return "<%s id=%s transaction=%r level=%s>" % (
            self.__class__.__name__,
            hex(id(self)),
            self.transaction_name,
            self._level,
        )


@contextmanager
def new_scope() -> "Generator[Scope, None, None]":
    """
    Context manager that forks the current scope and runs the wrapped code in it.
    After the wrapped code is executed, the original scope is restored.

    Example Usage:

    .. code-block:: python

        import sentry_scope

        with sentry_scope.new_scope() as scope:
            scope.set_tag("color", "green")
            event = scope.apply_to_event(Event())  # has the `color` tag

        # the current scope does not have the `color` tag

    """
    # fork current scope
    current_scope = Scope.get_current_scope()
    forked_scope = current_scope.fork()
    token = _current_scope.set(forked_scope)

    try:
        yield forked_scope

    finally:
        try:
            # restore original scope
            _current_scope.reset(token)
        except (LookupError, ValueError):
            capture_internal_exception(sys.exc_info())


@contextmanager
def use_scope(scope: "Scope") -> "Generator[Scope, None, None]":
    """
    Context manager that uses the given `scope` and runs the wrapped code in it.
    After the wrapped code is executed, the original scope is restored.
    """
    # set given scope as current scope
    token = _current_scope.set(scope)

    try:
        yield scope

    finally:
        try:
            # restore original scope
            _current_scope.reset(token)
        except (LookupError, ValueError):
            capture_internal_exception(sys.exc_info())
