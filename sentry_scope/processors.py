from abc import ABC, abstractmethod

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Optional
    from typing import Union

    from sentry_scope._types import EventProcessorFunc
    from sentry_scope.event import Event


class EventProcessor(ABC):
    """Baseclass for event processors registered on a scope.

    Processors run in registration order when the scope is applied to an
    event. Each one receives the event returned by the previous one.
    """

    @abstractmethod
    def process(self, event: "Event") -> "Optional[Event]":
        """
        Transform the event and return it.

        Returning a different event object replaces the event for the
        processors that follow. Returning None drops the event. Exceptions
        are not caught by the scope.
        """
        pass


class FunctionEventProcessor(EventProcessor):
    """Adapts a plain function to the :py:class:`EventProcessor` interface."""

    def __init__(self, func: "EventProcessorFunc") -> None:
        self.func = func

    def process(self, event: "Event") -> "Optional[Event]":
        return self.func(event)

    def __repr__(self) -> str:
        return "<%s func=%r>" % (self.__class__.__name__, self.func)


def as_event_processor(
    processor: "Union[EventProcessor, EventProcessorFunc]",
) -> "EventProcessor":
    if isinstance(processor, EventProcessor):
        return processor

    if not callable(processor):
        raise TypeError(
            "event processor must be an EventProcessor or a callable, got %s"
            % type(processor).__name__
        )

    return FunctionEventProcessor(processor)
