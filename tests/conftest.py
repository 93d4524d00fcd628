import pytest

import sentry_scope
from sentry_scope import options, scope


@pytest.fixture(autouse=True)
def clean_scopes():
    """
    Resets the current scope for every test to avoid leaking data between tests.
    """
    scope._current_scope.set(None)


@pytest.fixture(autouse=True)
def clean_options():
    yield
    options.reset_options()


@pytest.fixture
def sentry_init():
    def inner(**kwargs):
        return sentry_scope.init(**kwargs)

    return inner


@pytest.fixture
def capture_processed_events():
    """Returns a processor and the list it records every event it sees into."""
    events = []

    def processor(event):
        events.append(event)
        return event

    return processor, events
