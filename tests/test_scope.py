import copy
from collections import Counter, OrderedDict, defaultdict

import pytest

import sentry_scope
from sentry_scope import Event, EventProcessor, Level, Scope, TypeMismatch
from sentry_scope.breadcrumbs import BreadcrumbBuffer
from sentry_scope.facts import os_context, runtime_context


def _state(scope):
    return {
        "tags": scope.tags,
        "user": scope.user,
        "extra": scope.extra,
        "contexts": scope.contexts,
        "fingerprint": scope.fingerprint,
        "level": scope.level,
        "transaction_names": scope.transaction_names,
        "rack_env": scope.rack_env,
        "event_processors": scope.event_processors,
        "breadcrumbs": scope.breadcrumbs.members,
    }


def test_defaults():
    scope = Scope()

    assert scope.tags == {}
    assert scope.user == {}
    assert scope.extra == {}
    assert scope.fingerprint == []
    assert scope.transaction_names == []
    assert scope.transaction_name is None
    assert scope.level == Level.ERROR
    assert scope.rack_env == {}
    assert scope.event_processors == []
    assert isinstance(scope.breadcrumbs, BreadcrumbBuffer)
    assert scope.breadcrumbs.empty()
    assert scope.contexts == {"os": os_context(), "runtime": runtime_context()}


def test_seeded_contexts_do_not_alias_facts():
    scope = Scope()
    scope.contexts["os"]["name"] = "Blafasel"

    assert os_context()["name"] != "Blafasel"
    assert Scope().contexts["os"] == os_context()


def test_clear_resets_to_fresh_state():
    scope = Scope()
    old_breadcrumbs = scope.breadcrumbs

    scope.set_tag("a", "b")
    scope.set_user({"id": "42"})
    scope.set_extra("k", "v")
    scope.set_context("device", {"model": "x"})
    scope.set_fingerprint(["foo"])
    scope.set_level(Level.WARNING)
    scope.set_transaction_name("/orders")
    scope.set_rack_env({"REQUEST_METHOD": "GET"})
    scope.add_breadcrumb(message="hello")
    scope.add_event_processor(lambda event: event)

    scope.clear()

    assert _state(scope) == _state(Scope())
    assert scope.breadcrumbs is not old_breadcrumbs
    assert len(old_breadcrumbs) == 1


def test_incremental_setters_keep_other_keys():
    scope = Scope()
    scope.set_tags({"a": "1"})
    scope.set_tag("b", "2")
    scope.set_extras({"x": 1})
    scope.set_extra("y", 2)
    scope.set_context("device", {"model": "x"})

    assert scope.tags == {"a": "1", "b": "2"}
    assert scope.extra == {"x": 1, "y": 2}
    assert set(scope.contexts) == {"os", "runtime", "device"}


def test_full_replace_setters():
    scope = Scope()
    scope.set_tag("old", "1")
    scope.set_tags({"new": "2"})
    scope.set_contexts({"device": {"model": "x"}})

    assert scope.tags == {"new": "2"}
    assert scope.contexts == {"device": {"model": "x"}}


def test_remove_keys():
    scope = Scope()
    scope.set_tag("a", "1")
    scope.set_extra("b", "2")
    scope.set_context("c", {})

    scope.remove_tag("a")
    scope.remove_extra("b")
    scope.remove_context("c")
    scope.remove_tag("missing")

    assert scope.tags == {}
    assert scope.extra == {}
    assert "c" not in scope.contexts


@pytest.mark.parametrize(
    "setter",
    ["set_user", "set_extras", "set_tags", "set_contexts"],
)
def test_dict_setters_reject_other_types(setter):
    scope = Scope()

    with pytest.raises(TypeMismatch) as excinfo:
        getattr(scope, setter)(42)

    assert str(excinfo.value) == "expected the argument to be a dict, got int (42)"
    assert excinfo.value.expected is dict
    assert excinfo.value.actual is int
    assert excinfo.value.value == 42


def test_set_fingerprint_rejects_non_lists():
    scope = Scope()

    with pytest.raises(TypeMismatch) as excinfo:
        scope.set_fingerprint("foo")

    assert "expected the argument to be a list, got str" in str(excinfo.value)
    assert scope.fingerprint == []


def test_type_mismatch_is_a_type_error():
    with pytest.raises(TypeError):
        Scope().set_user(None)


def test_level_is_not_validated():
    scope = Scope()
    scope.set_level("custom")

    assert scope.level == "custom"


def test_transaction_name_stack():
    scope = Scope()
    scope.set_transaction_name("a")
    scope.set_transaction_name("b")

    assert scope.transaction_name == "b"
    assert scope.transaction_names == ["a", "b"]

    event = scope.apply_to_event(Event())
    assert event.transaction == "b"


def test_set_rack_env_none_becomes_empty():
    scope = Scope()
    scope.set_rack_env({"PATH_INFO": "/"})
    scope.set_rack_env(None)

    assert scope.rack_env == {}


def test_clear_breadcrumbs_installs_new_buffer():
    scope = Scope()
    scope.add_breadcrumb(message="first")
    event = scope.apply_to_event(Event())

    scope.clear_breadcrumbs()
    scope.add_breadcrumb(message="second")

    assert [c["message"] for c in event.breadcrumbs] == ["first"]
    assert [c["message"] for c in scope.breadcrumbs] == ["second"]


def test_fork_independence():
    s1 = Scope()
    s2 = s1.dup()
    s2.set_tag("k", "v")

    assert "k" not in s1.tags

    s1.set_extra("only", "s1")
    assert "only" not in s2.extra


def test_fork_copies_nested_values():
    s1 = Scope()
    s1.set_context("character", {"name": "Mighty", "stats": {"level": 1}})
    s1.set_user({"id": "1", "roles": ["admin"]})
    s1.set_fingerprint(["a"])
    s1.set_transaction_name("t1")
    s1.add_breadcrumb(message="crumb", data={"k": "v"})

    s2 = s1.dup()
    s2.contexts["character"]["stats"]["level"] = 2
    s2.user["roles"].append("guest")
    s2.fingerprint.append("b")
    s2.set_transaction_name("t2")
    s2.add_breadcrumb(message="other")
    s2.breadcrumbs.members[0]["message"] = "edited"

    assert s1.contexts["character"] == {"name": "Mighty", "stats": {"level": 1}}
    assert s1.user == {"id": "1", "roles": ["admin"]}
    assert s1.fingerprint == ["a"]
    assert s1.transaction_names == ["t1"]
    assert [c["message"] for c in s1.breadcrumbs] == ["crumb"]
    assert len(s2.breadcrumbs) == 2


def test_fork_copies_scalars_and_processors():
    s1 = Scope()
    s1.set_level(Level.INFO)
    s1.set_rack_env({"REQUEST_METHOD": "POST"})
    s1.add_event_processor(lambda event: event)

    s2 = s1.dup()
    s2.set_level(Level.DEBUG)
    s2.rack_env["REQUEST_METHOD"] = "GET"
    s2.add_event_processor(lambda event: event)

    assert s1.level == Level.INFO
    assert s1.rack_env == {"REQUEST_METHOD": "POST"}
    assert len(s1.event_processors) == 1
    assert s2.event_processors[0] is s1.event_processors[0]


def test_copy_and_fork_are_dup():
    s1 = Scope()
    s1.set_tag("foo", "bar")

    for s2 in (copy.copy(s1), s1.fork()):
        assert isinstance(s2, Scope)
        assert s2.tags == {"foo": "bar"}
        assert s2.tags is not s1.tags


def test_original_mutation_does_not_affect_fork():
    s1 = Scope()
    s1.set_tag("a", "1")
    s2 = s1.dup()

    s1.set_tag("b", "2")
    s1.contexts["os"]["name"] = "changed"

    assert s2.tags == {"a": "1"}
    assert s2.contexts["os"]["name"] == os_context()["name"]


def test_apply_merges_dicts_with_event_precedence():
    scope = Scope()
    scope.set_tags({"a": "1", "shared": "scope"})
    scope.set_user({"id": "42"})
    scope.set_extras({"x": 1})
    scope.set_context("device", {"model": "scope"})

    event = Event()
    event.tags = {"b": "2", "shared": "event"}
    event.user = {"email": "jane@example.com"}
    event.extra = {"x": 2}
    event.contexts = {"device": {"model": "event"}}

    rv = scope.apply_to_event(event)

    assert rv is event
    assert event.tags == {"a": "1", "b": "2", "shared": "event"}
    assert event.user == {"id": "42", "email": "jane@example.com"}
    assert event.extra == {"x": 2}
    assert event.contexts["device"] == {"model": "event"}
    assert event.contexts["os"] == os_context()
    assert event.contexts["runtime"] == runtime_context()


def test_apply_tag_collision():
    scope = Scope()
    scope.set_tags({"a": "1"})
    event = Event()
    event.tags = {"a": "2"}

    scope.apply_to_event(event)

    assert event.tags == {"a": "2"}


def test_apply_does_not_modify_scope_dicts():
    scope = Scope()
    scope.set_tags({"a": "1"})
    event = Event()
    event.tags = {"b": "2"}

    scope.apply_to_event(event)

    assert scope.tags == {"a": "1"}


def test_fingerprint_is_replaced():
    scope = Scope()
    scope.set_fingerprint(["new"])
    event = Event()
    event.fingerprint = ["old"]

    scope.apply_to_event(event)

    assert event.fingerprint == ["new"]


def test_empty_fingerprint_still_replaces():
    event = Event()
    event.fingerprint = ["old"]

    Scope().apply_to_event(event)

    assert event.fingerprint == []


def test_level_applied_when_event_has_none():
    scope = Scope()
    scope.set_level(Level.WARNING)

    event = scope.apply_to_event(Event())

    assert event.level == Level.WARNING


def test_event_level_is_preserved():
    scope = Scope()
    scope.set_level(Level.WARNING)

    event = scope.apply_to_event(Event(level=Level.FATAL))

    assert event.level == Level.FATAL


def test_default_level_is_error():
    event = Scope().apply_to_event(Event())

    assert event.level == Level.ERROR


def test_apply_replaces_breadcrumbs_and_rack_env():
    scope = Scope()
    scope.add_breadcrumb(message="crumb")
    scope.set_rack_env({"PATH_INFO": "/orders"})

    event = Event()
    event.rack_env = {"PATH_INFO": "/old"}
    event.breadcrumbs = BreadcrumbBuffer()

    scope.apply_to_event(event)

    assert event.breadcrumbs is scope.breadcrumbs
    assert event.rack_env == {"PATH_INFO": "/orders"}


def test_transaction_is_none_without_names():
    event = Event()
    event.transaction = "from event"

    Scope().apply_to_event(event)

    assert event.transaction is None


def test_processors_compose_in_registration_order():
    scope = Scope()

    def first(event):
        event.extra["markers"] = ["first"]
        return event

    def second(event):
        event.extra["markers"].append("second")
        return event

    scope.add_event_processor(first)
    scope.add_event_processor(second)

    event = scope.apply_to_event(Event())

    assert event.extra["markers"] == ["first", "second"]


def test_processor_interface_and_replacement_event():
    replacement = Event(message="replacement")

    class Replace(EventProcessor):
        def process(self, event):
            return replacement

    class Mark(EventProcessor):
        def process(self, event):
            event.tags["seen"] = event.message
            return event

    scope = Scope()
    scope.add_event_processor(Replace())
    scope.add_event_processor(Mark())

    rv = scope.apply_to_event(Event(message="original"))

    assert rv is replacement
    assert rv.tags == {"seen": "replacement"}


def test_processor_returning_none_drops_event(capture_processed_events):
    processor, seen = capture_processed_events

    scope = Scope()
    scope.add_event_processor(lambda event: None)
    scope.add_event_processor(processor)

    assert scope.apply_to_event(Event()) is None
    assert seen == []


def test_processor_exception_propagates():
    scope = Scope()
    scope.set_tag("merged", "yes")
    calls = []

    def broken(event):
        raise ValueError("processor failed")

    def after(event):
        calls.append(event)
        return event

    scope.add_event_processor(broken)
    scope.add_event_processor(after)

    event = Event()
    with pytest.raises(ValueError, match="processor failed"):
        scope.apply_to_event(event)

    assert calls == []
    assert event.tags == {"merged": "yes"}


def test_add_event_processor_rejects_non_callables():
    with pytest.raises(TypeError):
        Scope().add_event_processor(42)


def test_repr():
    scope = Scope()
    scope.set_transaction_name("/orders")

    assert "transaction='/orders'" in repr(scope)


def test_fork_copies_dict_and_list_subclasses():
    s1 = Scope()
    s1.set_tags(OrderedDict(a="1"))
    calls = defaultdict(list)
    calls["seen"].append(1)
    s1.set_context("calls", calls)
    s1.set_extra("counts", Counter(a=1))

    s2 = s1.dup()
    s2.set_tag("k", "v")
    s2.contexts["calls"]["seen"].append(2)
    s2.contexts["calls"]["new"].append(3)
    s2.extra["counts"]["a"] += 1

    assert "k" not in s1.tags
    assert s1.contexts["calls"] == {"seen": [1]}
    assert s1.extra["counts"] == Counter(a=1)
    assert isinstance(s2.tags, OrderedDict)
    assert isinstance(s2.contexts["calls"], defaultdict)


def test_max_breadcrumbs_is_fixed_at_creation(sentry_init):
    scope = Scope()
    sentry_init(max_breadcrumbs=5)

    scope.clear_breadcrumbs()
    assert scope.breadcrumbs.max_breadcrumbs == 100

    scope.clear()
    assert scope.breadcrumbs.max_breadcrumbs == 100
    assert Scope().max_breadcrumbs == 5


def test_explicit_max_breadcrumbs():
    scope = Scope(max_breadcrumbs=3)
    assert scope.breadcrumbs.max_breadcrumbs == 3

    scope.clear_breadcrumbs()
    assert scope.breadcrumbs.max_breadcrumbs == 3

    scope.clear()
    assert scope.breadcrumbs.max_breadcrumbs == 3

    assert scope.dup().breadcrumbs.max_breadcrumbs == 3
    assert scope.dup().max_breadcrumbs == 3


def test_get_current_scope_uses_subclass():
    class CustomScope(Scope):
        __slots__ = ()

    scope = CustomScope.get_current_scope()

    assert type(scope) is CustomScope
    assert sentry_scope.get_current_scope() is scope


def test_processors_editing_nested_values_do_not_change_scope():
    scope = Scope()
    scope.set_user({"id": "42", "roles": ["admin"]})
    scope.set_extra("data", {"k": "v"})

    def edit(event):
        event.contexts["os"]["name"] = "edited"
        event.user["roles"].append("guest")
        event.extra["data"]["k"] = "edited"
        event.fingerprint.append("edited")
        return event

    scope.add_event_processor(edit)
    scope.apply_to_event(Event())

    assert scope.contexts["os"]["name"] != "edited"
    assert scope.user == {"id": "42", "roles": ["admin"]}
    assert scope.extra == {"data": {"k": "v"}}
    assert scope.fingerprint == []
