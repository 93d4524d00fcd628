"""
Recursive copy of the data a scope holds.

Scopes store string keyed dicts of scalars and nested dicts, and lists of
strings. Mutable mappings, sequences and sets (subclasses included) are
copied, as are plain tuples holding any of them. Anything else is treated
as an opaque value and kept by reference.
"""

import copy
from collections.abc import Mapping, MutableSequence, MutableSet

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Callable
    from typing import Dict
    from typing import Optional


def deepcopy_databag(x: "Any", memo: "Optional[Dict[int, Any]]" = None) -> "Any":
    """Copies dicts, lists, tuples and sets recursively.

    Shared or cyclic containers are copied once and the copy is reused,
    like :py:func:`copy.deepcopy` does.
    """
    if memo is None:
        memo = {}

    cls = type(x)

    copier = _deepcopy_dispatch.get(cls)
    if copier is None:
        if isinstance(x, dict):
            copier = _deepcopy_dict_subclass
        elif isinstance(x, list):
            copier = _deepcopy_list_subclass
        elif isinstance(x, Mapping):
            copier = _deepcopy_dict
        elif isinstance(x, MutableSequence):
            copier = _deepcopy_list
        elif isinstance(x, MutableSet):
            copier = _deepcopy_set
        else:
            return x

    d = id(x)
    y = memo.get(d, _nil)
    if y is not _nil:
        return y

    return copier(x, memo)


_nil = object()

_deepcopy_dispatch = d = {}  # type: Dict[type, Callable[[Any, Dict[int, Any]], Any]]


def _deepcopy_list(x: "Any", memo: "Dict[int, Any]") -> "Any":
    y = []  # type: list[Any]
    memo[id(x)] = y
    append = y.append
    for a in x:
        append(deepcopy_databag(a, memo))
    return y


d[list] = _deepcopy_list


def _deepcopy_dict(x: "Any", memo: "Dict[int, Any]") -> "Any":
    y = {}  # type: dict[Any, Any]
    memo[id(x)] = y
    for key, value in x.items():
        y[key] = deepcopy_databag(value, memo)
    return y


d[dict] = _deepcopy_dict


def _deepcopy_tuple(x: "Any", memo: "Dict[int, Any]") -> "Any":
    y = tuple(deepcopy_databag(a, memo) for a in x)
    # Tuples of immutable values are their own copy.
    if all(a is b for a, b in zip(x, y)):
        return x
    memo[id(x)] = y
    return y


d[tuple] = _deepcopy_tuple


def _deepcopy_set(x: "Any", memo: "Dict[int, Any]") -> "Any":
    # Set members are hashable, so they are never mutable containers.
    y = set(x)
    memo[id(x)] = y
    return y


d[set] = _deepcopy_set

del d


def _deepcopy_dict_subclass(x: "Any", memo: "Dict[int, Any]") -> "Any":
    # A shallow copy keeps the class and its state (e.g. a default_factory).
    y = copy.copy(x)
    y.clear()
    memo[id(x)] = y
    for key, value in x.items():
        y[key] = deepcopy_databag(value, memo)
    return y


def _deepcopy_list_subclass(x: "Any", memo: "Dict[int, Any]") -> "Any":
    y = copy.copy(x)
    del y[:]
    memo[id(x)] = y
    for a in x:
        y.append(deepcopy_databag(a, memo))
    return y
