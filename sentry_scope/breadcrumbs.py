from collections import deque

from sentry_scope._copy import deepcopy_databag
from sentry_scope.consts import DEFAULT_MAX_BREADCRUMBS

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Deque
    from typing import Dict
    from typing import Iterator
    from typing import List
    from typing import Optional

    from sentry_scope._types import Breadcrumb


class BreadcrumbBuffer:
    """Bounded log of breadcrumbs. The oldest crumbs are evicted first."""

    __slots__ = ("max_breadcrumbs", "buffer", "n_truncated")

    def __init__(self, max_breadcrumbs: int = DEFAULT_MAX_BREADCRUMBS) -> None:
        self.max_breadcrumbs = max_breadcrumbs
        self.buffer: "Deque[Breadcrumb]" = deque()
        self.n_truncated = 0

    def record(self, crumb: "Breadcrumb") -> None:
        self.buffer.append(crumb)

        while len(self.buffer) > self.max_breadcrumbs:
            self.buffer.popleft()
            self.n_truncated += 1

    @property
    def members(self) -> "List[Breadcrumb]":
        return list(self.buffer)

    def peek(self) -> "Optional[Breadcrumb]":
        """Returns the most recently recorded crumb."""
        return self.buffer[-1] if self.buffer else None

    def empty(self) -> bool:
        return not self.buffer

    def duplicate(self) -> "BreadcrumbBuffer":
        """Returns a buffer that can be appended to without affecting this one.

        The crumbs are copied too, so editing one in the duplicate does not
        show up here.
        """
        rv: "BreadcrumbBuffer" = object.__new__(self.__class__)
        rv.max_breadcrumbs = self.max_breadcrumbs
        rv.buffer = deque(deepcopy_databag(list(self.buffer)))
        rv.n_truncated = self.n_truncated
        return rv

    __copy__ = duplicate

    def to_dict(self) -> "Dict[str, Any]":
        return {"values": [dict(crumb) for crumb in self.buffer]}

    def __iter__(self) -> "Iterator[Breadcrumb]":
        return iter(self.buffer)

    def __len__(self) -> int:
        return len(self.buffer)

    def __repr__(self) -> str:
        return "<%s size=%d max=%d>" % (
            self.__class__.__name__,
            len(self.buffer),
            self.max_breadcrumbs,
        )
