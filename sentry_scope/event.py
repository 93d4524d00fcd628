import uuid
from datetime import datetime, timezone

from sentry_scope.consts import Level
from sentry_scope.utils import to_timestamp

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Dict
    from typing import List
    from typing import Optional

    from sentry_scope.breadcrumbs import BreadcrumbBuffer


class Event:
    """
    A single reportable error or message.

    The scope fills in ``tags``, ``user``, ``extra``, ``contexts``,
    ``fingerprint``, ``level``, ``transaction``, ``breadcrumbs`` and
    ``rack_env`` when it is applied to the event. Values set on the event
    before that take precedence over the scope's for the dict fields and
    for ``level``.
    """

    PLATFORM = "python"

    Level = Level

    __slots__ = (
        "event_id",
        "timestamp",
        "platform",
        "message",
        "level",
        "transaction",
        "tags",
        "user",
        "extra",
        "contexts",
        "fingerprint",
        "breadcrumbs",
        "rack_env",
    )

    def __init__(
        self,
        message: "Optional[str]" = None,
        level: "Optional[Level]" = None,
    ) -> None:
        self.event_id: str = uuid.uuid4().hex
        self.timestamp: datetime = datetime.now(timezone.utc)
        self.platform: str = self.PLATFORM
        self.message = message
        self.level = level
        self.transaction: "Optional[str]" = None

        self.tags: "Dict[str, Any]" = {}
        self.user: "Dict[str, Any]" = {}
        self.extra: "Dict[str, Any]" = {}
        self.contexts: "Dict[str, Dict[str, Any]]" = {}
        self.fingerprint: "List[str]" = []
        self.breadcrumbs: "Optional[BreadcrumbBuffer]" = None
        self.rack_env: "Dict[str, Any]" = {}

    def to_dict(self) -> "Dict[str, Any]":
        """Returns the event as a JSON compatible dict."""
        rv: "Dict[str, Any]" = {
            "event_id": self.event_id,
            "timestamp": to_timestamp(self.timestamp),
            "platform": self.platform,
            "tags": dict(self.tags),
            "user": dict(self.user),
            "extra": dict(self.extra),
            "contexts": dict(self.contexts),
            "fingerprint": list(self.fingerprint),
        }

        if self.message is not None:
            rv["message"] = self.message
        if self.level is not None:
            # levels are not validated, so plain strings end up here too
            rv["level"] = getattr(self.level, "value", self.level)
        if self.transaction is not None:
            rv["transaction"] = self.transaction
        if self.rack_env:
            rv["request"] = {"env": dict(self.rack_env)}

        if self.breadcrumbs is not None:
            crumbs = self.breadcrumbs.to_dict()
            for crumb in crumbs["values"]:
                if isinstance(crumb.get("timestamp"), datetime):
                    crumb["timestamp"] = to_timestamp(crumb["timestamp"])
            rv["breadcrumbs"] = crumbs

        return rv

    def __repr__(self) -> str:
        return "<Event id=%s level=%s transaction=%r>" % (
            self.event_id,
            self.level,
            self.transaction,
        )
