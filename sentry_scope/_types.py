from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from types import TracebackType
    from typing import Any
    from typing import Callable
    from typing import Dict
    from typing import Literal
    from typing import Optional
    from typing import Tuple
    from typing import Type
    from typing import TypedDict
    from typing import Union

    from sentry_scope.event import Event

    ExcInfo = Tuple[
        Optional[Type[BaseException]], Optional[BaseException], Optional[TracebackType]
    ]

    LogLevelStr = Literal["fatal", "error", "warning", "info", "debug"]

    Breadcrumb = TypedDict(
        "Breadcrumb",
        {
            "category": str,
            "data": Dict[str, Any],
            "level": LogLevelStr,
            "message": str,
            "timestamp": Union[datetime, str],
            "type": str,
        },
        total=False,
    )

    BreadcrumbHint = Dict[str, Any]

    # A plain function that can be registered as an event processor.
    EventProcessorFunc = Callable[[Event], Optional[Event]]
