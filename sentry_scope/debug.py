import sys
import logging
from logging import LogRecord

from sentry_scope.options import get_options
from sentry_scope.utils import logger


class _OptionsBasedDebugFilter(logging.Filter):
    def filter(self, record: "LogRecord") -> bool:
        return bool(get_options()["debug"])


def init_debug_support() -> None:
    if not logger.handlers:
        configure_logger()


def configure_logger() -> None:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(" [sentry] %(levelname)s: %(message)s"))
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG)
    logger.addFilter(_OptionsBasedDebugFilter())
