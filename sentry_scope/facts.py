"""
Static descriptors of the operating system and the Python runtime.

They are computed once per process and seeded into the ``contexts`` of
every new scope.
"""

import platform
import sys
import threading

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any
    from typing import Dict
    from typing import Optional


def _compute_os_context() -> "Dict[str, Any]":
    uname = platform.uname()
    return {
        "name": uname.system or sys.platform,
        "version": uname.version,
        "build": uname.release,
        "kernel_version": uname.version,
    }


def _compute_runtime_context() -> "Dict[str, Any]":
    return {
        "name": platform.python_implementation(),
        "version": "%s.%s.%s" % (sys.version_info[:3]),
        "build": sys.version,
    }


class FactProvider:
    """Computes the OS and runtime descriptors on first access and keeps them.

    Computing the facts has no side effects, so the lock only makes sure
    every caller observes the same cached dicts.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._os_context: "Optional[Dict[str, Any]]" = None
        self._runtime_context: "Optional[Dict[str, Any]]" = None

    def _ensure_initialized(self) -> None:
        if self._runtime_context is not None:
            return

        with self._lock:
            if self._runtime_context is None:
                self._os_context = _compute_os_context()
                self._runtime_context = _compute_runtime_context()

    def os_context(self) -> "Dict[str, Any]":
        self._ensure_initialized()
        return self._os_context  # type: ignore

    def runtime_context(self) -> "Dict[str, Any]":
        self._ensure_initialized()
        return self._runtime_context  # type: ignore


_provider = FactProvider()


def get_fact_provider() -> "FactProvider":
    """Returns the process wide fact provider."""
    return _provider


def os_context() -> "Dict[str, Any]":
    return _provider.os_context()


def runtime_context() -> "Dict[str, Any]":
    return _provider.runtime_context()
