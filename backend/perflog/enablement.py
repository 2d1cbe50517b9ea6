"""
Enablement predicates for PerformanceTracker.

Each predicate is a zero-argument callable evaluated once per ``track`` call.
"""

import os
from typing import Callable

from .core.config import Settings

_TRUE_VALUES = ("1", "true", "yes")


def always_enabled() -> bool:
    return True


def never_enabled() -> bool:
    return False


def env_flag(key: str, default: bool = True) -> Callable[[], bool]:
    """Predicate that re-reads environment variable ``key`` on every call."""

    def is_enabled() -> bool:
        raw = os.environ.get(key)
        if raw is None:
            return default
        return raw.strip().lower() in _TRUE_VALUES

    return is_enabled


def settings_flag(settings: Settings) -> Callable[[], bool]:
    """Predicate over ``settings.perf_logging_enabled``."""
    return lambda: settings.perf_logging_enabled
