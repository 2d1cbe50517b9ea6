import logging
import sys
from pathlib import Path
from typing import Generator

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from perflog.collectors import InMemoryCollector
from perflog.core.config import get_settings
from perflog.enablement import always_enabled
from perflog.logging_utils import clear_context
from perflog.performance import PerformanceTracker


TYPE_NAME = "typeName"


@pytest.fixture
def collector() -> InMemoryCollector:
    return InMemoryCollector()


@pytest.fixture
def tracker(collector: InMemoryCollector) -> PerformanceTracker:
    return PerformanceTracker(collector, TYPE_NAME, always_enabled)


@pytest.fixture(autouse=True)
def reset_settings_and_context(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("PERF_LOGGING_ENABLED", raising=False)
    get_settings.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    clear_context()


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Snapshot root and package logger state around setup_logging calls."""
    root = logging.getLogger()
    package = logging.getLogger("perflog")
    saved = (
        list(root.handlers),
        root.level,
        list(package.handlers),
        package.level,
        package.propagate,
    )
    yield
    for handler in package.handlers:
        if handler not in saved[2]:
            handler.close()
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    package.handlers[:] = saved[2]
    package.setLevel(saved[3])
    package.propagate = saved[4]
