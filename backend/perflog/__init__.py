"""
perflog: hierarchical performance measurements flushed as one batch per root.

Quick-start::

    from perflog import build_tracker

    tracker = build_tracker()
    with tracker.track("import_job") as job:
        with job.track_child("parse"):
            ...
"""

from .collectors import InMemoryCollector, JsonLinesFileCollector, LoggingCollector
from .enablement import always_enabled, env_flag, never_enabled, settings_flag
from .errors import ConfigError, MeasurementClosedError, PerfLogError
from .factory import build_collector, build_tracker
from .performance import (
    Collector,
    MeasurementRecord,
    PerformanceMeasurement,
    PerformanceTracker,
    StubMeasurement,
    build_tree,
    parse_batch,
)

__all__ = [
    "Collector",
    "ConfigError",
    "InMemoryCollector",
    "JsonLinesFileCollector",
    "LoggingCollector",
    "MeasurementClosedError",
    "MeasurementRecord",
    "PerfLogError",
    "PerformanceMeasurement",
    "PerformanceTracker",
    "StubMeasurement",
    "always_enabled",
    "build_collector",
    "build_tracker",
    "build_tree",
    "env_flag",
    "never_enabled",
    "parse_batch",
    "settings_flag",
]
