"""
Performance measurement module.

Contains:
- PerformanceTracker and its real/stub measurements
- Flat record serializer
- Batch reader for emitted payloads
"""

from .protocols import (
    Collector,
    PerformanceMeasurementProtocol,
    PerformanceTrackerProtocol,
)
from .records import MeasurementRecord, build_tree, parse_batch
from .tracker import (
    NULL_MEASUREMENT,
    PerformanceMeasurement,
    PerformanceTracker,
    StubMeasurement,
)
from .types import LogType, NumericFact

__all__ = [
    "Collector",
    "LogType",
    "MeasurementRecord",
    "NULL_MEASUREMENT",
    "NumericFact",
    "PerformanceMeasurement",
    "PerformanceMeasurementProtocol",
    "PerformanceTracker",
    "PerformanceTrackerProtocol",
    "StubMeasurement",
    "build_tree",
    "parse_batch",
]
