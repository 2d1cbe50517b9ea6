"""
Wiring a PerformanceTracker from settings.
"""

import logging
from typing import Optional

from .collectors import InMemoryCollector, JsonLinesFileCollector, LoggingCollector
from .core.config import Settings, get_settings
from .enablement import env_flag
from .errors import ConfigError
from .performance.protocols import Collector
from .performance.tracker import PerformanceTracker

logger = logging.getLogger("perflog.factory")

ENABLED_ENV_VAR = "PERF_LOGGING_ENABLED"


def build_collector(settings: Settings) -> Collector:
    """Create the collector named by ``settings.perf_collector``.

    Raises:
        ConfigError: If the collector name is unknown
    """
    kind = settings.perf_collector.strip().lower()
    if kind == "memory":
        return InMemoryCollector()
    if kind == "logging":
        return LoggingCollector()
    if kind == "jsonl":
        return JsonLinesFileCollector(settings.perf_output_dir)
    raise ConfigError(f"Unknown performance collector: {settings.perf_collector}")


def build_tracker(
    settings: Optional[Settings] = None,
    collector: Optional[Collector] = None,
) -> PerformanceTracker:
    """Create a tracker from settings.

    The enablement check reads ``PERF_LOGGING_ENABLED`` on every ``track``
    call, falling back to ``settings.perf_logging_enabled``.
    """
    if settings is None:
        settings = get_settings()
    if collector is None:
        collector = build_collector(settings)
    logger.info(
        f"Performance tracker '{settings.perf_type_name}' using {type(collector).__name__}"
    )
    return PerformanceTracker(
        collector=collector,
        type_name=settings.perf_type_name,
        is_log_enabled=env_flag(ENABLED_ENV_VAR, default=settings.perf_logging_enabled),
    )
