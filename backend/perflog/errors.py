"""
Error hierarchy for perflog.

Sink (collector) failures are not wrapped: they propagate to the caller of
``close()`` unchanged.
"""


class PerfLogError(Exception):
    """Base class for all perflog errors."""
    pass


class MeasurementClosedError(PerfLogError, RuntimeError):
    """Raised when a closed measurement is mutated or asked for a child."""

    def __init__(self, operation_name: str, action: str):
        self.operation_name = operation_name
        self.action = action
        super().__init__(f"Cannot {action} on closed measurement: {operation_name}")


class ConfigError(PerfLogError, ValueError):
    """Raised when the tracker cannot be wired from settings."""
    pass


__all__ = [
    "PerfLogError",
    "MeasurementClosedError",
    "ConfigError",
]
