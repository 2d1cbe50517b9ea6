"""
Protocol definitions for the performance module.

Real and stub measurements share one capability set; collectors are the
external sink the root measurement flushes into.
"""

from typing import Any, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class Collector(Protocol):
    """Protocol for sinks receiving serialized measurement batches."""

    def collect(self, type_name: str, payload: str) -> None:
        """Receive one batch.

        Args:
            type_name: Routing label configured on the tracker
            payload: Bracketed array of flat record objects

        Note:
            Called at most once per root measurement. Exceptions raised
            here propagate to the caller closing the root.
        """
        ...


@runtime_checkable
class PerformanceMeasurementProtocol(Protocol):
    """Protocol for measurement scopes (real or stub)."""

    def track_child(self, operation_name: str) -> "PerformanceMeasurementProtocol":
        """Open a nested measurement whose parent is this one."""
        ...

    def add_value(self, name: str, unit: str, value: int) -> None:
        """Append a numeric fact; repeated names are all retained."""
        ...

    def add_key_value(self, key: str, value: Union[str, bool]) -> None:
        """Upsert a string or bool fact; the last write per key wins."""
        ...

    def close(self) -> None:
        """Finish the measurement and flush it to the parent or the sink."""
        ...

    def __enter__(self) -> "PerformanceMeasurementProtocol":
        ...

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> Optional[bool]:
        ...


@runtime_checkable
class PerformanceTrackerProtocol(Protocol):
    """Protocol for measurement factories."""

    def track(self, operation_name: str) -> PerformanceMeasurementProtocol:
        """Start tracking a root measurement.

        Args:
            operation_name: Semantic name of the scope

        Returns:
            A real measurement when logging is enabled, a stub otherwise
        """
        ...
