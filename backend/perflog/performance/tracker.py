"""
Performance tracker for hierarchical measurements.

A tracker creates root measurements; measurements create children. Each
measurement serializes itself when closed and hands its whole buffer
(descendants first, itself last) to its parent. Only the root talks to the
collector, exactly once, with the flattened batch of its subtree.

Usage:
    tracker = PerformanceTracker(collector, "AppPerformance", lambda: True)
    with tracker.track("handle_request") as measurement:
        measurement.add_value("Rows", "count", 42)
        with measurement.track_child("query"):
            ...
"""

import functools
import inspect
import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from prometheus_client import Counter, Histogram

from ..errors import MeasurementClosedError
from ..logging_utils import bind_operation_context, reset_operation_context
from .protocols import Collector
from .serializer import join_batch, render_record, wrap_batch
from .types import ELAPSED_FACT, ELAPSED_UNIT, NumericFact

logger = logging.getLogger("perflog.performance.tracker")

F = TypeVar("F", bound=Callable[..., Any])

MEASUREMENTS_CLOSED = Counter(
    "perflog_measurements_closed_total",
    "Total measurements closed",
    ["kind"],
)

BATCHES_EMITTED = Counter(
    "perflog_batches_emitted_total",
    "Total batches handed to a collector",
    ["type_name"],
)

ROOT_DURATION = Histogram(
    "perflog_root_measurement_duration_seconds",
    "Elapsed time of root measurements",
    ["type_name"],
    buckets=(
        0.005,
        0.01,
        0.05,
        0.1,
        0.5,
        1,
        5,
        10,
        float("inf"),
    ),
)


class PerformanceTracker:
    """
    Entry point for performance logging.

    The enablement predicate is evaluated once per ``track`` call. A
    measurement keeps the mode it was created in for its whole life, and
    its children inherit that mode structurally.
    """

    def __init__(
        self,
        collector: Collector,
        type_name: str,
        is_log_enabled: Callable[[], bool],
    ):
        """
        Args:
            collector: Sink receiving one batch per root measurement
            type_name: Routing label passed to the collector with each batch
            is_log_enabled: Zero-argument predicate deciding real vs stub
        """
        self._collector = collector
        self._type_name = type_name
        self._is_log_enabled = is_log_enabled

    @property
    def type_name(self) -> str:
        return self._type_name

    def track(self, operation_name: str) -> Union["PerformanceMeasurement", "StubMeasurement"]:
        """Start tracking a root measurement.

        Args:
            operation_name: Semantic name of the scope

        Returns:
            A real measurement, or the stub when logging is disabled
        """
        if not self._is_log_enabled():
            return NULL_MEASUREMENT
        return PerformanceMeasurement(
            operation_name,
            type_name=self._type_name,
            collector=self._collector,
        )

    def measure(self, name: Optional[str] = None) -> Callable[[F], F]:
        """Decorator running each call of a function inside a root measurement.

        Works on both sync and async functions. The measurement is named
        ``name`` or the function's qualified name.

        Note:
            Every call opens a new root and emits its own batch, even when
            made inside another open measurement. To nest under an existing
            scope, call ``track_child`` on that measurement instead.
        """

        def decorator(fn: F) -> F:
            label = name or fn.__qualname__

            if inspect.iscoroutinefunction(fn):

                @functools.wraps(fn)
                async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                    with self.track(label):
                        return await fn(*args, **kwargs)

                return async_wrapper  # type: ignore[return-value]

            @functools.wraps(fn)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                with self.track(label):
                    return fn(*args, **kwargs)

            return sync_wrapper  # type: ignore[return-value]

        return decorator


class PerformanceMeasurement:
    """A single timed scope in a measurement tree.

    Not safe for concurrent mutation. Children closing on different threads
    must synchronize externally on their shared parent.
    """

    def __init__(
        self,
        operation_name: str,
        *,
        type_name: Optional[str] = None,
        collector: Optional[Collector] = None,
        parent: Optional["PerformanceMeasurement"] = None,
    ):
        if parent is None and collector is None:
            raise ValueError("A root measurement requires a collector")

        self._operation_name = operation_name
        self._operation_id = str(uuid.uuid4())
        self._parent = parent
        self._type_name = type_name
        self._collector = collector
        self._numeric_facts: List[NumericFact] = []
        self._string_facts: Dict[str, str] = {}
        self._bool_facts: Dict[str, bool] = {}
        self._records: List[str] = []
        self._closed = False
        self._elapsed_ms: Optional[int] = None
        self._context_token: Any = None
        self._start_ns = time.monotonic_ns()

    # -- identity --

    @property
    def operation_name(self) -> str:
        return self._operation_name

    @property
    def operation_id(self) -> str:
        return self._operation_id

    @property
    def parent(self) -> Optional["PerformanceMeasurement"]:
        return self._parent

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def elapsed_ms(self) -> Optional[int]:
        """Whole milliseconds between creation and close, None while open."""
        return self._elapsed_ms

    # -- context manager --

    def __enter__(self) -> "PerformanceMeasurement":
        self._context_token = bind_operation_context(self._operation_id, self._operation_name)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            self.close()
        finally:
            if self._context_token is not None:
                reset_operation_context(self._context_token)
                self._context_token = None

    # -- capability set --

    def track_child(self, operation_name: str) -> "PerformanceMeasurement":
        """Create a nested measurement. It reports into this one when closed."""
        self._ensure_open("track child")
        return PerformanceMeasurement(operation_name, parent=self)

    def add_value(self, name: str, unit: str, value: int) -> None:
        """Append a numeric fact. Repeated names are all kept, in order.

        Raises:
            TypeError: If value is not an int (bool included)
        """
        self._ensure_open("add value")
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"Fact '{name}' must be int, got {type(value).__name__}"
            )
        self._numeric_facts.append(NumericFact(name=name, unit=unit, value=value))

    def add_key_value(self, key: str, value: Union[str, bool]) -> None:
        """Record a string or bool fact, replacing any earlier value for the key.

        Raises:
            TypeError: If value is neither str nor bool
        """
        self._ensure_open("add key value")
        if isinstance(value, bool):
            self._bool_facts[key] = value
        elif isinstance(value, str):
            self._string_facts[key] = value
        else:
            raise TypeError(
                f"Fact '{key}' must be str or bool, got {type(value).__name__}"
            )

    add_numeric_fact = add_value
    add_fact = add_key_value

    def close(self) -> None:
        """Stop the clock, serialize, and flush to the parent or the collector.

        Closing twice is a no-op. Collector errors propagate.
        """
        if self._closed:
            logger.warning(f"Measurement already closed: {self._operation_name}")
            return
        self._closed = True

        self._elapsed_ms = (time.monotonic_ns() - self._start_ns) // 1_000_000
        self._numeric_facts.append(
            NumericFact(name=ELAPSED_FACT, unit=ELAPSED_UNIT, value=self._elapsed_ms)
        )

        self._records.append(self._render())
        batch = join_batch(self._records)
        self._records = []

        if self._parent is None:
            self._emit(batch)
        else:
            MEASUREMENTS_CLOSED.labels(kind="child").inc()
            self._parent._add_record(batch, child_name=self._operation_name)

    # -- internals --

    def _ensure_open(self, action: str) -> None:
        if self._closed:
            raise MeasurementClosedError(self._operation_name, action)

    def _add_record(self, batch: str, child_name: str) -> None:
        if self._closed:
            logger.warning(
                f"Dropping records of child '{child_name}': "
                f"parent '{self._operation_name}' is already closed"
            )
            return
        self._records.append(batch)

    def _render(self) -> str:
        return render_record(
            operation_name=self._operation_name,
            operation_id=self._operation_id,
            parent_operation_id=self._parent.operation_id if self._parent else None,
            numeric_facts=self._numeric_facts,
            string_facts=self._string_facts,
            bool_facts=self._bool_facts,
        )

    def _emit(self, batch: str) -> None:
        type_name = self._type_name or ""
        MEASUREMENTS_CLOSED.labels(kind="root").inc()
        ROOT_DURATION.labels(type_name=type_name).observe((self._elapsed_ms or 0) / 1000)
        self._collector.collect(type_name, wrap_batch(batch))
        BATCHES_EMITTED.labels(type_name=type_name).inc()
        logger.debug(
            f"Performance batch emitted for {self._operation_name}",
            extra={"type_name": type_name, "elapsed_ms": self._elapsed_ms},
        )

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"PerformanceMeasurement({self._operation_name!r}, {self._operation_id}, {state})"


class StubMeasurement:
    """Inert measurement returned when logging is disabled.

    Every operation is a no-op that never raises; children are stubs too.
    """

    __slots__ = ()

    def __enter__(self) -> "StubMeasurement":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    def track_child(self, operation_name: str) -> "StubMeasurement":
        return self

    def add_value(self, name: str, unit: str, value: int) -> None:
        pass

    def add_key_value(self, key: str, value: Union[str, bool]) -> None:
        pass

    add_numeric_fact = add_value
    add_fact = add_key_value

    def close(self) -> None:
        pass

    def __repr__(self) -> str:
        return "StubMeasurement()"


NULL_MEASUREMENT = StubMeasurement()
