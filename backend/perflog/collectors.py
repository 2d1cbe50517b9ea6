"""
Collectors receiving serialized performance batches.

The tracker hands each root batch to exactly one collector. Transport,
retries and authentication are left to whatever sits behind a collector.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List, Optional, Tuple


class InMemoryCollector:
    """Keep every batch in a list, in arrival order."""

    def __init__(self) -> None:
        self.batches: List[Tuple[str, str]] = []

    def collect(self, type_name: str, payload: str) -> None:
        self.batches.append((type_name, payload))

    @property
    def payloads(self) -> List[str]:
        return [payload for _, payload in self.batches]

    def clear(self) -> None:
        self.batches.clear()

    def __len__(self) -> int:
        return len(self.batches)


class LoggingCollector:
    """Write each batch to a logger at INFO level."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("perflog.collectors.batches")

    def collect(self, type_name: str, payload: str) -> None:
        self._logger.info(payload, extra={"type_name": type_name})


class JsonLinesFileCollector:
    """Append each batch as one line to ``<output_dir>/<type_name>.jsonl``."""

    def __init__(self, output_dir: Path):
        self._dir = Path(output_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger("perflog.collectors.jsonl")

    def path_for(self, type_name: str) -> Path:
        return self._dir / f"{type_name}.jsonl"

    def collect(self, type_name: str, payload: str) -> None:
        path = self.path_for(type_name)
        with self._lock:
            with path.open("a", encoding="utf-8") as fp:
                fp.write(payload + "\n")
        self._logger.debug(f"Appended performance batch to {path}")
