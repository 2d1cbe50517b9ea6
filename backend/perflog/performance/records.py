"""
Reading emitted performance batches.

The emitted payload is flat: parent/child structure is recovered only by
correlating ``OperationId`` and ``ParentOperationId``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .types import HEADER_FIELDS, UNIT_SUFFIX


class MeasurementRecord(BaseModel):
    """One flattened measurement as read back from a batch."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    operation_name: str = Field(alias="OperationName")
    operation_id: str = Field(alias="OperationId")
    log_type: str = Field(alias="LogType")
    parent_operation_id: Optional[str] = Field(default=None, alias="ParentOperationId")

    @property
    def facts(self) -> Dict[str, Any]:
        """All non-header fields, unit fields included."""
        return {k: v for k, v in (self.model_extra or {}).items() if k not in HEADER_FIELDS}

    @property
    def numeric_facts(self) -> Dict[str, Any]:
        """Map of numeric fact name to ``(value, unit)``."""
        facts = self.facts
        return {
            name[: -len(UNIT_SUFFIX)]: (facts.get(name[: -len(UNIT_SUFFIX)]), unit)
            for name, unit in facts.items()
            if name.endswith(UNIT_SUFFIX)
        }


def parse_batch(payload: str) -> List[MeasurementRecord]:
    """Parse a collector payload into records, keeping close order.

    Raises:
        ValueError: If the payload is not a JSON array of objects
    """
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("Performance payload must be a JSON array")
    return [MeasurementRecord.model_validate(item) for item in data]


def build_tree(records: List[MeasurementRecord]) -> Dict[Optional[str], List[MeasurementRecord]]:
    """Group records by parent id; the ``None`` key holds the root(s)."""
    tree: Dict[Optional[str], List[MeasurementRecord]] = {}
    for record in records:
        tree.setdefault(record.parent_operation_id, []).append(record)
    return tree
