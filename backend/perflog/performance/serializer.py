"""
Text rendering of measurement records.

Each measurement is rendered as one flat JSON object. Field order:
headers (name, id, log type, optional parent id), numeric facts as
value/unit pairs in insertion order, string facts, then bool facts.
Repeated keys are rendered as-is; nothing is deduplicated here.
"""

import json
from typing import Iterable, List, Mapping, Optional

from .types import (
    LOG_TYPE_FIELD,
    OPERATION_ID_FIELD,
    OPERATION_NAME_FIELD,
    PARENT_OPERATION_ID_FIELD,
    UNIT_SUFFIX,
    LogType,
    NumericFact,
)


def quote(value: str) -> str:
    """Quote a string with JSON escaping (quotes, backslashes, control chars)."""
    return json.dumps(str(value), ensure_ascii=False)


def render_field(name: str, value: object) -> str:
    """Render one ``"name":value`` pair.

    bool and int are written unquoted; everything else is quoted.
    """
    if isinstance(value, bool):
        rendered = "true" if value else "false"
    elif isinstance(value, int):
        rendered = str(value)
    else:
        rendered = quote(str(value))
    return f"{quote(name)}:{rendered}"


def render_record(
    operation_name: str,
    operation_id: str,
    parent_operation_id: Optional[str],
    numeric_facts: Iterable[NumericFact],
    string_facts: Mapping[str, str],
    bool_facts: Mapping[str, bool],
) -> str:
    """Render a single measurement as a flat object.

    Args:
        operation_name: Scope name
        operation_id: Unique id of the measurement
        parent_operation_id: Id of the parent, omitted from output when None
        numeric_facts: Facts rendered as ``<name>`` and ``<name>_unit``
        string_facts: Facts rendered as quoted strings
        bool_facts: Facts rendered as ``true``/``false``

    Returns:
        The object text, without a trailing separator
    """
    fields: List[str] = [
        render_field(OPERATION_NAME_FIELD, operation_name),
        render_field(OPERATION_ID_FIELD, operation_id),
        render_field(LOG_TYPE_FIELD, LogType.PERFORMANCE.value),
    ]
    if parent_operation_id is not None:
        fields.append(render_field(PARENT_OPERATION_ID_FIELD, parent_operation_id))

    for fact in numeric_facts:
        fields.append(render_field(fact.name, fact.value))
        fields.append(render_field(f"{fact.name}{UNIT_SUFFIX}", fact.unit))
    for key, value in string_facts.items():
        fields.append(render_field(key, value))
    for key, value in bool_facts.items():
        fields.append(render_field(key, bool(value)))

    return "{" + ",".join(fields) + "}"


def join_batch(fragments: Iterable[str]) -> str:
    """Comma-join already rendered fragments."""
    return ",".join(fragments)


def wrap_batch(batch: str) -> str:
    """Wrap a joined batch in array delimiters."""
    return f"[{batch}]"
