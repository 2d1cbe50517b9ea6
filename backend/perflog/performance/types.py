"""
Core types for performance measurements.

This module defines the value model shared by the tracker, the serializer
and the batch reader, including the header field names of emitted records.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class LogType(Enum):
    """Discriminator written into every emitted record."""
    PERFORMANCE = "Performance"


# Header fields, in the order they are rendered
OPERATION_NAME_FIELD = "OperationName"
OPERATION_ID_FIELD = "OperationId"
LOG_TYPE_FIELD = "LogType"
PARENT_OPERATION_ID_FIELD = "ParentOperationId"

HEADER_FIELDS = (
    OPERATION_NAME_FIELD,
    OPERATION_ID_FIELD,
    LOG_TYPE_FIELD,
    PARENT_OPERATION_ID_FIELD,
)

UNIT_SUFFIX = "_unit"

ELAPSED_FACT = "Elapsed"
ELAPSED_UNIT = "ms"


class NumericFact(BaseModel):
    """A named integer value with its unit."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Fact name, rendered as the value key")
    unit: str = Field(description="Unit label, rendered under '<name>_unit'")
    value: StrictInt = Field(description="Integer value, rendered unquoted")
