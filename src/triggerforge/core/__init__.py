"""Core event and record types."""

from triggerforge.core.types import (
    MutationEvent,
    OperationType,
    Phase,
    Record,
    ValidationError,
    as_records,
)

__all__ = [
    "MutationEvent",
    "OperationType",
    "Phase",
    "Record",
    "ValidationError",
    "as_records",
]
