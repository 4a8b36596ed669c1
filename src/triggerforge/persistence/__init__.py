"""Persistence layer - record store and trigger-aware DML runtime."""

from triggerforge.persistence.runtime import TriggerRuntime
from triggerforge.persistence.store import (
    EntitySchema,
    FieldSpec,
    RecordStore,
    SQLiteRecordStore,
)

__all__ = [
    "EntitySchema",
    "FieldSpec",
    "RecordStore",
    "SQLiteRecordStore",
    "TriggerRuntime",
]
