"""Core types for the triggerforge dispatch engine.

Defines the data passed through every dispatch:
- Phase / OperationType: which lifecycle point fired
- Record: a mutable record carrying its own validation errors
- ValidationError: a record-level rejection message
- MutationEvent: one invocation of an entity's lifecycle trigger
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any


class Phase(Enum):
    """Lifecycle phase relative to persistence.

    BEFORE: Records are not yet persisted and may be modified in place
    AFTER: Records are persisted; side effects go through the record store
    """

    BEFORE = "before"
    AFTER = "after"


class OperationType(Enum):
    """The kind of mutation that produced the event."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    UNDELETE = "undelete"


@dataclass(frozen=True)
class ValidationError:
    """A rejection attached to a single record.

    Attributes:
        message: Human-readable message shown for the record
        field: Field name this error relates to, or None for record-level errors
        code: Machine-readable error code
    """

    message: str
    field: str | None = None
    code: str = "VALIDATION_FAILED"

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "field": self.field, "code": self.code}


class Record(dict):
    """A record in a trigger batch.

    Behaves as a plain dict of field values. Operations reject a record by
    calling ``add_error``; the host runtime refuses to persist any batch
    that contains a record with errors.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._errors: list[ValidationError] = []

    @property
    def errors(self) -> list[ValidationError]:
        return list(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def add_error(
        self,
        message: str,
        field: str | None = None,
        code: str = "VALIDATION_FAILED",
    ) -> ValidationError:
        """Attach a validation error to this record and return it."""
        error = ValidationError(message=message, field=field, code=code)
        self._errors.append(error)
        return error

    def clear_errors(self) -> None:
        self._errors.clear()


def as_records(rows: Iterable[Mapping[str, Any]]) -> list[Record]:
    """Wrap plain mappings as Records, leaving existing Records untouched."""
    return [row if isinstance(row, Record) else Record(row) for row in rows]


_REQUIRES_NEW = (OperationType.INSERT, OperationType.UPDATE, OperationType.UNDELETE)
_REQUIRES_OLD = (OperationType.UPDATE, OperationType.DELETE)


@dataclass(frozen=True)
class MutationEvent:
    """One invocation of an entity's lifecycle trigger.

    Constructed by the host for each phase of a DML call and discarded once
    the dispatcher returns. The batch containers are immutable; the records
    inside them are not, so BEFORE-phase operations can modify them.

    Attributes:
        entity: Name of the entity being mutated (e.g. "Account")
        phase: BEFORE or AFTER persistence
        operation_type: INSERT, UPDATE, DELETE or UNDELETE
        new_records: Current record state (insert/update/undelete)
        old_records_by_id: Prior record state keyed by id (update/delete)
        store: Data-access collaborator for operations that read or write
            other records
    """

    entity: str
    phase: Phase
    operation_type: OperationType
    new_records: tuple[Record, ...] | None = None
    old_records_by_id: Mapping[str, Record] | None = None
    store: Any = None

    def __post_init__(self) -> None:
        if self.new_records is None and self.old_records_by_id is None:
            raise ValueError(
                "MutationEvent requires new_records or old_records_by_id"
            )
        if self.operation_type in _REQUIRES_NEW and self.new_records is None:
            raise ValueError(
                f"{self.operation_type.value} events require new_records"
            )
        if self.operation_type in _REQUIRES_OLD and self.old_records_by_id is None:
            raise ValueError(
                f"{self.operation_type.value} events require old_records_by_id"
            )

        # Freeze the containers; frozen dataclass needs object.__setattr__
        if self.new_records is not None:
            object.__setattr__(
                self, "new_records", tuple(as_records(self.new_records))
            )
        if self.old_records_by_id is not None:
            old = {
                key: value if isinstance(value, Record) else Record(value)
                for key, value in self.old_records_by_id.items()
            }
            object.__setattr__(self, "old_records_by_id", MappingProxyType(old))

    @property
    def candidates(self) -> tuple[Record, ...]:
        """The record batch handed to each operation's filter.

        New records when present, otherwise the prior-state records (delete).
        """
        if self.new_records is not None:
            return self.new_records
        return tuple(self.old_records_by_id.values())

    def old_record(self, record: Mapping[str, Any]) -> Record | None:
        """Return the prior state of ``record`` (matched by id), if any."""
        if self.old_records_by_id is None:
            return None
        return self.old_records_by_id.get(record.get("id"))

    @property
    def is_before(self) -> bool:
        return self.phase is Phase.BEFORE

    @property
    def is_after(self) -> bool:
        return self.phase is Phase.AFTER

    @property
    def is_insert(self) -> bool:
        return self.operation_type is OperationType.INSERT

    @property
    def is_update(self) -> bool:
        return self.operation_type is OperationType.UPDATE

    @property
    def is_delete(self) -> bool:
        return self.operation_type is OperationType.DELETE

    @property
    def is_undelete(self) -> bool:
        return self.operation_type is OperationType.UNDELETE
