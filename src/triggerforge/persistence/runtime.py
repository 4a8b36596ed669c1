"""Trigger-aware DML runtime.

Plays the host platform's part around the dispatch engine: it performs
inserts, updates, deletes and undeletes against the record store and fires
the entity's entry point before and after persistence, all inside one
transaction.

Lifecycle of a DML call:
1. Build the batch (new records and/or prior state) and clear errors
   left on its records by an earlier call
2. Fire BEFORE; records rejected by operations abort the call
3. Persist
4. Fire AFTER; rejections abort the call
5. Commit (outermost call only); roll back on any exception

Operations receive the runtime itself as ``event.store``, so the writes
they make to other entities fire those entities' triggers in the same
transaction.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from triggerforge.core.types import OperationType, Phase, Record, as_records
from triggerforge.dispatch.entry_point import TriggerEntryPoint
from triggerforge.errors import RecordRejectedError
from triggerforge.persistence.store import SQLiteRecordStore

logger = logging.getLogger(__name__)


class TriggerRuntime:
    """Runs DML through registered trigger entry points."""

    def __init__(self, store: SQLiteRecordStore):
        self.store = store
        self.triggers: dict[str, TriggerEntryPoint] = {}
        self._depth = 0

    def register_trigger(self, entry_point: TriggerEntryPoint) -> None:
        """Attach an entry point to its entity. Replaces any previous one."""
        self.triggers[entry_point.entity] = entry_point

    # ------------------------------------------------------------------
    # Transaction handling
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Join the current transaction or start a new one.

        Only the outermost block commits. Any exception rolls back the
        whole transaction, including work done by nested DML.
        """
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield
        except Exception:
            if outermost:
                logger.debug("Rolling back transaction")
                self.store.rollback()
            raise
        else:
            if outermost:
                self.store.commit()
        finally:
            self._depth -= 1

    def _fire(
        self,
        entity: str,
        phase: Phase,
        operation_type: OperationType,
        new_records: list[Record] | None,
        old_records_by_id: Mapping[str, Record] | None,
    ) -> None:
        entry_point = self.triggers.get(entity)
        if entry_point is None:
            return
        entry_point(
            phase,
            operation_type,
            new_records=new_records,
            old_records_by_id=old_records_by_id,
            store=self,
        )

    def _raise_if_rejected(self, entity: str, records: Iterable[Record]) -> None:
        rejected = [r for r in records if r.has_errors]
        if rejected:
            logger.info("Rejecting %d %s record(s)", len(rejected), entity)
            raise RecordRejectedError(entity, rejected)

    def _run(
        self,
        entity: str,
        operation_type: OperationType,
        new_records: list[Record] | None,
        old_records_by_id: Mapping[str, Record] | None,
        persist: Any,
    ) -> None:
        batch = new_records if new_records is not None else list(old_records_by_id.values())
        for record in batch:
            record.clear_errors()

        with self.transaction():
            self._fire(entity, Phase.BEFORE, operation_type, new_records, old_records_by_id)
            self._raise_if_rejected(entity, batch)
            persist()
            self._fire(entity, Phase.AFTER, operation_type, new_records, old_records_by_id)
            self._raise_if_rejected(entity, batch)

    def _load_existing(
        self, entity: str, ids: list[str], include_deleted: bool = False
    ) -> dict[str, Record]:
        existing = self.store.get_many(entity, ids, include_deleted=include_deleted)
        missing = [i for i in ids if i not in existing]
        if missing:
            raise ValueError(f"{entity} record(s) not found: {', '.join(missing)}")
        return existing

    # ------------------------------------------------------------------
    # DML
    # ------------------------------------------------------------------

    def insert(self, entity: str, records: Iterable[Mapping[str, Any]]) -> list[Record]:
        """Insert records, firing the entity's triggers around persistence."""
        new_records = as_records(records)
        self._run(
            entity,
            OperationType.INSERT,
            new_records,
            None,
            lambda: self.store.insert(entity, new_records),
        )
        return new_records

    def update(self, entity: str, records: Iterable[Mapping[str, Any]]) -> list[Record]:
        """Apply field changes to existing records by id.

        Each given record only needs ``id`` plus the fields to change; the
        batch seen by operations holds the full merged record.
        """
        pk = self.store.schema(entity).primary_key
        changes = list(records)
        ids = [c[pk] for c in changes]
        old_records = self._load_existing(entity, ids)

        new_records = []
        for change in changes:
            merged = Record(old_records[change[pk]])
            merged.update(change)
            new_records.append(merged)

        self._run(
            entity,
            OperationType.UPDATE,
            new_records,
            old_records,
            lambda: self.store.update(entity, new_records),
        )
        return new_records

    def delete(self, entity: str, ids: Iterable[str]) -> list[Record]:
        """Soft-delete records by id. Returns their last state."""
        ids = list(ids)
        old_records = self._load_existing(entity, ids)
        self._run(
            entity,
            OperationType.DELETE,
            None,
            old_records,
            lambda: self.store.delete(entity, ids),
        )
        return list(old_records.values())

    def undelete(self, entity: str, ids: Iterable[str]) -> list[Record]:
        """Restore soft-deleted records by id.

        Raises:
            ValueError: If an id is unknown or its record is not deleted
        """
        ids = list(ids)
        restored = list(self._load_existing(entity, ids, include_deleted=True).values())
        live = self.store.get_many(entity, ids)
        if live:
            raise ValueError(
                f"{entity} record(s) not deleted: {', '.join(i for i in ids if i in live)}"
            )
        self._run(
            entity,
            OperationType.UNDELETE,
            restored,
            None,
            lambda: self.store.undelete(entity, ids),
        )
        return restored

    def query(
        self, entity: str, filter: Mapping[str, Any] | None = None
    ) -> list[Record]:
        """Read live records. Reads never fire triggers."""
        return self.store.query(entity, filter)
