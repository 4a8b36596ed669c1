"""SQLite record store.

The data-access collaborator used by the host runtime and by operations
that read or write related records. Methods never commit; the caller
(normally TriggerRuntime) owns the transaction and calls ``commit`` or
``rollback`` once per DML call.

Deletes are soft: a deleted row keeps its data with ``isDeleted = 1`` so
that it can be undeleted later.
"""

import sqlite3
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from triggerforge.core.types import Record

DELETED_COLUMN = "isDeleted"


@runtime_checkable
class RecordStore(Protocol):
    """Data access available to operations through ``event.store``."""

    def query(
        self, entity: str, filter: Mapping[str, Any] | None = None
    ) -> list[Record]:
        """Return live records matching the filter.

        Filter values may be scalars (equality) or lists/tuples (IN).
        """
        ...

    def update(
        self, entity: str, records: Iterable[Mapping[str, Any]]
    ) -> list[Record]:
        """Persist field changes for records that carry an ``id``."""
        ...


@dataclass
class FieldSpec:
    """A column in an entity table."""

    name: str
    type: str = "TEXT"  # SQLite storage class


@dataclass
class EntitySchema:
    """Table layout for one entity.

    Attributes:
        name: Entity name (e.g. "Account")
        abbreviation: Prefix for generated ids (e.g. "ACC")
        fields: Columns, including the primary key
        primary_key: Name of the primary key column
    """

    name: str
    abbreviation: str
    fields: list[FieldSpec] = field(default_factory=list)
    primary_key: str = "id"

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


def _col(name: str) -> str:
    """Return a double-quoted column identifier."""
    return f'"{name}"'


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteRecordStore:
    """Record store backed by sqlite3."""

    def __init__(
        self,
        db_path: Path | str = ":memory:",
        schemas: Iterable[EntitySchema] = (),
    ):
        self.db_path = str(db_path)
        self.conn: sqlite3.Connection | None = None
        self.schemas: dict[str, EntitySchema] = {s.name: s for s in schemas}

    def connect(self) -> None:
        """Establish database connection."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def _require_conn(self) -> sqlite3.Connection:
        if not self.conn:
            raise RuntimeError("Database not connected")
        return self.conn

    def register_schema(self, schema: EntitySchema) -> None:
        self.schemas[schema.name] = schema

    def schema(self, entity: str) -> EntitySchema:
        """Get the schema for an entity.

        Raises:
            ValueError: If the entity has no registered schema
        """
        if entity not in self.schemas:
            raise ValueError(f"Entity '{entity}' has no registered schema")
        return self.schemas[entity]

    # ------------------------------------------------------------------
    # Schema management
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create tables for every registered schema if they don't exist."""
        conn = self._require_conn()
        for schema in self.schemas.values():
            columns = []
            for spec in schema.fields:
                col_def = f"{_col(spec.name)} {spec.type}"
                if spec.name == schema.primary_key:
                    col_def += " PRIMARY KEY"
                columns.append(col_def)
            columns.append(f"{_col(DELETED_COLUMN)} INTEGER NOT NULL DEFAULT 0")

            sql = (
                f"CREATE TABLE IF NOT EXISTS {self._table_name(schema.name)} "
                f"({', '.join(columns)})"
            )
            conn.execute(sql)
        conn.commit()

    def _table_name(self, entity_name: str) -> str:
        """Convert entity name to a quoted snake_case table name."""
        result = []
        for i, char in enumerate(entity_name):
            if char.isupper() and i > 0:
                result.append("_")
            result.append(char.lower())
        return _col("".join(result))

    def _to_record(self, row: sqlite3.Row) -> Record:
        data = dict(row)
        data.pop(DELETED_COLUMN, None)
        return Record(data)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def query(
        self,
        entity: str,
        filter: Mapping[str, Any] | None = None,
        include_deleted: bool = False,
    ) -> list[Record]:
        """Return records matching the filter, ordered by primary key."""
        conn = self._require_conn()
        schema = self.schema(entity)

        clauses: list[str] = []
        values: list[Any] = []
        if not include_deleted:
            clauses.append(f"{_col(DELETED_COLUMN)} = 0")

        for name, value in (filter or {}).items():
            if name not in schema.field_names:
                raise ValueError(f"Unknown field '{name}' on {entity}")
            if isinstance(value, (list, tuple, set, frozenset)):
                value = list(value)
                if not value:
                    return []
                placeholders = ", ".join("?" for _ in value)
                clauses.append(f"{_col(name)} IN ({placeholders})")
                values.extend(value)
            elif value is None:
                clauses.append(f"{_col(name)} IS NULL")
            else:
                clauses.append(f"{_col(name)} = ?")
                values.append(value)

        sql = f"SELECT * FROM {self._table_name(entity)}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += f" ORDER BY {_col(schema.primary_key)}"

        cursor = conn.execute(sql, values)
        return [self._to_record(row) for row in cursor.fetchall()]

    def get_many(
        self,
        entity: str,
        ids: Iterable[str],
        include_deleted: bool = False,
    ) -> dict[str, Record]:
        """Fetch records by id, keyed by id. Missing ids are omitted."""
        schema = self.schema(entity)
        records = self.query(
            entity, {schema.primary_key: list(ids)}, include_deleted=include_deleted
        )
        return {r[schema.primary_key]: r for r in records}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(
        self, entity: str, records: Iterable[Mapping[str, Any]]
    ) -> list[Record]:
        """Insert records, generating ids where missing.

        Generated ids and audit timestamps are written back into the given
        records when they are mutable mappings.
        """
        conn = self._require_conn()
        schema = self.schema(entity)
        pk = schema.primary_key
        table_name = self._table_name(entity)
        now = _now()

        inserted = []
        for record in records:
            data = record if isinstance(record, dict) else dict(record)
            if data.get(pk) is None:
                data[pk] = f"{schema.abbreviation}-{uuid.uuid4().hex[:12]}"
            if "createdAt" in schema.field_names:
                data.setdefault("createdAt", now)
            if "updatedAt" in schema.field_names:
                data.setdefault("updatedAt", now)

            field_names = [f for f in schema.field_names if f in data]
            placeholders = ", ".join("?" for _ in field_names)
            sql = (
                f"INSERT INTO {table_name} "
                f"({', '.join(_col(f) for f in field_names)}) VALUES ({placeholders})"
            )
            conn.execute(sql, [data[f] for f in field_names])
            inserted.append(data if isinstance(data, Record) else Record(data))
        return inserted

    def update(
        self, entity: str, records: Iterable[Mapping[str, Any]]
    ) -> list[Record]:
        """Write every known non-key field of each record by id."""
        conn = self._require_conn()
        schema = self.schema(entity)
        pk = schema.primary_key
        table_name = self._table_name(entity)
        now = _now()

        updated = []
        for record in records:
            if record.get(pk) is None:
                raise ValueError(f"Cannot update {entity} record without '{pk}'")
            data = dict(record)
            if "updatedAt" in schema.field_names:
                data["updatedAt"] = now

            updatable = [f for f in schema.field_names if f in data and f != pk]
            if updatable:
                set_clause = ", ".join(f"{_col(f)} = ?" for f in updatable)
                values = [data[f] for f in updatable]
                values.append(data[pk])
                sql = f"UPDATE {table_name} SET {set_clause} WHERE {_col(pk)} = ?"
                conn.execute(sql, values)
            updated.append(Record(data))
        return updated

    def delete(self, entity: str, ids: Iterable[str]) -> int:
        """Soft-delete records by id. Returns the number of rows affected."""
        return self._set_deleted(entity, ids, True)

    def undelete(self, entity: str, ids: Iterable[str]) -> int:
        """Restore soft-deleted records by id. Returns rows affected."""
        return self._set_deleted(entity, ids, False)

    def _set_deleted(self, entity: str, ids: Iterable[str], deleted: bool) -> int:
        conn = self._require_conn()
        schema = self.schema(entity)
        ids = list(ids)
        if not ids:
            return 0
        placeholders = ", ".join("?" for _ in ids)
        sql = (
            f"UPDATE {self._table_name(entity)} SET {_col(DELETED_COLUMN)} = ? "
            f"WHERE {_col(schema.primary_key)} IN ({placeholders})"
        )
        cursor = conn.execute(sql, [1 if deleted else 0, *ids])
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def commit(self) -> None:
        self._require_conn().commit()

    def rollback(self) -> None:
        self._require_conn().rollback()
