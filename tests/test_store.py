"""Tests for the SQLite record store."""

import pytest

from triggerforge.accounts import SCHEMAS
from triggerforge.core.types import Record
from triggerforge.persistence import RecordStore, SQLiteRecordStore


@pytest.fixture
def store():
    s = SQLiteRecordStore(":memory:", schemas=SCHEMAS)
    s.connect()
    s.initialize()
    yield s
    s.close()


class TestSQLiteRecordStore:
    def test_requires_connection(self):
        s = SQLiteRecordStore(":memory:", schemas=SCHEMAS)
        with pytest.raises(RuntimeError, match="not connected"):
            s.query("Account")

    def test_unknown_entity(self, store):
        with pytest.raises(ValueError, match="no registered schema"):
            store.query("Opportunity")

    def test_satisfies_record_store_protocol(self, store):
        assert isinstance(store, RecordStore)

    def test_insert_generates_ids_in_place(self, store):
        record = Record(name="Acme")
        inserted = store.insert("Account", [record])
        assert inserted[0] is record
        assert record["id"].startswith("ACC-")
        assert record["createdAt"] and record["updatedAt"]

    def test_insert_keeps_given_id(self, store):
        store.insert("Account", [{"id": "ACC-1", "name": "Acme"}])
        assert store.get_many("Account", ["ACC-1"])["ACC-1"]["name"] == "Acme"

    def test_query_filters(self, store):
        store.insert(
            "Contact",
            [
                {"id": "CON-1", "accountId": "ACC-1", "lastName": "Doe"},
                {"id": "CON-2", "accountId": "ACC-2", "lastName": "Roe"},
                {"id": "CON-3", "accountId": "ACC-3", "lastName": "Poe"},
            ],
        )
        assert [c["id"] for c in store.query("Contact", {"accountId": "ACC-2"})] == ["CON-2"]
        assert [
            c["id"] for c in store.query("Contact", {"accountId": ["ACC-1", "ACC-3"]})
        ] == ["CON-1", "CON-3"]
        assert store.query("Contact", {"accountId": []}) == []
        assert len(store.query("Contact", {"email": None})) == 3

    def test_query_unknown_field(self, store):
        with pytest.raises(ValueError, match="Unknown field"):
            store.query("Contact", {"nickname": "JD"})

    def test_query_returns_records_without_deleted_flag(self, store):
        store.insert("Account", [{"id": "ACC-1", "name": "Acme"}])
        record = store.query("Account")[0]
        assert isinstance(record, Record)
        assert "isDeleted" not in record

    def test_update(self, store):
        store.insert("Account", [{"id": "ACC-1", "name": "Acme", "employeeCount": 10}])
        store.update("Account", [{"id": "ACC-1", "employeeCount": 75}])
        record = store.get_many("Account", ["ACC-1"])["ACC-1"]
        assert record["employeeCount"] == 75
        assert record["name"] == "Acme"

    def test_update_requires_id(self, store):
        with pytest.raises(ValueError, match="without 'id'"):
            store.update("Account", [{"name": "Acme"}])

    def test_soft_delete_and_undelete(self, store):
        store.insert("Account", [{"id": "ACC-1", "name": "Acme"}])

        assert store.delete("Account", ["ACC-1"]) == 1
        assert store.query("Account") == []
        assert "ACC-1" in store.get_many("Account", ["ACC-1"], include_deleted=True)

        assert store.undelete("Account", ["ACC-1"]) == 1
        assert [r["id"] for r in store.query("Account")] == ["ACC-1"]

    def test_delete_nothing(self, store):
        assert store.delete("Account", []) == 0

    def test_rollback_discards_uncommitted_writes(self, store):
        store.insert("Account", [{"id": "ACC-1", "name": "Acme"}])
        store.commit()
        store.insert("Account", [{"id": "ACC-2", "name": "Globex"}])
        store.rollback()
        assert [r["id"] for r in store.query("Account")] == ["ACC-1"]

    def test_camel_case_table_names(self, store):
        assert store._table_name("AccountContactRole") == '"account_contact_role"'
