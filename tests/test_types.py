"""Tests for core event and record types."""

import pytest

from triggerforge.core.types import (
    MutationEvent,
    OperationType,
    Phase,
    Record,
    ValidationError,
    as_records,
)


# =============================================================================
# Record tests
# =============================================================================


class TestRecord:
    def test_behaves_like_dict(self):
        record = Record({"id": "ACC-1", "name": "Acme"})
        assert record["name"] == "Acme"
        assert dict(record) == {"id": "ACC-1", "name": "Acme"}

    def test_starts_without_errors(self):
        record = Record(name="Acme")
        assert record.errors == []
        assert not record.has_errors

    def test_add_error(self):
        record = Record(name="Acme")
        error = record.add_error("Phone is required.", field="phone", code="REQ")
        assert error == ValidationError(message="Phone is required.", field="phone", code="REQ")
        assert record.errors == [error]
        assert record.has_errors

    def test_errors_returns_copy(self):
        record = Record()
        record.add_error("bad")
        record.errors.clear()
        assert len(record.errors) == 1

    def test_clear_errors(self):
        record = Record()
        record.add_error("bad")
        record.clear_errors()
        assert not record.has_errors

    def test_validation_error_to_dict(self):
        error = ValidationError(message="bad", field="phone")
        assert error.to_dict() == {
            "message": "bad",
            "field": "phone",
            "code": "VALIDATION_FAILED",
        }

    def test_as_records_preserves_existing_records(self):
        existing = Record(id="1")
        wrapped = as_records([existing, {"id": "2"}])
        assert wrapped[0] is existing
        assert isinstance(wrapped[1], Record)
        assert wrapped[1] == {"id": "2"}


# =============================================================================
# MutationEvent tests
# =============================================================================


class TestMutationEvent:
    def test_insert_requires_new_records(self):
        with pytest.raises(ValueError, match="insert events require new_records"):
            MutationEvent(
                entity="Account",
                phase=Phase.BEFORE,
                operation_type=OperationType.INSERT,
                old_records_by_id={"1": {"id": "1"}},
            )

    def test_delete_requires_old_records(self):
        with pytest.raises(ValueError, match="delete events require old_records_by_id"):
            MutationEvent(
                entity="Account",
                phase=Phase.BEFORE,
                operation_type=OperationType.DELETE,
                new_records=({"id": "1"},),
            )

    def test_update_requires_both(self):
        with pytest.raises(ValueError, match="update events require old_records_by_id"):
            MutationEvent(
                entity="Account",
                phase=Phase.AFTER,
                operation_type=OperationType.UPDATE,
                new_records=({"id": "1"},),
            )

    def test_requires_some_records(self):
        with pytest.raises(ValueError, match="requires new_records or old_records_by_id"):
            MutationEvent(
                entity="Account",
                phase=Phase.AFTER,
                operation_type=OperationType.UNDELETE,
            )

    def test_wraps_plain_dicts_as_records(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.BEFORE,
            operation_type=OperationType.INSERT,
            new_records=[{"name": "Acme"}],
        )
        assert isinstance(event.new_records, tuple)
        assert isinstance(event.new_records[0], Record)

    def test_keeps_record_identity(self):
        record = Record(name="Acme")
        event = MutationEvent(
            entity="Account",
            phase=Phase.BEFORE,
            operation_type=OperationType.INSERT,
            new_records=[record],
        )
        assert event.new_records[0] is record

    def test_old_records_are_read_only(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.BEFORE,
            operation_type=OperationType.DELETE,
            old_records_by_id={"1": {"id": "1"}},
        )
        with pytest.raises(TypeError):
            event.old_records_by_id["2"] = Record(id="2")

    def test_event_is_frozen(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.BEFORE,
            operation_type=OperationType.INSERT,
            new_records=[{"name": "Acme"}],
        )
        with pytest.raises(AttributeError):
            event.phase = Phase.AFTER

    def test_candidates_prefer_new_records(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.AFTER,
            operation_type=OperationType.UPDATE,
            new_records=[{"id": "1", "employeeCount": 60}],
            old_records_by_id={"1": {"id": "1", "employeeCount": 10}},
        )
        assert event.candidates == ({"id": "1", "employeeCount": 60},)

    def test_candidates_fall_back_to_old_records_for_delete(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.BEFORE,
            operation_type=OperationType.DELETE,
            old_records_by_id={"1": {"id": "1"}, "2": {"id": "2"}},
        )
        assert [r["id"] for r in event.candidates] == ["1", "2"]

    def test_old_record_lookup(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.BEFORE,
            operation_type=OperationType.UPDATE,
            new_records=[{"id": "1", "name": "New"}],
            old_records_by_id={"1": {"id": "1", "name": "Old"}},
        )
        assert event.old_record(event.new_records[0])["name"] == "Old"
        assert event.old_record({"id": "missing"}) is None

    def test_old_record_none_for_insert(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.BEFORE,
            operation_type=OperationType.INSERT,
            new_records=[{"id": "1"}],
        )
        assert event.old_record(event.new_records[0]) is None

    def test_phase_and_operation_predicates(self):
        event = MutationEvent(
            entity="Account",
            phase=Phase.AFTER,
            operation_type=OperationType.UNDELETE,
            new_records=[{"id": "1"}],
        )
        assert event.is_after and not event.is_before
        assert event.is_undelete
        assert not (event.is_insert or event.is_update or event.is_delete)
