"""Account trigger operations."""

import logging
from collections.abc import Sequence

from triggerforge.core.types import MutationEvent, OperationType, Record
from triggerforge.operations.base import BaseOperation

logger = logging.getLogger(__name__)

PROSPECT_TYPE = "Prospect"
PROSPECT_PHONE_MESSAGE = "Prospect accounts must have a phone number."

# Contacts are updated when an account grows past this many employees
EMPLOYEE_THRESHOLD = 50
LARGE_ACCOUNT_DESCRIPTION = (
    f"Parent account has more than {EMPLOYEE_THRESHOLD} employees."
)


class AccountValidation(BaseOperation):
    """Reject prospect accounts that have no phone number."""

    name = "AccountValidation"
    on = (OperationType.INSERT, OperationType.UPDATE)

    def filter(
        self, event: MutationEvent, candidates: Sequence[Record]
    ) -> list[Record]:
        return [
            r
            for r in candidates
            if r.get("type") == PROSPECT_TYPE and r.get("phone") in (None, "")
        ]

    def execute(self, event: MutationEvent, subset: Sequence[Record]) -> None:
        for record in subset:
            record.add_error(
                PROSPECT_PHONE_MESSAGE, field="phone", code="PROSPECT_PHONE_REQUIRED"
            )


class AccountUpdateRelatedContacts(BaseOperation):
    """Flag the contacts of accounts whose employee count crossed the threshold.

    Only accounts that moved from at or below EMPLOYEE_THRESHOLD to above it
    in this update qualify, so re-saving an already large account is a no-op.
    Contacts are written through ``event.store``.
    """

    name = "AccountUpdateRelatedContacts"
    on = (OperationType.UPDATE,)

    def filter(
        self, event: MutationEvent, candidates: Sequence[Record]
    ) -> list[Record]:
        crossed = []
        for record in candidates:
            old = event.old_record(record)
            if old is None:
                continue
            before = old.get("employeeCount") or 0
            after = record.get("employeeCount") or 0
            if before <= EMPLOYEE_THRESHOLD < after:
                crossed.append(record)
        return crossed

    def execute(self, event: MutationEvent, subset: Sequence[Record]) -> None:
        if event.store is None:
            raise RuntimeError(f"{self.name} requires a record store")

        account_ids = [r["id"] for r in subset]
        contacts = event.store.query("Contact", {"accountId": account_ids})
        if not contacts:
            return

        for contact in contacts:
            contact["description"] = LARGE_ACCOUNT_DESCRIPTION

        event.store.update("Contact", contacts)
        logger.info(
            "Updated %d contact(s) for %d account(s) past %d employees",
            len(contacts),
            len(account_ids),
            EMPLOYEE_THRESHOLD,
        )
