"""Exception types for triggerforge.

Operations signal record-level rejections by attaching a
``ValidationError`` to the offending record (see ``core.types``). The
exceptions below cover configuration problems and the host runtime's
all-or-none rejection of a DML call. Any other exception raised by an
operation propagates unchanged.
"""

from typing import Any


class TriggerForgeError(Exception):
    """Base class for all triggerforge errors."""


class ConfigurationError(TriggerForgeError):
    """A trigger configuration is invalid or cannot be resolved.

    Raised at load time for schema violations, unregistered operation
    identifiers and duplicate entity declarations.
    """


class ConfigNotFoundError(ConfigurationError):
    """No trigger configuration is registered for an entity key."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"No trigger configuration registered for '{entity}'")


class RecordRejectedError(TriggerForgeError):
    """One or more records in a DML batch carry validation errors.

    Attributes:
        entity: Entity name of the rejected batch
        records: The records that carry errors
    """

    def __init__(self, entity: str, records: list[Any]):
        self.entity = entity
        self.records = records
        messages = []
        for record in records:
            for error in record.errors:
                messages.append(error.message)
        summary = "; ".join(dict.fromkeys(messages))
        super().__init__(
            f"{len(records)} {entity} record(s) rejected: {summary}"
        )
