"""Operation contract for trigger dispatch.

An operation is a small, stateless unit of business logic bound to one
entity type. The dispatcher asks it three questions, always passing the
current MutationEvent explicitly:

1. is_enabled(event): should this operation run for this event at all?
2. filter(event, candidates): which records in the batch does it care about?
3. execute(event, subset): do the work on those records only.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from triggerforge.core.types import MutationEvent, OperationType, Record


@runtime_checkable
class TriggerOperation(Protocol):
    """Protocol that all trigger operations must implement."""

    def is_enabled(self, event: MutationEvent) -> bool:
        """Return True if this operation applies to the event."""
        ...

    def filter(
        self, event: MutationEvent, candidates: Sequence[Record]
    ) -> list[Record]:
        """Select the records this operation must process.

        Must not mutate ``candidates``. Returns an empty list when nothing
        qualifies.
        """
        ...

    def execute(self, event: MutationEvent, subset: Sequence[Record]) -> None:
        """Run the operation's business logic on the filtered records."""
        ...


class BaseOperation:
    """Base class for operations with common functionality.

    Subclasses set ``name`` (the identifier used in configuration
    documents), optionally narrow ``on``, and override ``execute``.
    The default ``filter`` selects every candidate.
    """

    name: str = ""
    on: tuple[OperationType, ...] = tuple(OperationType)

    def is_enabled(self, event: MutationEvent) -> bool:
        return event.operation_type in self.on

    def filter(
        self, event: MutationEvent, candidates: Sequence[Record]
    ) -> list[Record]:
        return list(candidates)

    def execute(self, event: MutationEvent, subset: Sequence[Record]) -> None:
        """Run the operation. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement execute()")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {operation_name(self)!r}>"


def operation_name(operation: object) -> str:
    """Return the identifier of an operation instance.

    Uses the ``name`` attribute when set, otherwise the class name.
    """
    return getattr(operation, "name", "") or type(operation).__name__
