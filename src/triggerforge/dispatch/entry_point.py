"""Per-entity trigger entry point.

The thin adapter between the host's mutation notification and the
dispatcher: build a MutationEvent, look up the entity's configuration,
hand both to TriggerDispatcher.handle. It performs no business logic.
"""

import itertools
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from triggerforge.config.types import ConfigTable
from triggerforge.core.types import MutationEvent, OperationType, Phase
from triggerforge.dispatch.dispatcher import TriggerDispatcher

logger = logging.getLogger(__name__)

# Every (phase, operation type) pair; entry points subscribe to all of them
# and leave narrowing to the operations themselves.
ALL_EVENTS: tuple[tuple[Phase, OperationType], ...] = tuple(
    itertools.product(Phase, OperationType)
)


class TriggerEntryPoint:
    """Entry point for one entity's lifecycle trigger.

    Attributes:
        entity: Entity key used for configuration lookup
        configs: The process-wide configuration table
        dispatcher: Dispatcher that runs the configured operations
        subscriptions: (phase, operation type) pairs this entry point handles
    """

    def __init__(
        self,
        entity: str,
        configs: ConfigTable,
        dispatcher: TriggerDispatcher,
    ):
        self.entity = entity
        self.configs = configs
        self.dispatcher = dispatcher
        self.subscriptions = ALL_EVENTS

    def __call__(
        self,
        phase: Phase,
        operation_type: OperationType,
        new_records: Iterable[Mapping[str, Any]] | None = None,
        old_records_by_id: Mapping[str, Mapping[str, Any]] | None = None,
        store: Any = None,
    ) -> MutationEvent:
        """Handle a raw mutation notification from the host.

        Returns:
            The MutationEvent that was dispatched
        """
        event = MutationEvent(
            entity=self.entity,
            phase=phase,
            operation_type=operation_type,
            new_records=tuple(new_records) if new_records is not None else None,
            old_records_by_id=old_records_by_id,
            store=store,
        )
        self.fire(event)
        return event

    def fire(self, event: MutationEvent) -> None:
        """Dispatch an already-built event.

        Raises:
            ConfigNotFoundError: If the entity is unconfigured and the table's
                missing-config policy is RAISE
        """
        if (event.phase, event.operation_type) not in self.subscriptions:
            return

        config = self.configs.resolve(self.entity)
        if config is None:
            return

        self.dispatcher.handle(event, config)

    def __repr__(self) -> str:
        return f"<TriggerEntryPoint {self.entity!r}>"
