"""Trigger dispatcher for triggerforge.

Runs the phase-appropriate operations of a TriggerConfig against one
MutationEvent, handling enablement, per-operation filtering and
sequential ordering. Operation failures are not recovered here.
"""

import logging
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager

from triggerforge.config.types import TriggerConfig
from triggerforge.core.types import MutationEvent
from triggerforge.operations.base import operation_name

logger = logging.getLogger(__name__)

_LOGGED_ATTR = "_triggerforge_logged"


class TriggerDispatcher:
    """Dispatches mutation events to configured operations.

    Operations within a phase execute sequentially in declared order. An
    in-place change made by one BEFORE-phase operation is visible to every
    operation after it.
    """

    def __init__(self) -> None:
        self._bypassed: Counter[str] = Counter()

    def handle(self, event: MutationEvent, config: TriggerConfig) -> None:
        """Execute the operations configured for the event's phase.

        Args:
            event: The mutation event being dispatched
            config: Trigger configuration for the event's entity

        Any exception raised by an operation propagates unchanged and stops
        the remaining operations.
        """
        if not config.is_enabled:
            logger.debug("Triggers disabled for '%s', skipping", config.entity)
            return

        if self.is_bypassed(config.entity):
            logger.debug("Triggers bypassed for '%s', skipping", config.entity)
            return

        operations = config.operations_for(event.phase)
        if not operations:
            return

        candidates = event.candidates

        for op in operations:
            name = operation_name(op)
            try:
                if not op.is_enabled(event):
                    continue

                subset = op.filter(event, candidates)
                if not subset:
                    continue

                logger.debug(
                    "Running '%s' on %d %s record(s) (%s %s)",
                    name,
                    len(subset),
                    event.entity,
                    event.phase.value,
                    event.operation_type.value,
                )
                op.execute(event, subset)
            except Exception as e:
                # Nested dispatches (DML issued by an operation) re-raise the
                # same exception through every level; log it at the innermost.
                if not getattr(e, _LOGGED_ATTR, False):
                    logger.error(
                        "Operation '%s' failed during %s %s of %s: %s",
                        name,
                        event.phase.value,
                        event.operation_type.value,
                        event.entity,
                        e,
                    )
                    setattr(e, _LOGGED_ATTR, True)
                raise

    # ------------------------------------------------------------------
    # Bypass
    # ------------------------------------------------------------------

    @contextmanager
    def bypass(self, entity: str) -> Iterator[None]:
        """Suppress dispatch for an entity while the block runs.

        Usage:
            with dispatcher.bypass("Account"):
                runtime.insert("Account", rows)  # no Account operations run
        """
        self._bypassed[entity] += 1
        try:
            yield
        finally:
            self._bypassed[entity] -= 1
            if self._bypassed[entity] <= 0:
                del self._bypassed[entity]

    def is_bypassed(self, entity: str) -> bool:
        """Check if dispatch is currently bypassed for an entity."""
        return self._bypassed[entity] > 0
