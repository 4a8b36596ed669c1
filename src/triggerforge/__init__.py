"""triggerforge: configuration-driven dispatch of entity lifecycle triggers.

Separates the mechanics of trigger invocation from business logic:
- Operations: small units with is_enabled / filter / execute
- TriggerConfig: per-entity enablement and ordered before/after operations
- TriggerDispatcher: runs the phase's operations on their filtered records
- TriggerEntryPoint: adapts a host mutation notification into a dispatch

Usage:
    from triggerforge import BaseOperation, OperationRegistry, OperationType

    class RequireName(BaseOperation):
        name = "RequireName"
        on = (OperationType.INSERT,)

        def filter(self, event, candidates):
            return [r for r in candidates if not r.get("name")]

        def execute(self, event, subset):
            for record in subset:
                record.add_error("Name is required.", field="name")

    OperationRegistry.register("RequireName", RequireName)
"""

from triggerforge.config.types import ConfigTable, MissingConfigPolicy, TriggerConfig
from triggerforge.core.types import (
    MutationEvent,
    OperationType,
    Phase,
    Record,
    ValidationError,
)
from triggerforge.dispatch.dispatcher import TriggerDispatcher
from triggerforge.dispatch.entry_point import TriggerEntryPoint
from triggerforge.errors import (
    ConfigNotFoundError,
    ConfigurationError,
    RecordRejectedError,
    TriggerForgeError,
)
from triggerforge.operations.base import BaseOperation, TriggerOperation, operation_name
from triggerforge.operations.registry import OperationRegistry, operation

__version__ = "0.1.0"

__all__ = [
    "BaseOperation",
    "ConfigNotFoundError",
    "ConfigTable",
    "ConfigurationError",
    "MissingConfigPolicy",
    "MutationEvent",
    "OperationRegistry",
    "OperationType",
    "Phase",
    "Record",
    "RecordRejectedError",
    "TriggerConfig",
    "TriggerDispatcher",
    "TriggerEntryPoint",
    "TriggerForgeError",
    "TriggerOperation",
    "ValidationError",
    "operation",
    "operation_name",
]
