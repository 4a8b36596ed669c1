"""Trigger operations: the contract and the startup-time registry."""

from triggerforge.operations.base import BaseOperation, TriggerOperation, operation_name
from triggerforge.operations.registry import (
    OperationFactory,
    OperationRegistry,
    operation,
)

__all__ = [
    "BaseOperation",
    "OperationFactory",
    "OperationRegistry",
    "TriggerOperation",
    "operation",
    "operation_name",
]
