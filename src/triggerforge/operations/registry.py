"""Operation registry for triggerforge.

Maps the identifiers used in trigger configuration documents to factories
that build operation instances. Follows the same pattern as the hook and
validator registries: explicit registration at startup, no lookup of
classes by name at dispatch time.
"""

from collections.abc import Callable
from typing import TypeVar

from triggerforge.operations.base import TriggerOperation

# Factory signature: () -> TriggerOperation (an operation class qualifies)
OperationFactory = Callable[[], TriggerOperation]

T = TypeVar("T")


class OperationRegistry:
    """Registry for trigger operation factories.

    Operations must be explicitly registered before a configuration can
    reference them. Registration is done at application startup via
    register_builtin_operations() or the @operation decorator.

    Example:
        OperationRegistry.register("AccountValidation", AccountValidation)

        # Later, while loading the configuration document
        op = OperationRegistry.create("AccountValidation")
    """

    _factories: dict[str, OperationFactory] = {}

    @classmethod
    def register(cls, name: str, factory: OperationFactory) -> None:
        """Register an operation factory by name.

        Idempotent - re-registering the same name is a no-op.

        Args:
            name: Identifier referenced from configuration documents
            factory: Zero-argument callable returning an operation
        """
        if name in cls._factories:
            return
        cls._factories[name] = factory

    @classmethod
    def get(cls, name: str) -> OperationFactory:
        """Get a registered operation factory by name.

        Raises:
            ValueError: If the operation is not registered
        """
        if name not in cls._factories:
            raise ValueError(
                f"Operation '{name}' is not registered. "
                "Operations must be explicitly registered at application startup."
            )
        return cls._factories[name]

    @classmethod
    def create(cls, name: str) -> TriggerOperation:
        """Build an operation instance from its identifier.

        Raises:
            ValueError: If the operation is not registered
        """
        return cls.get(name)()

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if an operation is registered."""
        return name in cls._factories

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered operation names."""
        return sorted(cls._factories.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._factories.clear()


def operation(name: str) -> Callable[[T], T]:
    """Class decorator to register an operation.

    Usage:
        @operation("AccountValidation")
        class AccountValidation(BaseOperation):
            ...
    """

    def decorator(cls: T) -> T:
        OperationRegistry.register(name, cls)  # type: ignore[arg-type]
        return cls

    return decorator
