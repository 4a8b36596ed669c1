"""Trigger configuration types.

- TriggerConfig: per-entity enablement and ordered before/after operations
- ConfigTable: the immutable, process-wide table of TriggerConfigs
- MissingConfigPolicy: what the entry point does for an unconfigured entity
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from triggerforge.core.types import Phase
from triggerforge.errors import ConfigNotFoundError, ConfigurationError
from triggerforge.operations.base import TriggerOperation, operation_name

logger = logging.getLogger(__name__)


class MissingConfigPolicy(Enum):
    """Behavior when a trigger fires for an entity with no configuration.

    WARN: Log a warning and dispatch nothing
    RAISE: Propagate ConfigNotFoundError to the host transaction
    """

    WARN = "warn"
    RAISE = "raise"


@dataclass(frozen=True)
class TriggerConfig:
    """Dispatch configuration for one entity type.

    Attributes:
        entity: Entity key this configuration governs (e.g. "Account")
        is_enabled: False short-circuits every dispatch for the entity
        before_ops: Operations run in the BEFORE phase, in order
        after_ops: Operations run in the AFTER phase, in order
    """

    entity: str
    is_enabled: bool = True
    before_ops: tuple[TriggerOperation, ...] = field(default_factory=tuple)
    after_ops: tuple[TriggerOperation, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "before_ops", tuple(self.before_ops))
        object.__setattr__(self, "after_ops", tuple(self.after_ops))

    def operations_for(self, phase: Phase) -> tuple[TriggerOperation, ...]:
        """Return the ordered operation list for a phase."""
        if phase is Phase.BEFORE:
            return self.before_ops
        return self.after_ops

    def shared_operations(self) -> list[str]:
        """Names of operations declared in both the before and after lists."""
        before = {operation_name(op) for op in self.before_ops}
        return sorted(
            {operation_name(op) for op in self.after_ops if operation_name(op) in before}
        )

    def describe(self) -> dict:
        """Plain-dict view, shaped like the configuration document."""
        return {
            "isEnabled": self.is_enabled,
            "beforeTriggersOpsClassNames": [operation_name(op) for op in self.before_ops],
            "afterTriggerOpsClassNames": [operation_name(op) for op in self.after_ops],
        }


def check_phase_exclusivity(config: TriggerConfig, strict: bool = False) -> None:
    """Warn about (or, when strict, reject) operations listed in both phases."""
    shared = config.shared_operations()
    if not shared:
        return
    if strict:
        raise ConfigurationError(
            f"Operations declared in both before and after lists for "
            f"'{config.entity}': {', '.join(shared)}"
        )
    logger.warning(
        "Operations declared in both phases for '%s': %s",
        config.entity,
        ", ".join(shared),
    )


class ConfigTable:
    """Immutable table of trigger configurations keyed by entity.

    Built once during startup and shared read-only by every entry point.
    """

    def __init__(
        self,
        configs: Iterable[TriggerConfig] = (),
        missing: MissingConfigPolicy = MissingConfigPolicy.WARN,
    ):
        table: dict[str, TriggerConfig] = {}
        for config in configs:
            if config.entity in table:
                raise ConfigurationError(
                    f"Duplicate trigger configuration for '{config.entity}'"
                )
            table[config.entity] = config
        self._configs = MappingProxyType(table)
        self.missing = missing

    @classmethod
    def from_configs(
        cls,
        configs: Iterable[TriggerConfig],
        missing: MissingConfigPolicy = MissingConfigPolicy.WARN,
        strict: bool = False,
    ) -> "ConfigTable":
        """Build a table from in-code declarations."""
        configs = list(configs)
        for config in configs:
            check_phase_exclusivity(config, strict=strict)
        return cls(configs, missing=missing)

    def get_config(self, entity: str) -> TriggerConfig:
        """Get the configuration for an entity.

        Raises:
            ConfigNotFoundError: If no configuration is registered for the key
        """
        try:
            return self._configs[entity]
        except KeyError:
            raise ConfigNotFoundError(entity) from None

    def resolve(self, entity: str) -> TriggerConfig | None:
        """Get the configuration for an entity, applying the missing policy.

        Returns None (after logging a warning) for an unconfigured entity
        under MissingConfigPolicy.WARN.
        """
        try:
            return self.get_config(entity)
        except ConfigNotFoundError:
            if self.missing is MissingConfigPolicy.RAISE:
                raise
            logger.warning(
                "No trigger configuration for '%s', skipping dispatch", entity
            )
            return None

    def entities(self) -> list[str]:
        """List configured entity keys."""
        return sorted(self._configs.keys())

    def __contains__(self, entity: object) -> bool:
        return entity in self._configs

    def __iter__(self) -> Iterator[TriggerConfig]:
        return iter(self._configs.values())

    def __len__(self) -> int:
        return len(self._configs)
