"""Initialize triggerforge services once at process start.

Registers operations, loads and validates the trigger configuration,
connects the record store and wires the Account entry point into the
runtime. The returned ConfigTable is immutable and shared by every
dispatch for the life of the process.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from triggerforge.accounts import (
    ACCOUNT,
    ACCOUNT_CONFIG_PATH,
    SCHEMAS,
    account_trigger,
    register_account_operations,
)
from triggerforge.config.loader import load_config_file
from triggerforge.config.settings import Settings
from triggerforge.config.types import ConfigTable
from triggerforge.dispatch.dispatcher import TriggerDispatcher
from triggerforge.dispatch.entry_point import TriggerEntryPoint
from triggerforge.persistence.runtime import TriggerRuntime
from triggerforge.persistence.store import SQLiteRecordStore

logger = logging.getLogger(__name__)


@dataclass
class TriggerForgeServices:
    """Container for all initialized triggerforge services."""

    settings: Settings
    configs: ConfigTable
    dispatcher: TriggerDispatcher
    store: SQLiteRecordStore
    runtime: TriggerRuntime

    def close(self) -> None:
        self.store.close()


def register_builtin_operations() -> None:
    """Register every operation shipped with triggerforge.

    Called at application startup, before any configuration is loaded.
    """
    register_account_operations()


def load_configs(settings: Settings) -> ConfigTable:
    """Load the configuration document named by the settings."""
    path = settings.config_path or ACCOUNT_CONFIG_PATH
    return load_config_file(
        path,
        missing=settings.missing_config,
        strict=settings.strict_phases,
    )


def initialize_services(settings: Settings | None = None) -> TriggerForgeServices:
    """Initialize all triggerforge services.

    Raises:
        ConfigurationError: If the trigger configuration is invalid
    """
    if settings is None:
        settings = Settings.from_env()

    register_builtin_operations()
    configs = load_configs(settings)

    sqlite_path = settings.sqlite_path
    if sqlite_path != ":memory:":
        Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    store = SQLiteRecordStore(sqlite_path, schemas=SCHEMAS)
    store.connect()
    store.initialize()

    dispatcher = TriggerDispatcher()
    runtime = TriggerRuntime(store)
    runtime.register_trigger(account_trigger(configs, dispatcher))
    for entity in configs.entities():
        if entity == ACCOUNT:
            continue
        if entity in store.schemas:
            runtime.register_trigger(TriggerEntryPoint(entity, configs, dispatcher))
        else:
            logger.warning("No record schema for configured entity '%s'", entity)

    return TriggerForgeServices(
        settings=settings,
        configs=configs,
        dispatcher=dispatcher,
        store=store,
        runtime=runtime,
    )
