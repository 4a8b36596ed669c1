"""Account trigger entry point and its in-code configuration."""

from pathlib import Path

from triggerforge.accounts.operations import (
    AccountUpdateRelatedContacts,
    AccountValidation,
)
from triggerforge.config.types import ConfigTable, TriggerConfig
from triggerforge.dispatch.dispatcher import TriggerDispatcher
from triggerforge.dispatch.entry_point import TriggerEntryPoint

ACCOUNT = "Account"

# Bundled configuration document for the Account trigger
ACCOUNT_CONFIG_PATH = Path(__file__).parent / "trigger_config.json"


def account_trigger_config(is_enabled: bool = True) -> TriggerConfig:
    """Declare the Account configuration in code.

    Equivalent to the bundled trigger_config.json document.
    """
    return TriggerConfig(
        entity=ACCOUNT,
        is_enabled=is_enabled,
        before_ops=(AccountValidation(),),
        after_ops=(AccountUpdateRelatedContacts(),),
    )


def account_trigger(
    configs: ConfigTable, dispatcher: TriggerDispatcher
) -> TriggerEntryPoint:
    """Build the Account entry point."""
    return TriggerEntryPoint(ACCOUNT, configs, dispatcher)
