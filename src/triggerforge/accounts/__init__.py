"""Account trigger: operations, configuration and entry point.

Usage:
    from triggerforge.accounts import register_account_operations

    register_account_operations()  # once, at startup
"""

from triggerforge.accounts.operations import (
    EMPLOYEE_THRESHOLD,
    LARGE_ACCOUNT_DESCRIPTION,
    PROSPECT_PHONE_MESSAGE,
    AccountUpdateRelatedContacts,
    AccountValidation,
)
from triggerforge.accounts.schema import ACCOUNT_SCHEMA, CONTACT_SCHEMA, SCHEMAS
from triggerforge.accounts.trigger import (
    ACCOUNT,
    ACCOUNT_CONFIG_PATH,
    account_trigger,
    account_trigger_config,
)
from triggerforge.operations.registry import OperationRegistry


def register_account_operations() -> None:
    """Register the Account operations with the OperationRegistry."""
    OperationRegistry.register(AccountValidation.name, AccountValidation)
    OperationRegistry.register(
        AccountUpdateRelatedContacts.name, AccountUpdateRelatedContacts
    )


__all__ = [
    "ACCOUNT",
    "ACCOUNT_CONFIG_PATH",
    "ACCOUNT_SCHEMA",
    "CONTACT_SCHEMA",
    "EMPLOYEE_THRESHOLD",
    "LARGE_ACCOUNT_DESCRIPTION",
    "PROSPECT_PHONE_MESSAGE",
    "SCHEMAS",
    "AccountUpdateRelatedContacts",
    "AccountValidation",
    "account_trigger",
    "account_trigger_config",
    "register_account_operations",
]
