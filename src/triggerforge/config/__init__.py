"""Trigger configuration: types, document loading and settings."""

from triggerforge.config.loader import (
    ConfigIssue,
    build_config,
    load_config_document,
    load_config_file,
    read_config_file,
    validate_config_document,
)
from triggerforge.config.settings import DEFAULT_LOG_LEVEL, Settings, log_level_from_env
from triggerforge.config.types import (
    ConfigTable,
    MissingConfigPolicy,
    TriggerConfig,
    check_phase_exclusivity,
)

__all__ = [
    "ConfigIssue",
    "ConfigTable",
    "DEFAULT_LOG_LEVEL",
    "MissingConfigPolicy",
    "Settings",
    "TriggerConfig",
    "build_config",
    "check_phase_exclusivity",
    "load_config_document",
    "load_config_file",
    "log_level_from_env",
    "read_config_file",
    "validate_config_document",
]
