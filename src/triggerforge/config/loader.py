"""
Build trigger configurations from external documents.

A configuration document maps entity keys to their trigger settings::

    {
      "Account": {
        "isEnabled": true,
        "beforeTriggersOpsClassNames": ["AccountValidation"],
        "afterTriggerOpsClassNames": ["AccountUpdateRelatedContacts"]
      }
    }

Documents may be JSON (``.json``) or YAML (``.yaml`` / ``.yml``). Each
document is validated against ``schemas/trigger_config.schema.json`` and
every operation identifier is resolved through the OperationRegistry while
loading, so a bad document fails at startup rather than at dispatch time.

Usage:
    from triggerforge.config.loader import load_config_file

    configs = load_config_file(Path("trigger_config.json"))
    account = configs.get_config("Account")
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaValidationError

from triggerforge.config.types import (
    ConfigTable,
    MissingConfigPolicy,
    TriggerConfig,
    check_phase_exclusivity,
)
from triggerforge.errors import ConfigurationError
from triggerforge.operations.registry import OperationRegistry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Document keys
# ---------------------------------------------------------------------------

IS_ENABLED_KEY = "isEnabled"
BEFORE_OPS_KEY = "beforeTriggersOpsClassNames"
AFTER_OPS_KEY = "afterTriggerOpsClassNames"

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "trigger_config.schema.json"

_YAML_SUFFIXES = (".yaml", ".yml")


@dataclass
class ConfigIssue:
    """A single problem found in a configuration document."""

    message: str
    path: str = ""  # location within the document, e.g. "Account/isEnabled"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[ERROR]{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: SchemaValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _operation_names(entry: Mapping[str, Any], key: str) -> list[str]:
    names = entry.get(key) or []
    if isinstance(names, str):
        names = [names]
    return list(names)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a JSON or YAML configuration document from disk.

    Raises:
        ConfigurationError: If the file is missing, empty or unparseable
    """
    if not path.is_file():
        raise ConfigurationError(f"Trigger configuration not found: {path}")

    try:
        with path.open() as fh:
            if path.suffix.lower() in _YAML_SUFFIXES:
                data = yaml.safe_load(fh)
            else:
                data = json.load(fh)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc

    if data is None:
        raise ConfigurationError(f"Trigger configuration {path} is empty")
    return data


def validate_config_document(data: Any) -> list[ConfigIssue]:
    """Validate a configuration document without building it.

    Checks the document against the JSON Schema, then checks that every
    operation identifier is registered.

    Returns:
        A list of ConfigIssue objects (empty on success).
    """
    validator = Draft202012Validator(_load_schema())
    issues = [
        ConfigIssue(message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    ]
    if issues:
        return issues

    for entity, entry in data.items():
        for key in (BEFORE_OPS_KEY, AFTER_OPS_KEY):
            for index, name in enumerate(_operation_names(entry, key)):
                if not OperationRegistry.is_registered(name):
                    issues.append(
                        ConfigIssue(
                            message=f"Operation '{name}' is not registered",
                            path=f"{entity}/{key}[{index}]",
                        )
                    )
    return issues


def build_config(entity: str, entry: Mapping[str, Any]) -> TriggerConfig:
    """Resolve one document entry into a TriggerConfig.

    Raises:
        ConfigurationError: If an operation identifier is not registered
    """
    try:
        before_ops = [
            OperationRegistry.create(name)
            for name in _operation_names(entry, BEFORE_OPS_KEY)
        ]
        after_ops = [
            OperationRegistry.create(name)
            for name in _operation_names(entry, AFTER_OPS_KEY)
        ]
    except ValueError as exc:
        raise ConfigurationError(f"Invalid configuration for '{entity}': {exc}") from exc

    return TriggerConfig(
        entity=entity,
        is_enabled=bool(entry.get(IS_ENABLED_KEY, False)),
        before_ops=tuple(before_ops),
        after_ops=tuple(after_ops),
    )


def load_config_document(
    data: Any,
    *,
    missing: MissingConfigPolicy = MissingConfigPolicy.WARN,
    strict: bool = False,
) -> ConfigTable:
    """Validate and resolve a configuration document into a ConfigTable.

    Args:
        data: Parsed document (entity key -> settings)
        missing: Policy for entities absent from the document
        strict: Reject operations declared in both phase lists

    Raises:
        ConfigurationError: On any schema violation or unresolvable identifier
    """
    issues = validate_config_document(data)
    if issues:
        raise ConfigurationError(
            "Invalid trigger configuration: " + "; ".join(str(i) for i in issues)
        )

    configs = []
    for entity, entry in data.items():
        config = build_config(entity, entry)
        check_phase_exclusivity(config, strict=strict)
        configs.append(config)
        logger.debug(
            "Loaded trigger configuration for '%s' (enabled=%s, before=%d, after=%d)",
            entity,
            config.is_enabled,
            len(config.before_ops),
            len(config.after_ops),
        )

    return ConfigTable(configs, missing=missing)


def load_config_file(
    path: Path,
    *,
    missing: MissingConfigPolicy = MissingConfigPolicy.WARN,
    strict: bool = False,
) -> ConfigTable:
    """Read, validate and resolve a configuration document from disk."""
    table = load_config_document(read_config_file(path), missing=missing, strict=strict)
    logger.info("Loaded %d trigger configuration(s) from %s", len(table), path)
    return table
