"""Runtime settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from triggerforge.config.types import MissingConfigPolicy
from triggerforge.errors import ConfigurationError

_TRUE_VALUES = ("1", "true", "yes", "on")

DEFAULT_LOG_LEVEL = "WARNING"


def log_level_from_env() -> str:
    """Logging level name from TRIGGERFORGE_LOG_LEVEL, upper-cased."""
    return os.environ.get("TRIGGERFORGE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def _missing_policy_from_env() -> MissingConfigPolicy:
    value = os.environ.get("TRIGGERFORGE_MISSING_CONFIG", "warn").lower()
    try:
        return MissingConfigPolicy(value)
    except ValueError:
        allowed = ", ".join(p.value for p in MissingConfigPolicy)
        raise ConfigurationError(
            f"Invalid TRIGGERFORGE_MISSING_CONFIG '{value}' (expected one of: {allowed})"
        ) from None


@dataclass
class Settings:
    """Process-wide settings for triggerforge services.

    Attributes:
        database_url: sqlite:/// URL of the record store
        config_path: Trigger configuration document, or None for the
            bundled Account configuration
        missing_config: Policy for entities without configuration
        strict_phases: Reject operations declared in both phase lists
    """

    database_url: str = "sqlite:///:memory:"
    config_path: Path | None = None
    missing_config: MissingConfigPolicy = MissingConfigPolicy.WARN
    strict_phases: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """Create settings from environment variables.

        Recognised variables:
        1. DATABASE_URL (standard; default: in-memory SQLite)
        2. TRIGGERFORGE_CONFIG_PATH
        3. TRIGGERFORGE_MISSING_CONFIG ("warn" or "raise")
        4. TRIGGERFORGE_STRICT_PHASES ("1", "true", "yes", "on")

        Raises:
            ConfigurationError: If TRIGGERFORGE_MISSING_CONFIG is not a known policy
        """
        config_path = os.environ.get("TRIGGERFORGE_CONFIG_PATH")

        return cls(
            database_url=os.environ.get("DATABASE_URL", "sqlite:///:memory:"),
            config_path=Path(config_path) if config_path else None,
            missing_config=_missing_policy_from_env(),
            strict_phases=os.environ.get("TRIGGERFORGE_STRICT_PHASES", "").lower()
            in _TRUE_VALUES,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def sqlite_path(self) -> str:
        """Filesystem path (or ":memory:") extracted from the sqlite URL.

        Raises:
            ValueError: For non-sqlite database URLs
        """
        if not self.is_sqlite:
            raise ValueError(f"Unsupported database URL scheme: {self.database_url}")
        path = self.database_url.replace("sqlite:///", "", 1)
        return path or ":memory:"
