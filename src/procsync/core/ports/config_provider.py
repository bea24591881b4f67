"""
Configuration Port - Settings for the tracker, the condenser and the sync.

EnvironmentConfigProvider (adapters/config) reads them from a .env file,
the environment and command line flags.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


DEFAULT_ASANA_URL = "https://app.asana.com/api/1.0"
DEFAULT_APP_URL = "http://localhost:3000"

# Asana rejects notes longer than this
DEFAULT_NOTES_LIMIT = 65_000

# Pause between processes in sync-all, to stay under Asana rate limits
DEFAULT_BATCH_DELAY = 1.0


@dataclass
class TrackerConfig:
    """Configuration for the project tracker (Asana)."""

    access_token: str
    url: str = DEFAULT_ASANA_URL
    workspace_id: str | None = None  # Default workspace for new projects
    timeout: int = 30


@dataclass
class CondenserConfig:
    """Configuration for the text-condensation service."""

    api_key: str | None = None
    model: str = "claude-sonnet-4-5"
    max_tokens: int = 16_000
    timeout: float = 120.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@dataclass
class SyncConfig:
    """Engine behaviour that is not tied to one backend."""

    app_url: str = DEFAULT_APP_URL  # Used for back-links in backfilled tasks
    notes_limit: int = DEFAULT_NOTES_LIMIT
    backfill_improvements: bool = True
    verbose: bool = False
    batch_delay: float = DEFAULT_BATCH_DELAY  # Seconds between processes in a batch


@dataclass
class AppConfig:
    """Everything the CLI needs to build an orchestrator."""

    tracker: TrackerConfig
    condenser: CondenserConfig
    sync: SyncConfig

    # Local store
    database_path: str | None = None

    def validate(self) -> list[str]:
        """Problems that make the configuration unusable; empty when valid."""
        errors = []

        if not self.tracker.access_token:
            errors.append("Missing tracker token (ASANA_ACCESS_TOKEN)")
        if not self.tracker.url:
            errors.append("Missing tracker URL (ASANA_API_URL)")
        if self.sync.notes_limit <= 0:
            errors.append("Notes limit must be positive (PROCSYNC_NOTES_LIMIT)")
        if self.sync.batch_delay < 0:
            errors.append("Batch delay must not be negative (PROCSYNC_BATCH_DELAY)")

        return errors


class ConfigProviderPort(ABC):
    """Source of AppConfig; later sources override earlier ones."""

    @abstractmethod
    def load(self) -> AppConfig:
        """Build the full configuration from every source."""
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Raw value for a lowercase config key such as ``"asana_access_token"``."""
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """Human-readable problems with the loaded values; empty when usable."""
        ...
