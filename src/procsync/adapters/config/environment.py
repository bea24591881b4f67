"""
Environment Config Provider - Load configuration from environment variables.

Supports:
- Environment variables (ASANA_ACCESS_TOKEN, ASANA_WORKSPACE_ID, ...)
- .env files
- Command line argument overrides

Precedence, lowest first: .env file, environment, CLI overrides.
"""

import os
from pathlib import Path
from typing import Any

from procsync.core.ports.config_provider import (
    DEFAULT_APP_URL,
    DEFAULT_BATCH_DELAY,
    DEFAULT_ASANA_URL,
    DEFAULT_NOTES_LIMIT,
    AppConfig,
    CondenserConfig,
    ConfigProviderPort,
    SyncConfig,
    TrackerConfig,
)


DEFAULT_DATABASE = "~/.procsync/procsync.db"

# Accepted spellings of "on" for boolean settings; anything else is off
TRUTHY = ("true", "yes", "on", "1")


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider that loads from environment variables and .env files.
    """

    ENV_MAPPING = {
        "ASANA_ACCESS_TOKEN": "asana_access_token",
        "ASANA_WORKSPACE_ID": "workspace_id",
        "ASANA_API_URL": "asana_url",
        "ANTHROPIC_API_KEY": "anthropic_api_key",
        "PROCSYNC_CONDENSE_MODEL": "condense_model",
        "PROCSYNC_APP_URL": "app_url",
        "PROCSYNC_DB": "database_path",
        "PROCSYNC_NOTES_LIMIT": "notes_limit",
        "PROCSYNC_VERBOSE": "verbose",
        "PROCSYNC_BATCH_DELAY": "batch_delay",
    }

    CLI_MAPPING = {
        "db": "database_path",
        "workspace": "workspace_id",
        "app_url": "app_url",
        "notes_limit": "notes_limit",
        "verbose": "verbose",
    }

    def __init__(
        self,
        env_file: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ):
        """
        Initialize the config provider.

        Args:
            env_file: Path to .env file (auto-detected if not specified)
            cli_overrides: Command line argument overrides
        """
        self._values: dict[str, Any] = {}
        self._env_file = env_file
        self._cli_overrides = cli_overrides or {}
        self.env_file_path: Path | None = None

        # Load configuration
        self._load_env_file()
        self._load_environment()
        self._apply_cli_overrides()

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    def load(self) -> AppConfig:
        """Load complete configuration."""
        tracker = TrackerConfig(
            access_token=self.get("asana_access_token", ""),
            url=self.get("asana_url", DEFAULT_ASANA_URL),
            workspace_id=self.get("workspace_id"),
        )

        condenser = CondenserConfig(api_key=self.get("anthropic_api_key"))
        model = self.get("condense_model")
        if model:
            condenser.model = model

        sync = SyncConfig(
            app_url=str(self.get("app_url", DEFAULT_APP_URL)).rstrip("/"),
            notes_limit=self._get_int("notes_limit", DEFAULT_NOTES_LIMIT),
            verbose=self._get_bool("verbose"),
            batch_delay=self._get_float("batch_delay", DEFAULT_BATCH_DELAY),
        )

        return AppConfig(
            tracker=tracker,
            condenser=condenser,
            sync=sync,
            database_path=self.get("database_path", DEFAULT_DATABASE),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        key = key.lower().replace("-", "_")
        return self._values.get(key, default)

    def validate(self) -> list[str]:
        """Validate configuration."""
        errors = []

        if not self.get("asana_access_token"):
            errors.append("Missing ASANA_ACCESS_TOKEN - set in environment or .env file")
        try:
            if self._get_int("notes_limit", DEFAULT_NOTES_LIMIT) <= 0:
                errors.append("PROCSYNC_NOTES_LIMIT must be a positive integer")
        except ValueError:
            errors.append("PROCSYNC_NOTES_LIMIT must be a positive integer")

        try:
            if self._get_float("batch_delay", DEFAULT_BATCH_DELAY) < 0:
                errors.append("PROCSYNC_BATCH_DELAY must be a non-negative number of seconds")
        except ValueError:
            errors.append("PROCSYNC_BATCH_DELAY must be a non-negative number of seconds")

        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _get_int(self, key: str, default: int) -> int:
        value = self.get(key, default)
        if isinstance(value, bool):
            raise ValueError(f"{key} must be an integer")
        return int(value)

    def _get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in TRUTHY
        return bool(value)

    def _get_float(self, key: str, default: float) -> float:
        value = self.get(key, default)
        if isinstance(value, bool):
            raise ValueError(f"{key} must be a number")
        return float(value)

    def _load_env_file(self) -> None:
        """Load values from .env file."""
        env_file = self._find_env_file()
        if not env_file:
            return
        self.env_file_path = env_file

        for line in env_file.read_text().splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            if line.startswith("export "):
                line = line[len("export ") :]

            if "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")

            config_key = self.ENV_MAPPING.get(key)
            if config_key:
                self._values[config_key] = self._coerce(value)

    def _find_env_file(self) -> Path | None:
        """Find .env file."""
        if self._env_file:
            return self._env_file if self._env_file.exists() else None

        cwd_env = Path.cwd() / ".env"
        if cwd_env.exists():
            return cwd_env

        return None

    @staticmethod
    def _coerce(raw_value: str) -> Any:
        """Convert boolean-ish values."""
        if raw_value.lower() in ("true", "yes"):
            return True
        if raw_value.lower() in ("false", "no"):
            return False
        return raw_value

    def _load_environment(self) -> None:
        """Load values from environment variables."""
        for env_key, config_key in self.ENV_MAPPING.items():
            raw_value = os.environ.get(env_key)
            if raw_value is not None:
                self._values[config_key] = self._coerce(raw_value)

    def _apply_cli_overrides(self) -> None:
        """Apply CLI argument overrides."""
        for cli_key, config_key in self.CLI_MAPPING.items():
            if self._cli_overrides.get(cli_key) is not None:
                self._values[config_key] = self._cli_overrides[cli_key]
