"""Tests for the environment/.env configuration provider."""

from __future__ import annotations

from pathlib import Path

import pytest

from procsync.adapters.config import EnvironmentConfigProvider
from procsync.core.ports.config_provider import (
    DEFAULT_APP_URL,
    DEFAULT_ASANA_URL,
    DEFAULT_BATCH_DELAY,
    DEFAULT_NOTES_LIMIT,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """No ambient settings or stray .env file leak into these tests."""
    for key in EnvironmentConfigProvider.ENV_MAPPING:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class TestEnvironmentConfigProvider:
    def test_defaults(self):
        config = EnvironmentConfigProvider().load()

        assert config.tracker.url == DEFAULT_ASANA_URL
        assert config.tracker.workspace_id is None
        assert config.sync.app_url == DEFAULT_APP_URL
        assert config.sync.notes_limit == DEFAULT_NOTES_LIMIT
        assert not config.condenser.enabled
        assert config.sync.batch_delay == DEFAULT_BATCH_DELAY
        assert config.sync.verbose is False
        assert config.database_path.endswith("procsync.db")

    def test_load_from_env_vars(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "env-token")
        monkeypatch.setenv("ASANA_WORKSPACE_ID", "ws-9")
        monkeypatch.setenv("PROCSYNC_APP_URL", "https://app.example.com/")
        monkeypatch.setenv("PROCSYNC_NOTES_LIMIT", "5000")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
        monkeypatch.setenv("PROCSYNC_CONDENSE_MODEL", "claude-custom")

        config = EnvironmentConfigProvider().load()

        assert config.tracker.access_token == "env-token"
        assert config.tracker.workspace_id == "ws-9"
        assert config.sync.app_url == "https://app.example.com"
        assert config.sync.notes_limit == 5000
        assert config.condenser.enabled
        assert config.condenser.model == "claude-custom"

    def test_auto_detect_env_file_in_cwd(self, tmp_path: Path):
        (tmp_path / ".env").write_text(
            "# local settings\n"
            "export ASANA_ACCESS_TOKEN='file-token'\n"
            'PROCSYNC_DB="/tmp/p.db"\n'
            "UNRELATED=ignored\n"
            "not a setting\n"
        )

        provider = EnvironmentConfigProvider()
        config = provider.load()

        assert provider.env_file_path == tmp_path / ".env"
        assert config.tracker.access_token == "file-token"
        assert config.database_path == "/tmp/p.db"
        assert provider.get("unrelated") is None

    def test_explicit_env_file(self, tmp_path: Path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("ASANA_ACCESS_TOKEN=custom\n")

        provider = EnvironmentConfigProvider(env_file=env_file)

        assert provider.get("asana_access_token") == "custom"

    def test_missing_explicit_env_file_is_ignored(self, tmp_path: Path):
        provider = EnvironmentConfigProvider(env_file=tmp_path / "missing.env")
        assert provider.env_file_path is None

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / ".env").write_text("ASANA_ACCESS_TOKEN=file-token\n")
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "env-token")

        assert EnvironmentConfigProvider().get("asana_access_token") == "env-token"

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ASANA_WORKSPACE_ID", "ws-env")
        monkeypatch.setenv("PROCSYNC_DB", "/env.db")

        provider = EnvironmentConfigProvider(
            cli_overrides={"workspace": "ws-cli", "db": "/cli.db", "notes_limit": None}
        )
        config = provider.load()

        assert config.tracker.workspace_id == "ws-cli"
        assert config.database_path == "/cli.db"
        assert config.sync.notes_limit == DEFAULT_NOTES_LIMIT

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("yes", True),
            ("true", True),
            ("1", True),
            ("on", True),
            ("no", False),
            ("false", False),
            ("0", False),
            ("off", False),
            ("", False),
        ],
    )
    def test_verbose_values(self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool):
        monkeypatch.setenv("PROCSYNC_VERBOSE", value)
        assert EnvironmentConfigProvider().load().sync.verbose is expected

    def test_batch_delay(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PROCSYNC_BATCH_DELAY", "0.25")
        assert EnvironmentConfigProvider().load().sync.batch_delay == 0.25

    def test_zero_batch_delay_stays_numeric(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PROCSYNC_BATCH_DELAY", "0")
        monkeypatch.setenv("PROCSYNC_NOTES_LIMIT", "1")

        config = EnvironmentConfigProvider().load()

        assert config.sync.batch_delay == 0.0
        assert config.sync.notes_limit == 1


class TestValidation:
    def test_missing_token(self):
        errors = EnvironmentConfigProvider().validate()
        assert any("ASANA_ACCESS_TOKEN" in e for e in errors)

    def test_valid(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "token")
        assert EnvironmentConfigProvider().validate() == []

    @pytest.mark.parametrize("value", ["0", "-5", "lots"])
    def test_bad_notes_limit(self, monkeypatch: pytest.MonkeyPatch, value: str):
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "token")
        monkeypatch.setenv("PROCSYNC_NOTES_LIMIT", value)

        errors = EnvironmentConfigProvider().validate()

        assert errors == ["PROCSYNC_NOTES_LIMIT must be a positive integer"]

    @pytest.mark.parametrize("value", ["-1", "soon"])
    def test_bad_batch_delay(self, monkeypatch: pytest.MonkeyPatch, value: str):
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "token")
        monkeypatch.setenv("PROCSYNC_BATCH_DELAY", value)

        errors = EnvironmentConfigProvider().validate()

        assert errors == ["PROCSYNC_BATCH_DELAY must be a non-negative number of seconds"]

    def test_app_config_validate(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ASANA_ACCESS_TOKEN", "token")
        assert EnvironmentConfigProvider().load().validate() == []
