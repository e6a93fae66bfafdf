"""Tests for environment settings (config.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from cypress_cli.config import VALID_CYPRESS_ENVS, Settings, default_cache_folder
from cypress_cli.exceptions import InvalidEnvironmentError


class TestFromEnv:
    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.cypress_env is None
        assert settings.run_binary is None
        assert settings.debug is False
        assert settings.cache_folder == default_cache_folder({})

    def test_overrides(self, tmp_path: Path) -> None:
        settings = Settings.from_env({
            "CYPRESS_CACHE_FOLDER": str(tmp_path),
            "CYPRESS_RUN_BINARY": str(tmp_path / "Cypress"),
            "DEBUG": "cypress:*",
        })
        assert settings.cache_folder == tmp_path
        assert settings.run_binary == tmp_path / "Cypress"
        assert settings.debug is True

    def test_debug_requires_cypress_namespace(self) -> None:
        assert Settings.from_env({"DEBUG": "express:*"}).debug is False

    def test_default_cache_folder_ends_with_cypress(self) -> None:
        assert "Cypress" in default_cache_folder({}).parts


class TestValidate:
    def test_unset_is_valid(self) -> None:
        Settings.from_env({}).validate()

    @pytest.mark.parametrize("value", VALID_CYPRESS_ENVS)
    def test_accepted_values(self, value: str) -> None:
        Settings.from_env({"CYPRESS_ENV": value}).validate()

    @pytest.mark.parametrize("value", ["bogus", "", "PRODUCTION"])
    def test_rejected_values(self, value: str) -> None:
        with pytest.raises(InvalidEnvironmentError) as exc_info:
            Settings.from_env({"CYPRESS_ENV": value}).validate()
        assert str(exc_info.value) == f"CYPRESS_ENV={value}"
        assert exc_info.value.hint is not None
        assert "production" in exc_info.value.hint
