"""Shared pytest fixtures and configuration for the cypress-cli test suite.

Guidelines
----------
* No network access and no real Cypress binary in any test.
* Command handlers, the cache and the version service are faked at the
  :class:`~cypress_cli.core.protocols.Services` boundary.
* Settings are built from explicit dicts, never from ``os.environ``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from cypress_cli.config import Settings
from cypress_cli.core.models import Versions
from cypress_cli.core.protocols import Services
from cypress_cli.core.schema import CommandSchemaRegistry, build_default_registry


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeHandler:
    """Records every options record it is started with."""

    def __init__(self, result: int | None = 0, error: BaseException | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[Any] = []

    async def start(self, options: Any) -> int | None:
        self.calls.append(options)
        if self.error is not None:
            raise self.error
        return self.result


class FakeCache:
    def __init__(self, versions: Sequence[str] = (), root: Path = Path("/tmp/Cypress")) -> None:
        self.versions = list(versions)
        self.root = root
        self.calls: list[str] = []

    def list(self) -> Sequence[str]:
        self.calls.append("list")
        return self.versions

    def path(self) -> Path:
        self.calls.append("path")
        return self.root

    def clear(self) -> None:
        self.calls.append("clear")


class FakeVersions:
    def __init__(self, error: BaseException | None = None) -> None:
        self.error = error

    async def get_versions(self) -> Versions:
        if self.error is not None:
            raise self.error
        return Versions(package="4.2.0", binary="4.2.1")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def services() -> Services:
    return Services(
        run=FakeHandler(),
        open=FakeHandler(),
        install=FakeHandler(),
        verify=FakeHandler(),
        cache=FakeCache(versions=("4.1.0", "4.2.0")),
        versions=FakeVersions(),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings.from_env({"CYPRESS_CACHE_FOLDER": str(tmp_path / "cache")})


@pytest.fixture
def registry() -> CommandSchemaRegistry:
    return build_default_registry()
