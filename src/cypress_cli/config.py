"""Runtime settings read from the process environment.

The environment table is read exactly once, at startup, into an
immutable :class:`Settings` instance that is passed explicitly to
whoever needs it.  Nothing in cypress-cli writes environment variables.
"""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from cypress_cli.exceptions import InvalidEnvironmentError

VALID_CYPRESS_ENVS: tuple[str, ...] = ("development", "test", "staging", "production")
"""Accepted values for ``CYPRESS_ENV``.  Unset is accepted as well."""

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


@dataclass(frozen=True, slots=True)
class Settings:
    """Snapshot of the environment variables cypress-cli understands."""

    cypress_env: str | None
    """Raw ``CYPRESS_ENV`` value, ``None`` when unset."""

    cache_folder: Path
    """Root of the binary cache."""

    run_binary: Path | None
    """Explicit binary path from ``CYPRESS_RUN_BINARY``."""

    debug: bool
    """Whether ``DEBUG`` asks for cypress debug output."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        cache = env.get("CYPRESS_CACHE_FOLDER")
        run_binary = env.get("CYPRESS_RUN_BINARY")
        return cls(
            cypress_env=env.get("CYPRESS_ENV"),
            cache_folder=Path(cache).expanduser() if cache else default_cache_folder(env),
            run_binary=Path(run_binary).expanduser() if run_binary else None,
            debug="cypress" in env.get("DEBUG", ""),
        )

    def validate(self) -> None:
        """Raise :class:`InvalidEnvironmentError` for an unknown ``CYPRESS_ENV``."""
        if self.cypress_env is None or self.cypress_env in VALID_CYPRESS_ENVS:
            return
        raise InvalidEnvironmentError(
            f"CYPRESS_ENV={self.cypress_env}",
            hint=(
                "The environment variable CYPRESS_ENV is reserved and should "
                "only be used internally.\nUnset it or set it to one of: "
                + ", ".join(VALID_CYPRESS_ENVS)
            ),
        )


def default_cache_folder(environ: Mapping[str, str]) -> Path:
    """Return the platform default cache root for Cypress binaries."""
    system = platform.system().lower()
    if system == "darwin":
        return Path.home() / "Library" / "Caches" / "Cypress"
    if system == "windows":
        local = environ.get("LOCALAPPDATA")
        base = Path(local) if local else Path.home() / "AppData" / "Local"
        return base / "Cypress" / "Cache"
    xdg = environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "Cypress"


def configure_logging(settings: Settings) -> None:
    """Install the root logging handler for the current invocation."""
    level = logging.DEBUG if settings.debug else logging.WARNING
    logging.basicConfig(level=level, format=_LOG_FORMAT)
