"""Infrastructure: locating the Cypress binary on disk.

Binaries live in ``<cache>/<version>/`` with a platform-specific layout.
``CYPRESS_RUN_BINARY`` overrides the cache lookup entirely.

Rules
-----
* Detection via the filesystem only: no subprocess.
* No ``print()``: callers handle user-facing output.
"""

from __future__ import annotations

import json
import platform
from dataclasses import dataclass
from pathlib import Path

from cypress_cli.config import Settings
from cypress_cli.exceptions import BinaryNotFoundError
from cypress_cli.version import __version__


@dataclass(frozen=True, slots=True)
class BinaryState:
    """Result of a binary lookup.

    Attributes
    ----------
    version : str
        The package version the binary is expected to match.
    executable : Path
        Where the executable is (or would be).
    found : bool
        Whether the executable exists.
    """

    version: str
    executable: Path
    found: bool


def executable_path(directory: Path) -> Path:
    """Return the executable inside an unpacked binary *directory*."""
    system = platform.system().lower()
    if system == "darwin":
        return directory / "Cypress.app" / "Contents" / "MacOS" / "Cypress"
    if system == "windows":
        return directory / "Cypress" / "Cypress.exe"
    return directory / "Cypress" / "Cypress"


def locate_binary(settings: Settings, version: str = __version__) -> BinaryState:
    if settings.run_binary is not None:
        executable = settings.run_binary
    else:
        executable = executable_path(settings.cache_folder / version)
    return BinaryState(version=version, executable=executable, found=executable.is_file())


def require_binary(settings: Settings, version: str = __version__) -> Path:
    """Locate the binary or raise :class:`BinaryNotFoundError`."""
    state = locate_binary(settings, version)
    if not state.found:
        raise BinaryNotFoundError(
            f"No version of Cypress is installed in: {state.executable.parent}",
            hint=(
                "Reinstall Cypress by running: cypress install\n"
                "or point CYPRESS_RUN_BINARY at an existing binary."
            ),
        )
    return state.executable


def read_binary_version(state: BinaryState) -> str | None:
    """Read the version from the binary's bundled ``package.json``.

    Linux and Windows keep it next to the executable under
    ``resources/app``; macOS keeps it under ``Contents/Resources/app``.
    Returns ``None`` when no readable ``package.json`` is found.
    """
    parent = state.executable.parent
    candidates = (
        parent / "resources" / "app" / "package.json",
        parent.parent / "Resources" / "app" / "package.json",
    )
    for candidate in candidates:
        try:
            data = json.loads(candidate.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            continue
        version = data.get("version") if isinstance(data, dict) else None
        if isinstance(version, str):
            return version
    return None
