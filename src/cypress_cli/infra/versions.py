"""Infrastructure: package and binary version lookup."""

from __future__ import annotations

import asyncio

from cypress_cli.config import Settings
from cypress_cli.core.models import Versions
from cypress_cli.infra.binary import locate_binary, read_binary_version
from cypress_cli.version import __version__

NOT_INSTALLED = "not installed"


class PackageVersionService:
    """Report this package's version and the installed binary's version."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def get_versions(self) -> Versions:
        state = locate_binary(self._settings)
        binary = await asyncio.to_thread(read_binary_version, state)
        return Versions(package=__version__, binary=binary or NOT_INSTALLED)
