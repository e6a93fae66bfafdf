"""Protocols (interfaces) for the collaborators the dispatcher drives.

Running a browser, installing a binary and looking up versions happen
outside the argument-parsing core.  The core depends ONLY on these
protocols; concrete adapters live in :mod:`cypress_cli.infra` and tests
substitute their own.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from cypress_cli.core.models import CommandName, Versions


class CommandHandler(Protocol):
    """Contract for ``run``, ``open``, ``install`` and ``verify``."""

    async def start(self, options: Any) -> int | None:
        """Perform the command with a frozen options record.

        The returned integer is a suggested process exit code (for
        ``run``, the number of failed tests).  ``None`` means ``0``.

        Raises
        ------
        CypressCliError
            When the command cannot be carried out.
        """
        ...  # pragma: no cover


class CacheOperations(Protocol):
    """Synchronous operations behind ``cypress cache <action>``."""

    def list(self) -> Sequence[str]:
        """Return the cached binary versions."""
        ...  # pragma: no cover

    def path(self) -> Path:
        """Return the root of the binary cache."""
        ...  # pragma: no cover

    def clear(self) -> None:
        """Delete every cached binary."""
        ...  # pragma: no cover


class VersionService(Protocol):
    async def get_versions(self) -> Versions:
        ...  # pragma: no cover


@dataclass(frozen=True, slots=True)
class Services:
    """Bundle of every collaborator a :class:`Dispatcher` may invoke."""

    run: CommandHandler
    open: CommandHandler
    install: CommandHandler
    verify: CommandHandler
    cache: CacheOperations
    versions: VersionService

    def handler_for(self, command: CommandName) -> CommandHandler:
        handlers = {
            CommandName.RUN: self.run,
            CommandName.OPEN: self.open,
            CommandName.INSTALL: self.install,
            CommandName.VERIFY: self.verify,
        }
        return handlers[command]
