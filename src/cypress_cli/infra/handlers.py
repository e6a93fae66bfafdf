"""Infrastructure: command handlers that drive the Cypress binary.

Each handler satisfies :class:`~cypress_cli.core.protocols.CommandHandler`.
They translate a frozen options record into binary arguments and spawn
the binary with :func:`asyncio.create_subprocess_exec`.

Rules
-----
* No imports from ``cli``.
* No user-facing output.
* ``OSError`` from spawning is re-raised as
  :class:`~cypress_cli.exceptions.HandlerFailedError`.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import random
from pathlib import Path
from typing import Any

from cypress_cli.config import Settings
from cypress_cli.core.models import InstallOptions, OpenOptions, RunOptions, VerifyOptions
from cypress_cli.core.protocols import Services
from cypress_cli.exceptions import BinaryNotFoundError, HandlerFailedError
from cypress_cli.infra.binary import locate_binary, require_binary
from cypress_cli.infra.cache import FilesystemCache
from cypress_cli.infra.versions import PackageVersionService

logger = logging.getLogger(__name__)

_FLAG_NAMES: dict[str, str] = {"global_mode": "global"}


def binary_arguments(options: Any, *, exclude: tuple[str, ...] = ()) -> list[str]:
    """Convert a record's non-default fields into ``--flag value`` tokens.

    ``True`` becomes a bare flag, ``False`` becomes ``--flag false``.
    """
    args: list[str] = []
    for field in dataclasses.fields(options):
        value = getattr(options, field.name)
        if field.name in exclude or value is None or value == field.default:
            continue
        flag = "--" + _FLAG_NAMES.get(field.name, field.name.replace("_", "-"))
        if value is True:
            args.append(flag)
        elif value is False:
            args.extend((flag, "false"))
        else:
            args.extend((flag, str(value)))
    return args


async def _spawn(executable: Path, args: list[str], **kwargs: Any) -> asyncio.subprocess.Process:
    logger.debug("spawning %s with %r", executable, args)
    try:
        return await asyncio.create_subprocess_exec(str(executable), *args, **kwargs)
    except OSError as exc:
        raise HandlerFailedError(f"Could not start {executable}: {exc}") from exc


class RunHandler:
    """``cypress run``: headless run; exit code is the failed-test count."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @staticmethod
    def build_arguments(options: RunOptions) -> list[str]:
        return ["--run-project", options.project or ".", *binary_arguments(options, exclude=("project",))]

    async def start(self, options: RunOptions) -> int:
        executable = require_binary(self._settings)
        process = await _spawn(executable, self.build_arguments(options))
        return await process.wait()


class OpenHandler:
    """``cypress open``: interactive mode, optionally detached."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @staticmethod
    def build_arguments(options: OpenOptions) -> list[str]:
        return binary_arguments(options, exclude=("detached",))

    async def start(self, options: OpenOptions) -> int:
        executable = require_binary(self._settings)
        if options.detached:
            await _spawn(executable, self.build_arguments(options), start_new_session=True)
            return 0
        process = await _spawn(executable, self.build_arguments(options))
        return await process.wait()


class VerifyHandler:
    """``cypress verify``: smoke-test the binary with a random ping."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def start(self, options: VerifyOptions) -> int:
        executable = require_binary(self._settings)
        ping = str(random.randint(0, 1000))
        process = await _spawn(
            executable,
            ["--smoke-test", f"--ping={ping}"],
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0 or stdout.decode(errors="replace").strip() != ping:
            raise HandlerFailedError(
                "Cypress failed to start.",
                hint=stderr.decode(errors="replace").strip() or None,
            )
        return 0


class InstallHandler:
    """``cypress install``: accepts an existing binary; never downloads."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def start(self, options: InstallOptions) -> int:
        state = locate_binary(self._settings)
        if state.found and not options.force:
            logger.debug("Cypress %s is already installed at %s", state.version, state.executable)
            return 0
        raise BinaryNotFoundError(
            f"Cannot download Cypress {state.version}: binary downloads are not supported.",
            hint=f"Place the binary at {state.executable} or set CYPRESS_RUN_BINARY.",
        )


def build_default_services(settings: Settings) -> Services:
    """Wire the filesystem and binary adapters into a :class:`Services` bundle."""
    return Services(
        run=RunHandler(settings),
        open=OpenHandler(settings),
        install=InstallHandler(settings),
        verify=VerifyHandler(settings),
        cache=FilesystemCache(settings),
        versions=PackageVersionService(settings),
    )
