"""Domain models for cypress-cli.

Option records are **frozen** dataclasses: one record type per command,
built once per invocation after reconciliation and never mutated after
they are handed to a command handler.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from cypress_cli.exceptions import UnknownCommandError, UsageError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class CommandName(str, Enum):
    """Top-level commands understood by the CLI."""

    HELP = "help"
    VERSION = "version"
    RUN = "run"
    OPEN = "open"
    INSTALL = "install"
    VERIFY = "verify"
    CACHE = "cache"


class CacheAction(str, Enum):
    """Sub-actions accepted by ``cypress cache``."""

    LIST = "list"
    PATH = "path"
    CLEAR = "clear"


class ValueMode(Enum):
    """How a flag consumes the token that follows it."""

    REQUIRED = "required"
    """``--flag <value>``"""

    OPTIONAL = "optional"
    """``--flag [value]``: bare flag means ``True``."""

    SWITCH = "switch"
    """``--flag``: presence only."""

    NEGATED = "negated"
    """``--no-flag``: presence sets the key to ``False``."""


class Arity(Enum):
    SINGLE = "single"
    MULTI = "multi"


class ResolutionAction(Enum):
    SHOW_HELP = "show_help"
    SHOW_VERSION = "show_version"
    DISPATCH = "dispatch"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Resolution result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of classifying the raw token stream."""

    action: ResolutionAction
    command: CommandName | None = None
    """The matched command when :attr:`action` is ``DISPATCH``."""

    token: str | None = None
    """The offending token when :attr:`action` is ``UNKNOWN``."""

    exit_code: int | None = None
    """Process exit code for the help and unknown outcomes."""


# ---------------------------------------------------------------------------
# Per-command option records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RunOptions:
    browser: str | None = None
    ci_build_id: str | None = None
    config: str | None = None
    config_file: str | None = None
    env: str | None = None
    group: str | None = None
    key: str | None = None
    headed: bool = False
    headless: bool = False
    exit: bool = True
    parallel: bool = False
    port: int | None = None
    project: str | None = None
    record: bool | None = None
    reporter: str | None = None
    reporter_options: str | None = None
    spec: str | None = None
    """Comma-joined list of spec files or globs."""

    tag: str | None = None
    """Comma-joined list of tags."""

    dev: bool | None = None


@dataclass(frozen=True, slots=True)
class OpenOptions:
    browser: str | None = None
    config: str | None = None
    config_file: str | None = None
    detached: bool | None = None
    env: str | None = None
    global_mode: bool = False
    port: int | None = None
    project: str | None = None
    dev: bool | None = None


@dataclass(frozen=True, slots=True)
class InstallOptions:
    force: bool = False


@dataclass(frozen=True, slots=True)
class VerifyOptions:
    dev: bool | None = None
    force: bool = True
    welcome_message: bool = False


@dataclass(frozen=True, slots=True)
class CacheRequest:
    action: CacheAction


CommandOptions = Union[RunOptions, OpenOptions, InstallOptions, VerifyOptions, CacheRequest]


@dataclass(frozen=True, slots=True)
class Versions:
    """Versions reported by ``cypress version``."""

    package: str
    binary: str


# ---------------------------------------------------------------------------
# Construction from parsed options
# ---------------------------------------------------------------------------

_RECORDS: dict[CommandName, type[Any]] = {
    CommandName.RUN: RunOptions,
    CommandName.OPEN: OpenOptions,
    CommandName.INSTALL: InstallOptions,
    CommandName.VERIFY: VerifyOptions,
}

# verify always runs the full check and skips the welcome banner
_FORCED: dict[CommandName, dict[str, Any]] = {
    CommandName.VERIFY: {"force": True, "welcome_message": False},
}


def build_options(command: CommandName, parsed: Mapping[str, Any]) -> CommandOptions:
    """Build the typed, immutable options record for *command*.

    Keys whose value is ``None`` are treated as unset and fall back to
    the record's defaults.  Keys the record does not declare are ignored.

    Raises
    ------
    UsageError
        If ``cache`` was given no sub-action.
    UnknownCommandError
        If ``cache`` was given a sub-action outside :class:`CacheAction`.
    """
    if command is CommandName.CACHE:
        return _cache_request(parsed.get("action"))

    record = _RECORDS[command]
    names = {field.name for field in dataclasses.fields(record)}
    values = {
        key: value
        for key, value in parsed.items()
        if key in names and value is not None
    }
    values.update(_FORCED.get(command, {}))
    return record(**values)


def _cache_request(action: Any) -> CacheRequest:
    if not isinstance(action, str):
        raise UsageError("missing cache command", command=CommandName.CACHE.value)
    try:
        return CacheRequest(action=CacheAction(action))
    except ValueError:
        raise UnknownCommandError(
            f"cache {action}", command=CommandName.CACHE.value,
        ) from None
