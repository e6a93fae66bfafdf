"""Command schema registry: which flags each command accepts.

Every command owns an independent list of :class:`OptionSpec` entries
(``run`` has ``--parallel``, ``open`` does not).  The registry is built
once at startup by :func:`build_default_registry`, passed explicitly to
whoever needs it, and is read-only afterwards.

Parsing is delegated to :mod:`argparse`.  The parser subclass used here
never prints or exits on its own: every parse failure is raised as a
:class:`~cypress_cli.exceptions.UsageError` for the dispatcher to render.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, NoReturn

from cypress_cli.core.descriptions import text
from cypress_cli.core.models import Arity, CacheAction, CommandName, ValueMode
from cypress_cli.exceptions import ConfigurationError, UnknownOptionError, UsageError

logger = logging.getLogger(__name__)


def coerce_false(value: str) -> bool:
    """Treat the literal ``"false"`` as ``False`` and anything else as ``True``."""
    return value != "false"


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declaration of a single flag."""

    key: str
    """Destination key in the parsed options and the typed record."""

    flags: tuple[str, ...]
    """Aliases, short first (e.g. ``("-s", "--spec")``)."""

    description_key: str
    """Key into :data:`~cypress_cli.core.descriptions.DESCRIPTIONS`."""

    value_mode: ValueMode = ValueMode.REQUIRED
    arity: Arity = Arity.SINGLE
    coerce: Callable[[str], Any] | None = None
    default: Any = None
    metavar: str | None = None

    @property
    def signature(self) -> str:
        """Flags and value placeholder as shown in help output."""
        flags = ", ".join(self.flags)
        if self.value_mode is ValueMode.REQUIRED:
            return f"{flags} <{self.metavar or self.key}>"
        if self.value_mode is ValueMode.OPTIONAL:
            return f"{flags} [{self.metavar or 'bool'}]"
        return flags


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Declaration of one top-level command."""

    name: CommandName
    summary: str
    usage: str = "[options]"
    options: tuple[OptionSpec, ...] = ()
    actions: tuple[tuple[str, str], ...] = ()
    """Positional sub-actions as ``(name, description_key)`` pairs."""


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Raw output of schema-driven parsing, before reconciliation."""

    options: dict[str, Any]
    positionals: tuple[str, ...]
    """Tokens the parser could not attach to any flag."""

    help_requested: bool = False


# ---------------------------------------------------------------------------
# Parser with a registry-owned error hook
# ---------------------------------------------------------------------------

class CommandParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises instead of printing and exiting."""

    def __init__(self, command: CommandName, **kwargs: Any) -> None:
        super().__init__(add_help=False, allow_abbrev=False, **kwargs)
        self.command: CommandName = command

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, command=self.command.value)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class CommandSchemaRegistry:
    """Read-only lookup of command declarations.

    Construction resolves the help text of every option and sub-action,
    so an undeclared description fails fast with
    :class:`~cypress_cli.exceptions.ConfigurationError`.
    """

    def __init__(self, commands: Sequence[CommandSpec]) -> None:
        specs: dict[CommandName, CommandSpec] = {}
        help_text: dict[str, str] = {}
        for spec in commands:
            if spec.name in specs:
                raise ConfigurationError(f"Command declared twice: {spec.name.value}")
            for option in spec.options:
                help_text[option.description_key] = text(option.description_key)
            for _, description_key in spec.actions:
                help_text[description_key] = text(description_key)
            specs[spec.name] = spec
        self._commands: Mapping[CommandName, CommandSpec] = MappingProxyType(specs)
        self._help: Mapping[str, str] = MappingProxyType(help_text)

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands.values())

    def names(self) -> tuple[str, ...]:
        return tuple(name.value for name in self._commands)

    def is_known(self, name: str) -> bool:
        return name in self.names()

    def command(self, name: CommandName | str) -> CommandSpec:
        return self._commands[CommandName(name)]

    def schema_for(self, name: CommandName | str) -> tuple[OptionSpec, ...]:
        return self.command(name).options

    def help_for(self, description_key: str) -> str:
        return self._help[description_key]

    def multi_value_flags(self, name: CommandName | str) -> dict[str, tuple[str, ...]]:
        """Return ``{key: aliases}`` for every multi-value flag of *name*."""
        return {
            option.key: option.flags
            for option in self.schema_for(name)
            if option.arity is Arity.MULTI
        }

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def build_parser(self, name: CommandName | str) -> CommandParser:
        spec = self.command(name)
        parser = CommandParser(spec.name, prog=f"cypress {spec.name.value}")
        parser.add_argument("-h", "--help", action="store_true", dest="help")
        for option in spec.options:
            _add_option(parser, option)
        if spec.actions:
            parser.add_argument("action", nargs="?", default=None)
        return parser

    def parse(self, name: CommandName | str, args: Sequence[str]) -> ParseResult:
        """Parse the tokens following the command name.

        Raises
        ------
        UnknownOptionError
            If a flag is not declared for the command.
        UsageError
            If a flag is missing its value or the value fails coercion.
        """
        parser = self.build_parser(name)
        namespace, extras = parser.parse_known_args(list(args))
        positionals: list[str] = []
        end_of_options = False
        for token in extras:
            if end_of_options:
                positionals.append(token)
            elif token == "--":
                end_of_options = True
            elif token.startswith("-") and token != "-":
                raise UnknownOptionError(token.split("=", 1)[0], command=parser.command.value)
            else:
                positionals.append(token)
        options = vars(namespace)
        help_requested = bool(options.pop("help"))
        logger.debug("parsed %s options %r, positionals %r", parser.command.value, options, positionals)
        return ParseResult(
            options=options,
            positionals=tuple(positionals),
            help_requested=help_requested,
        )


def _add_option(parser: argparse.ArgumentParser, option: OptionSpec) -> None:
    kwargs: dict[str, Any] = {"dest": option.key}
    if option.value_mode is ValueMode.REQUIRED:
        kwargs.update(default=option.default, metavar=option.metavar)
        if option.coerce is not None:
            kwargs["type"] = option.coerce
    elif option.value_mode is ValueMode.OPTIONAL:
        kwargs.update(nargs="?", const=True, default=option.default, type=option.coerce or str)
    elif option.value_mode is ValueMode.SWITCH:
        kwargs.update(action="store_true", default=option.default)
    else:
        kwargs.update(action="store_false", default=True if option.default is None else option.default)
    parser.add_argument(*option.flags, **kwargs)


# ---------------------------------------------------------------------------
# Reference command set
# ---------------------------------------------------------------------------

def _browser(description_key: str, metavar: str) -> OptionSpec:
    return OptionSpec("browser", ("-b", "--browser"), description_key, metavar=metavar)


_CONFIG = OptionSpec("config", ("-c", "--config"), "config", metavar="config")
_CONFIG_FILE = OptionSpec("config_file", ("-C", "--config-file"), "configFile", metavar="config-file")
_ENV = OptionSpec("env", ("-e", "--env"), "env", metavar="env")
_PORT = OptionSpec("port", ("-p", "--port"), "port", coerce=int, metavar="port")
_PROJECT = OptionSpec("project", ("-P", "--project"), "project", metavar="project-path")
_DEV = OptionSpec("dev", ("--dev",), "dev", ValueMode.OPTIONAL, coerce=coerce_false)


def build_default_registry() -> CommandSchemaRegistry:
    """Declare the reference command set."""
    return CommandSchemaRegistry([
        CommandSpec(CommandName.HELP, "Shows CLI help and exits", usage=""),
        CommandSpec(CommandName.VERSION, text("version"), usage=""),
        CommandSpec(
            CommandName.RUN,
            "Runs Cypress tests from the CLI without the GUI",
            options=(
                _browser("browserRunMode", "browser-name-or-path"),
                OptionSpec("ci_build_id", ("--ci-build-id",), "ciBuildId", metavar="id"),
                _CONFIG,
                _CONFIG_FILE,
                _ENV,
                OptionSpec("group", ("--group",), "group", metavar="name"),
                OptionSpec("key", ("-k", "--key"), "key", metavar="record-key"),
                OptionSpec("headed", ("--headed",), "headed", ValueMode.SWITCH, default=None),
                OptionSpec("headless", ("--headless",), "headless", ValueMode.SWITCH, default=None),
                OptionSpec("exit", ("--no-exit",), "exit", ValueMode.NEGATED),
                OptionSpec("parallel", ("--parallel",), "parallel", ValueMode.SWITCH, default=None),
                _PORT,
                _PROJECT,
                OptionSpec("record", ("--record",), "record", ValueMode.OPTIONAL, coerce=coerce_false),
                OptionSpec("reporter", ("-r", "--reporter"), "reporter", metavar="reporter"),
                OptionSpec(
                    "reporter_options", ("-o", "--reporter-options"), "reporterOptions",
                    metavar="reporter-options",
                ),
                OptionSpec("spec", ("-s", "--spec"), "spec", arity=Arity.MULTI, metavar="spec"),
                OptionSpec("tag", ("-t", "--tag"), "tag", arity=Arity.MULTI, metavar="tag"),
                _DEV,
            ),
        ),
        CommandSpec(
            CommandName.OPEN,
            "Opens Cypress in the interactive GUI.",
            options=(
                _browser("browserOpenMode", "browser-path"),
                _CONFIG,
                _CONFIG_FILE,
                OptionSpec("detached", ("-d", "--detached"), "detached", ValueMode.OPTIONAL, coerce=coerce_false),
                _ENV,
                OptionSpec("global_mode", ("--global",), "global", ValueMode.SWITCH, default=None),
                _PORT,
                _PROJECT,
                _DEV,
            ),
        ),
        CommandSpec(
            CommandName.INSTALL,
            "Installs the Cypress executable matching this package's version",
            options=(
                OptionSpec("force", ("-f", "--force"), "forceInstall", ValueMode.SWITCH, default=None),
            ),
        ),
        CommandSpec(
            CommandName.VERIFY,
            "Verifies that Cypress is installed correctly and executable",
            options=(_DEV,),
        ),
        CommandSpec(
            CommandName.CACHE,
            "Manages the Cypress binary cache",
            usage="[command]",
            actions=(
                (CacheAction.LIST.value, "cacheList"),
                (CacheAction.PATH.value, "cachePath"),
                (CacheAction.CLEAR.value, "cacheClear"),
            ),
        ),
    ])
