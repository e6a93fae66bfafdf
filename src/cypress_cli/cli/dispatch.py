"""Command dispatch: resolve → parse → reconcile → hand off.

The :class:`Dispatcher` owns the translation from a raw token stream to
a process exit code.  It never lets an error escape as a crash: usage
errors are printed with the relevant help text, handler failures are
logged verbatim, and both map to :data:`exit_codes.GENERAL_ERROR`.

Ordering
--------
1. Resolve the token stream (help / version / unknown / command).
2. Parse the command's flags against its schema.
3. Reconcile space-separated multi-value flags.
4. Freeze the options into the command's record and call the handler.
"""

from __future__ import annotations

import asyncio
import logging
import textwrap
from collections.abc import Sequence
from typing import Any

from rich.markup import escape

from cypress_cli.cli import exit_codes
from cypress_cli.cli.console import console, err_console
from cypress_cli.cli.help import PROGRAM, render_command_help, render_program_help
from cypress_cli.core.models import (
    CacheAction,
    CacheRequest,
    CommandName,
    ResolutionAction,
    build_options,
)
from cypress_cli.core.protocols import Services
from cypress_cli.core.reconcile import SpaceDelimitedValues, reconcile_multi_values
from cypress_cli.core.resolver import resolve
from cypress_cli.core.schema import CommandSchemaRegistry
from cypress_cli.exceptions import CypressCliError, HandlerFailedError, UsageError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def render_error(exc: BaseException) -> None:
    """Print *exc* (and its hint, if any) to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    hint = getattr(exc, "hint", None)
    if hint:
        err_console.print(f"[yellow]Hint:[/yellow] {escape(hint)}")


def space_delimited_warning(notice: SpaceDelimitedValues) -> str:
    """Build the warning shown when a flag's values were space-separated."""
    message = textwrap.dedent(f"""\
        ⚠ Warning: It looks like you're passing --{notice.flag} a space-separated list of arguments:

        "{' '.join(notice.values)}"

        This will work, but it's not recommended.

        If you are trying to pass multiple arguments, separate them with commas instead:
          {PROGRAM} run --{notice.flag} arg1,arg2,arg3
        """)
    if notice.flag == "spec":
        message += textwrap.dedent(f"""
            The most common cause of this warning is using an unescaped glob pattern. If you are
            trying to pass a glob pattern, escape it using quotes:
              {PROGRAM} run --spec "**/*.spec.js"
            """)
    return message


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class Dispatcher:
    """Route one invocation to the matching collaborator.

    Parameters
    ----------
    registry:
        The command schemas, built once at startup.
    services:
        Command handlers, cache operations and the version service.
    """

    def __init__(self, registry: CommandSchemaRegistry, services: Services) -> None:
        self._registry = registry
        self._services = services

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dispatch(self, tokens: Sequence[str]) -> int:
        """Run the command described by *tokens* and return an exit code."""
        logger.debug("cli starts with arguments %r", list(tokens))
        resolution = resolve(tokens, self._registry.names())

        if resolution.action is ResolutionAction.SHOW_HELP:
            self.show_help()
            return resolution.exit_code or exit_codes.SUCCESS
        if resolution.action is ResolutionAction.SHOW_VERSION:
            return self.show_versions()
        if resolution.action is ResolutionAction.UNKNOWN:
            err_console.print(f'Unknown command "{escape(resolution.token or "")}"')
            self.show_help(stderr=True)
            return resolution.exit_code or exit_codes.GENERAL_ERROR

        assert resolution.command is not None
        try:
            return self._dispatch_command(resolution.command, tokens)
        except UsageError as exc:
            self._report_usage_error(exc)
            return exit_codes.GENERAL_ERROR

    def show_help(self, command: CommandName | str | None = None, *, stderr: bool = False) -> None:
        if command is None:
            rendered = render_program_help(self._registry)
        else:
            rendered = render_command_help(self._registry, command)
        (err_console if stderr else console).print(rendered, markup=False)

    def show_versions(self) -> int:
        logger.debug("printing Cypress version")
        try:
            versions = asyncio.run(self._services.versions.get_versions())
        except Exception as exc:  # noqa: BLE001
            render_error(exc)
            return exit_codes.GENERAL_ERROR
        console.print(f"Cypress package version: {escape(versions.package)}")
        console.print(f"Cypress binary version: {escape(versions.binary)}")
        return exit_codes.SUCCESS

    # ------------------------------------------------------------------
    # Per-command flow
    # ------------------------------------------------------------------

    def _dispatch_command(self, command: CommandName, tokens: Sequence[str]) -> int:
        parsed = self._registry.parse(command, tokens[1:])
        if parsed.help_requested:
            self.show_help(command)
            return exit_codes.SUCCESS

        multi_flags = self._registry.multi_value_flags(command)
        if multi_flags:
            result = reconcile_multi_values(tokens, parsed.options, parsed.positionals, multi_flags)
            for notice in result.notices:
                err_console.print()
                err_console.print(space_delimited_warning(notice), markup=False)

        options = build_options(command, parsed.options)
        logger.debug("dispatching %s with %r", command.value, options)

        if isinstance(options, CacheRequest):
            return self._run_cache(options.action)
        return self._start_handler(command, options)

    def _start_handler(self, command: CommandName, options: Any) -> int:
        handler = self._services.handler_for(command)
        try:
            result = asyncio.run(handler.start(options))
        except CypressCliError as exc:
            render_error(exc)
            return exit_codes.GENERAL_ERROR
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s handler failed", command.value, exc_info=True)
            render_error(HandlerFailedError(str(exc) or type(exc).__name__))
            return exit_codes.GENERAL_ERROR
        return int(result or 0)

    def _run_cache(self, action: CacheAction) -> int:
        cache = self._services.cache
        try:
            if action is CacheAction.LIST:
                versions = list(cache.list())
                if not versions:
                    console.print("No cached binary versions were found.")
                for version in versions:
                    console.print(escape(version))
            elif action is CacheAction.PATH:
                console.print(str(cache.path()), markup=False)
            else:
                cache.clear()
        except CypressCliError as exc:
            render_error(exc)
            return exit_codes.GENERAL_ERROR
        return exit_codes.SUCCESS

    def _report_usage_error(self, exc: UsageError) -> None:
        err_console.print()
        err_console.print(f"  error: {escape(str(exc))}")
        err_console.print()
        self.show_help(exc.command, stderr=True)
