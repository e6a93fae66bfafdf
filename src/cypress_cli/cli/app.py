"""CLI application entry point for cypress-cli.

This module is the **outer error boundary** for the entire application.
:func:`cli` catches :class:`~cypress_cli.exceptions.CypressCliError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No parsing logic lives here: :class:`~cypress_cli.cli.dispatch.Dispatcher`
  and the core layer do the work.
* Settings are read from the environment once, in :func:`cli`, and
  validated before any command logic runs (even ``help``).
* This module must be imported, never executed directly; use the
  ``cypress`` console script or ``python -m cypress_cli``.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from rich.markup import escape

from cypress_cli.cli import exit_codes
from cypress_cli.cli.console import err_console
from cypress_cli.cli.dispatch import Dispatcher, render_error
from cypress_cli.config import Settings, configure_logging
from cypress_cli.core.protocols import Services
from cypress_cli.core.schema import build_default_registry
from cypress_cli.exceptions import CypressCliError, MisuseError


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: list[str] | None = None,
    *,
    settings: Settings | None = None,
    services: Services | None = None,
) -> int:
    """Run the cypress CLI.

    Parameters
    ----------
    argv:
        Explicit argument list without the program name.  When ``None``
        (default), ``sys.argv[1:]`` is used.
    settings:
        Environment snapshot.  Read from ``os.environ`` when omitted.
    services:
        Collaborators to dispatch to.  The filesystem/binary adapters
        from :mod:`cypress_cli.infra` are used when omitted.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    InvalidEnvironmentError
        If ``CYPRESS_ENV`` holds an unaccepted value.
    """
    tokens = list(sys.argv[1:] if argv is None else argv)
    if settings is None:
        settings = Settings.from_env()
    settings.validate()

    registry = build_default_registry()
    if services is None:
        from cypress_cli.infra.handlers import build_default_services

        services = build_default_services(settings)

    return Dispatcher(registry, services).dispatch(tokens)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        settings = Settings.from_env()
        configure_logging(settings)
        code = main(settings=settings)
        sys.exit(code)
    except CypressCliError as exc:
        render_error(exc)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        err_console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}",
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)


def refuse_direct_execution() -> NoReturn:
    """Report that this module was run as a script and exit with -1."""
    render_error(MisuseError(
        "This CLI module should be imported from another Python module "
        "and not executed directly",
        hint="Run the `cypress` command or `python -m cypress_cli` instead.",
    ))
    sys.exit(exit_codes.MISUSE)


if __name__ == "__main__":
    refuse_direct_execution()
