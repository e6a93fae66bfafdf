"""Custom exception hierarchy for cypress-cli.

Every user-visible error condition maps to a subclass of
:class:`CypressCliError` so that the CLI error boundary can render a
clean message instead of a stack trace.

Hierarchy
---------
CypressCliError
├── ConfigurationError
├── InvalidEnvironmentError
├── UsageError
│   ├── UnknownCommandError
│   └── UnknownOptionError
├── HandlerFailedError
├── BinaryNotFoundError
└── MisuseError
"""

from __future__ import annotations


class CypressCliError(Exception):
    """Base exception for all cypress-cli errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Startup ---------------------------------------------------------------

class ConfigurationError(CypressCliError):
    """Raised when a command schema is declared inconsistently.

    This is a programming error caught while the registry is built,
    never something a user can trigger from the command line.
    """


class InvalidEnvironmentError(CypressCliError):
    """Raised when ``CYPRESS_ENV`` holds a value outside the accepted set."""


# --- User input ------------------------------------------------------------

class UsageError(CypressCliError):
    """Raised when the command line cannot be parsed.

    ``command`` names the command whose help should be shown alongside
    the message, or ``None`` for the top-level help.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.command: str | None = command


class UnknownCommandError(UsageError):
    """Raised for an unrecognised top-level command or cache sub-command."""

    def __init__(self, token: str, *, command: str | None = None) -> None:
        super().__init__(f"unknown command: {token}", command=command)
        self.token: str = token


class UnknownOptionError(UsageError):
    """Raised when a flag is not declared in the command's schema."""

    def __init__(self, flag: str, *, command: str | None = None) -> None:
        super().__init__(f"unknown option: {flag}", command=command)
        self.flag: str = flag


# --- Collaborators ---------------------------------------------------------

class HandlerFailedError(CypressCliError):
    """Raised when a command handler's ``start()`` fails."""


class BinaryNotFoundError(CypressCliError):
    """Raised when the Cypress binary cannot be located on disk."""


# --- Entry point -----------------------------------------------------------

class MisuseError(CypressCliError):
    """Raised when the CLI module is executed directly instead of imported."""
