"""Classification of the raw token stream before any flag parsing."""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence

from cypress_cli.core.models import CommandName, Resolution, ResolutionAction

logger = logging.getLogger(__name__)

VERSION_TOKENS: tuple[str, ...] = ("version", "--version", "-v")
HELP_TOKENS: tuple[str, ...] = ("help", "-h", "--help")


def includes_version(tokens: Sequence[str]) -> bool:
    """Return ``True`` when a version token appears anywhere in *tokens*."""
    return any(token in VERSION_TOKENS for token in tokens)


def resolve(tokens: Sequence[str], known_commands: Collection[str]) -> Resolution:
    """Decide what the invocation asks for.

    *tokens* excludes the program name, so the command sits at index 0.

    * no tokens → show help
    * ``version`` / ``--version`` / ``-v`` anywhere → show version, ahead
      of any other command on the line
    * ``help`` / ``-h`` / ``--help`` first → show help
    * first token not in *known_commands* → unknown, exit code 1
    * otherwise dispatch to the named command
    """
    if not tokens:
        logger.debug("no command given, printing help")
        return Resolution(ResolutionAction.SHOW_HELP, exit_code=0)

    if includes_version(tokens):
        return Resolution(ResolutionAction.SHOW_VERSION, command=CommandName.VERSION)

    first = tokens[0]
    if first in HELP_TOKENS:
        return Resolution(ResolutionAction.SHOW_HELP, command=CommandName.HELP, exit_code=0)

    if first not in known_commands:
        logger.debug("unknown command %s", first)
        return Resolution(ResolutionAction.UNKNOWN, token=first, exit_code=1)

    return Resolution(ResolutionAction.DISPATCH, command=CommandName(first))
