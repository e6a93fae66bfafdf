"""Recovery of multi-value flags split across space-separated tokens.

Users sometimes type ``--spec a.js b.js`` expecting both files to run.
The parser attaches only ``a.js`` to ``--spec`` and leaves ``b.js`` as a
stray positional that would otherwise be discarded.  This module puts
such strays back onto the flag as a single comma-joined value.

Pure logic: no I/O and no output.  The caller receives one
:class:`SpaceDelimitedValues` notice per rewritten flag and decides how
to warn the user.

Rules
-----
1. Only flags declared multi-value are considered.
2. The scan window for a flag starts two tokens after its first
   occurrence (one token for the inline ``--spec=a.js`` form) and ends
   before the next ``--`` token, before the next short alias of a
   multi-value flag, or at the end of the stream.
3. Only tokens the parser left as stray positionals are absorbed.
4. Flags are visited in the order they first appear in the stream and
   each stray positional is absorbed by at most one flag.
5. Absorbed tokens leave the returned ``remaining``, so a second pass
   over the result is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpaceDelimitedValues:
    """A flag whose value was rebuilt from space-separated tokens."""

    flag: str
    values: tuple[str, ...]
    """The flag's original value followed by every absorbed token."""


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    notices: tuple[SpaceDelimitedValues, ...]
    remaining: tuple[str, ...]
    """Stray positionals no flag absorbed."""


def _matches_alias(token: str, alias: str) -> int | None:
    """Return the window offset when *token* carries *alias*, else ``None``."""
    if token == alias:
        return 2
    if alias.startswith("--"):
        if token.startswith(alias + "="):
            return 1
    elif len(token) > 2 and token.startswith(alias) and not token.startswith("--"):
        return 1
    return None


def find_flag(tokens: Sequence[str], aliases: Sequence[str]) -> tuple[int, int] | None:
    """Locate the first occurrence of any alias in *tokens*.

    Returns ``(index, window_offset)`` where ``window_offset`` is ``2``
    for the separate-value form and ``1`` when the value is attached to
    the flag token (``--spec=a.js`` or ``-sa.js``).  ``None`` when the
    flag does not appear.
    """
    for index, token in enumerate(tokens):
        for alias in aliases:
            offset = _matches_alias(token, alias)
            if offset is not None:
                return index, offset
    return None


def candidate_window(
    tokens: Sequence[str], start: int, stop_aliases: Sequence[str] = (),
) -> Sequence[str]:
    """Return ``tokens[start:]`` up to (excluding) the window's end.

    The window ends at the next ``--`` token or at any token carrying one
    of *stop_aliases*.  Other short flags such as ``-k key`` do not end it.
    """
    end = len(tokens)
    for index in range(start, len(tokens)):
        token = tokens[index]
        if token.startswith("--") or any(
            _matches_alias(token, alias) is not None for alias in stop_aliases
        ):
            end = index
            break
    return tokens[start:end]


def reconcile_multi_values(
    tokens: Sequence[str],
    options: MutableMapping[str, Any],
    positionals: Sequence[str],
    multi_flags: Mapping[str, Sequence[str]],
) -> ReconcileResult:
    """Rewrite split multi-value flags in *options* in place.

    Parameters
    ----------
    tokens:
        The raw argument stream, unmodified.
    options:
        Parsed options keyed by option key.  Rewritten flags receive a
        single comma-joined string.
    positionals:
        Tokens the base parser did not attach to any flag.
    multi_flags:
        ``{key: aliases}`` for each multi-value flag of the command.
    """
    located: list[tuple[int, int, str]] = []
    for key, aliases in multi_flags.items():
        if not options.get(key):
            continue
        found = find_flag(tokens, aliases)
        if found is not None:
            located.append((found[0], found[1], key))

    short_aliases = tuple(
        alias
        for aliases in multi_flags.values()
        for alias in aliases
        if not alias.startswith("--")
    )
    remaining = list(positionals)
    notices: list[SpaceDelimitedValues] = []

    for index, offset, key in sorted(located):
        extras: list[str] = []
        for token in candidate_window(tokens, index + offset, short_aliases):
            if token in remaining:
                remaining.remove(token)
                extras.append(token)
        if not extras:
            continue

        values = (str(options[key]), *extras)
        options[key] = ",".join(values)
        notices.append(SpaceDelimitedValues(flag=key, values=values))

    logger.debug("variable-length opts parsed %r", {"args": list(tokens), "opts": dict(options)})
    return ReconcileResult(notices=tuple(notices), remaining=tuple(remaining))
