"""Usage text rendered from the command schema registry.

Every registered flag is listed with the help string from the option
descriptor table.  Output is returned as plain strings; callers print
them with Rich markup disabled so ``[options]`` survives intact.
"""

from __future__ import annotations

from collections.abc import Sequence

from cypress_cli.core.descriptions import text
from cypress_cli.core.models import CommandName
from cypress_cli.core.schema import CommandSchemaRegistry, CommandSpec

PROGRAM = "cypress"


def _rows(rows: Sequence[tuple[str, str]], indent: str = "  ") -> list[str]:
    width = max((len(left) for left, _ in rows), default=0)
    return [f"{indent}{left.ljust(width)}  {right}" for left, right in rows]


def _command_label(spec: CommandSpec) -> str:
    return f"{spec.name.value} {spec.usage}".rstrip()


def render_program_help(registry: CommandSchemaRegistry) -> str:
    """Top-level usage: global flags and the command list."""
    lines = [f"Usage: {PROGRAM} <command> [options]", "", "Options:"]
    lines += _rows([
        ("-v, --version", text("version")),
        ("-h, --help", text("help")),
    ])
    lines += ["", "Commands:"]
    lines += _rows([(_command_label(spec), spec.summary) for spec in registry])
    return "\n".join(lines)


def render_command_help(registry: CommandSchemaRegistry, command: CommandName | str) -> str:
    """Usage for a single command, including every declared flag."""
    spec = registry.command(command)
    lines = [f"Usage: {PROGRAM} {_command_label(spec)}", "", spec.summary, ""]

    if spec.actions:
        lines.append("Commands:")
        lines += _rows([(name, registry.help_for(key)) for name, key in spec.actions])
        lines.append("")

    option_rows = [
        (option.signature, registry.help_for(option.description_key))
        for option in spec.options
    ]
    option_rows.append(("-h, --help", text("help")))
    lines.append("Options:")
    lines += _rows(option_rows)
    return "\n".join(lines)
