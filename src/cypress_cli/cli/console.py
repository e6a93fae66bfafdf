"""Rich console helpers for the CLI layer.

A fresh :class:`rich.console.Console` is created per call so output
always targets the *current* ``sys.stdout`` / ``sys.stderr``.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console


def get_rich_console(*, stderr: bool = False) -> Console:
	"""Create a Rich console targeting stdout, or stderr when asked."""
	return Console(stderr=stderr)


class _ConsoleProxy:
	"""``print``-compatible proxy bound to one output stream."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	def print(self, *objects: object, **kwargs: Any) -> None:
		"""Render with Rich; long lines are never wrapped."""
		kwargs.setdefault("soft_wrap", True)
		kwargs.setdefault("highlight", False)
		kwargs.setdefault("emoji", False)
		get_rich_console(stderr=self._stderr).print(*objects, **kwargs)


console = _ConsoleProxy(stderr=False)
err_console = _ConsoleProxy(stderr=True)
