"""cypress-cli: command-line front door for the Cypress test runner.

Parses and validates process arguments, then hands a typed options
record to the matching command handler.
"""

from cypress_cli.version import __version__

__all__: list[str] = ["__version__"]
