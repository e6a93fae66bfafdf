"""Core layer: command schemas, token classification and reconciliation.

Rules
-----
* No ``print()`` calls and no Rich rendering.
* No filesystem, network or subprocess I/O.
* No imports from ``cli`` or ``infra``.
"""

from cypress_cli.core.models import (
    CacheAction,
    CacheRequest,
    CommandName,
    InstallOptions,
    OpenOptions,
    RunOptions,
    VerifyOptions,
    Versions,
    build_options,
)
from cypress_cli.core.protocols import CacheOperations, CommandHandler, Services, VersionService
from cypress_cli.core.reconcile import SpaceDelimitedValues, reconcile_multi_values
from cypress_cli.core.resolver import resolve
from cypress_cli.core.schema import CommandSchemaRegistry, build_default_registry

__all__: list[str] = [
    "CacheAction",
    "CacheOperations",
    "CacheRequest",
    "CommandHandler",
    "CommandName",
    "CommandSchemaRegistry",
    "InstallOptions",
    "OpenOptions",
    "RunOptions",
    "Services",
    "SpaceDelimitedValues",
    "VerifyOptions",
    "VersionService",
    "Versions",
    "build_default_registry",
    "build_options",
    "reconcile_multi_values",
    "resolve",
]
