"""Infrastructure layer: filesystem and binary integration.

This layer wraps the binary cache, the bundled ``package.json`` and the
Cypress executable.  Raw ``OSError`` exceptions are caught here and re-raised as
:class:`~cypress_cli.exceptions.CypressCliError` subclasses.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from cypress_cli.infra.binary import BinaryState, locate_binary, read_binary_version, require_binary
from cypress_cli.infra.cache import FilesystemCache
from cypress_cli.infra.handlers import (
    InstallHandler,
    OpenHandler,
    RunHandler,
    VerifyHandler,
    build_default_services,
)
from cypress_cli.infra.versions import PackageVersionService

__all__: list[str] = [
    "BinaryState",
    "FilesystemCache",
    "InstallHandler",
    "OpenHandler",
    "PackageVersionService",
    "RunHandler",
    "VerifyHandler",
    "build_default_services",
    "locate_binary",
    "read_binary_version",
    "require_binary",
]
