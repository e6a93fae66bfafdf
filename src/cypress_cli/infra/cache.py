"""Infrastructure: the on-disk binary cache behind ``cypress cache``."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from cypress_cli.config import Settings
from cypress_cli.exceptions import HandlerFailedError

logger = logging.getLogger(__name__)


class FilesystemCache:
    """Cache operations rooted at :attr:`Settings.cache_folder`.

    Each sub-directory of the root is one cached binary version.
    """

    def __init__(self, settings: Settings) -> None:
        self._root: Path = settings.cache_folder

    def path(self) -> Path:
        return self._root

    def list(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(entry.name for entry in self._root.iterdir() if entry.is_dir())

    def clear(self) -> None:
        """Remove the cache root.  A missing root is not an error."""
        logger.debug("removing binary cache %s", self._root)
        try:
            shutil.rmtree(self._root)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise HandlerFailedError(
                f"Could not clear the binary cache at {self._root}: {exc}",
            ) from exc
