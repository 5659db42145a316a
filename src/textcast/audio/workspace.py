"""Per-request scratch directories for intermediate audio files."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from textcast.errors import ErrorKind, WorkingAreaSetupFailed
from textcast.models import WorkingArea

LOGGER = logging.getLogger(__name__)


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass


class WorkingAreaManager:
    """Creates and removes working areas under a shared root.

    Areas are named after a key derived from the source, so two runs for the
    same source share one directory and the later run replaces it.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if not key or Path(key).name != key or key in (".", ".."):
            raise ValueError(f"Invalid working area key: {key!r}")
        return self.root / key

    def acquire(self, key: str) -> WorkingArea:
        path = self.path_for(key)
        try:
            _remove_tree(path)
        except OSError as exc:
            raise WorkingAreaSetupFailed(
                f"Could not remove stale working directory {path}: {exc}"
            ) from exc
        try:
            path.mkdir(parents=True)
        except OSError as exc:
            raise WorkingAreaSetupFailed(f"Could not create working directory {path}: {exc}") from exc

        LOGGER.debug("Created working area %s", path)
        return WorkingArea(path=path)

    def release(self, area: WorkingArea) -> bool:
        """Remove the area recursively. Failures are logged, never raised."""
        try:
            _remove_tree(area.path)
        except OSError as exc:
            LOGGER.warning("%s (%s): %s", ErrorKind.CLEANUP_FAILED.description, area.path, exc)
            return False
        LOGGER.debug("Removed working area %s", area.path)
        return True
