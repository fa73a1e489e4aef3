"""Package copier — copy allowlisted package contents with their metadata sidecars.

Each copied entry may have a sidecar (``<entry>.meta``) that the host uses
to track the asset. Sidecars travel with their entry; a missing sidecar is
not an error.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from relocator.config import DEFAULT_ALLOWLIST
from relocator.errors import FilesystemConflict, PreconditionViolation

LOGGER = logging.getLogger(__name__)


class PackageCopier:
    """Copies a fixed allowlist of files and directories out of a package."""

    def __init__(self, allowlist: list[str] | None = None, meta_suffix: str = ".meta"):
        self.allowlist = list(allowlist) if allowlist is not None else list(DEFAULT_ALLOWLIST)
        self.meta_suffix = meta_suffix

    def copy_into(self, source: str | Path, destination: str | Path) -> list[str]:
        """Copy allowlisted entries of ``source`` into a new ``destination`` directory.

        Entries absent from the source are skipped silently.

        Returns:
            Names of the entries that were copied, in allowlist order.

        Raises:
            PreconditionViolation: If ``source`` is not a directory.
            FilesystemConflict: If ``destination`` already exists.
        """
        source = Path(source)
        destination = Path(destination)

        if not source.is_dir():
            raise PreconditionViolation(f"Package source is not a directory: {source}")
        if destination.exists():
            raise FilesystemConflict(f"Target dir already exists, aborting: {destination}")

        LOGGER.info("Copying '%s' to '%s'", source, destination)
        destination.mkdir(parents=True)

        copied = []
        for name in self.allowlist:
            if self._copy_with_meta(source / name, destination / name):
                copied.append(name)
        return copied

    def delete_tree(self, root: str | Path) -> None:
        """Empty ``root`` by deleting and recreating it, and delete its sidecar.

        The host tracks the directory's deletion through the sidecar, so the
        sidecar must go even though the directory itself is recreated.
        """
        root = Path(root)
        if root.exists():
            shutil.rmtree(root)
        root.mkdir(parents=True)

        meta = self._meta_path(root)
        if meta.exists():
            meta.unlink()
        LOGGER.info("Deleted embedded packages under %s", root)

    def _copy_with_meta(self, source: Path, dest: Path) -> bool:
        if not source.exists():
            LOGGER.debug("Skipping missing entry %s", source)
            return False

        _copy_file_or_dir(source, dest)

        meta = self._meta_path(source)
        if meta.is_file():
            shutil.copy2(meta, self._meta_path(dest))
        return True

    def _meta_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.meta_suffix)


def _copy_file_or_dir(source: Path, dest: Path) -> None:
    if source.is_dir():
        shutil.copytree(source, dest)
    else:
        shutil.copy2(source, dest)
