"""Manifest store — extract package references and keep a single backup.

The manifest is treated as ordered text lines, not parsed as JSON. A line
references a local package when it contains the package filter and a
quoted ``"file:<path>"`` token, for example::

    "de.codesmile.foo": "file:P:/pkgs/de.codesmile.foo",

Rewrites are computed fully in memory and swapped into place with
``os.replace`` so the live manifest is never missing or half-written.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from pathlib import Path

from relocator.errors import ManifestParseError, PreconditionViolation

LOGGER = logging.getLogger(__name__)

FILE_MARKER = '"file:'

# Splits text into lines while keeping each line's terminator, so untouched
# lines are written back byte-for-byte.
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


def parse_file_path(line: str, line_number: int = 0) -> str:
    """Return the path between the last ``"file:`` marker and its closing quote.

    Raises:
        ManifestParseError: If the marker is absent, unterminated, or the path is empty.
    """
    start = line.rfind(FILE_MARKER)
    if start < 0:
        raise ManifestParseError(
            f"Matching line has no {FILE_MARKER} token", line_number, line
        )

    start += len(FILE_MARKER)
    end = line.find('"', start)
    if end < 0:
        raise ManifestParseError("Unterminated file: path", line_number, line)

    path = line[start:end]
    if not path.strip():
        raise ManifestParseError("Empty file: path", line_number, line)
    return path


def split_lines(text: str) -> list[str]:
    return _LINE_RE.findall(text)


class ManifestStore:
    """Reads and rewrites the dependency manifest and manages its backup copy."""

    def __init__(self, manifest_path: str | Path, backup_path: str | Path):
        self.manifest_path = Path(manifest_path)
        self.backup_path = Path(backup_path)

    @property
    def has_backup(self) -> bool:
        return self.backup_path.exists()

    def read_lines(self) -> list[str]:
        """Return the manifest's lines with their terminators.

        Raises:
            PreconditionViolation: If the manifest does not exist.
            ManifestParseError: If the manifest is not valid UTF-8.
        """
        if not self.manifest_path.is_file():
            raise PreconditionViolation(f"Manifest does not exist: {self.manifest_path}")
        try:
            text = self.manifest_path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestParseError(f"Manifest is not valid UTF-8: {self.manifest_path} ({e.reason})") from e
        return split_lines(text)

    def extract_and_remove_matching(self, filter_text: str) -> list[str]:
        """Remove every line containing ``filter_text`` and return their paths.

        Paths are returned in manifest order. Non-matching lines keep their
        relative order and exact bytes. When nothing matches the file is
        left untouched.

        Raises:
            PreconditionViolation: If the manifest does not exist.
            ManifestParseError: If a matching line has a malformed ``file:`` token.
                                The manifest is not modified in that case.
        """
        lines = self.read_lines()
        kept: list[str] = []
        paths: list[str] = []

        for number, line in enumerate(lines, start=1):
            if filter_text in line:
                paths.append(parse_file_path(line, number))
            else:
                kept.append(line)

        if not paths:
            LOGGER.info("No manifest lines match %r", filter_text)
            return []

        self._replace_contents("".join(kept).encode("utf-8"))
        LOGGER.info("Removed %d package reference(s) from %s", len(paths), self.manifest_path)
        return paths

    def backup(self) -> None:
        """Copy the manifest to the backup path.

        Raises:
            PreconditionViolation: If a backup already exists (it is never overwritten)
                                   or the manifest is missing.
        """
        if self.backup_path.exists():
            raise PreconditionViolation(f"Manifest backup already exists: {self.backup_path}")
        if not self.manifest_path.is_file():
            raise PreconditionViolation(f"Manifest does not exist: {self.manifest_path}")

        shutil.copyfile(self.manifest_path, self.backup_path)
        LOGGER.info("Backed up manifest to %s", self.backup_path)

    def restore_from_backup(self) -> None:
        """Replace the manifest with the backup, then delete the backup.

        Raises:
            PreconditionViolation: If no backup exists.
        """
        if not self.backup_path.exists():
            raise PreconditionViolation(f"Manifest backup does not exist: {self.backup_path}")

        self._replace_contents(self.backup_path.read_bytes())
        self.backup_path.unlink()
        LOGGER.info("Restored manifest from %s", self.backup_path)

    def _replace_contents(self, data: bytes) -> None:
        tmp_path = self.manifest_path.with_name(self.manifest_path.name + ".tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, self.manifest_path)
