"""Path ledger — the package source paths extracted by the last embed.

The ledger lives outside the project so it survives a full reimport of the
project's assets. It is a single slot: each save replaces the previous file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from relocator.errors import PreconditionViolation

LOGGER = logging.getLogger(__name__)


class PathLedger:
    """One path per line, UTF-8, at a fixed location."""

    def __init__(self, ledger_path: str | Path):
        self.ledger_path = Path(ledger_path)

    def exists(self) -> bool:
        return self.ledger_path.is_file()

    def save(self, paths: list[str]) -> None:
        """Replace any previous ledger with ``paths``."""
        if self.ledger_path.exists():
            self.ledger_path.unlink()

        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.ledger_path, "w", encoding="utf-8", newline="\n") as f:
            for path in paths:
                f.write(path + "\n")
        LOGGER.info("Saved %d package path(s) to %s", len(paths), self.ledger_path)

    def load(self) -> list[str]:
        """Return the saved paths in file order.

        Raises:
            PreconditionViolation: If no ledger has been saved.
        """
        if not self.ledger_path.is_file():
            raise PreconditionViolation(f"Package path ledger not found: {self.ledger_path}")

        with open(self.ledger_path, encoding="utf-8") as f:
            return [line.rstrip("\r\n") for line in f if line.strip()]
