"""Session store — durable boolean flags that survive a host reload.

Flags are kept as a JSON object keyed by name. Erasing a flag removes the
key entirely rather than storing ``false``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from relocator.errors import PreconditionViolation


class SessionStore:
    """File-backed key/value store with an explicit erase operation."""

    def __init__(self, session_path: str | Path):
        self.session_path = Path(session_path)

    def get_bool(self, key: str, default: bool = False) -> bool:
        return bool(self._load().get(key, default))

    def set_bool(self, key: str, value: bool) -> None:
        data = self._load()
        data[key] = bool(value)
        self._save(data)

    def erase(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def _load(self) -> dict[str, object]:
        if not self.session_path.exists():
            return {}
        with open(self.session_path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise PreconditionViolation(f"Corrupt session file {self.session_path}: {e}") from e
        if not isinstance(data, dict):
            raise PreconditionViolation(f"Corrupt session file {self.session_path}: not an object")
        return data

    def _save(self, data: dict[str, object]) -> None:
        self.session_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.session_path.with_name(self.session_path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.session_path)
