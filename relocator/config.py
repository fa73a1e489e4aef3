"""Relocation config — where the manifest, ledger and embedded packages live.

Config is read from ``relocator.yaml`` in the project root. Every key is
optional; a missing file yields the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from relocator.errors import ConfigError

CONFIG_FILE = "relocator.yaml"

DEFAULT_ALLOWLIST = [
    # files
    "package.json",
    "CHANGELOG.md",
    "GETTING STARTED.md",
    "README.md",
    "TODO.md",
    # directories
    "Editor",
    "Runtime",
]

_KNOWN_KEYS = {
    "manifest",
    "backup_suffix",
    "package_filter",
    "destination",
    "allowlist",
    "meta_suffix",
    "state_dir",
    "operator",
    "commands",
}
_KNOWN_COMMANDS = {"resolve", "reload", "import"}


@dataclass
class HostCommands:
    """Shell commands standing in for the host's resolve, reload and import calls."""

    resolve: str = ""
    reload: str = ""
    import_path: str = ""  # may contain {path}


@dataclass
class RelocationConfig:
    """Resolved settings for one project."""

    project_root: Path
    manifest: str = "Packages/manifest.json"
    backup_suffix: str = ".backup"
    package_filter: str = "de.codesmile."
    destination: str = "Assets/CodeSmile/Packages"
    allowlist: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWLIST))
    meta_suffix: str = ".meta"
    state_dir: Path = field(default_factory=lambda: Path.home() / ".relocator")
    operator: str = ""
    commands: HostCommands = field(default_factory=HostCommands)

    @property
    def manifest_path(self) -> Path:
        return self.project_root / self.manifest

    @property
    def backup_path(self) -> Path:
        return self.manifest_path.with_name(self.manifest_path.name + self.backup_suffix)

    @property
    def destination_root(self) -> Path:
        return self.project_root / self.destination

    @property
    def ledger_path(self) -> Path:
        return self.state_dir / "package_paths.txt"

    @property
    def session_path(self) -> Path:
        return self.state_dir / "session.json"

    def check_destination(self) -> None:
        """Ensure the destination root is a directory strictly inside the project.

        The destination is emptied by un-embed, so this runs before anything
        touches it.

        Raises:
            ConfigError: If the destination is the project root or outside it.
        """
        root = self.project_root.resolve()
        dest = self.destination_root.resolve()
        if dest == root or root not in dest.parents:
            raise ConfigError(
                f"'destination' must be a directory inside the project {root}: {self.destination!r}"
            )


def load_config(project_root: str | Path, config_path: str | Path | None = None) -> RelocationConfig:
    """Load the relocation config for a project.

    Args:
        project_root: Root directory of the project being relocated into.
        config_path: Explicit config file. Defaults to ``<project_root>/relocator.yaml``;
                     an explicit path that does not exist is an error.

    Raises:
        ConfigError: If the file is not a mapping, holds unknown keys, or names
                     a destination outside the project.
    """
    root = Path(project_root).resolve()
    path = Path(config_path) if config_path else root / CONFIG_FILE

    data: dict = {}
    if path.exists():
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    elif config_path:
        raise ConfigError(f"Config file not found: {path}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")

    commands_data = data.get("commands") or {}
    if not isinstance(commands_data, dict) or set(commands_data) - _KNOWN_COMMANDS:
        raise ConfigError(f"'commands' must map {sorted(_KNOWN_COMMANDS)} to shell commands")

    allowlist = data.get("allowlist", DEFAULT_ALLOWLIST)
    if not isinstance(allowlist, list) or not all(isinstance(a, str) and a for a in allowlist):
        raise ConfigError("'allowlist' must be a list of relative names")

    config = RelocationConfig(
        project_root=root,
        manifest=data.get("manifest", "Packages/manifest.json"),
        backup_suffix=data.get("backup_suffix", ".backup"),
        package_filter=data.get("package_filter", "de.codesmile."),
        destination=data.get("destination", "Assets/CodeSmile/Packages") or "",
        allowlist=list(allowlist),
        meta_suffix=data.get("meta_suffix", ".meta"),
        operator=os.environ.get("RELOCATOR_OPERATOR", data.get("operator", "")),
        commands=HostCommands(
            resolve=commands_data.get("resolve", ""),
            reload=commands_data.get("reload", ""),
            import_path=commands_data.get("import", ""),
        ),
    )

    state_dir = os.environ.get("RELOCATOR_STATE_DIR") or data.get("state_dir")
    if state_dir:
        config.state_dir = Path(state_dir).expanduser()

    if not config.package_filter:
        raise ConfigError("'package_filter' must not be empty")
    if not config.backup_suffix:
        raise ConfigError("'backup_suffix' must not be empty")
    config.check_destination()

    return config
