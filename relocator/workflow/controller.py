"""Relocation controller — embed packages into the project and take them back out.

Embed runs in two phases separated by a host reload, which discards all
in-memory state:

1. ``start_embed`` backs up the manifest, removes the matching package
   lines, saves their paths to the ledger, sets the resume flag, then asks
   the host to resolve dependencies and reload.
2. ``resume_embed_if_pending`` runs at every start. When the resume flag is
   set it clears the flag first, then defers copying every ledger path into
   the destination root and importing it.

``un_embed`` empties the destination root, restores the manifest backup,
and asks the host to import, resolve and reload.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath

from relocator.config import RelocationConfig
from relocator.copier.package_copier import PackageCopier
from relocator.errors import PreconditionViolation
from relocator.manifest.store import ManifestStore
from relocator.state.ledger import PathLedger
from relocator.state.session import SessionStore
from relocator.workflow.gate import current_identity, is_authorized_operator
from relocator.workflow.host import Host, to_project_relative

LOGGER = logging.getLogger(__name__)

RESUME_EMBED_KEY = "relocator.continue_embed"


@dataclass
class RelocationStatus:
    """Snapshot of the durable relocation state."""

    backup_exists: bool
    resume_pending: bool
    ledger_paths: list[str] | None = None  # None when no ledger has been saved
    embedded_packages: list[str] = field(default_factory=list)


class RelocationController:
    """Drives the embed and un-embed workflows for one project."""

    def __init__(
        self,
        config: RelocationConfig,
        host: Host,
        *,
        manifest: ManifestStore | None = None,
        ledger: PathLedger | None = None,
        session: SessionStore | None = None,
        copier: PackageCopier | None = None,
    ):
        self.config = config
        self.host = host
        self.manifest = manifest or ManifestStore(config.manifest_path, config.backup_path)
        self.ledger = ledger or PathLedger(config.ledger_path)
        self.session = session or SessionStore(config.session_path)
        self.copier = copier or PackageCopier(config.allowlist, config.meta_suffix)

    # ── Entry points ────────────────────────────────────────────────

    def start_embed(self) -> bool:
        """Phase 1 of embed. Returns False when the operator is not authorized."""
        if not self._authorized("embed"):
            return False

        self.manifest.backup()
        paths = self.manifest.extract_and_remove_matching(self.config.package_filter)
        self.ledger.save(paths)
        self.session.set_bool(RESUME_EMBED_KEY, True)

        self.host.resolve_dependencies()
        self.host.request_reload()
        return True

    def resume_embed_if_pending(self) -> bool:
        """Startup hook. Returns True when the copy phase was scheduled."""
        if not self.session.get_bool(RESUME_EMBED_KEY, False):
            return False

        # cleared before the copy so a failure cannot re-trigger it on every start
        self.session.erase(RESUME_EMBED_KEY)
        LOGGER.info("Continue embedding packages ...")

        self.host.defer(self._complete_embed)
        return True

    def un_embed(self) -> bool:
        """Reverse embed. Returns False when the operator is not authorized."""
        if not self._authorized("unembed"):
            return False

        self.config.check_destination()
        self.copier.delete_tree(self.config.destination_root)
        self.manifest.restore_from_backup()
        self.host.import_path(self._destination_relative())

        self.host.resolve_dependencies()
        self.host.request_reload()
        return True

    def status(self) -> RelocationStatus:
        root = self.config.destination_root
        embedded = sorted(p.name for p in root.iterdir() if p.is_dir()) if root.is_dir() else []
        return RelocationStatus(
            backup_exists=self.manifest.has_backup,
            resume_pending=self.session.get_bool(RESUME_EMBED_KEY, False),
            ledger_paths=self.ledger.load() if self.ledger.exists() else None,
            embedded_packages=embedded,
        )

    # ── Phase 2 ─────────────────────────────────────────────────────

    def destination_for(self, source_path: str) -> Path:
        """Map a package source path to its directory under the destination root.

        The directory name is the source's basename without the package filter
        prefix, so ``P:/pkgs/de.codesmile.foo`` becomes ``<destination>/foo``.

        Raises:
            PreconditionViolation: If the basename does not carry the prefix.
        """
        prefix = self.config.package_filter
        basename = re.split(r"[\\/]", source_path.rstrip("\\/"))[-1]
        if not basename.startswith(prefix) or len(basename) == len(prefix):
            raise PreconditionViolation(
                f"Cannot derive package directory from '{source_path}': "
                f"name does not start with '{prefix}'"
            )
        return self.config.destination_root / basename[len(prefix):]

    def source_for(self, ledger_path: str) -> Path:
        """Resolve a ledger path the way the host resolves ``file:`` entries.

        Relative paths are taken from the manifest's directory, never from the
        working directory. Drive-letter paths such as ``P:/pkgs`` count as
        absolute on every platform.
        """
        if Path(ledger_path).is_absolute() or PureWindowsPath(ledger_path).drive:
            return Path(ledger_path)
        return self.config.manifest_path.parent / ledger_path

    def _complete_embed(self) -> None:
        self.config.check_destination()
        paths = self.ledger.load()
        targets = [(self.source_for(path), self.destination_for(path)) for path in paths]

        names = [dest.name for _, dest in targets]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise PreconditionViolation(f"Packages map to the same directory: {', '.join(duplicates)}")

        for source, dest in targets:
            self.copier.copy_into(source, dest)

        self.host.import_path(self._destination_relative())
        LOGGER.info("Embedded %d package(s) into %s", len(targets), self.config.destination_root)

    # ── Helpers ─────────────────────────────────────────────────────

    def _destination_relative(self) -> str:
        return to_project_relative(self.config.destination_root, self.config.project_root)

    def _authorized(self, action: str) -> bool:
        if is_authorized_operator(self.config.operator):
            return True
        LOGGER.warning(
            "'%s' only works for the configured operator (current: %s)", action, current_identity()
        )
        return False
