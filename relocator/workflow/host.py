"""Host collaborators — the calls the workflow makes into its surrounding environment.

The host resolves dependencies after the manifest changes, reloads the
process (which discards all in-memory state), imports or refreshes a path
in the project, and runs callbacks once it has finished loading.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from relocator.config import HostCommands
from relocator.errors import HostCommandError, PreconditionViolation

LOGGER = logging.getLogger(__name__)


class Host:
    """Base host: queues deferred callbacks, leaves the external calls to subclasses."""

    def __init__(self):
        self._deferred: list[Callable[[], None]] = []

    def resolve_dependencies(self) -> None:
        raise NotImplementedError

    def request_reload(self) -> None:
        raise NotImplementedError

    def import_path(self, relative_path: str) -> None:
        raise NotImplementedError

    def defer(self, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` to run once the host has finished loading."""
        self._deferred.append(callback)

    @property
    def pending(self) -> int:
        return len(self._deferred)

    def run_deferred(self) -> int:
        """Run queued callbacks in order; a failing callback stops the rest.

        Returns:
            Number of callbacks that ran to completion.
        """
        ran = 0
        while self._deferred:
            callback = self._deferred.pop(0)
            callback()
            ran += 1
        return ran


class CommandHost(Host):
    """Host whose external calls are configured shell commands.

    A call with no configured command is logged and skipped.
    """

    def __init__(self, project_root: str | Path, commands: HostCommands, timeout: int = 600):
        super().__init__()
        self.project_root = Path(project_root)
        self.commands = commands
        self.timeout = timeout

    def resolve_dependencies(self) -> None:
        self._run("resolve", self.commands.resolve)

    def request_reload(self) -> None:
        if not self.commands.reload:
            LOGGER.info("Reload requested: the pending step runs on the next relocator start")
            return
        self._run("reload", self.commands.reload)

    def import_path(self, relative_path: str) -> None:
        command = self.commands.import_path
        if command:
            command = command.replace("{path}", relative_path)
        self._run(f"import {relative_path}", command)

    def _run(self, label: str, command: str) -> None:
        if not command:
            LOGGER.info("No %s command configured, skipping", label.split()[0])
            return

        LOGGER.info("Running %s: %s", label, command)
        try:
            proc = subprocess.run(
                command,
                shell=True,
                cwd=self.project_root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise HostCommandError(command, -1, f"timed out after {self.timeout}s") from e

        if proc.stdout:
            LOGGER.debug(proc.stdout.rstrip())
        if proc.returncode != 0:
            raise HostCommandError(command, proc.returncode, proc.stderr[:5000])


def to_project_relative(path: str | Path, project_root: str | Path) -> str:
    """Return ``path`` relative to the project root, with forward slashes.

    Raises:
        PreconditionViolation: If ``path`` is outside the project.
    """
    root = Path(project_root).resolve()
    resolved = Path(path).resolve()
    try:
        return resolved.relative_to(root).as_posix()
    except ValueError:
        raise PreconditionViolation(f"Failed to make path relative: {path}") from None
