"""Error taxonomy for relocation workflows.

Every failure the operator can hit derives from ``RelocationError`` so the
CLI can report it and exit non-zero. Refusing an unauthorized operator is
not an error and has no exception type.
"""

from __future__ import annotations


class RelocationError(Exception):
    """Base class for all relocation failures."""


class PreconditionViolation(RelocationError):
    """A required file is missing or present when it must not be."""


class ConfigError(PreconditionViolation):
    """The relocation config file is invalid."""


class ManifestParseError(RelocationError):
    """A manifest line matched the package filter but has no usable ``file:`` path."""

    def __init__(self, message: str, line_number: int = 0, line: str = ""):
        super().__init__(message)
        self.line_number = line_number
        self.line = line

    def __str__(self) -> str:
        if self.line_number:
            return f"{self.args[0]} (line {self.line_number}: {self.line.strip()})"
        return self.args[0]


class FilesystemConflict(RelocationError):
    """A copy destination already exists."""


class HostCommandError(RelocationError):
    """A configured host command exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, stderr: str = ""):
        super().__init__(f"Host command failed ({exit_code}): {command}")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
