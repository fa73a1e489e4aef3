"""Operator gate — only the maintainer's own machine account may relocate packages.

This is a guard against accidental use, not access control.
"""

from __future__ import annotations

import getpass
import platform


def current_identity() -> str:
    """Return the current account as ``HOST\\user``."""
    return f"{platform.node()}\\{getpass.getuser()}"


def is_authorized_operator(expected: str, identity: str | None = None) -> bool:
    """Check the current (or given) identity against the configured operator.

    An empty ``expected`` identity authorizes nobody.
    """
    if not expected:
        return False
    if identity is None:
        identity = current_identity()
    return identity == expected
