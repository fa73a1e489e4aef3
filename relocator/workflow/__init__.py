"""Workflow — the embed / un-embed state machine and its collaborators.

This package provides:
- Gate: the operator identity check guarding both entry points
- Host: the opaque resolve, reload and import calls plus deferred callbacks
- Controller: phase 1 and phase 2 of embed, and un-embed
"""
