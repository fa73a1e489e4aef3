"""Durable state that survives a host reload.

This package provides:
- Ledger: the package source paths extracted during embed
- Session: a small key/value store holding the resume flag
"""
