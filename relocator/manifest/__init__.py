"""Manifest — line-oriented access to the dependency manifest and its backup."""
