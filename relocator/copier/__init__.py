"""Copier — moves package contents and their metadata sidecars into the project."""
