"""Relocator — move development packages between linked and embedded layouts."""

__version__ = "0.1.0"
