"""Voteboard: suggestion/vote board backend."""

__version__ = "0.1.0"
