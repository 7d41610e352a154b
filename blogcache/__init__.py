"""Cached "does this blog use more than one category" check for blog front ends."""

__version__ = "0.1.0"
