"""Kinship graph - relationship engine for multi-tenant family records."""

__version__ = "0.1.0"
