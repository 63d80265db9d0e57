"""Variant generation and resolution engine for retail catalogs."""

__version__ = "0.1.0"
