"""Catalog API - product catalog service with geo and keyword search."""

__version__ = "0.1.0"
