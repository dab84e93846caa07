# src/commission_builder/adapters/catalog/__init__.py
"""
Catalog Adapters - External Catalog Documents

This package fetches catalog/theme JSON documents and validates them.
"""

from commission_builder.adapters.catalog.schema import CatalogDocument
from commission_builder.adapters.catalog.source import fetch_document

__all__ = [
    "CatalogDocument",
    "fetch_document",
]
