# src/commission_builder/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Catalog (JSON sources)
- Persistence (session snapshot)
- Uploads (reference file handles)
- Formatting (text output)
- Export (PDF)
"""

__all__ = []
