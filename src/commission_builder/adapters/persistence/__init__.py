# src/commission_builder/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains adapters for persisting the session snapshot:
- File-based key-value storage (JSON)
"""

from commission_builder.adapters.persistence.file_store import (
    STORAGE_KEY,
    SessionSnapshot,
    clear_snapshot,
    load_snapshot,
    save_snapshot,
)

__all__ = [
    "STORAGE_KEY",
    "SessionSnapshot",
    "clear_snapshot",
    "load_snapshot",
    "save_snapshot",
]
