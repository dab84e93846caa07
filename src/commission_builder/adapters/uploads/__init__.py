# src/commission_builder/adapters/uploads/__init__.py
"""
Upload Adapters - Reference File Handles

This package registers uploaded reference files and manages their handles.
"""

from commission_builder.adapters.uploads.registry import UploadHandle, UploadRegistry, classify_file

__all__ = [
    "UploadHandle",
    "UploadRegistry",
    "classify_file",
]
