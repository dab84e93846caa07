# src/commission_builder/adapters/export/__init__.py
"""
Export Adapters - Summary Documents

This package renders the finished order into a PDF document.
"""

from commission_builder.adapters.export.pdf_exporter import PdfExporter, build_summary_pdf_bytes

__all__ = [
    "PdfExporter",
    "build_summary_pdf_bytes",
]
