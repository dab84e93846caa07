# src/commission_builder/adapters/formatting/__init__.py
"""
Formatting Adapters - Summary Formatting

This package contains text formatting for prices and the order summary.
"""

from commission_builder.adapters.formatting.formatter import (
    addon_price_tag,
    reference_discount_text,
    style_price_tag,
    summary_lines,
    summary_text,
)

__all__ = [
    "addon_price_tag",
    "reference_discount_text",
    "style_price_tag",
    "summary_lines",
    "summary_text",
]
