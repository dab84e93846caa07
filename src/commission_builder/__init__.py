# src/commission_builder/__init__.py
"""
Commission Builder - Multi-step Commission Order Wizard

Lets a client pick a commission type, sub-type, tier, art style and add-ons,
attach reference files and get a price estimate they can copy or export as a
PDF. Pricing is driven by a JSON catalog with a built-in fallback.
"""

__version__ = "1.0.0"
