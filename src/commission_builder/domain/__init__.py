# src/commission_builder/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains the catalog and selection models, the pricing engine
and the error taxonomy. No dependencies on infrastructure or external systems.
"""

from commission_builder.domain.models import (
    Addon,
    ArtStyle,
    Breakdown,
    Catalog,
    CommissionType,
    Currency,
    DiscountPolicy,
    FileRef,
    SelectionState,
    Step,
    SubType,
    TermsOfService,
    Tier,
)
from commission_builder.domain.errors import (
    CommissionError,
    ConfigLoadFailure,
    ExportFailure,
    QuotaExceeded,
    ResolutionMiss,
    StateRestoreFailure,
)
from commission_builder.domain.pricing import compute_breakdown, format_price

__all__ = [
    "Addon",
    "ArtStyle",
    "Breakdown",
    "Catalog",
    "CommissionType",
    "Currency",
    "DiscountPolicy",
    "FileRef",
    "SelectionState",
    "Step",
    "SubType",
    "TermsOfService",
    "Tier",
    "CommissionError",
    "ConfigLoadFailure",
    "ExportFailure",
    "QuotaExceeded",
    "ResolutionMiss",
    "StateRestoreFailure",
    "compute_breakdown",
    "format_price",
]
