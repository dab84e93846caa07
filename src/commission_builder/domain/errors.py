# src/commission_builder/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines the exceptions raised while loading the catalog,
restoring or persisting the session, resolving selections and exporting.
"""


class CommissionError(Exception):
    """Base exception for commission builder errors."""
    pass


class ConfigLoadFailure(CommissionError):
    """Raised when a catalog source cannot be fetched, parsed or validated."""
    pass


class StateRestoreFailure(CommissionError):
    """Raised when a persisted snapshot (or one of its fields) is unusable."""
    pass


class ResolutionMiss(CommissionError):
    """Raised when a selection references an id the catalog does not define."""
    pass


class ExportFailure(CommissionError):
    """Raised when the summary document cannot be generated."""
    pass


class QuotaExceeded(CommissionError):
    """Raised when the session snapshot cannot be written."""
    pass
