# src/commission_builder/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from commission_builder.shared.validators import (
    is_url,
    sanitize_user_input,
    validate_log_level,
    validate_source,
)

__all__ = [
    "is_url",
    "sanitize_user_input",
    "validate_log_level",
    "validate_source",
]
