# src/commission_builder/shared/validators.py
"""
Input Validation Utilities - Configuration and User Input Validation

This module provides validation functions for configuration values and the
free-text fields a user types into the wizard.

Files that USE this module:
- commission_builder.config.settings (uses validation functions in Settings field validators)
- commission_builder.application.actions (sanitizes username/description)

Files that this module USES:
- None (pure utility functions)
"""
import re
from typing import Optional
from urllib.parse import urlparse

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def is_url(source: str) -> bool:
    """Return True when source is an http(s) URL."""
    return urlparse(source).scheme in ("http", "https")


def validate_source(source: str) -> bool:
    """
    Validate a catalog source.

    Args:
        source: Local file path or http(s) URL

    Returns:
        True if valid, False otherwise
    """
    if not source or source.isspace():
        return False

    parsed = urlparse(source)
    if parsed.scheme in ("http", "https"):
        return bool(parsed.netloc)
    # Anything else with a scheme (ftp:, data:) is not supported; Windows drive letters are
    if parsed.scheme and len(parsed.scheme) > 1:
        return False
    return True


def validate_log_level(level: str) -> bool:
    if not level:
        return False
    return level.upper() in LOG_LEVELS



def sanitize_user_input(text: Optional[str], max_length: int = 2000) -> str:
    """
    Sanitize free text typed by the user.

    Strips control characters (keeping newlines and tabs) and truncates to
    max_length. Leading/trailing whitespace is kept so typing is not disturbed.

    Args:
        text: Raw input
        max_length: Maximum allowed length

    Returns:
        Sanitized text ('' for None)
    """
    if not text:
        return ""

    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', str(text))

    if len(text) > max_length:
        text = text[:max_length]

    return text
