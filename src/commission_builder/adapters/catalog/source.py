# src/commission_builder/adapters/catalog/source.py
"""
Catalog Sources - Fetching JSON Documents

This module fetches a single JSON document from either a local file or an
http(s) URL. Every failure (I/O, HTTP, timeout, invalid JSON, non-object
JSON) is raised as ConfigLoadFailure so callers can fall back uniformly.

Files that USE this module:
- commission_builder.application.catalog_service (fetches data and theme documents)
- tests.test_catalog_service (unit tests)

Files that this module USES:
- commission_builder.config (settings for HTTP timeout)
- commission_builder.domain.errors (ConfigLoadFailure)
- commission_builder.shared.validators (is_url)
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from commission_builder.config import settings
from commission_builder.domain.errors import ConfigLoadFailure
from commission_builder.shared.validators import is_url

log = logging.getLogger(__name__)


def _fetch_url(url: str, timeout: int) -> Any:
    try:
        log.info("Fetching catalog document from %s", url)
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.Timeout:
        log.error("Catalog fetch timeout after %d seconds: %s", timeout, url)
        raise ConfigLoadFailure(f"Catalog fetch timeout after {timeout}s: {url}")
    except requests.exceptions.RequestException as e:
        log.error("Catalog fetch failed: %s", e)
        raise ConfigLoadFailure(f"Catalog fetch failed: {e}")
    except ValueError as e:
        log.error("Catalog source returned invalid JSON: %s", e)
        raise ConfigLoadFailure(f"Catalog source returned invalid JSON: {url}: {e}")


def _read_file(path: Path) -> Any:
    try:
        log.info("Reading catalog document from %s", path)
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        log.error("Catalog file is not valid JSON: %s: %s", path, e)
        raise ConfigLoadFailure(f"Catalog file is not valid JSON: {path}: {e}")
    except OSError as e:
        log.error("Catalog file could not be read: %s", e)
        raise ConfigLoadFailure(f"Catalog file could not be read: {path}: {e}")


def fetch_document(source: str, timeout: Optional[int] = None) -> Dict[str, Any]:
    """
    Fetch one JSON object from a path or URL.

    Args:
        source: Local file path or http(s) URL
        timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)

    Returns:
        Parsed JSON object

    Raises:
        ConfigLoadFailure: If the document cannot be fetched or is not a JSON object
    """
    if is_url(source):
        data = _fetch_url(source, timeout or settings.http_timeout_seconds)
    else:
        data = _read_file(Path(source))

    if not isinstance(data, dict):
        log.error("Catalog source %s returned %r instead of an object", source, type(data))
        raise ConfigLoadFailure(f"Catalog source {source} did not contain a JSON object")
    return data
