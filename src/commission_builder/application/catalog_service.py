# src/commission_builder/application/catalog_service.py
"""
Catalog Service - Loading the Catalog with Fallback

This module loads the catalog from zero, one or two JSON sources and falls
back to the built-in default catalog whenever the data source cannot be
fetched, parsed or validated. The wizard must always start, so failures are
recorded as warnings on the returned catalog instead of being raised.

Sources are positional: the first is the data document, the optional second
is the theme document. Both are fetched concurrently and both complete (or
fail) before the catalog is returned.

Files that USE this module:
- commission_builder.app (loads the catalog at startup)
- tests.test_catalog_service (unit tests)

Files that this module USES:
- commission_builder.adapters.catalog.source (fetch_document)
- commission_builder.adapters.catalog.schema (CatalogDocument)
- commission_builder.domain.default_catalog (fallback catalog)
"""
from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from commission_builder.adapters.catalog.schema import CatalogDocument
from commission_builder.adapters.catalog.source import fetch_document
from commission_builder.domain.default_catalog import build_default_catalog
from commission_builder.domain.errors import ConfigLoadFailure
from commission_builder.domain.models import Catalog

log = logging.getLogger(__name__)

Fetcher = Callable[[str], Dict[str, Any]]

_FetchResult = Tuple[Optional[Dict[str, Any]], Optional[Exception]]


def _fetch_all(sources: Sequence[str], fetch: Fetcher) -> List[_FetchResult]:
    """Fetch every source concurrently, capturing each failure instead of raising."""

    def _one(source: str) -> _FetchResult:
        try:
            return fetch(source), None
        except Exception as e:
            return None, e

    if len(sources) == 1:
        return [_one(sources[0])]
    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        return list(pool.map(_one, sources))


def parse_catalog(document: Dict[str, Any], source: str, theme: Optional[Dict[str, Any]] = None,
                  warnings: Tuple[str, ...] = ()) -> Catalog:
    """
    Validate a catalog document and convert it into a Catalog.

    Raises:
        ConfigLoadFailure: If required fields are missing or invalid
    """
    try:
        parsed = CatalogDocument.model_validate(document)
    except ValidationError as e:
        raise ConfigLoadFailure(f"Catalog document {source} is invalid: {e}") from e
    return parsed.to_catalog(source=source, theme=theme, warnings=warnings)


def load_catalog(sources: Sequence[str] = (), fetch: Optional[Fetcher] = None) -> Catalog:
    """
    Load the catalog from the given sources, falling back to the default catalog.

    Args:
        sources: [] for the built-in catalog, [data] or [data, theme]
        fetch: Document fetcher (defaults to fetch_document)

    Returns:
        Catalog; its warnings list every non-fatal problem met while loading
    """
    fetch = fetch or fetch_document
    sources = [s for s in sources if s]
    if not sources:
        log.info("No catalog source configured, using built-in catalog")
        return build_default_catalog()

    if len(sources) > 2:
        log.warning("Only a data and a theme source are supported; ignoring %s", sources[2:])
        sources = sources[:2]

    warnings: List[str] = []
    results = _fetch_all(sources, fetch)

    theme: Optional[Dict[str, Any]] = None
    if len(results) == 2:
        theme_doc, theme_error = results[1]
        if theme_error is not None:
            warnings.append(f"Theme could not be loaded from {sources[1]}: {theme_error}")
            log.warning("Theme could not be loaded from %s: %s", sources[1], theme_error)
        else:
            theme = theme_doc

    data_doc, data_error = results[0]
    if data_error is None:
        try:
            catalog = parse_catalog(data_doc, source=" + ".join(sources), theme=theme,
                                    warnings=tuple(warnings))
            log.info("Catalog loaded from %s (%d commission types)",
                     catalog.source, len(catalog.commission_types))
            return catalog
        except ConfigLoadFailure as e:
            data_error = e

    warnings.append(f"Using built-in catalog: {data_error}")
    log.warning("Catalog could not be loaded from %s, using built-in catalog: %s", sources[0], data_error)
    fallback = build_default_catalog()
    return dataclasses.replace(
        fallback,
        theme=theme if theme is not None else fallback.theme,
        warnings=tuple(warnings),
    )
