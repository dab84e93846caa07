# src/commission_builder/app.py
"""
Application Entry Point - Session Startup

This module serves as the composition root for the commission builder.
It wires settings, logging, the catalog, persistence, uploads and the
exporter into a Wizard, then reports the current order.

Files that USE this module:
- console script `commission-builder` (pyproject.toml)

Files that this module USES:
- commission_builder.shared.logging_conf (setup_logging for logging configuration)
- commission_builder.config (settings for sources, state file and export path)
- commission_builder.application.catalog_service (load_catalog)
- commission_builder.application.state_manager (StateManager)
- commission_builder.application.wizard (Wizard)
- commission_builder.adapters.export.pdf_exporter (PdfExporter)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import argparse  # Command line options
import logging  # Standard library for logging messages and errors
import sys  # System-specific parameters and functions for exit codes
from typing import List, Optional

from commission_builder.config import Settings, settings
from commission_builder.shared.logging_conf import setup_logging
from commission_builder.adapters.export.pdf_exporter import PdfExporter
from commission_builder.adapters.uploads.registry import UploadRegistry
from commission_builder.application.catalog_service import load_catalog
from commission_builder.application.state_manager import StateManager
from commission_builder.application.wizard import Wizard
from commission_builder.domain.errors import ExportFailure


def build_wizard(config: Settings) -> Wizard:
    """
    Create a Wizard for the configured catalog and state file.

    Args:
        config: Settings instance

    Returns:
        Wizard positioned on the restored (or first) step
    """
    sources = config.catalog_sources
    if config.theme_source:
        if sources:
            sources = sources + [config.theme_source]
        else:
            logging.getLogger(__name__).warning(
                "THEME_SOURCE is set without CATALOG_SOURCE; theme ignored")
    catalog = load_catalog(sources)

    state_manager = StateManager(config.state_file)
    state_manager.restore(catalog)

    uploads = UploadRegistry()
    exporter = PdfExporter(config.export_path, read_image=uploads.read_bytes)
    return Wizard(
        catalog,
        state_manager,
        uploads=uploads,
        exporter=exporter,
        single_type_id=config.single_type_id,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Restore the session and print its summary.

    This function:
    1. Sets up logging from settings
    2. Loads the catalog (falling back to the built-in one)
    3. Restores the persisted session
    4. Prints the current step, any catalog warnings and the summary
    5. Exports the PDF when --export is given (requires accepted ToS)

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(prog="commission-builder", description="Commission order builder")
    parser.add_argument("--export", action="store_true", help="export the summary PDF")
    args = parser.parse_args(argv)

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)

    wizard = build_wizard(settings)
    try:
        for warning in wizard.catalog.warnings:
            print(f"Warning: {warning}")
        print(f"Step: {wizard.step_title(wizard.step)}")
        print(wizard.summary_text())

        if args.export:
            if not wizard.can_export:
                print("Accept the Terms of Service before exporting.")
                return 1
            try:
                path = wizard.export()
            except ExportFailure as e:
                logger.error("Export failed: %s", e)
                print("PDF export failed. Check the log for details.")
                return 1
            print(f"Exported {path}")
        return 0
    finally:
        wizard.close()


if __name__ == "__main__":
    sys.exit(main())
