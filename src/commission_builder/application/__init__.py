# src/commission_builder/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the catalog loader, the selection reducer, the state
manager and the step controller that orchestrate the domain logic.
"""

from commission_builder.application.catalog_service import load_catalog
from commission_builder.application.state_manager import StateManager
from commission_builder.application.wizard import Wizard

__all__ = [
    "load_catalog",
    "StateManager",
    "Wizard",
]
