# src/commission_builder/application/state_manager.py
"""
State Manager - Session State Ownership and Persistence

This module owns the in-progress SelectionState and keeps the persisted
snapshot in step with it. In-memory state is always authoritative: if a write
fails the error is logged and the session carries on.

On restore, the snapshot is reconciled against the current catalog so that
ids invalidated by a catalog update are cleared instead of breaking rendering.

Files that USE this module:
- commission_builder.application.wizard (Wizard holds a StateManager)
- commission_builder.app (creates the StateManager for the configured state file)
- tests.test_state_manager (unit tests)

Files that this module USES:
- commission_builder.adapters.persistence.file_store (save_snapshot, load_snapshot, SessionSnapshot)
- commission_builder.adapters.uploads.registry (classify_file for restored files)
- commission_builder.domain.models (SelectionState, FileRef, Catalog)
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from commission_builder.adapters.persistence.file_store import (
    SessionSnapshot,
    clear_snapshot,
    load_snapshot,
    save_snapshot,
)
from commission_builder.adapters.uploads.registry import classify_file
from commission_builder.domain.errors import QuotaExceeded, StateRestoreFailure
from commission_builder.domain.models import (
    DEFAULT_STYLE_ID,
    Catalog,
    FileRef,
    SelectionState,
)
from commission_builder.domain.pricing import clamp_quantity

logger = logging.getLogger(__name__)


def to_snapshot(state: SelectionState) -> SessionSnapshot:
    """
    Convert SelectionState to SessionSnapshot for persistence.

    File handles are dropped; only the descriptive triple is kept.
    """
    return SessionSnapshot(
        step=state.step,
        selected_type_id=state.selected_type_id,
        selected_sub_id=state.selected_sub_id,
        selected_tier_index=state.selected_tier_index,
        selected_style_id=state.selected_style_id,
        selected_addons=[(addon_id, value) for addon_id, value in state.selected_addons.items()],
        files=[f.identity for f in state.files],
        username=state.username,
        description=state.description,
        currency=state.currency,
        tos_accepted=state.tos_accepted,
        ts=datetime.now(timezone.utc),
    )


def from_snapshot(snapshot: SessionSnapshot) -> SelectionState:
    """Create SelectionState from SessionSnapshot (restored files carry no handle)."""
    files: List[FileRef] = []
    seen = set()
    for name, size, last_modified in snapshot.files:
        if (name, size, last_modified) in seen:
            continue
        seen.add((name, size, last_modified))
        files.append(FileRef(name=name, size=size, last_modified=last_modified, kind=classify_file(name)))

    return SelectionState(
        step=snapshot.step,
        selected_type_id=snapshot.selected_type_id,
        selected_sub_id=snapshot.selected_sub_id,
        selected_tier_index=snapshot.selected_tier_index,
        selected_style_id=snapshot.selected_style_id,
        selected_addons=OrderedDict(snapshot.selected_addons),
        files=files,
        username=snapshot.username,
        description=snapshot.description,
        currency=snapshot.currency,
        tos_accepted=snapshot.tos_accepted,
    )


def reconcile(catalog: Catalog, state: SelectionState) -> List[str]:
    """
    Drop selections the catalog no longer defines (mutates state).

    Args:
        catalog: Catalog to check ids against
        state: Restored state

    Returns:
        Human-readable list of what was repaired
    """
    repairs: List[str] = []

    commission_type = catalog.find_type(state.selected_type_id)
    if state.selected_type_id and (commission_type is None or commission_type.coming_soon):
        repairs.append(f"unknown type {state.selected_type_id!r}")
        state.selected_type_id = None
        state.clear_downstream_of_type()
        commission_type = None

    sub_type = catalog.find_sub_type(commission_type, state.selected_sub_id)
    if state.selected_sub_id and sub_type is None:
        repairs.append(f"unknown sub-type {state.selected_sub_id!r}")
        state.selected_sub_id = None
        state.clear_downstream_of_sub()

    if sub_type is not None and not 0 <= state.selected_tier_index < len(sub_type.tiers):
        repairs.append(f"tier index {state.selected_tier_index} out of range")
        state.selected_tier_index = 0

    for addon_id in list(state.selected_addons):
        addon = commission_type.find_addon(addon_id) if commission_type else None
        if addon is None:
            repairs.append(f"unknown add-on {addon_id!r}")
            del state.selected_addons[addon_id]
        elif addon.has_quantity:
            state.selected_addons[addon_id] = clamp_quantity(state.selected_addons[addon_id])
        else:
            state.selected_addons[addon_id] = True

    if catalog.find_style(state.selected_style_id) is None:
        repairs.append(f"unknown style {state.selected_style_id!r}")
        state.selected_style_id = DEFAULT_STYLE_ID

    if state.currency not in catalog.currencies:
        repairs.append(f"unknown currency {state.currency!r}")
        state.currency = catalog.default_currency

    return repairs


class StateManager:
    """Owns the session's SelectionState and its persisted snapshot."""

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: Optional state file (defaults to settings.state_file)
        """
        self._path = path
        self._state = SelectionState()

    @property
    def state(self) -> SelectionState:
        return self._state

    def restore(self, catalog: Catalog) -> SelectionState:
        """
        Load the persisted snapshot, falling back to defaults field by field.

        Never raises: restore problems are logged as warnings.

        Args:
            catalog: Catalog the restored selection must be valid against

        Returns:
            Restored (or fresh) SelectionState, also held as the current state
        """
        snapshot, problems = load_snapshot(self._path)
        for problem in problems:
            logger.warning("%s", StateRestoreFailure(f"Snapshot field reset to default: {problem}"))

        if snapshot is None:
            logger.info("No persisted session found, starting fresh")
            self._state = SelectionState(currency=catalog.default_currency)
            return self._state

        state = from_snapshot(snapshot)
        for repair in reconcile(catalog, state):
            logger.warning("Restored selection repaired: %s", repair)

        self._state = state
        logger.info("Restored session from %s (step=%s)", snapshot.ts, state.step.value)
        return self._state

    def persist(self, state: Optional[SelectionState] = None) -> bool:
        """
        Write the snapshot of state (default: the current state).

        Returns:
            True if written, False if the write failed (logged, not raised)
        """
        try:
            save_snapshot(to_snapshot(state or self._state), self._path)
            return True
        except QuotaExceeded as e:
            logger.error("Failed to persist session, keeping in-memory state: %s", e)
            return False

    def replace(self, state: SelectionState) -> SelectionState:
        """Make state current and persist it; the in-memory update never fails."""
        self._state = state
        self.persist()
        return state

    def clear(self) -> None:
        """Forget the persisted snapshot."""
        try:
            clear_snapshot(self._path)
        except OSError as e:
            logger.error("Failed to clear persisted session: %s", e)
