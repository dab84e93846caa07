# src/commission_builder/application/wizard.py
"""
Wizard - Step Controller for the Commission Order

This module drives the six-step order flow
(type -> subtype -> details -> upload -> summary -> tos). Every action goes
through dispatch(), which applies it, releases handles of files that left the
selection, persists the snapshot and recomputes the price breakdown.

Export is gated on ToS acceptance; without it export() does nothing.

Files that USE this module:
- commission_builder.app (composition root)
- tests.test_wizard (unit tests)

Files that this module USES:
- commission_builder.application.actions (action types and reducer)
- commission_builder.application.state_manager (StateManager)
- commission_builder.adapters.uploads.registry (UploadRegistry, classify_file, accepted_kinds)
- commission_builder.adapters.formatting.formatter (summary_text)
- commission_builder.domain.pricing (compute_breakdown)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Tuple

from commission_builder.adapters.formatting.formatter import summary_text
from commission_builder.adapters.uploads.registry import UploadRegistry, accepted_kinds, classify_file
from commission_builder.application import actions
from commission_builder.application.actions import Action, apply_action
from commission_builder.application.state_manager import StateManager
from commission_builder.domain.errors import ExportFailure
from commission_builder.domain.models import (
    STEP_ORDER,
    Breakdown,
    Catalog,
    SelectionState,
    Step,
)
from commission_builder.domain.pricing import compute_breakdown

logger = logging.getLogger(__name__)

STEP_TITLES: Dict[Step, str] = {
    Step.TYPE: "Pick a commission type",
    Step.SUBTYPE: "Pick a subtype",
    Step.DETAILS: "Details & add-ons",
    Step.UPLOAD: "Reference upload",
    Step.SUMMARY: "Summary",
    Step.TOS: "Terms of Service",
}


class Exporter(Protocol):
    """Protocol for summary document exporters."""
    def export(self, catalog: Catalog, state: SelectionState, breakdown: Breakdown) -> Path:
        ...


class Wizard:
    """Step controller owning the session's selection."""

    def __init__(
        self,
        catalog: Catalog,
        state_manager: StateManager,
        uploads: Optional[UploadRegistry] = None,
        exporter: Optional[Exporter] = None,
        single_type_id: Optional[str] = None,
    ):
        """
        Initialize the wizard on top of an already restored StateManager.

        Args:
            catalog: Loaded catalog
            state_manager: Owner of the selection state and its persistence
            uploads: Registry of upload handles (a new one when omitted)
            exporter: Document exporter used by export()
            single_type_id: Fix the commission type and drop the type step
        """
        self.catalog = catalog
        self.state_manager = state_manager
        self.uploads = uploads or UploadRegistry()
        self.exporter = exporter
        self.single_type_id = single_type_id
        self.steps: Tuple[Step, ...] = STEP_ORDER[1:] if single_type_id else STEP_ORDER

        state = actions.clone_state(state_manager.state)
        if single_type_id:
            if self.catalog.find_type(single_type_id) is None:
                logger.warning("Single type %r is not in the catalog", single_type_id)
            elif state.selected_type_id != single_type_id:
                state.selected_type_id = single_type_id
                state.clear_downstream_of_type()
        state.step = self._reachable_step(state, state.step)
        self.state_manager.replace(state)
        self._breakdown = compute_breakdown(self.catalog, state)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        return self.state_manager.state

    @property
    def step(self) -> Step:
        return self.state.step

    @property
    def breakdown(self) -> Breakdown:
        return self._breakdown

    def dispatch(self, action: Action) -> SelectionState:
        """
        Apply an action, persist, and recompute the breakdown.

        Args:
            action: One of the actions in commission_builder.application.actions

        Returns:
            The new current state
        """
        if isinstance(action, actions.GoToStep):
            target = Step(action.step)
            if target != self.steps[0] and not self.can_enter(target):
                logger.debug("Cannot enter %s yet", target.value)
                return self.state

        previous = self.state
        new = apply_action(self.catalog, previous, action)

        kept = {id(f) for f in new.files}
        self.uploads.release_many(f for f in previous.files if id(f) not in kept)

        self.state_manager.replace(new)
        self._breakdown = compute_breakdown(self.catalog, new)
        logger.debug("%s -> step=%s total=%.2f", type(action).__name__, new.step.value, self._breakdown.total)
        return new

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_type(self, type_id: str) -> SelectionState:
        if self.single_type_id and type_id != self.single_type_id:
            logger.debug("Type is fixed to %r, ignoring %r", self.single_type_id, type_id)
            return self.state
        return self.dispatch(actions.SelectType(type_id))

    def select_sub_type(self, sub_id: str) -> SelectionState:
        return self.dispatch(actions.SelectSubType(sub_id))

    def select_tier(self, index: int) -> SelectionState:
        return self.dispatch(actions.SelectTier(index))

    def toggle_addon(self, addon_id: str, selected: Optional[bool] = None, quantity: int = 1) -> SelectionState:
        return self.dispatch(actions.ToggleAddon(addon_id, selected, quantity))

    def set_addon_quantity(self, addon_id: str, quantity: int) -> SelectionState:
        return self.dispatch(actions.SetAddonQuantity(addon_id, quantity))

    def select_style(self, style_id: str) -> SelectionState:
        return self.dispatch(actions.SelectStyle(style_id))

    def select_currency(self, code: str) -> SelectionState:
        return self.dispatch(actions.SelectCurrency(code))

    def add_files(self, paths: Iterable) -> SelectionState:
        """
        Register uploaded files and attach them (duplicates are ignored).

        Files of a kind the selected type does not accept, and files that
        cannot be read, are logged and skipped.
        """
        accepted = accepted_kinds(self.state.selected_type_id)
        refs = []
        for path in paths:
            kind = classify_file(Path(path).name)
            if kind not in accepted:
                logger.warning("Rejected %s: %s files are not accepted here", path, kind)
                continue
            try:
                refs.append(self.uploads.register(path))
            except OSError as e:
                logger.warning("Cannot attach %s: %s", path, e)
        new = self.dispatch(actions.AddFiles(tuple(refs)))
        kept = {id(f) for f in new.files}
        self.uploads.release_many(ref for ref in refs if id(ref) not in kept)
        return new

    def remove_file(self, index: int) -> SelectionState:
        return self.dispatch(actions.RemoveFile(index))

    def set_username(self, text: str) -> SelectionState:
        return self.dispatch(actions.SetUsername(text))

    def set_description(self, text: str) -> SelectionState:
        return self.dispatch(actions.SetDescription(text))

    def accept_tos(self, accepted: bool = True) -> SelectionState:
        return self.dispatch(actions.SetTosAccepted(accepted))

    def reset_details(self) -> SelectionState:
        return self.dispatch(actions.ResetDetails())

    def reset(self) -> SelectionState:
        """Start over: clear every selection and return to the first step."""
        self.dispatch(actions.ResetAll())
        if self.single_type_id:
            self.dispatch(actions.SelectType(self.single_type_id))
            if self.step not in self.steps:
                self.dispatch(actions.GoToStep(self.steps[0]))
        return self.state

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def can_enter(self, step: Step, state: Optional[SelectionState] = None) -> bool:
        """
        Check whether a step's prerequisites are met.

        subtype needs a selectable type; details and later steps need a
        resolvable type and sub-type.
        """
        state = state or self.state
        if step not in self.steps:
            return False
        if step == Step.TYPE:
            return True
        commission_type = self.catalog.find_type(state.selected_type_id)
        if commission_type is None or commission_type.coming_soon:
            return False
        if step == Step.SUBTYPE:
            return True
        return self.catalog.find_sub_type(commission_type, state.selected_sub_id) is not None

    def _reachable_step(self, state: SelectionState, wanted: Step) -> Step:
        """Last step at or before wanted whose prerequisites hold."""
        if wanted not in self.steps:
            wanted = self.steps[0]
        index = self.steps.index(wanted)
        while index > 0 and not self.can_enter(self.steps[index], state):
            index -= 1
        return self.steps[index]

    def _go(self, step: Step) -> bool:
        self.dispatch(actions.GoToStep(step))
        return True

    def advance(self) -> bool:
        """
        Move to the next step ("next", "finish", "proceed").

        Returns:
            True if the step changed
        """
        index = self.steps.index(self.step)
        if index + 1 >= len(self.steps):
            return False
        target = self.steps[index + 1]
        if not self.can_enter(target):
            logger.debug("Cannot enter %s yet", target.value)
            return False
        return self._go(target)

    def skip_upload(self) -> bool:
        """Jump from upload straight to summary."""
        if self.step != Step.UPLOAD:
            return False
        return self._go(Step.SUMMARY)

    def back(self) -> bool:
        """Move to the previous step; no-op on the first step."""
        index = self.steps.index(self.step)
        if index == 0:
            return False
        return self._go(self.steps[index - 1])

    def step_statuses(self) -> Dict[Step, str]:
        """Step tracker: 'completed', 'current' or 'upcoming' for each step."""
        current = self.steps.index(self.step)
        statuses = {}
        for index, step in enumerate(self.steps):
            if index < current:
                statuses[step] = "completed"
            elif index == current:
                statuses[step] = "current"
            else:
                statuses[step] = "upcoming"
        return statuses

    @staticmethod
    def step_title(step: Step) -> str:
        return STEP_TITLES[step]

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def summary_text(self) -> str:
        return summary_text(self.catalog, self.state, self.breakdown)

    @property
    def can_export(self) -> bool:
        return self.state.tos_accepted

    def export(self) -> Optional[Path]:
        """
        Export the summary document.

        Returns:
            Path of the written document, or None when the ToS has not been
            accepted (nothing is produced and the state is unchanged)

        Raises:
            ExportFailure: If the exporter fails; the state is left untouched
        """
        if not self.can_export:
            logger.info("Export requested before accepting the Terms of Service, ignoring")
            return None
        if self.exporter is None:
            raise ExportFailure("No exporter configured")
        try:
            return self.exporter.export(self.catalog, self.state, self.breakdown)
        except ExportFailure as e:
            logger.error("Export failed: %s", e)
            raise
        except Exception as e:
            logger.error("Export failed: %s", e)
            raise ExportFailure(str(e)) from e

    def close(self) -> None:
        """End the session: release every outstanding upload handle."""
        self.uploads.release_all()
