# src/commission_builder/application/actions.py
"""
Selection Actions - Closed Set of Mutations and Their Reducer

Every change to the in-progress order is one of the actions defined here.
apply_action() maps (catalog, state, action) to a new SelectionState without
touching the input state, so it can be tested without any UI, persistence or
file handles involved.

Rules enforced here:
- Selecting a different type clears sub-type, tier, add-ons, style and files
- Selecting a different sub-type clears tier and add-ons
- Add-on keys always belong to the selected type
- Files are deduplicated by (name, size, last_modified)
- Actions referencing unknown ids leave the state unchanged

Files that USE this module:
- commission_builder.application.wizard (dispatches actions)
- tests.test_actions (unit tests)

Files that this module USES:
- commission_builder.domain.models (Catalog, SelectionState, FileRef, Step)
- commission_builder.domain.pricing (clamp_quantity)
- commission_builder.shared.validators (sanitize_user_input)
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from commission_builder.domain.models import (
    DEFAULT_STYLE_ID,
    Catalog,
    FileRef,
    SelectionState,
    Step,
)
from commission_builder.domain.pricing import clamp_quantity
from commission_builder.shared.validators import sanitize_user_input

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectType:
    type_id: str


@dataclass(frozen=True)
class SelectSubType:
    sub_id: str


@dataclass(frozen=True)
class SelectTier:
    index: int


@dataclass(frozen=True)
class ToggleAddon:
    """Toggle an add-on, or force it on/off when selected is given."""
    addon_id: str
    selected: Optional[bool] = None
    quantity: int = 1


@dataclass(frozen=True)
class SetAddonQuantity:
    addon_id: str
    quantity: int


@dataclass(frozen=True)
class SelectStyle:
    style_id: str


@dataclass(frozen=True)
class SelectCurrency:
    code: str


@dataclass(frozen=True)
class AddFiles:
    files: Tuple[FileRef, ...]


@dataclass(frozen=True)
class RemoveFile:
    index: int


@dataclass(frozen=True)
class SetUsername:
    text: str


@dataclass(frozen=True)
class SetDescription:
    text: str


@dataclass(frozen=True)
class SetTosAccepted:
    accepted: bool


@dataclass(frozen=True)
class GoToStep:
    step: Step


@dataclass(frozen=True)
class ResetDetails:
    """Reset tier, add-ons and style for the current sub-type."""


@dataclass(frozen=True)
class ResetAll:
    """Start the order over."""


Action = Union[
    SelectType, SelectSubType, SelectTier, ToggleAddon, SetAddonQuantity,
    SelectStyle, SelectCurrency, AddFiles, RemoveFile, SetUsername,
    SetDescription, SetTosAccepted, GoToStep, ResetDetails, ResetAll,
]


def clone_state(state: SelectionState) -> SelectionState:
    """Copy a state so it can be mutated; FileRefs (and their handles) are shared."""
    return replace(
        state,
        selected_addons=OrderedDict(state.selected_addons),
        files=list(state.files),
    )


def fresh_state(catalog: Catalog) -> SelectionState:
    return SelectionState(currency=catalog.default_currency)


def apply_action(catalog: Catalog, state: SelectionState, action: Action) -> SelectionState:
    """
    Apply one action and return the resulting state.

    Args:
        catalog: Catalog used to validate ids
        state: Current state (not modified)
        action: Action to apply

    Returns:
        New SelectionState (equal to the input when the action was rejected)
    """
    new = clone_state(state)
    commission_type = catalog.find_type(new.selected_type_id)
    sub_type = catalog.find_sub_type(commission_type, new.selected_sub_id)

    if isinstance(action, SelectType):
        target = catalog.find_type(action.type_id)
        if target is None or target.coming_soon:
            log.debug("Ignoring selection of unavailable type %r", action.type_id)
            return new
        if target.id != new.selected_type_id:
            new.selected_type_id = target.id
            new.clear_downstream_of_type()
        new.step = Step.SUBTYPE

    elif isinstance(action, SelectSubType):
        target = catalog.find_sub_type(commission_type, action.sub_id)
        if target is None:
            log.debug("Ignoring selection of unknown sub-type %r", action.sub_id)
            return new
        if target.id != new.selected_sub_id:
            new.selected_sub_id = target.id
            new.clear_downstream_of_sub()
        new.step = Step.DETAILS

    elif isinstance(action, SelectTier):
        if sub_type is not None and 0 <= action.index < len(sub_type.tiers):
            new.selected_tier_index = action.index

    elif isinstance(action, ToggleAddon):
        addon = commission_type.find_addon(action.addon_id) if commission_type else None
        if addon is None:
            return new
        selected = action.selected
        if selected is None:
            selected = addon.id not in new.selected_addons
        if selected:
            new.selected_addons[addon.id] = clamp_quantity(action.quantity) if addon.has_quantity else True
        else:
            new.selected_addons.pop(addon.id, None)

    elif isinstance(action, SetAddonQuantity):
        addon = commission_type.find_addon(action.addon_id) if commission_type else None
        if addon is not None and addon.has_quantity and addon.id in new.selected_addons:
            new.selected_addons[addon.id] = clamp_quantity(action.quantity)

    elif isinstance(action, SelectStyle):
        if catalog.find_style(action.style_id) is not None:
            new.selected_style_id = action.style_id

    elif isinstance(action, SelectCurrency):
        if action.code in catalog.currencies:
            new.currency = action.code

    elif isinstance(action, AddFiles):
        seen = {f.identity for f in new.files}
        for ref in action.files:
            if ref.identity in seen:
                continue
            seen.add(ref.identity)
            new.files.append(ref)

    elif isinstance(action, RemoveFile):
        if 0 <= action.index < len(new.files):
            new.files.pop(action.index)

    elif isinstance(action, SetUsername):
        new.username = sanitize_user_input(action.text, max_length=200)

    elif isinstance(action, SetDescription):
        new.description = sanitize_user_input(action.text)

    elif isinstance(action, SetTosAccepted):
        new.tos_accepted = bool(action.accepted)

    elif isinstance(action, GoToStep):
        new.step = Step(action.step)

    elif isinstance(action, ResetDetails):
        new.selected_tier_index = 0
        new.selected_addons.clear()
        new.selected_style_id = DEFAULT_STYLE_ID

    elif isinstance(action, ResetAll):
        new = fresh_state(catalog)

    else:
        raise TypeError(f"Unknown action: {action!r}")

    return new
