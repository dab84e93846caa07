# tests/test_actions.py
"""
Selection Action Tests - Unit Tests for the Reducer

This module contains unit tests for apply_action: selection cascades,
add-on toggling and quantities, file deduplication, free-text sanitizing,
and rejection of unknown ids.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- commission_builder.application.actions (actions and apply_action under test)
- commission_builder.domain.models (SelectionState, FileRef, Step)
- pytest (testing framework)
"""
import copy  # Snapshot inputs to check they are not mutated

import pytest  # Testing framework for writing and running tests

from commission_builder.application.actions import (
    AddFiles,
    GoToStep,
    RemoveFile,
    ResetAll,
    ResetDetails,
    SelectCurrency,
    SelectStyle,
    SelectSubType,
    SelectTier,
    SelectType,
    SetAddonQuantity,
    SetDescription,
    SetTosAccepted,
    SetUsername,
    ToggleAddon,
    apply_action,
    fresh_state,
)
from commission_builder.domain.models import DEFAULT_STYLE_ID, FileRef, SelectionState, Step


class TestSelectionCascade:
    def test_changing_type_clears_downstream(self, catalog, scenario_state):
        scenario_state.selected_style_id = "style_pixel"

        result = apply_action(catalog, scenario_state, SelectType("emotes"))

        assert result.selected_type_id == "emotes"
        assert result.selected_sub_id is None
        assert result.selected_tier_index == 0
        assert len(result.selected_addons) == 0
        assert result.selected_style_id == DEFAULT_STYLE_ID
        assert result.files == []
        assert result.step == Step.SUBTYPE

    def test_reselecting_same_type_keeps_selection(self, catalog, scenario_state):
        result = apply_action(catalog, scenario_state, SelectType("character"))

        assert result.selected_sub_id == "bust"
        assert dict(result.selected_addons) == {"addChar": True, "itemProp": 2}
        assert len(result.files) == 3
        assert result.step == Step.SUBTYPE

    def test_changing_sub_type_clears_tier_and_addons(self, catalog, scenario_state):
        scenario_state.selected_tier_index = 2

        result = apply_action(catalog, scenario_state, SelectSubType("fullBody"))

        assert result.selected_sub_id == "fullBody"
        assert result.selected_tier_index == 0
        assert len(result.selected_addons) == 0
        assert len(result.files) == 3
        assert result.step == Step.DETAILS

    def test_coming_soon_type_is_not_selectable(self, catalog):
        state = SelectionState()
        result = apply_action(catalog, state, SelectType("other"))
        assert result == state

    def test_unknown_ids_leave_state_unchanged(self, catalog, scenario_state):
        for action in (SelectType("nope"), SelectSubType("nope"), SelectTier(7),
                       ToggleAddon("nope"), SelectStyle("nope"), SelectCurrency("XYZ"),
                       RemoveFile(10)):
            assert apply_action(catalog, scenario_state, action) == scenario_state

    def test_input_state_not_mutated(self, catalog, scenario_state):
        before = copy.deepcopy(scenario_state)
        apply_action(catalog, scenario_state, SelectType("emotes"))
        apply_action(catalog, scenario_state, ToggleAddon("rush"))
        assert scenario_state == before


class TestAddons:
    def test_toggle_flag_addon(self, catalog, scenario_state):
        on = apply_action(catalog, scenario_state, ToggleAddon("rush"))
        assert on.selected_addons["rush"] is True
        off = apply_action(catalog, on, ToggleAddon("rush"))
        assert "rush" not in off.selected_addons

    def test_item_prop_stores_quantity(self, catalog, scenario_state):
        state = apply_action(catalog, scenario_state, ToggleAddon("itemProp", selected=False))
        state = apply_action(catalog, state, ToggleAddon("itemProp", selected=True, quantity=0))
        assert state.selected_addons["itemProp"] == 1

    def test_set_quantity_requires_selected_addon(self, catalog, scenario_state):
        state = apply_action(catalog, scenario_state, SetAddonQuantity("itemProp", 5))
        assert state.selected_addons["itemProp"] == 5

        state = apply_action(catalog, state, ToggleAddon("itemProp", selected=False))
        state = apply_action(catalog, state, SetAddonQuantity("itemProp", 3))
        assert "itemProp" not in state.selected_addons

    def test_addon_of_other_type_rejected(self, catalog, scenario_state):
        result = apply_action(catalog, scenario_state, ToggleAddon("subBadge"))
        assert "subBadge" not in result.selected_addons

    def test_selection_order_preserved(self, catalog, scenario_state):
        result = apply_action(catalog, scenario_state, ToggleAddon("rush"))
        assert list(result.selected_addons) == ["addChar", "itemProp", "rush"]


class TestFiles:
    def test_duplicates_are_dropped(self, catalog, scenario_state):
        duplicate = FileRef(name="ref0.png", size=1000, last_modified=1700000000000)
        new_file = FileRef(name="extra.txt", size=5, last_modified=1)

        result = apply_action(catalog, scenario_state, AddFiles((duplicate, new_file, new_file)))

        assert [f.name for f in result.files] == ["ref0.png", "ref1.png", "ref2.png", "extra.txt"]

    def test_remove_by_index(self, catalog, scenario_state):
        result = apply_action(catalog, scenario_state, RemoveFile(1))
        assert [f.name for f in result.files] == ["ref0.png", "ref2.png"]


class TestOtherFields:
    def test_style_and_currency(self, catalog, scenario_state):
        state = apply_action(catalog, scenario_state, SelectStyle("style_pixel"))
        state = apply_action(catalog, state, SelectCurrency("GBP"))
        assert state.selected_style_id == "style_pixel"
        assert state.currency == "GBP"

    def test_text_fields_are_sanitized(self, catalog):
        state = apply_action(catalog, SelectionState(), SetUsername("ar\x00tist" + "x" * 300))
        assert state.username.startswith("artist")
        assert len(state.username) == 200

        state = apply_action(catalog, state, SetDescription("line one\nline two\x07"))
        assert state.description == "line one\nline two"

    def test_tos_and_step(self, catalog):
        state = apply_action(catalog, SelectionState(), SetTosAccepted(True))
        state = apply_action(catalog, state, GoToStep(Step.TOS))
        assert state.tos_accepted is True
        assert state.step == Step.TOS

    def test_reset_details(self, catalog, scenario_state):
        scenario_state.selected_tier_index = 2
        scenario_state.selected_style_id = "style_pixel"

        result = apply_action(catalog, scenario_state, ResetDetails())

        assert result.selected_tier_index == 0
        assert len(result.selected_addons) == 0
        assert result.selected_style_id == DEFAULT_STYLE_ID
        assert result.selected_sub_id == "bust"
        assert len(result.files) == 3

    def test_reset_all(self, catalog, scenario_state):
        result = apply_action(catalog, scenario_state, ResetAll())
        assert result == fresh_state(catalog)
        assert result.step == Step.TYPE

    def test_unknown_action_raises(self, catalog):
        with pytest.raises(TypeError):
            apply_action(catalog, SelectionState(), object())
