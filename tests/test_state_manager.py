# tests/test_state_manager.py
"""
State Manager Tests - Unit Tests for Session Persistence

This module contains unit tests for the snapshot file store and the
StateManager: round-trips, per-field recovery from malformed snapshots,
corrupt file backup, non-fatal write failures, and reconciliation of stale
ids against the catalog.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- commission_builder.application.state_manager (StateManager, reconcile, snapshot conversion)
- commission_builder.adapters.persistence.file_store (snapshot file I/O)
- unittest.mock (patch for simulated write failures)
- pytest (testing framework)
"""
import json  # Inspect and hand-craft stored snapshots

import pytest  # Testing framework for writing and running tests

from unittest.mock import patch  # Patching for simulated storage failures

from commission_builder.adapters.persistence.file_store import (
    STORAGE_KEY,
    SessionSnapshot,
    clear_snapshot,
    load_snapshot,
    save_snapshot,
)
from commission_builder.application.state_manager import (
    StateManager,
    from_snapshot,
    reconcile,
    to_snapshot,
)
from commission_builder.domain.errors import QuotaExceeded
from commission_builder.domain.models import DEFAULT_STYLE_ID, SelectionState, Step


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state" / "session_state.json"


def write_record(path, record):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({STORAGE_KEY: record}), encoding="utf-8")


class TestFileStore:
    def test_save_and_load(self, state_file):
        snap = SessionSnapshot(
            step=Step.UPLOAD,
            selected_type_id="character",
            selected_sub_id="bust",
            selected_addons=[("addChar", True), ("itemProp", 2)],
            files=[("a.png", 10, 123)],
            username="kit",
        )
        save_snapshot(snap, state_file)

        loaded, problems = load_snapshot(state_file)

        assert problems == []
        assert loaded.step == Step.UPLOAD
        assert loaded.selected_addons == [("addChar", True), ("itemProp", 2)]
        assert loaded.files == [("a.png", 10, 123)]
        assert loaded.username == "kit"
        assert loaded.ts is not None

    def test_stored_under_fixed_key(self, state_file):
        save_snapshot(SessionSnapshot(files=[("a.png", 10, 123)]), state_file)
        data = json.loads(state_file.read_text(encoding="utf-8"))

        record = data[STORAGE_KEY]
        assert record["step"] == "type"
        assert record["files"] == [{"name": "a.png", "size": 10, "lastModified": 123}]

    def test_missing_file(self, state_file):
        assert load_snapshot(state_file) == (None, [])

    def test_corrupt_file_is_backed_up(self, state_file):
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text("{not json", encoding="utf-8")

        snapshot, problems = load_snapshot(state_file)

        assert snapshot is None
        assert len(problems) == 1
        assert not state_file.exists()
        assert state_file.with_suffix(".json.corrupt").exists()

    def test_malformed_fields_fall_back_individually(self, state_file):
        write_record(state_file, {
            "step": "warp",
            "selected_type_id": "character",
            "selected_tier_index": "two",
            "selected_addons": "addChar",
            "files": [{"name": "a.png"}],
            "username": "kit",
            "tos_accepted": "yes",
        })

        snapshot, problems = load_snapshot(state_file)

        assert snapshot.step == Step.TYPE
        assert snapshot.selected_type_id == "character"
        assert snapshot.selected_tier_index == 0
        assert snapshot.selected_addons == []
        assert snapshot.files == []
        assert snapshot.username == "kit"
        assert snapshot.tos_accepted is False
        assert len(problems) == 5

    def test_oversized_file_size_falls_back(self, state_file):
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text(
            '{"' + STORAGE_KEY + '": {"files": [{"name": "a.png", "size": 1e400, "lastModified": 1}], '
            '"username": "kept"}}',
            encoding="utf-8",
        )

        snapshot, problems = load_snapshot(state_file)

        assert snapshot.files == []
        assert snapshot.username == "kept"
        assert len(problems) == 1

    def test_unusable_directory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")

        snapshot, problems = load_snapshot(blocker / "session_state.json")

        assert snapshot is None
        assert len(problems) == 1

    def test_save_failure_raises_quota_exceeded(self, state_file):
        with patch("commission_builder.adapters.persistence.file_store.tempfile.mkstemp",
                   side_effect=OSError("No space left on device")):
            with pytest.raises(QuotaExceeded):
                save_snapshot(SessionSnapshot(), state_file)

    def test_clear(self, state_file):
        save_snapshot(SessionSnapshot(), state_file)
        clear_snapshot(state_file)
        assert not state_file.exists()
        clear_snapshot(state_file)


class TestStateManager:
    def test_round_trip(self, catalog, scenario_state, state_file):
        scenario_state.username = "kit"
        scenario_state.description = "A fox in a hat"
        scenario_state.currency = "EUR"
        scenario_state.tos_accepted = True
        manager = StateManager(state_file)

        assert manager.persist(scenario_state) is True
        restored = StateManager(state_file).restore(catalog)

        assert restored == scenario_state
        assert list(restored.selected_addons) == ["addChar", "itemProp"]
        assert all(f.handle is None for f in restored.files)
        assert [f.kind for f in restored.files] == ["image", "image", "image"]

    def test_fresh_state_when_nothing_stored(self, catalog, state_file):
        state = StateManager(state_file).restore(catalog)
        assert state == SelectionState(currency=catalog.default_currency)

    def test_restore_keeps_valid_fields(self, catalog, state_file):
        write_record(state_file, {
            "step": "details",
            "selected_type_id": "character",
            "selected_sub_id": "bust",
            "selected_tier_index": -3,
            "username": "kit",
        })

        state = StateManager(state_file).restore(catalog)

        assert state.step == Step.DETAILS
        assert state.selected_sub_id == "bust"
        assert state.selected_tier_index == 0
        assert state.username == "kit"

    def test_restore_infinite_quantity(self, catalog, state_file):
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text(
            '{"' + STORAGE_KEY + '": {"selected_type_id": "character", "selected_sub_id": "bust", '
            '"selected_addons": [["itemProp", Infinity]]}}',
            encoding="utf-8",
        )

        state = StateManager(state_file).restore(catalog)

        assert state.selected_addons["itemProp"] == 1

    def test_restore_with_unusable_directory(self, catalog, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")

        state = StateManager(blocker / "session_state.json").restore(catalog)

        assert state == SelectionState(currency=catalog.default_currency)

    def test_restore_from_corrupt_file(self, catalog, state_file):
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text("garbage", encoding="utf-8")

        state = StateManager(state_file).restore(catalog)

        assert state.step == Step.TYPE
        assert state.selected_type_id is None

    def test_persist_failure_is_not_fatal(self, catalog, scenario_state, state_file):
        manager = StateManager(state_file)
        with patch("commission_builder.application.state_manager.save_snapshot",
                   side_effect=QuotaExceeded("quota")):
            result = manager.replace(scenario_state)
            persisted = manager.persist()

        assert result is scenario_state
        assert manager.state is scenario_state
        assert persisted is False
        assert not state_file.exists()

    def test_clear(self, scenario_state, state_file):
        manager = StateManager(state_file)
        manager.persist(scenario_state)
        manager.clear()
        assert not state_file.exists()


class TestSnapshotConversion:
    def test_files_deduplicated_on_restore(self):
        snap = SessionSnapshot(files=[("a.png", 1, 2), ("a.png", 1, 2), ("notes.txt", 3, 4)])
        state = from_snapshot(snap)
        assert [(f.name, f.kind) for f in state.files] == [("a.png", "image"), ("notes.txt", "text")]

    def test_to_snapshot_drops_handles(self, scenario_state):
        scenario_state.files[0].handle = object()
        snap = to_snapshot(scenario_state)
        assert snap.files[0] == ("ref0.png", 1000, 1700000000000)
        assert "handle" not in json.dumps(snap.to_json())


class TestReconcile:
    def test_valid_state_untouched(self, catalog, scenario_state):
        assert reconcile(catalog, scenario_state) == []
        assert scenario_state.selected_sub_id == "bust"

    def test_unknown_type_cleared(self, catalog, scenario_state):
        scenario_state.selected_type_id = "retired"

        repairs = reconcile(catalog, scenario_state)

        assert repairs
        assert scenario_state.selected_type_id is None
        assert scenario_state.selected_sub_id is None
        assert len(scenario_state.selected_addons) == 0
        assert scenario_state.files == []

    def test_coming_soon_type_cleared(self, catalog):
        state = SelectionState(selected_type_id="other", selected_sub_id="custom")
        reconcile(catalog, state)
        assert state.selected_type_id is None
        assert state.selected_sub_id is None

    def test_unknown_sub_type_and_addons(self, catalog, scenario_state):
        scenario_state.selected_sub_id = "torso"
        scenario_state.selected_addons["subBadge"] = True

        reconcile(catalog, scenario_state)

        assert scenario_state.selected_type_id == "character"
        assert scenario_state.selected_sub_id is None
        assert "subBadge" not in scenario_state.selected_addons

    def test_values_normalized(self, catalog, scenario_state):
        scenario_state.selected_addons["itemProp"] = 0
        scenario_state.selected_addons["addChar"] = 1
        scenario_state.selected_tier_index = 9
        scenario_state.selected_style_id = "style_gone"
        scenario_state.currency = "JPY"

        reconcile(catalog, scenario_state)

        assert scenario_state.selected_addons["itemProp"] == 1
        assert scenario_state.selected_addons["addChar"] is True
        assert scenario_state.selected_tier_index == 0
        assert scenario_state.selected_style_id == DEFAULT_STYLE_ID
        assert scenario_state.currency == "USD"
