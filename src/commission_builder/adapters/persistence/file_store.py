# src/commission_builder/adapters/persistence/file_store.py
"""
File Store - Session Snapshot Persistence

This module persists the in-progress order as a JSON key-value file. The
snapshot lives under one fixed key so the file can be shared with other
records. Only descriptive data is stored: uploaded files are reduced to their
(name, size, last_modified) triple, never their content or handles.

Restoring is forgiving: every field is parsed on its own and a malformed
field falls back to its default without discarding the others.

Files that USE this module:
- commission_builder.application.state_manager (StateManager persists and restores through it)
- tests.test_state_manager (unit tests)

Files that this module USES:
- commission_builder.config (settings for the state file path)
- commission_builder.domain.errors (QuotaExceeded)
- commission_builder.domain.models (Step, default style and currency)
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from commission_builder.config import settings
from commission_builder.domain.errors import QuotaExceeded
from commission_builder.domain.models import BASE_CURRENCY, DEFAULT_STYLE_ID, Step

log = logging.getLogger(__name__)

STORAGE_KEY = "commission_builder_v2"


@dataclass
class SessionSnapshot:
    step: Step = Step.TYPE
    selected_type_id: Optional[str] = None
    selected_sub_id: Optional[str] = None
    selected_tier_index: int = 0
    selected_style_id: str = DEFAULT_STYLE_ID
    selected_addons: List[Tuple[str, Any]] = field(default_factory=list)
    files: List[Tuple[str, int, int]] = field(default_factory=list)
    username: str = ""
    description: str = ""
    currency: str = BASE_CURRENCY
    tos_accepted: bool = False
    ts: Optional[datetime] = None  # UTC

    def to_json(self) -> dict:
        """
        Convert SessionSnapshot to a JSON-serializable dictionary.

        Returns:
            Dictionary with the step as its string value, add-ons as [id, value]
            pairs, files as {name, size, lastModified} and an ISO timestamp
        """
        return {
            "step": self.step.value,
            "selected_type_id": self.selected_type_id,
            "selected_sub_id": self.selected_sub_id,
            "selected_tier_index": self.selected_tier_index,
            "selected_style_id": self.selected_style_id,
            "selected_addons": [[addon_id, value] for addon_id, value in self.selected_addons],
            "files": [
                {"name": name, "size": size, "lastModified": last_modified}
                for name, size, last_modified in self.files
            ],
            "username": self.username,
            "description": self.description,
            "currency": self.currency,
            "tos_accepted": self.tos_accepted,
            "ts": (self.ts or datetime.now(timezone.utc)).isoformat(),
        }

    @staticmethod
    def from_json(data: dict) -> Tuple["SessionSnapshot", List[str]]:
        """
        Create SessionSnapshot from a JSON dictionary, field by field.

        Args:
            data: Dictionary as written by to_json (possibly by an older version)

        Returns:
            Tuple of (snapshot, problems) where problems names every field that
            was malformed and replaced by its default
        """
        defaults = SessionSnapshot()
        problems: List[str] = []

        def _field(key: str, parser: Callable[[Any], Any], default: Any) -> Any:
            if key not in data or data[key] is None:
                return default
            try:
                return parser(data[key])
            except (KeyError, ValueError, TypeError, OverflowError) as e:
                problems.append(f"{key}: {e}")
                return default

        ts_raw = data.get("ts")
        ts = None
        if isinstance(ts_raw, str):
            try:
                ts = datetime.fromisoformat(ts_raw.replace("Z", "+00:00")).astimezone(timezone.utc)
            except ValueError:
                problems.append(f"ts: invalid timestamp {ts_raw!r}")

        snapshot = SessionSnapshot(
            step=_field("step", Step, defaults.step),
            selected_type_id=_field("selected_type_id", _parse_id, None),
            selected_sub_id=_field("selected_sub_id", _parse_id, None),
            selected_tier_index=_field("selected_tier_index", _parse_index, 0),
            selected_style_id=_field("selected_style_id", _parse_id, DEFAULT_STYLE_ID),
            selected_addons=_field("selected_addons", _parse_addons, []),
            files=_field("files", _parse_files, []),
            username=_field("username", _parse_text, ""),
            description=_field("description", _parse_text, ""),
            currency=_field("currency", _parse_id, BASE_CURRENCY),
            tos_accepted=_field("tos_accepted", _parse_bool, False),
            ts=ts,
        )
        return snapshot, problems


def _parse_id(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise TypeError(f"expected a non-empty string, got {value!r}")
    return value


def _parse_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _parse_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")
    return value


def _parse_index(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"index must not be negative, got {value}")
    return value


def _parse_addons(value: Any) -> List[Tuple[str, Any]]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list of [id, value] pairs, got {value!r}")
    pairs = []
    for item in value:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValueError(f"malformed add-on entry {item!r}")
        addon_id, selection = item
        if not isinstance(addon_id, str):
            raise TypeError(f"add-on id must be a string, got {addon_id!r}")
        if not isinstance(selection, (bool, int, float)):
            raise TypeError(f"add-on value must be a flag or count, got {selection!r}")
        pairs.append((addon_id, selection))
    return pairs


def _parse_files(value: Any) -> List[Tuple[str, int, int]]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list of files, got {value!r}")
    files = []
    for item in value:
        files.append((str(item["name"]), int(item["size"]), int(item["lastModified"])))
    return files


def _state_path(path: Optional[Path] = None) -> Path:
    """
    Get path to state file and ensure directory exists.

    Returns:
        Path object pointing to state file
    """
    p = Path(path) if path is not None else settings.state_file
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def save_snapshot(snap: SessionSnapshot, path: Optional[Path] = None) -> None:
    """
    Save the session snapshot under STORAGE_KEY using an atomic write.

    Args:
        snap: SessionSnapshot instance to save
        path: Optional state file (defaults to settings.state_file)

    Raises:
        QuotaExceeded: If the file cannot be written (disk full, permissions...)
    """
    try:
        p = _state_path(path)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json.tmp", dir=str(p.parent), text=True)
    except OSError as e:
        raise QuotaExceeded(f"Failed to prepare state file: {e}") from e

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump({STORAGE_KEY: snap.to_json()}, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, str(p))
    except (OSError, TypeError, ValueError) as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise QuotaExceeded(f"Failed to save state file: {e}") from e


def load_snapshot(path: Optional[Path] = None) -> Tuple[Optional[SessionSnapshot], List[str]]:
    """
    Load the session snapshot.

    A file that is not valid JSON is backed up next to the original with a
    .corrupt suffix and removed, so the next save starts clean.

    Args:
        path: Optional state file (defaults to settings.state_file)

    Returns:
        Tuple of (snapshot or None when nothing usable is stored, problems)
    """
    try:
        p = _state_path(path)
    except OSError as e:
        log.error("State file location is not usable: %s", e)
        return None, [f"snapshot: {e}"]
    if not p.exists():
        return None, []

    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        backup_path = p.with_suffix(".json.corrupt")
        try:
            shutil.copy2(p, backup_path)
            p.unlink()
            log.warning("State file corrupted (JSON decode error), backed up to %s: %s", backup_path, e)
        except OSError as backup_error:
            log.error("Failed to backup corrupt state file: %s", backup_error)
        return None, [f"snapshot: {e}"]
    except OSError as e:
        log.error("Unexpected error reading state file: %s", e)
        return None, [f"snapshot: {e}"]

    record = data.get(STORAGE_KEY) if isinstance(data, dict) else None
    if not isinstance(record, dict):
        return None, [] if record is None else [f"snapshot: expected an object, got {type(record).__name__}"]

    return SessionSnapshot.from_json(record)


def clear_snapshot(path: Optional[Path] = None) -> None:
    """Remove the stored snapshot (no-op when nothing is stored)."""
    p = _state_path(path)
    try:
        p.unlink()
    except FileNotFoundError:
        pass
