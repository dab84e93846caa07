# src/commission_builder/adapters/uploads/registry.py
"""
Upload Registry - Transient Handles for Reference Files

This module registers uploaded reference files and hands out the transient
handles used to read them back for export. Handles are session-scoped: they
are never persisted, and every handle must be released when its file leaves
the selection or the session ends.

Files that USE this module:
- commission_builder.application.wizard (registers uploads, releases removed files)
- commission_builder.adapters.export.pdf_exporter (reads image bytes through handles)
- tests.test_uploads (unit tests)

Files that this module USES:
- commission_builder.domain.models (FileRef)
"""
from __future__ import annotations

import itertools
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional

from commission_builder.domain.models import FileRef

log = logging.getLogger(__name__)

KIND_IMAGE = "image"
KIND_TEXT = "text"
KIND_PDF = "pdf"
KIND_OTHER = "other"

# Only the "other" commission type takes written briefs
TEXT_UPLOAD_TYPE_ID = "other"


def classify_file(name: str) -> str:
    """
    Classify a file by its name: image, text, pdf or other.

    Args:
        name: File name (only the extension is used)

    Returns:
        One of "image", "text", "pdf", "other"
    """
    mime, _ = mimetypes.guess_type(name)
    if mime and mime.startswith("image/"):
        return KIND_IMAGE
    if mime == "application/pdf":
        return KIND_PDF
    if (mime and mime.startswith("text/")) or name.lower().endswith(".txt"):
        return KIND_TEXT
    return KIND_OTHER


def accepted_kinds(type_id: Optional[str]) -> FrozenSet[str]:
    """File kinds a commission type accepts as references: images and PDFs, plus text for "other"."""
    if type_id == TEXT_UPLOAD_TYPE_ID:
        return frozenset((KIND_IMAGE, KIND_PDF, KIND_TEXT))
    return frozenset((KIND_IMAGE, KIND_PDF))


@dataclass
class UploadHandle:
    """In-memory reference to an uploaded file."""
    handle_id: int
    path: Path
    released: bool = False


class UploadRegistry:
    """Tracks the handles of every file uploaded during the session."""

    def __init__(self):
        self._handles: Dict[int, UploadHandle] = {}
        self._ids = itertools.count(1)

    def register(self, path) -> FileRef:
        """
        Register an uploaded file and return its reference.

        Args:
            path: Path of the uploaded file

        Returns:
            FileRef with size and modification time (ms) taken from the file

        Raises:
            OSError: If the file cannot be stat'ed
        """
        path = Path(path)
        stat = path.stat()
        handle = UploadHandle(handle_id=next(self._ids), path=path)
        self._handles[handle.handle_id] = handle
        log.debug("Registered upload %s as handle %d", path.name, handle.handle_id)
        return FileRef(
            name=path.name,
            size=stat.st_size,
            last_modified=int(stat.st_mtime * 1000),
            kind=classify_file(path.name),
            handle=handle,
        )

    def release(self, ref: FileRef) -> None:
        """Release the handle behind ref (no-op for restored refs without a handle)."""
        handle = ref.handle
        if not isinstance(handle, UploadHandle):
            return
        if self._handles.pop(handle.handle_id, None) is not None:
            log.debug("Released upload handle %d (%s)", handle.handle_id, ref.name)
        handle.released = True
        ref.handle = None

    def release_many(self, refs: Iterable[FileRef]) -> None:
        for ref in refs:
            self.release(ref)

    def release_all(self) -> None:
        """Release every outstanding handle (session end)."""
        count = len(self._handles)
        for handle in self._handles.values():
            handle.released = True
        self._handles.clear()
        if count:
            log.info("Released %d upload handle(s)", count)

    @property
    def open_count(self) -> int:
        return len(self._handles)

    def read_bytes(self, ref: FileRef) -> Optional[bytes]:
        """
        Read the content behind a file reference.

        Returns:
            File content, or None when the ref has no live handle
            (e.g. it was restored from a snapshot)

        Raises:
            OSError: If the file can no longer be read
        """
        handle = ref.handle
        if not isinstance(handle, UploadHandle) or handle.released:
            return None
        return handle.path.read_bytes()
