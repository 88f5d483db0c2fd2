"""
EditorStateTracker — derives the editor snapshot from the host surface.

The surface is anything with:
  active_document_path() -> str | None
  workspace_folders()    -> list[str]   (paths, first one wins)

Both event handlers mutate the snapshot fully, then fire the broadcast
callback. A send never sees a half-updated snapshot.
"""

import re

from .config import log
from .constants import NO_FOLDER_OPEN

_SEPARATORS = re.compile(r"[\\/]")


def split_document_path(path):
    """Return (file_name, file_type) for a document path; ("", "") if absent."""
    if not path:
        return "", ""
    file_name = _SEPARATORS.split(path)[-1]
    file_type = file_name.rsplit(".", 1)[1] if "." in file_name else ""
    return file_name, file_type


def folder_display_name(folder):
    segments = [s for s in _SEPARATORS.split(folder) if s]
    return segments[-1] if segments else folder


class EditorStateTracker:
    """Holds the snapshot in sync with active-document and folder events."""

    def __init__(self, context, surface, on_change=None):
        self._context = context
        self._surface = surface
        self._on_change = on_change

    @property
    def snapshot(self):
        return self._context.snapshot

    def refresh(self):
        """Initial read of both sources, without broadcasting."""
        self._read_active_document()
        self._read_workspace_folders()

    # ── Event handlers (called by the editor event source) ────

    def on_active_document_changed(self):
        self._read_active_document()
        log.info("Active document: %s", self.snapshot.file_name or "(none)")
        self._notify()

    def on_workspace_folders_changed(self):
        self._read_workspace_folders()
        log.info("Workspace folder: %s", self.snapshot.folder_name)
        self._notify()

    # ── Internals ─────────────────────────────────────────────

    def _read_active_document(self):
        file_name, file_type = split_document_path(self._surface.active_document_path())
        self.snapshot.file_name = file_name
        self.snapshot.file_type = file_type

    def _read_workspace_folders(self):
        folders = self._surface.workspace_folders()
        if folders:
            self.snapshot.folder_name = folder_display_name(folders[0])
        else:
            self.snapshot.folder_name = NO_FOLDER_OPEN

    def _notify(self):
        if self._on_change is not None:
            self._on_change(self.snapshot)
