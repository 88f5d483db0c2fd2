"""
WorkspaceWatcher — the editor event source for the standalone agent.

The "active document" is the most recently modified file under the open
workspace folders. poll() is called from the Tk loop; it walks the folders
(bounded by WORKSPACE_SCAN_LIMIT entries) and fires the tracker's
on_active_document_changed() when the newest file changes.
"""

import os
from pathlib import Path

from .config import log
from .constants import IGNORED_DIRS, WORKSPACE_SCAN_LIMIT


class WorkspaceWatcher:
    def __init__(self, folders=None, scan_limit=WORKSPACE_SCAN_LIMIT):
        self._folders = [str(Path(f).resolve()) for f in (folders or [])]
        self._scan_limit = scan_limit
        self._active_path = None
        self._tracker = None

    def attach(self, tracker):
        self._tracker = tracker

    # ── Surface (read by EditorStateTracker) ──────────────────

    def active_document_path(self):
        return self._active_path

    def workspace_folders(self):
        return list(self._folders)

    # ── Events ────────────────────────────────────────────────

    def set_folders(self, folders):
        """Replace the open folders (e.g. "Open folder...")."""
        self._folders = [str(Path(f).resolve()) for f in folders]
        log.info("Workspace folders: %s", ", ".join(self._folders) or "(none)")
        if self._tracker is not None:
            self._tracker.on_workspace_folders_changed()
        self.poll()

    def poll(self):
        """Rescan; fire a document-changed event if the newest file moved."""
        newest = self.find_newest_file()
        if newest == self._active_path:
            return False
        self._active_path = newest
        if self._tracker is not None:
            self._tracker.on_active_document_changed()
        return True

    def find_newest_file(self):
        newest_path, newest_mtime = None, -1.0
        seen = 0
        for folder in self._folders:
            for root, dirs, files in os.walk(folder):
                dirs[:] = [d for d in dirs if d not in IGNORED_DIRS and not d.startswith(".")]
                for name in files:
                    seen += 1
                    if seen > self._scan_limit:
                        return newest_path
                    path = os.path.join(root, name)
                    try:
                        mtime = os.stat(path).st_mtime
                    except OSError:
                        continue
                    if mtime > newest_mtime:
                        newest_path, newest_mtime = path, mtime
        return newest_path
