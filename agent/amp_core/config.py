"""
Paths, logging setup, per-workspace settings store, safe_print.
"""

import os
import json
import sys
import logging
from pathlib import Path

from .constants import NO_WORKSPACE_KEY


# ─── Paths ───────────────────────────────────────────────────────
# One settings file per user per machine; workspaces are keys inside it.
_FOLDER_NAME = "amp-agent"

if sys.platform == "win32":
    BASE_DIR = Path(os.environ.get("APPDATA", Path.home())) / _FOLDER_NAME
else:
    BASE_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / _FOLDER_NAME

SETTINGS_FILE = BASE_DIR / "settings.json"
LOG_FILE = BASE_DIR / "amp.log"
LOG_MAX_BYTES = 1_000_000

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

log = logging.getLogger("amp")


# ─── Safe print (no crash when there is no console) ──────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

def setup_logging(log_file=LOG_FILE, level=logging.INFO):
    """File log (truncated past LOG_MAX_BYTES) plus a console handler."""
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    try:
        if log_file.exists() and log_file.stat().st_size > LOG_MAX_BYTES:
            log_file.write_text("")
    except OSError:
        pass

    logging.basicConfig(
        filename=str(log_file),
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        encoding="utf-8",
    )

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in log.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(console_handler)
    return log


# ─── Settings (per-workspace key/value) ──────────────────────────

def workspace_key(folders):
    """Settings key for a workspace: absolute path of its first folder."""
    if not folders:
        return NO_WORKSPACE_KEY
    return str(Path(folders[0]).resolve())


class WorkspaceSettings:
    """
    Key/value settings scoped to one workspace, persisted as JSON:

        {"workspaces": {"/abs/path": {"websocketUrl": "ws://..."}}}

    Every update rewrites the file. Unreadable files are treated as empty
    so a corrupt settings file never blocks startup.
    """

    def __init__(self, path=SETTINGS_FILE, key=NO_WORKSPACE_KEY):
        self._path = Path(path)
        self.key = key

    def _load(self):
        if self._path.exists():
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
            except (json.JSONDecodeError, OSError) as e:
                log.warning("Settings unreadable (%s): %s", self._path, e)
        return {"workspaces": {}}

    def get(self, name, default=None):
        data = self._load()
        return data.get("workspaces", {}).get(self.key, {}).get(name, default)

    def update(self, name, value):
        data = self._load()
        scoped = data.setdefault("workspaces", {}).setdefault(self.key, {})
        scoped[name] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        log.info("Setting %s saved for %s", name, self.key)
