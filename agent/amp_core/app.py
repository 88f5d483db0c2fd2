"""
AgentApp — the main Tkinter application (the "host editor" process).

Activation, the broadcast loop, and deactivation all run inside Tkinter's
event loop via root.after(). Zero busy-wait loops.

Background threads: ONLY the socket thread of the current transport.
It never touches Tkinter or agent state; it posts edges onto a queue.
"""

import tkinter as tk

from .config import log, safe_print, workspace_key, WorkspaceSettings, SETTINGS_FILE
from .connection import ConnectionManager
from .constants import (
    AGENT_VERSION, BROADCAST_ON_EVENT, EVENT_POLL_MS, SETTING_BROADCAST,
    TICK_INTERVAL_MS, WORKSPACE_POLL_MS,
)
from .message import format_uptime
from .state import AgentContext
from .tracker import EditorStateTracker
from .ui import TkHost
from .workspace import WorkspaceWatcher


class AgentApp:
    """
    Owns the Tk main loop. Schedules everything via root.after():
      _poll_events()     — drains socket edges, runs the state machine  (every 100ms)
      _tick()            — status readout refresh (+ timer broadcast)    (every 1s)
      _poll_workspace()  — detects active document changes               (every 1.5s)
    """

    def __init__(self, folders, settings_file=SETTINGS_FILE):
        self.context = AgentContext()
        self.watcher = WorkspaceWatcher(folders)
        self.settings = WorkspaceSettings(settings_file, workspace_key(self.watcher.workspace_folders()))
        self.host = None
        self.manager = None
        self.tracker = None
        self._root = None

    # ─── Lifecycle ───────────────────────────────────────────

    def activate(self, host):
        """Wire components, read the initial snapshot, connect or prompt."""
        self.host = host
        self.context.init()

        policy = self.settings.get(SETTING_BROADCAST, BROADCAST_ON_EVENT)
        self.manager = ConnectionManager(self.context, host, self.settings, policy=policy)
        self.context.register(self.manager.close)

        self.tracker = EditorStateTracker(
            self.context, self.watcher, on_change=self.manager.on_snapshot_changed,
        )
        self.watcher.poll()                 # silent first scan (no tracker yet)
        self.watcher.attach(self.tracker)
        self.tracker.refresh()
        self.manager.refresh_status()

        log.info("Saved endpoint for %s: %s", self.settings.key, self.manager.endpoint)
        self.manager.connect_saved()

        log.info("v%s activated (workspace=%s, broadcast=%s)",
                 AGENT_VERSION, self.settings.key, self.manager.policy)

    def deactivate(self):
        self.context.teardown()

    def run(self):
        """Start the agent. Blocks on Tk mainloop. Call from main thread."""
        self._root = tk.Tk()
        host = TkHost(self._root)
        host.bind_commands(
            connect=self._command(lambda: self.manager.connect_command()),
            set_url=self._command(lambda: self.manager.set_endpoint()),
            options=self._command(lambda: self.manager.show_options()),
            send_now=self._command(lambda: self.manager.send_now_command()),
            open_folder=self._command(self.open_folder),
            greet=self._command(lambda: self.manager.greet()),
        )

        try:
            self.activate(host)

            self._root.after(EVENT_POLL_MS, self._poll_events)
            self._root.after(TICK_INTERVAL_MS, self._tick)
            self._root.after(WORKSPACE_POLL_MS, self._poll_workspace)
            self._root.protocol("WM_DELETE_WINDOW", self.stop)

            safe_print("amp agent running.\n")
            self._root.mainloop()
        finally:
            self.deactivate()
            try:
                self._root.destroy()
            except tk.TclError:
                pass
            log.info("AgentApp shut down.")

    def stop(self):
        try:
            self._root.quit()
        except Exception:
            pass

    def _command(self, fn):
        # Commands can fire before activation has finished wiring
        def run():
            if self.manager is None:
                return None
            return fn()
        return run

    # ─── Commands ────────────────────────────────────────────

    def open_folder(self):
        folder = self.host.ask_folder()
        if not folder:
            return
        self.watcher.set_folders([folder])
        self.settings.key = workspace_key(self.watcher.workspace_folders())
        log.info("Settings now scoped to %s", self.settings.key)

    # ─── Socket edges (every 100ms) ──────────────────────────

    def _poll_events(self):
        try:
            self.manager.drain()
        except Exception as e:
            log.error("_poll_events error: %s", e, exc_info=True)
        self._root.after(EVENT_POLL_MS, self._poll_events)

    # ─── Tick (every 1s) ─────────────────────────────────────

    def _tick(self):
        try:
            self.manager.on_tick()
            snapshot = self.context.snapshot
            detail = format_uptime(self.context.uptime_seconds)
            if snapshot.file_name:
                detail = f"{snapshot.file_name} · {detail}"
            self.host.set_detail(detail)
        except Exception as e:
            log.error("_tick error: %s", e, exc_info=True)
        self._root.after(TICK_INTERVAL_MS, self._tick)

    # ─── Workspace (every 1.5s) ──────────────────────────────

    def _poll_workspace(self):
        try:
            self.watcher.poll()
        except Exception as e:
            log.error("_poll_workspace error: %s", e, exc_info=True)
        self._root.after(WORKSPACE_POLL_MS, self._poll_workspace)
