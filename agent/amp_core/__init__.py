"""
amp_core — Editor Presence Agent v0.3
=====================================
Architecture: Tkinter main-thread event loop. Zero busy-wait.

  constants.py    → Version, intervals, status labels, phrases, theme
  config.py       → Paths, logging, per-workspace settings, safe_print
  errors.py       → ConfigurationError, TransportError, AlreadyConnectedWarning
  state.py        → ConnectionState machine, EditorSnapshot, AgentContext
  tracker.py      → EditorStateTracker (file/folder snapshot)
  message.py      → BroadcastMessage (wire payload + uptime/clock/caption)
  transport.py    → WebSocketTransport (websocket-client → queue, bg thread)
  connection.py   → ConnectionManager (lifecycle, broadcast, commands)
  workspace.py    → WorkspaceWatcher (active document / folder events)
  ui.py           → TkHost (status readout, prompts, options, toasts)
  app.py          → AgentApp (Tk main loop, root.after scheduling)
  runner.py       → main() + auto-restart wrapper
"""
