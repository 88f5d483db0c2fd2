"""
Constants, intervals, status labels, activity phrases and theme colors.
"""

AGENT_VERSION = "0.3.0"

# ─── Scheduling ──────────────────────────────────────────────────
TICK_INTERVAL_MS = 1000        # Status refresh (and timer-policy broadcast)
EVENT_POLL_MS = 100            # Drain socket edge events onto the main thread
EVENT_BATCH_MAX = 200          # Max edge events handled per drain
WORKSPACE_POLL_MS = 1500       # Look for a newly active document
WORKSPACE_SCAN_LIMIT = 5000    # Max directory entries walked per scan
CLOSE_JOIN_TIMEOUT_SEC = 2.0   # How long teardown waits for the socket threads
SEND_QUEUE_MAX = 32            # Outbound frames buffered for the writer thread

# ─── Settings ────────────────────────────────────────────────────
SETTING_URL = "websocketUrl"
SETTING_BROADCAST = "broadcast"
BROADCAST_ON_EVENT = "event"   # Send from tracker callbacks (default)
BROADCAST_ON_TIMER = "timer"   # Send on every tick instead
NO_WORKSPACE_KEY = "<no-folder>"
DEFAULT_URL_PLACEHOLDER = "ws://localhost:8080"

# ─── Editor snapshot ─────────────────────────────────────────────
NO_FOLDER_OPEN = "No folder is currently open"

# Directories never considered when looking for the active document
IGNORED_DIRS = frozenset({
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    "dist",
    "build",
})

# ─── Status readout ──────────────────────────────────────────────
STATUS_DISCONNECTED = "Not connected"
STATUS_CONNECTING = "Connecting..."
STATUS_CONNECTED = "Connected"

# ─── Options menu ────────────────────────────────────────────────
OPTION_RECONNECT = "Reconnect"
OPTION_CHANGE_URL = "Change URL"
OPTION_SHOW_UPTIME = "Show uptime"
OPTIONS = [OPTION_RECONNECT, OPTION_CHANGE_URL, OPTION_SHOW_UPTIME]

# ─── Activity captions (prefix of the "status" field) ────────────
ACTIVITY_PHRASES = (
    "Working on",
    "Editing",
    "Debugging",
    "Hacking away at",
    "Refactoring",
    "Polishing",
    "Deep in",
)

# ─── Theme (status window) ───────────────────────────────────────
THEME = {
    "bg_dark":       "#0f172a",   # window bg
    "bg_card":       "#1e293b",   # status bar bg
    "bg_hover":      "#334155",   # hover
    "primary":       "#3b82f6",   # button
    "primary_hover": "#2563eb",   # button hover
    "text_primary":  "#f1f5f9",   # white text
    "text_muted":    "#94a3b8",   # muted text
    "success":       "#22c55e",   # green
    "error":         "#ef4444",   # red
    "warning":       "#fbbf24",   # yellow
}

TOAST_DURATION_MS = 5000
