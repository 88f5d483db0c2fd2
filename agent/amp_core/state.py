"""
Connection state machine, editor snapshot, and AgentContext.

AgentContext is the single owner of everything that used to be a
process-wide variable: the snapshot, the session start, the connection
state and the status text. All mutations happen on the Tk main thread.
No locks needed.
"""

import enum
import time
from dataclasses import dataclass, field

from .config import log
from .constants import STATUS_DISCONNECTED


class ConnectionState(enum.Enum):
    DISCONNECTED = "disconnected"   # initial, and after every close/error
    CONNECTING = "connecting"       # handshake in flight
    OPEN = "open"
    CLOSED = "closed"               # closed locally, close edge pending

    @property
    def is_active(self) -> bool:
        """True while a connection object is live (opening or open)."""
        return self in (ConnectionState.CONNECTING, ConnectionState.OPEN)


class ConnectionEvent(enum.Enum):
    CONNECT = "connect"     # operator asked to connect
    OPEN = "open"           # handshake completed
    MESSAGE = "message"     # inbound frame
    CLOSE = "close"         # remote or transport closed
    ERROR = "error"         # transport failure
    SHUTDOWN = "shutdown"   # local close (teardown)


def transition(state, event):
    """
    Pure transition function. Returns the next state.

    OPEN is only reachable from CONNECTING, and CONNECT never leaves an
    active state, so two live connections can't coexist.
    """
    if event is ConnectionEvent.CONNECT:
        return state if state.is_active else ConnectionState.CONNECTING
    if event is ConnectionEvent.OPEN:
        return ConnectionState.OPEN if state is ConnectionState.CONNECTING else state
    if event in (ConnectionEvent.CLOSE, ConnectionEvent.ERROR):
        return ConnectionState.DISCONNECTED
    if event is ConnectionEvent.SHUTDOWN:
        return ConnectionState.CLOSED if state.is_active else state
    return state


@dataclass
class EditorSnapshot:
    folder_name: str = ""
    file_name: str = ""
    file_type: str = ""
    session_start: float = field(default_factory=time.monotonic)


@dataclass
class AgentContext:
    # ── Editor ────────────────────────────────────────────────
    snapshot: EditorSnapshot = field(default_factory=EditorSnapshot)

    # ── Connection ────────────────────────────────────────────
    state: ConnectionState = ConnectionState.DISCONNECTED
    status_text: str = STATUS_DISCONNECTED

    # ── Lifecycle ─────────────────────────────────────────────
    active: bool = False
    _releases: list = field(default_factory=list, repr=False)

    @property
    def session_start(self) -> float:
        return self.snapshot.session_start

    @property
    def uptime_seconds(self) -> float:
        """Seconds since activation, on the monotonic clock."""
        return max(0.0, time.monotonic() - self.snapshot.session_start)

    def init(self):
        """Activation: capture the session start once."""
        self.snapshot.session_start = time.monotonic()
        self.active = True
        log.info("Context activated")

    def register(self, release):
        """Register a callable to run on teardown (last in, first out)."""
        self._releases.append(release)

    def teardown(self):
        """Deactivation: run every release callback, newest first."""
        while self._releases:
            release = self._releases.pop()
            try:
                release()
            except Exception as e:
                log.error("Teardown step failed: %s", e, exc_info=True)
        self.active = False
        log.info("Context torn down")
