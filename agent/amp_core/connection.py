"""
ConnectionManager — owns the one outbound connection.

Lifecycle (all on the Tk main thread):
  connect()       → CONNECT edge, starts a WebSocketTransport
  drain()         → feeds queued socket edges through handle_event()
  send()          → broadcast the snapshot, only while OPEN
  close()         → SHUTDOWN edge on teardown, joins the socket thread

Every state change goes through state.transition(). Edges tagged with an
older generation than the current transport are dropped.

The host is the editor UI surface:
  show_info(msg), show_error(msg), set_status(text),
  prompt_url(placeholder) -> str | None, pick_option(options) -> str | None
"""

import queue

from .config import log
from .constants import (
    BROADCAST_ON_EVENT, BROADCAST_ON_TIMER, DEFAULT_URL_PLACEHOLDER,
    EVENT_BATCH_MAX, OPTIONS, OPTION_CHANGE_URL, OPTION_RECONNECT,
    OPTION_SHOW_UPTIME, SETTING_URL, STATUS_CONNECTED, STATUS_CONNECTING,
    STATUS_DISCONNECTED,
)
from .errors import AlreadyConnectedWarning, ConfigurationError, TransportError
from .message import BroadcastMessage, format_uptime
from .state import ConnectionEvent, ConnectionState, transition
from .transport import WebSocketTransport

_STATUS_TEXT = {
    ConnectionState.OPEN: STATUS_CONNECTED,
    ConnectionState.CONNECTING: STATUS_CONNECTING,
}


class ConnectionManager:
    def __init__(self, context, host, settings, events=None,
                 transport_factory=None, policy=BROADCAST_ON_EVENT):
        if policy not in (BROADCAST_ON_EVENT, BROADCAST_ON_TIMER):
            log.warning("Unknown broadcast policy %r — using %r", policy, BROADCAST_ON_EVENT)
            policy = BROADCAST_ON_EVENT
        self._ctx = context
        self._host = host
        self._settings = settings
        self._transport_factory = transport_factory or WebSocketTransport
        self._transport = None
        self._generation = 0
        self.events = events if events is not None else queue.Queue()
        self.policy = policy

    # ─── Read-only views ─────────────────────────────────────

    @property
    def state(self):
        return self._ctx.state

    @property
    def endpoint(self):
        """Persisted endpoint, or None when unset, blank or not a string."""
        value = self._settings.get(SETTING_URL)
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip()

    @property
    def has_transport(self):
        return self._transport is not None

    # ─── State machine ───────────────────────────────────────

    def _apply(self, event):
        old = self._ctx.state
        new = transition(old, event)
        if new is not old:
            self._ctx.state = new
            log.info("Connection %s → %s (%s)", old.value, new.value, event.value)
        return new

    def _set_status(self, text):
        self._ctx.status_text = text
        self._host.set_status(text)

    def refresh_status(self):
        """Re-render the status readout from the current state."""
        self._set_status(_STATUS_TEXT.get(self._ctx.state, STATUS_DISCONNECTED))

    # ─── Connect ─────────────────────────────────────────────

    def connect(self, endpoint):
        """
        Start a connection to `endpoint`. Returns True if an attempt started.
        Raises ConfigurationError when the endpoint is empty.
        """
        endpoint = endpoint.strip() if isinstance(endpoint, str) else ""
        if not endpoint:
            raise ConfigurationError()

        if self._ctx.state.is_active:
            log.warning("%s: connect ignored, already %s",
                        AlreadyConnectedWarning.__name__, self._ctx.state.value)
            self._host.show_info("Already connected to WebSocket server")
            return False

        generation = self._generation + 1
        try:
            transport = self._transport_factory(endpoint, generation, self.events)
        except TransportError as e:
            if e.original_error is not None:
                log.error("Cannot connect to %s: %s (%r)", e.url, e, e.original_error)
            else:
                log.error("Cannot connect to %s: %s", e.url, e)
            self._host.show_error(str(e))
            return False

        self._generation = generation
        self._transport = transport
        self._apply(ConnectionEvent.CONNECT)
        self._set_status(STATUS_CONNECTING)
        transport.start()
        return True

    # ─── Edge handling ───────────────────────────────────────

    def drain(self, max_events=EVENT_BATCH_MAX):
        """Handle queued socket edges. Returns how many were handled."""
        handled = 0
        while handled < max_events:
            try:
                generation, event, payload = self.events.get_nowait()
            except queue.Empty:
                break
            handled += 1
            self.handle_event(generation, event, payload)
        return handled

    def handle_event(self, generation, event, payload=None):
        if generation != self._generation or self._transport is None:
            log.debug("Dropping stale %s edge (gen %d, current %d)",
                      event.value, generation, self._generation)
            return

        if event is ConnectionEvent.OPEN:
            if self._apply(event) is ConnectionState.OPEN:
                self._set_status(STATUS_CONNECTED)
                self._host.show_info("Connected to WebSocket server")
                self.send()

        elif event is ConnectionEvent.MESSAGE:
            log.info("Message from server: %.200s", payload)
            self._host.show_info(f"Message from server: {payload}")

        elif event is ConnectionEvent.CLOSE:
            self._apply(event)
            self._transport = None
            self._set_status(STATUS_DISCONNECTED)
            self._host.show_info("Disconnected from WebSocket server")

        elif event is ConnectionEvent.ERROR:
            self._apply(event)
            transport, self._transport = self._transport, None
            transport.close()
            self._set_status(STATUS_DISCONNECTED)
            log.warning("WebSocket error: %s", payload)
            self._host.show_error(f"WebSocket error: {payload}")

    # ─── Broadcast ───────────────────────────────────────────

    def send(self, snapshot=None):
        """Broadcast the snapshot if OPEN. Never raises, never retries."""
        if self._ctx.state is not ConnectionState.OPEN or self._transport is None:
            return False
        message = BroadcastMessage.from_snapshot(
            snapshot or self._ctx.snapshot, self._ctx.uptime_seconds,
        )
        sent = self._transport.send(message.to_json())
        if sent:
            log.debug("Broadcast sent: %s", message.status)
        return sent

    def on_snapshot_changed(self, snapshot):
        """Tracker callback."""
        if self.policy == BROADCAST_ON_EVENT:
            self.send(snapshot)

    def on_tick(self):
        """1-second timer."""
        self.refresh_status()
        if self.policy == BROADCAST_ON_TIMER:
            self.send()

    # ─── Operator commands ───────────────────────────────────

    def connect_saved(self, report_missing=False):
        """
        Connect to the persisted endpoint, prompting for one when it is
        unset or blank. Used by startup, Reconnect and the connect command.
        """
        try:
            return self.connect(self.endpoint)
        except ConfigurationError as e:
            log.warning("No endpoint configured for %s — prompting", self._settings.key)
            if report_missing:
                self._host.show_error(str(e))
            return self.set_endpoint()

    def connect_command(self):
        return self.connect_saved(report_missing=True)

    def set_endpoint(self):
        url = (self._host.prompt_url(DEFAULT_URL_PLACEHOLDER) or "").strip()
        if not url:
            log.warning("Endpoint prompt cancelled or empty — nothing saved")
            self._host.show_error("WebSocket URL not set")
            return False
        self._settings.update(SETTING_URL, url)
        self._host.show_info(f"WebSocket URL set to {url}")
        return self.connect(url)

    def reconnect(self):
        return self.connect_saved()

    def show_uptime(self):
        text = f"Uptime: {format_uptime(self._ctx.uptime_seconds)}"
        self._host.show_info(text)
        return text

    def show_options(self):
        actions = {
            OPTION_RECONNECT: self.reconnect,
            OPTION_CHANGE_URL: self.set_endpoint,
            OPTION_SHOW_UPTIME: self.show_uptime,
        }
        action = actions.get(self._host.pick_option(OPTIONS))
        if action is None:
            return None
        return action()

    def send_now_command(self):
        if self._ctx.state is not ConnectionState.OPEN:
            self._host.show_error("Not connected to WebSocket server")
            return False
        return self.send()

    def greet(self):
        self._host.show_info("Hello World from amp extension!")

    # ─── Teardown ────────────────────────────────────────────

    def close(self):
        """Close any live connection and wait briefly for its thread."""
        transport = self._transport
        if transport is None:
            return
        self._apply(ConnectionEvent.SHUTDOWN)
        self._transport = None
        self._generation += 1       # edges from the closing socket are stale now
        self._ctx.status_text = STATUS_DISCONNECTED
        transport.close(wait=True)
        log.info("Connection closed on teardown")
