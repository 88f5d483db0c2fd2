"""
WebSocketTransport — one outbound socket on a daemon thread.

The socket thread NEVER touches agent state. Each edge callback only posts
(generation, ConnectionEvent, payload) onto the shared queue; the Tk main
thread drains it. The generation tags every event with the transport it came
from, so late edges from an abandoned socket can be told apart.

Outbound frames go through a small outbox drained by a writer thread, so
send() never waits on the network from the Tk main thread.
"""

import queue
import threading
from urllib.parse import urlparse

import websocket

from .config import log
from .constants import CLOSE_JOIN_TIMEOUT_SEC, SEND_QUEUE_MAX
from .errors import TransportError
from .state import ConnectionEvent

_SCHEMES = ("ws", "wss")
_STOP = object()


class WebSocketTransport:
    def __init__(self, url, generation, events):
        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise TransportError(f"Invalid WebSocket URL: {url}", url=url, error=e)
        if parsed.scheme not in _SCHEMES or not parsed.netloc:
            raise TransportError(f"Invalid WebSocket URL: {url}", url=url)

        self.url = url
        self.generation = generation
        self._events = events
        self._outbox = queue.Queue(maxsize=SEND_QUEUE_MAX)
        self._closing = False
        self._thread = None
        self._writer = None
        self._app = websocket.WebSocketApp(
            url,
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
        )

    # ── Edge callbacks (socket thread) ────────────────────────

    def _post(self, event, payload=None):
        self._events.put((self.generation, event, payload))

    def _on_open(self, ws):
        self._post(ConnectionEvent.OPEN)

    def _on_message(self, ws, message):
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        self._post(ConnectionEvent.MESSAGE, message)

    def _on_error(self, ws, error):
        self._post(ConnectionEvent.ERROR, str(error) or error.__class__.__name__)

    def _on_close(self, ws, close_status_code, close_msg):
        self._post(ConnectionEvent.CLOSE, close_status_code)

    def _run(self):
        try:
            self._app.run_forever()
        except Exception as e:
            log.error("Socket thread crashed (gen %d): %s", self.generation, e, exc_info=True)
            self._post(ConnectionEvent.ERROR, str(e))

    # ── Writer (outbox thread) ────────────────────────────────

    def _write_loop(self):
        while True:
            text = self._outbox.get()
            if text is _STOP:
                break
            self._write(text)

    def _write(self, text):
        """Hand one frame to the socket. Failures surface via the error/close edges."""
        try:
            self._app.send(text)
            return True
        except (websocket.WebSocketException, OSError) as e:
            log.warning("Send failed (gen %d): %s", self.generation, e)
            return False

    # ── Main-thread API ───────────────────────────────────────

    def start(self):
        """Open the connection in the background. Returns immediately."""
        self._thread = threading.Thread(
            target=self._run, name=f"ws-{self.generation}", daemon=True,
        )
        self._writer = threading.Thread(
            target=self._write_loop, name=f"ws-{self.generation}-writer", daemon=True,
        )
        self._thread.start()
        self._writer.start()
        log.info("Connecting to %s (gen %d)", self.url, self.generation)

    def send(self, text):
        """Queue a frame without blocking. Returns False if closing or the outbox is full."""
        if self._closing:
            return False
        try:
            self._outbox.put_nowait(text)
            return True
        except queue.Full:
            log.warning("Outbox full (gen %d) — dropping broadcast", self.generation)
            return False

    def close(self, wait=False):
        """Close the socket; optionally wait for its threads to finish."""
        self._closing = True
        self._stop_writer()
        try:
            self._app.close()
        except (websocket.WebSocketException, OSError) as e:
            log.warning("Close failed (gen %d): %s", self.generation, e)
        if not wait:
            return
        for thread in (self._writer, self._thread):
            if thread is None or thread is threading.current_thread():
                continue
            thread.join(timeout=CLOSE_JOIN_TIMEOUT_SEC)
            if thread.is_alive():
                log.warning("%s still alive after close", thread.name)

    def _stop_writer(self):
        # Unsent frames are dropped; send() refuses new ones once closing
        while True:
            try:
                self._outbox.get_nowait()
            except queue.Empty:
                break
        self._outbox.put_nowait(_STOP)
