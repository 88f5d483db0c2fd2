import queue

import pytest

from amp_core import message
from amp_core.config import WorkspaceSettings
from amp_core.connection import ConnectionManager
from amp_core.state import AgentContext, ConnectionEvent


class FakeHost:
    """Records every notification, status change and prompt."""

    def __init__(self, url_answer=None, option_answer=None):
        self.infos = []
        self.errors = []
        self.statuses = []
        self.prompts = 0
        self.url_answer = url_answer
        self.option_answer = option_answer

    def show_info(self, msg):
        self.infos.append(msg)

    def show_error(self, msg):
        self.errors.append(msg)

    def set_status(self, text):
        self.statuses.append(text)

    def prompt_url(self, placeholder):
        self.prompts += 1
        return self.url_answer

    def pick_option(self, options):
        return self.option_answer


class FakeTransport:
    """Stands in for WebSocketTransport; edges are emitted by the test."""

    def __init__(self, url, generation, events):
        self.url = url
        self.generation = generation
        self.events = events
        self.started = False
        self.closed = False
        self.close_waited = False
        self.sent = []
        self.send_ok = True

    def start(self):
        self.started = True

    def send(self, text):
        if self.send_ok:
            self.sent.append(text)
        return self.send_ok

    def close(self, wait=False):
        self.closed = True
        self.close_waited = wait

    def emit(self, event, payload=None):
        self.events.put((self.generation, event, payload))


class TransportFactory:
    def __init__(self):
        self.created = []

    def __call__(self, url, generation, events):
        transport = FakeTransport(url, generation, events)
        self.created.append(transport)
        return transport

    @property
    def last(self):
        return self.created[-1]


class FakeSurface:
    def __init__(self, path=None, folders=None):
        self.path = path
        self.folders = folders or []

    def active_document_path(self):
        return self.path

    def workspace_folders(self):
        return list(self.folders)


@pytest.fixture
def fixed_timezone(monkeypatch):
    monkeypatch.setattr(message, "local_timezone_name", lambda: "Europe/Berlin")
    return "Europe/Berlin"


@pytest.fixture
def context():
    ctx = AgentContext()
    ctx.init()
    return ctx


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def settings(tmp_path):
    return WorkspaceSettings(tmp_path / "settings.json", key="/work/project")


@pytest.fixture
def factory():
    return TransportFactory()


@pytest.fixture
def manager(context, host, settings, factory, fixed_timezone):
    return ConnectionManager(context, host, settings, events=queue.Queue(), transport_factory=factory)


@pytest.fixture
def open_manager(manager, factory):
    """Manager with an OPEN connection to ws://listener:8080."""
    manager.connect("ws://listener:8080")
    factory.last.emit(ConnectionEvent.OPEN)
    manager.drain()
    return manager
