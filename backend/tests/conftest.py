import asyncio

import pytest
from fastapi.testclient import TestClient

from paciencia.coordinator import SessionCoordinator
from paciencia.main import create_app
from paciencia.rooms import RoomStore
from paciencia.ws_manager import Connection


class FakeConnection(Connection):
    """Соединение без сокета: запоминает всё, что ему отправили."""

    def __init__(self, connection_id=None):
        super().__init__(ws=None, connection_id=connection_id)
        self.sent = []
        self.open = True
        self.yield_on_send = False

    @property
    def is_open(self):
        return self.open

    async def send(self, payload):
        if self.yield_on_send:
            await asyncio.sleep(0)
        if not self.open:
            return False
        self.sent.append(payload)
        return True

    def types(self):
        return [m["type"] for m in self.sent]

    def of_type(self, msg_type):
        return [m for m in self.sent if m["type"] == msg_type]

    def clear(self):
        self.sent.clear()


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def store():
    return RoomStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def coordinator(store, clock):
    return SessionCoordinator(store, clock=clock)


@pytest.fixture()
def make_conn():
    def _make(connection_id=None):
        return FakeConnection(connection_id)
    return _make


@pytest.fixture()
def api_app(tmp_path):
    # статики нет: /ws и /health без mount
    return create_app(SessionCoordinator(RoomStore()), static_dir=tmp_path / "missing")


@pytest.fixture()
def client(api_app):
    with TestClient(api_app) as test_client:
        yield test_client
