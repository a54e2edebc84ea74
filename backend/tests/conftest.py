import os
import sys
from collections import defaultdict

import pytest

# Ensure the backend root (containing the `livematch` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from livematch import create_app, get_hub, socketio
from livematch.services import LiveMatchHub


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    INITIAL_COINS = 1000
    COST_PER_PLAY = 20
    FRONTEND_URL = 'http://frontend.test'
    TOKEN_LENGTH = 8
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


class RecordingTransport:
    """Stands in for Socket.IO: tracks rooms and records what each sid would receive."""

    def __init__(self):
        self.rooms = defaultdict(set)
        self.sent = []
        self.inbox = defaultdict(list)

    def enter(self, sid, channel):
        self.rooms[channel].add(sid)

    def exit(self, sid, channel):
        self.rooms[channel].discard(sid)

    def send(self, event, payload, to):
        self.sent.append((event, payload, to))
        recipients = self.rooms[to] if to in self.rooms else {to}
        for sid in recipients:
            self.inbox[sid].append((event, payload))

    def events_for(self, sid, name=None):
        return [p for e, p in self.inbox[sid] if name is None or e == name]


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def hub(transport):
    return LiveMatchHub.from_config(
        {'INITIAL_COINS': 1000, 'COST_PER_PLAY': 20, 'FRONTEND_URL': 'http://frontend.test'},
        transport=transport,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def app_hub(flask_app):
    return get_hub(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        # Drop anything sent during the handshake
        test_client.get_received()
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()
