"""Shared test helpers for the timer server."""

import os

from sharedtimer import socketio


class TestConfig:
    __test__ = False
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['http://localhost:5173']
    SOCKETIO_NAMESPACE = '/'
    TIMER_ID_STYLE = 'readable'
    WATCHER_INTERVAL_SEC = 1.0
    INACTIVITY_TIMEOUT_SEC = 1800
    CLEANUP_INTERVAL_SEC = 300
    ABSOLUTE_TIMEOUT_FACTOR = 4


class FakeClock:
    """Millisecond clock that only moves when a test says so."""

    def __init__(self, start_ms=1_700_000_000_000):
        self.ms = start_ms

    def now(self):
        return self.ms

    def advance(self, seconds=0, ms=0):
        self.ms += int(seconds * 1000) + ms


def make_sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    # Drop the 'connected' greeting
    test_client.get_received()
    return test_client


def events(received, name=None):
    """Pull (name, payload) pairs from a test client's received packets."""
    out = []
    for pkt in received:
        if name is not None and pkt['name'] != name:
            continue
        args = pkt.get('args') or [None]
        out.append((pkt['name'], args[0]))
    return out
