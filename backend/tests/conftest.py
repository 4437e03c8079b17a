import os
import sys
import pytest

# Ensure the backend root (containing the `sharedtimer` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from sharedtimer import create_app, get_services
from helpers import FakeClock, TestConfig, make_sio_client


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def config_class():
    return TestConfig


@pytest.fixture()
def flask_app(config_class, clock):
    application = create_app(config_class, clock=clock)
    with application.app_context():
        yield application
    services = get_services(application)
    services.reaper.stop()
    for record in services.registry.records():
        services.watcher.cancel(record.id)


@pytest.fixture()
def services(flask_app):
    return get_services(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = make_sio_client(flask_app)
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def timer_id(services):
    return services.registry.create()
