import os
import random
import sys
import pytest

# Ensure the backend root (containing the `tankbot` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tankbot import create_app, socketio
from tankbot.services.game.session import GameSession
from tankbot.services.game.settings import GameSettings


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    BOARD_SIZE = 20
    MAX_NAME_LEN = 12
    STARTING_HEALTH = 3
    STARTING_POINTS = 1
    MIN_PLAYERS = 2
    COMMAND_PREFIX = '!game'


class FakeTimer:
    """Stands in for TickTimer; records start/cancel instead of sleeping."""

    def __init__(self, session):
        self.session = session
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        application.extensions['tankbot'].shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def timers():
    created = []

    def factory(session):
        timer = FakeTimer(session)
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture()
def session(timers):
    s = GameSession(channel_id='test', settings=GameSettings(), rng=random.Random(1234), timer_factory=timers)
    s.create()
    return s
