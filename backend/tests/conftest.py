import os
import random
import sys
import pytest

# Ensure the backend root (containing the `teamroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from teamroom import create_app, db, socketio
from teamroom.services.room import RoomManager


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ROOM_CAPACITY = 10
    TRAITOR_COUNT = 4
    RESET_DELAY_SEC = 30
    GAME_LOG_CAP = 100
    RECENT_LOGS_LIMIT = 10
    RANDOM_SEED = 1234
    QUEUE_DURING_GAME = False


class ManualScheduler:
    """Stands in for ResetScheduler; timers only fire when a test says so."""

    def __init__(self):
        self.timers = {}

    def schedule(self, key, delay, callback):
        if key in self.timers:
            return False
        self.timers[key] = (delay, callback)
        return True

    def cancel(self, key):
        return self.timers.pop(key, None) is not None

    def cancel_all(self):
        self.timers.clear()

    def pending(self):
        return sorted(self.timers)

    def fire(self, key=None):
        if key is None:
            key = min(self.timers)
        _delay, callback = self.timers.pop(key)
        return callback(key)


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def manager(scheduler):
    room_manager = RoomManager(rng=random.Random(7), scheduler=scheduler)
    yield room_manager
    room_manager.shutdown()


@pytest.fixture()
def join_many():
    def _join_many(room_manager, count, prefix='P', start=1):
        return [room_manager.join(f"{prefix}{i}") for i in range(start, start + count)]
    return _join_many


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        db.create_all()
        yield application
        application.extensions['room_manager'].shutdown()
        db.session.remove()
        db.drop_all()


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
