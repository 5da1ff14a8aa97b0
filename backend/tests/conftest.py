import os
import sys
import pytest

# Ensure the backend root (containing the `skyhigh` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from skyhigh import create_app, db, socketio
from skyhigh.runtime import get_runtime
from skyhigh.services.rounds import Ledger, RoundEngine
from skyhigh.services.rounds.ledger import BalanceStore


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    INITIAL_BALANCE = 1000.0
    MIN_BET = 10
    MAX_BET = 5000
    DEFAULT_BET = 100
    GROWTH_RATE = 0.05
    PRE_START_DELAY_MS = 3000
    CRASH_RESET_DELAY_MS = 4000
    HISTORY_LIMIT = 20
    ADVISOR_PROVIDER = 'fallback'
    GEMINI_API_KEY = ''


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start=1_700_000_000_000.0):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


class ForcedCrash:
    """Crash-point source returning scripted values; the last one repeats."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


class MemoryBalanceStore(BalanceStore):
    def __init__(self, value=None):
        self.value = value
        self.saves = []

    def load(self, default):
        return default if self.value is None else self.value

    def save(self, balance):
        self.value = balance
        self.saves.append(balance)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import skyhigh.models  # noqa: F401
        db.create_all()
        runtime = get_runtime(application)
        runtime.clock = FakeClock()
        runtime.engine.crash_point = ForcedCrash(2.00)
        yield application
        runtime.shutdown()
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def runtime(flask_app):
    return get_runtime(flask_app)


@pytest.fixture()
def clock(runtime):
    return runtime.clock


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
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def store():
    return MemoryBalanceStore()


@pytest.fixture()
def ledger(store):
    ledger = Ledger(store, initial_balance=1000, min_bet=10, max_bet=5000, default_bet=100)
    ledger.load()
    return ledger


@pytest.fixture()
def engine(ledger):
    return RoundEngine(ledger, crash_point=ForcedCrash(2.00))
