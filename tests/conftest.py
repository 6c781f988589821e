import random

import pytest

from models.draft import DraftConfig
from services.draft_engine import DraftEngine


class FakeStore:
    """In-memory stand-in for PreferencesDBManager"""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.saves = []

    def load(self, key, default=None):
        return self.data.get(key, default)

    def save(self, key, value):
        self.data[key] = value
        self.saves.append((key, value))
        return True


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def clock():
    return FakeClock(now=1000.0)


@pytest.fixture
def make_engine(store, clock):
    def _make(players=None, seed=7, config=None):
        if players is not None:
            store.data["players"] = list(players)
        return DraftEngine(
            store,
            config=config or DraftConfig(),
            rng=random.Random(seed),
            clock=clock,
        )

    return _make


@pytest.fixture
def recorder():
    events = []

    def listener(event, payload):
        events.append((event, payload))

    listener.events = events
    return listener


@pytest.fixture
def run_draft(clock):
    """Tick an engine until its draft is finished"""

    def _run(engine, step=50, limit=20000):
        for _ in range(limit):
            if not engine.is_drafting:
                return
            clock.advance(step)
            engine.tick()
        raise AssertionError("draft did not finish")

    return _run
