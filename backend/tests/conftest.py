import fnmatch
import os
from datetime import datetime

import pytest

# Configure before tablebook builds its module-level engine/redis client
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)

from sqlalchemy.orm import sessionmaker  # noqa: E402

from tablebook.clock import FixedClock  # noqa: E402
from tablebook.database import build_engine  # noqa: E402
from tablebook.models import Base  # noqa: E402
from tablebook.schemas.booking_settings import BookingSettingsWrite  # noqa: E402
from tablebook.services import settings_service  # noqa: E402
from tablebook.services.slots.config import BookingConfig  # noqa: E402

# Saturday
NOW = datetime(2026, 10, 17, 12, 0)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'tablebook.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def config():
    return BookingConfig(horizon_days=30)


@pytest.fixture
def configure(db, clock, config):
    """Create/replace booking settings of a branch through the service."""
    def _configure(branch_id=1, **overrides):
        values = {
            "open_time": "09:00",
            "close_time": "22:00",
            "interval_minutes": 30,
            "max_seats_per_slot": 40,
            "max_tables_per_slot": 12,
        }
        values.update(overrides)
        return settings_service.configure_settings(
            db, branch_id, BookingSettingsWrite(**values), clock.now(), config=config
        )
    return _configure


class FakePipeline:
    def __init__(self, redis):
        self.redis = redis
        self.ops = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self
        return queue

    def execute(self):
        return [getattr(self.redis, name)(*args, **kwargs) for name, args, kwargs in self.ops]


class FakeRedis:
    """In-memory stand-in for the handful of Redis commands the app uses."""

    def __init__(self):
        self.data = {}
        self.ttl = {}

    def pipeline(self):
        return FakePipeline(self)

    def hset(self, key, mapping):
        self.data.setdefault(key, {}).update(mapping)
        return len(mapping)

    def hgetall(self, key):
        return dict(self.data.get(key, {}))

    def expire(self, key, seconds):
        self.ttl[key] = seconds
        return key in self.data

    def keys(self, pattern):
        return [key for key in self.data if fnmatch.fnmatch(key, pattern)]

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                deleted += 1
            self.ttl.pop(key, None)
        return deleted

    def rpush(self, key, value):
        self.data.setdefault(key, []).append(value)
        return len(self.data[key])

    def ping(self):
        return True


@pytest.fixture
def fake_redis():
    return FakeRedis()
