import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key')

import datetime
import threading
import uuid

import pytest

from config import Config
from models import db, User
from userqr import create_app
from userqr.errors import FetchError, RecordNotFound, WriteError


class TestingConfig(Config):
    TESTING = True
    PUBLIC_BASE_URL = 'http://qr.test'
    BULK_CREATE_WORKERS = 4
    DETACHED_WRITES = False


@pytest.fixture
def app(tmp_path):
    # file database so worker threads get their own connections
    config = type('Config', (TestingConfig,), {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
    })
    app = create_app(config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.app_context():
        yield app.test_client()


def user_fields(**overrides):
    fields = {
        'name': 'Alice Smith',
        'email': 'alice@example.com',
        'phone': '5550001111',
        'address': '1 Main St',
        'gender': 'female',
        'dob': '1990-01-01',
        'occupation': 'Teacher',
        'interests': ['music'],
        'newsletter': False,
        'country': 'US',
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def make_user(app):
    """Insert a user straight into the database."""
    def _make(**overrides):
        u = User(**user_fields(**overrides))
        db.session.add(u)
        db.session.commit()
        return u
    return _make


def fresh(user_id):
    """Reload a user, discarding anything cached by the test's session."""
    db.session.rollback()
    return db.session.get(User, user_id)


class FakeStore:
    """In-memory record store with call recording and switchable failures."""

    def __init__(self, users=None, fail_fetch=False, fail_update=False, fail_creates=()):
        self.users = list(users or [])
        self.calls = []
        self.fail_fetch = fail_fetch
        self.fail_update = fail_update
        self.fail_creates = set(fail_creates)
        self._lock = threading.Lock()
        self._creates = 0

    def create(self, fields):
        with self._lock:
            self.calls.append(('create', dict(fields)))
            self._creates += 1
            if self._creates in self.fail_creates:
                raise WriteError('insert rejected')
            u = User(**fields)
            u.id = str(uuid.uuid4())
            u.created_at = datetime.datetime.utcnow()
            u.no_of_times_scanned = 0
            self.users.insert(0, u)
            return u

    def update(self, user_id, patch):
        with self._lock:
            self.calls.append(('update', user_id, dict(patch)))
            if self.fail_update:
                raise WriteError('update rejected')
            u = self._find(user_id)
            for k, v in patch.items():
                setattr(u, k, v)

    def fetch_all(self):
        if self.fail_fetch:
            raise FetchError('store unreachable')
        return list(self.users)

    def fetch_one(self, user_id):
        return self._find(user_id)

    def _find(self, user_id):
        for u in self.users:
            if u.id == user_id:
                return u
        raise RecordNotFound(user_id)

    def calls_of(self, kind):
        return [c for c in self.calls if c[0] == kind]


def stored_user(**overrides):
    """Transient user for the fake store / pipeline tests."""
    scans = overrides.pop('no_of_times_scanned', 0)
    u = User(**user_fields(**overrides))
    u.id = overrides.get('id') or str(uuid.uuid4())
    u.no_of_times_scanned = scans
    return u
