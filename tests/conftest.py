"""Shared fixtures for Passguard tests"""
import pytest

from passguard.app import create_app
from passguard.extensions import db
from passguard.services.auth_service import AuthService
from passguard.services.policy_service import PasswordPolicy

T0 = 1700000000
USER_PASSWORD = 'UserPass123'
ADMIN_PASSWORD = 'AdminPass123'


class FakeClock:
    """Settable epoch clock"""

    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


# In-memory stand-ins for the SQLAlchemy-backed collaborators

class MemoryStore:
    def commit(self):
        pass


class MemoryAccounts(MemoryStore):
    def __init__(self, ids=()):
        self.ids = list(ids)

    def all_ids(self):
        return list(self.ids)

    def get(self, account_id):
        return account_id if account_id in self.ids else None

    def exists(self, account_id):
        return account_id in self.ids


class MemoryMeta(MemoryStore):
    def __init__(self):
        self.values = {}

    def get(self, account_id, key):
        return self.values.get((account_id, key))

    def set(self, account_id, key, value):
        self.values[(account_id, key)] = str(value)

    def add(self, account_id, key, value):
        if self.get(account_id, key) is not None:
            return False
        self.set(account_id, key, value)
        return True


class MemoryOptions(MemoryStore):
    def __init__(self):
        self.values = {}

    def get(self, name):
        return self.values.get(name)

    def set(self, name, value):
        self.values[name] = value

    def add(self, name, value):
        if name in self.values:
            return False
        self.values[name] = value
        return True


class MemoryHistory(MemoryStore):
    def __init__(self):
        self.entries = {}

    def list(self, account_id):
        return list(self.entries.get(account_id, []))

    def append(self, account_id, password_hash):
        self.entries.setdefault(account_id, []).append(password_hash)

    def trim(self, account_id, keep):
        entries = self.entries.get(account_id, [])
        removed = max(len(entries) - keep, 0)
        self.entries[account_id] = entries[removed:]
        return removed


class MemorySessions(MemoryStore):
    def __init__(self, ids=()):
        self.active = set(ids)

    def destroy_all(self):
        count = len(self.active)
        self.active.clear()
        return count


class MemoryAudit(MemoryStore):
    def __init__(self):
        self.records = []

    def record(self, action, actor_id=None, details=None):
        self.records.append((action, actor_id, details))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_policy(clock):
    """Policy wired to in-memory collaborators with accounts 1, 2 and 3"""
    ids = (1, 2, 3)
    return PasswordPolicy(
        accounts=MemoryAccounts(ids),
        meta=MemoryMeta(),
        options=MemoryOptions(),
        history=MemoryHistory(),
        sessions=MemorySessions(ids),
        audit=MemoryAudit(),
        clock=clock,
    )


@pytest.fixture
def app(clock):
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        app.extensions['passguard'].clock = clock
        app.extensions['passguard'].install()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def policy(app):
    return app.extensions['passguard']


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    return app.test_client()


@pytest.fixture
def user(policy):
    return AuthService(policy).register_account('alice', USER_PASSWORD)


@pytest.fixture
def admin(policy):
    return AuthService(policy).register_account('admin', ADMIN_PASSWORD, is_admin=True)


def login(client, username, password):
    return client.post('/auth/login', json={'username': username, 'password': password})


def refresh():
    """Drop cached ORM state so assertions read what requests committed"""
    db.session.expire_all()
