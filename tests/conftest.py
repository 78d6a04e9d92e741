"""Shared fixtures for the admin gate tests."""
from datetime import datetime, timedelta, timezone

import pytest

from auth.gate import AuthorizationGate
from auth.provider import AuthenticatedUser
from config.settings import GateSettings
from utils.errors import InvalidCredentialsError
from utils.lockout_store import LockoutRepository, MemoryStore

ADMIN_EMAIL = "owner@example.com"
ADMIN_PASSWORD = "correct-horse"
T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeProvider:
    """Accepts a fixed set of accounts; anything else is invalid credentials."""

    def __init__(self, accounts=None):
        self.accounts = dict(accounts or {ADMIN_EMAIL: ADMIN_PASSWORD})
        self.error = None
        self.revoke_error = None
        self.authenticate_calls = []
        self.revoked = []

    def authenticate(self, identity, credential):
        self.authenticate_calls.append(identity)
        if self.error is not None:
            raise self.error
        if self.accounts.get(identity) != credential:
            raise InvalidCredentialsError("Invalid email or password")
        return AuthenticatedUser(identity=identity, user_id=f"id-{identity}")

    def revoke_session(self, identity):
        self.revoked.append(identity)
        if self.revoke_error is not None:
            raise self.revoke_error


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return GateSettings(
        privileged_identity=ADMIN_EMAIL,
        max_attempts=5,
        lockout_duration=timedelta(milliseconds=900_000),
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def repository(store):
    return LockoutRepository(store)


@pytest.fixture
def provider():
    return FakeProvider({ADMIN_EMAIL: ADMIN_PASSWORD, "customer@example.com": "shopper-pass"})


@pytest.fixture
def gate(settings, provider, repository, clock):
    return AuthorizationGate(settings, provider, repository, clock=clock)
