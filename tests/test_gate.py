"""Tests for the admin authorization gate."""
import threading
import time
from dataclasses import replace
from datetime import timedelta

import pytest

from auth.gate import AuthorizationGate, Authorized, Forbidden, Locked, Rejected
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, T0, FakeProvider
from utils.errors import ProviderTransportError
from utils.lockout_store import JsonFileStore, LockoutRepository, MemoryStore
from utils.rate_limiter import LockoutState

LOCKOUT = timedelta(milliseconds=900_000)


def fail(gate, times=1):
    results = [gate.attempt_login(ADMIN_EMAIL, "wrong") for _ in range(times)]
    return results[-1] if times == 1 else results


def test_failures_below_threshold_are_rejected(gate, provider):
    results = fail(gate, 4)

    assert results == [Rejected(4), Rejected(3), Rejected(2), Rejected(1)]
    assert len(provider.authenticate_calls) == 4


def test_fifth_failure_locks(gate, repository):
    fail(gate, 4)
    result = fail(gate)

    assert result == Locked(LOCKOUT)
    assert repository.load() == LockoutState(5, T0 + LOCKOUT)


def test_locked_gate_never_contacts_provider(gate, provider, clock):
    fail(gate, 5)
    calls = len(provider.authenticate_calls)
    clock.advance(minutes=5)

    result = gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert result == Locked(timedelta(minutes=10))
    assert len(provider.authenticate_calls) == calls


def test_non_admin_account_is_forbidden_and_revoked(gate, provider, repository):
    fail(gate, 2)
    before = repository.load()

    result = gate.attempt_login("customer@example.com", "shopper-pass")

    assert result == Forbidden()
    assert provider.revoked == ["customer@example.com"]
    assert repository.load() == before


def test_admin_login_clears_prior_failures(gate, repository):
    fail(gate, 3)

    result = gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert result == Authorized(ADMIN_EMAIL)
    assert repository.load() == LockoutState()


def test_elapsed_lockout_lets_login_through(gate, provider, clock, repository):
    fail(gate, 5)
    clock.advance(milliseconds=900_001)

    result = gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD)

    assert result == Authorized(ADMIN_EMAIL)
    assert provider.authenticate_calls[-1] == ADMIN_EMAIL
    assert repository.load() == LockoutState()


def test_failure_after_expiry_starts_a_new_count(gate, clock):
    fail(gate, 5)
    clock.advance(minutes=16)

    assert fail(gate) == Rejected(4)


def test_admin_email_matched_case_insensitively(gate, provider):
    provider.accounts["Owner@Example.com"] = ADMIN_PASSWORD
    assert gate.attempt_login("Owner@Example.com", ADMIN_PASSWORD) == Authorized("Owner@Example.com")


def test_transport_errors_count_by_default(gate, provider, repository):
    provider.error = ProviderTransportError("unreachable")

    assert gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD) == Rejected(4)
    assert repository.load().failed_attempts == 1


def test_transport_errors_can_be_excluded(settings, provider, repository, clock):
    settings = replace(settings, count_transport_errors=False)
    gate = AuthorizationGate(settings, provider, repository, clock=clock)
    provider.error = ProviderTransportError("unreachable")

    assert gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD) == Rejected(5)
    assert repository.load() == LockoutState()


def test_unexpected_provider_error_does_not_escape(gate, provider):
    provider.error = RuntimeError("boom")
    assert gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD) == Rejected(4)


def test_revoke_failure_still_forbidden(gate, provider):
    provider.revoke_error = ProviderTransportError("sign out failed")
    assert gate.attempt_login("customer@example.com", "shopper-pass") == Forbidden()


def test_lock_status_helpers(gate, clock):
    assert not gate.is_locked()
    fail(gate, 5)
    assert gate.is_locked()
    assert gate.remaining_lockout() == LOCKOUT
    clock.advance(minutes=15)
    assert not gate.is_locked()


@pytest.mark.parametrize("identity, credential", [("", "x"), (ADMIN_EMAIL, "")])
def test_empty_input_rejected(gate, provider, identity, credential):
    with pytest.raises(ValueError):
        gate.attempt_login(identity, credential)
    assert provider.authenticate_calls == []


def test_password_never_logged(gate, caplog):
    caplog.set_level("DEBUG")
    gate.attempt_login(ADMIN_EMAIL, "hunter2-secret")
    gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD)
    assert "hunter2-secret" not in caplog.text
    assert ADMIN_PASSWORD not in caplog.text


class SlowProvider(FakeProvider):
    def authenticate(self, identity, credential):
        time.sleep(0.01)
        return super().authenticate(identity, credential)


class ReadOnlyStore(MemoryStore):
    def set(self, key, value):
        raise OSError("read-only file system")


def test_parallel_sessions_share_one_counter(settings, clock, tmp_path):
    path = str(tmp_path / "lockout.json")
    provider = SlowProvider()
    gates = [
        AuthorizationGate(settings, provider, LockoutRepository(JsonFileStore(path)), clock=clock)
        for _ in range(5)
    ]
    barrier = threading.Barrier(len(gates))
    results = []

    def submit(gate):
        barrier.wait()
        results.append(gate.attempt_login(ADMIN_EMAIL, "wrong"))

    threads = [threading.Thread(target=submit, args=(g,)) for g in gates]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    remaining = sorted(r.attempts_remaining for r in results if isinstance(r, Rejected))
    assert remaining == [1, 2, 3, 4]
    assert results.count(Locked(LOCKOUT)) == 1
    assert LockoutRepository(JsonFileStore(path)).load() == LockoutState(5, T0 + LOCKOUT)


def test_unwritable_store_still_locks(settings, provider, clock):
    repository = LockoutRepository(ReadOnlyStore())
    gate = AuthorizationGate(settings, provider, repository, clock=clock)

    results = fail(gate, 20)

    assert len(provider.authenticate_calls) == 5
    assert results[4:] == [Locked(LOCKOUT)] * 16
    assert gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD) == Locked(LOCKOUT)


def test_unwritable_store_lockout_still_expires(settings, provider, clock):
    gate = AuthorizationGate(settings, provider, LockoutRepository(ReadOnlyStore()), clock=clock)
    fail(gate, 5)
    clock.advance(minutes=16)

    assert gate.attempt_login(ADMIN_EMAIL, ADMIN_PASSWORD) == Authorized(ADMIN_EMAIL)
    assert gate.current_state() == LockoutState()
