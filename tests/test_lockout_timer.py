"""Tests for the lockout countdown timer."""
from datetime import timedelta

from tests.conftest import T0
from utils.lockout_timer import LockoutTimer
from utils.rate_limiter import LockoutPolicy, LockoutState


def make_timer(repository, clock):
    policy = LockoutPolicy(max_attempts=5, lockout_duration=timedelta(minutes=15))
    return LockoutTimer(policy, repository, clock=clock)


def test_tick_reports_remaining_while_locked(repository, clock):
    repository.save(LockoutState(5, T0 + timedelta(seconds=30)))
    timer = make_timer(repository, clock)

    assert timer.tick() == timedelta(seconds=30)
    assert repository.load().failed_attempts == 5


def test_tick_resets_elapsed_lockout(repository, clock):
    repository.save(LockoutState(5, T0 + timedelta(seconds=30)))
    timer = make_timer(repository, clock)
    clock.advance(seconds=30)

    assert timer.tick() == timedelta(0)
    assert repository.load() == LockoutState()


def test_tick_leaves_unlocked_counter_alone(repository, clock):
    repository.save(LockoutState(failed_attempts=2))
    assert make_timer(repository, clock).tick() == timedelta(0)
    assert repository.load() == LockoutState(failed_attempts=2)


def test_watch_polls_every_second_until_expiry(repository, clock):
    repository.save(LockoutState(5, T0 + timedelta(seconds=3)))
    timer = make_timer(repository, clock)
    sleeps = []
    ticks = []

    def fake_sleep(seconds):
        sleeps.append(seconds)
        clock.advance(seconds=seconds)

    timer.watch(sleep=fake_sleep, on_tick=ticks.append)

    assert sleeps == [1.0, 1.0, 1.0]
    assert ticks[-1] == timedelta(0)
    assert repository.load() == LockoutState()
