"""
Rate Limiter Utility
Lockout state machine for admin login attempts (brute force protection)

VERSION HISTORY:
2.0.0 - Pure lockout policy over persisted state - 10/19/26
      CHANGES:
      - Replaced session-state counters with immutable LockoutState
      - LockoutPolicy is side-effect free; persistence lives in lockout_store
      - Lockout expiry is computed lazily from the stored timestamp
      - Removed the sliding attempt window (counter resets only on success
        or lockout expiry)
1.0.0 - Login attempt rate limiting - 11/12/25
      SECURITY:
      - Track failed login attempts per email
      - Lockout after MAX_ATTEMPTS failed attempts
      - LOCKOUT_DURATION cooldown period
      - Automatic lockout expiration
"""
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class LockoutState:
    """
    Persisted lockout state for this device

    failed_attempts: consecutive failures since the last success or expiry
    locked_until: moment the lockout ends (None when not locked)
    """
    failed_attempts: int = 0
    locked_until: Optional[datetime] = None

    @property
    def is_zero(self) -> bool:
        return self.failed_attempts == 0 and self.locked_until is None


class LockoutPolicy:
    """
    Computes the next LockoutState from the current one

    All methods are deterministic given their inputs: no clock reads,
    no storage access.

    Example:
        >>> policy = LockoutPolicy(max_attempts=5, lockout_duration=timedelta(minutes=15))
        >>> state = policy.on_failure(LockoutState(), now)
        >>> policy.attempts_remaining(state)
        4
    """

    MAX_ATTEMPTS = 5  # Maximum failed attempts before lockout
    LOCKOUT_DURATION = timedelta(minutes=15)

    def __init__(self, max_attempts: int = MAX_ATTEMPTS,
                 lockout_duration: timedelta = LOCKOUT_DURATION):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if lockout_duration <= timedelta(0):
            raise ValueError("lockout_duration must be positive")
        self.max_attempts = max_attempts
        self.lockout_duration = lockout_duration

    @classmethod
    def from_settings(cls, settings) -> "LockoutPolicy":
        return cls(settings.max_attempts, settings.lockout_duration)

    @staticmethod
    def is_locked(state: LockoutState, now: datetime) -> bool:
        """True iff a lockout is recorded and has not yet elapsed"""
        return state.locked_until is not None and now < state.locked_until

    @staticmethod
    def remaining_lockout(state: LockoutState, now: datetime) -> timedelta:
        """
        Time left before the lockout ends

        Only meant for user-facing messaging; never negative.
        """
        if state.locked_until is None:
            return timedelta(0)
        return max(timedelta(0), state.locked_until - now)

    def on_failure(self, state: LockoutState, now: datetime) -> LockoutState:
        """
        Record one failed attempt

        Sets locked_until once the counter reaches max_attempts.
        """
        attempts = state.failed_attempts + 1
        if attempts >= self.max_attempts:
            return LockoutState(attempts, now + self.lockout_duration)
        return replace(state, failed_attempts=attempts, locked_until=None)

    @staticmethod
    def on_success(state: LockoutState) -> LockoutState:
        """Successful authorized login always clears the state"""
        return LockoutState()

    def on_expiry(self, state: LockoutState, now: datetime) -> LockoutState:
        """Reset an elapsed lockout; any other state is returned unchanged"""
        if state.locked_until is not None and not self.is_locked(state, now):
            return LockoutState()
        return state

    def attempts_remaining(self, state: LockoutState) -> int:
        """Number of failures left before lockout (0 when at threshold)"""
        return max(0, self.max_attempts - state.failed_attempts)


def format_lockout_message(remaining: timedelta) -> str:
    """
    Format a user-friendly lockout message

    Args:
        remaining: Time left in the lockout

    Returns:
        Formatted message string
    """
    remaining_seconds = max(0, math.ceil(remaining.total_seconds()))
    minutes = remaining_seconds // 60
    seconds = remaining_seconds % 60

    if minutes > 0:
        return f"Too many failed login attempts. Login locked for {minutes}m {seconds}s"
    else:
        return f"Too many failed login attempts. Login locked for {seconds} seconds"
