"""
Lockout countdown timer

VERSION HISTORY:
1.0.0 - One-second lockout expiry poll - 10/19/26
      ADDITIONS:
      - tick() clears an elapsed lockout and persists the reset
      - watch() polls until the lockout is cleared
KEY FUNCTIONS:
- Drives the countdown shown on the login page (st.fragment run_every=1)
- Login attempts never depend on the timer: the gate re-checks the stored
  expiry on every call
"""
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from utils.lockout_store import STATE_LOCK, LockoutRepository
from utils.rate_limiter import LockoutPolicy

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LockoutTimer:
    """Polls the persisted lockout and resets it once it has elapsed"""

    POLL_INTERVAL = timedelta(seconds=1)

    def __init__(self, policy: LockoutPolicy, repository: LockoutRepository,
                 clock: Callable[[], datetime] = utc_now,
                 interval: timedelta = POLL_INTERVAL):
        self.policy = policy
        self.repository = repository
        self.clock = clock
        self.interval = interval

    def tick(self) -> timedelta:
        """
        Run one poll

        Returns:
            Remaining lockout time (zero once the lockout is cleared)
        """
        with STATE_LOCK:
            state = self.repository.load()
            now = self.clock()

            if self.policy.is_locked(state, now):
                return self.policy.remaining_lockout(state, now)

            expired = self.policy.on_expiry(state, now)
            if expired != state:
                try:
                    self.repository.save(expired)
                except OSError as e:
                    logger.error(f"Failed to persist lockout reset: {str(e)}", exc_info=True)
                else:
                    logger.info("Admin login lockout expired, attempt counter reset")
            return timedelta(0)

    def watch(self, sleep: Callable[[float], None] = time.sleep,
              on_tick: Optional[Callable[[timedelta], None]] = None) -> None:
        """
        Block until no lockout is active

        Args:
            sleep: Sleep function (injectable for tests)
            on_tick: Called with the remaining time after every poll
        """
        while True:
            remaining = self.tick()
            if on_tick is not None:
                on_tick(remaining)
            if remaining <= timedelta(0):
                return
            sleep(self.interval.total_seconds())
