"""
Persisted lockout storage

VERSION HISTORY:
1.1.0 - Shared-state hardening - 10/20/26
      SECURITY:
      - STATE_LOCK serializes lockout reads and writes across browser sessions
      - A state that failed to persist is kept in memory and still enforced
      - A stored expiry implies at least max_attempts failures
1.0.0 - Durable per-device lockout storage - 10/19/26
      ADDITIONS:
      - KeyValueStore protocol (get / set / remove)
      - JsonFileStore survives app restarts (default backend)
      - SessionStateStore for Streamlit session state
      - LockoutRepository maps LockoutState onto two string keys
KEY FUNCTIONS:
- Attempt count stored as a decimal integer
- Lockout expiry stored as epoch milliseconds (absent when not locked)
- Corrupt values are logged and treated as absent
"""
import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

import streamlit as st

from utils.rate_limiter import LockoutState

logger = logging.getLogger(__name__)

ATTEMPTS_KEY = "admin_login_attempts"
LOCKED_UNTIL_KEY = "admin_lockout_until"

# Held by the gate across load -> authenticate -> save, and by the timer
STATE_LOCK = threading.Lock()


class KeyValueStore(Protocol):
    """String key/value medium scoped to one device"""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store (tests, scripts)"""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class SessionStateStore:
    """
    Store backed by st.session_state

    Resets when the browser session ends, so only use it where the
    server has no writable disk.
    """

    def __init__(self, prefix: str = "kv_"):
        self.prefix = prefix

    def get(self, key: str) -> Optional[str]:
        return st.session_state.get(self.prefix + key)

    def set(self, key: str, value: str) -> None:
        st.session_state[self.prefix + key] = value

    def remove(self, key: str) -> None:
        st.session_state.pop(self.prefix + key, None)


class JsonFileStore:
    """
    Durable store kept in a small JSON file

    Every call re-reads the file so a restarted process sees the last
    written values.
    """

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Lockout store {self.path} unreadable, treating as empty: {str(e)}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Lockout store {self.path} has unexpected content, treating as empty")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".lockout-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def _to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def _stricter(a: LockoutState, b: LockoutState) -> LockoutState:
    """Combine two states keeping the higher count and the later lockout"""
    if a.locked_until is None:
        locked_until = b.locked_until
    elif b.locked_until is None:
        locked_until = a.locked_until
    else:
        locked_until = max(a.locked_until, b.locked_until)
    return LockoutState(max(a.failed_attempts, b.failed_attempts), locked_until)


class LockoutRepository:
    """
    Reads and writes LockoutState through a KeyValueStore

    Both keys are written together on every change and removed together
    on reset. When a write fails the state is kept in memory and merged
    into every later load until a write succeeds again.
    """

    def __init__(self, store: KeyValueStore, max_attempts: int = 5):
        self.store = store
        self.max_attempts = max_attempts
        self.unsaved: Optional[LockoutState] = None

    def load(self) -> LockoutState:
        """Return the effective state (zero state when nothing is stored)"""
        stored = self._load_stored()
        if self.unsaved is None:
            return stored
        return _stricter(stored, self.unsaved)

    def _load_stored(self) -> LockoutState:
        raw_attempts = self.store.get(ATTEMPTS_KEY)
        raw_until = self.store.get(LOCKED_UNTIL_KEY)

        attempts = 0
        if raw_attempts is not None:
            try:
                attempts = max(0, int(raw_attempts))
            except ValueError:
                logger.warning(f"Ignoring invalid stored attempt count: {raw_attempts!r}")

        locked_until = None
        if raw_until is not None:
            try:
                locked_until = _from_epoch_ms(int(raw_until))
            except (ValueError, OverflowError, OSError):
                logger.warning(f"Ignoring invalid stored lockout expiry: {raw_until!r}")

        # A recorded lockout always means the threshold was reached
        if locked_until is not None:
            attempts = max(attempts, self.max_attempts)

        return LockoutState(failed_attempts=attempts, locked_until=locked_until)

    def save(self, state: LockoutState) -> None:
        """
        Persist state; the zero state is stored as absent keys

        Raises:
            OSError: the store could not be written (state kept in memory)
        """
        try:
            if state.is_zero:
                self.store.remove(ATTEMPTS_KEY)
                self.store.remove(LOCKED_UNTIL_KEY)
            else:
                self.store.set(ATTEMPTS_KEY, str(state.failed_attempts))
                if state.locked_until is None:
                    self.store.remove(LOCKED_UNTIL_KEY)
                else:
                    self.store.set(LOCKED_UNTIL_KEY, str(_to_epoch_ms(state.locked_until)))
        except OSError:
            self.unsaved = state
            raise
        self.unsaved = None

    def reset(self) -> None:
        self.save(LockoutState())
