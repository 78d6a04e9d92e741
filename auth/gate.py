"""
Admin authorization gate

VERSION HISTORY:
1.1.0 - Shared lockout across browser sessions - 10/20/26
      SECURITY:
      - Attempts from all browser sessions are serialized on STATE_LOCK
      - Unpersisted lockout state stays enforced in memory
1.0.0 - Brute-force resistant admin gate - 10/19/26
      SECURITY:
      - Refuses to contact the identity provider while a lockout is active
      - Counts failed sign ins and locks after max_attempts failures
      - Admits only the configured admin identity
      - Revokes the session of any other successfully authenticated user
KEY FUNCTIONS:
- attempt_login(identity, credential) -> GateResult
- GateResult variants: Authorized, Rejected, Locked, Forbidden
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Protocol, Union

from auth.provider import AuthenticatedUser, mask_identity
from config.settings import GateSettings
from utils.errors import InvalidCredentialsError, ProviderTransportError
from utils.lockout_store import STATE_LOCK, LockoutRepository
from utils.lockout_timer import utc_now
from utils.rate_limiter import LockoutPolicy, LockoutState

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    def authenticate(self, identity: str, credential: str) -> AuthenticatedUser: ...

    def revoke_session(self, identity: str) -> None: ...


@dataclass(frozen=True)
class Authorized:
    identity: str


@dataclass(frozen=True)
class Rejected:
    attempts_remaining: int


@dataclass(frozen=True)
class Locked:
    remaining: timedelta


@dataclass(frozen=True)
class Forbidden:
    pass


GateResult = Union[Authorized, Rejected, Locked, Forbidden]


class AuthorizationGate:
    """
    Mediates every admin login attempt

    The gate is the only writer of the persisted lockout state. Lock status
    is always derived from the stored expiry at call time.

    Example:
        >>> gate = AuthorizationGate(settings, provider, LockoutRepository(store))
        >>> result = gate.attempt_login("owner@example.com", "secret")
        >>> isinstance(result, Authorized)
        True
    """

    def __init__(self, settings: GateSettings, provider: IdentityProvider,
                 repository: LockoutRepository,
                 clock: Callable[[], datetime] = utc_now):
        self.settings = settings
        self.provider = provider
        self.repository = repository
        self.clock = clock
        self.policy = LockoutPolicy.from_settings(settings)

    def current_state(self) -> LockoutState:
        return self.repository.load()

    def is_locked(self) -> bool:
        return self.policy.is_locked(self.repository.load(), self.clock())

    def remaining_lockout(self) -> timedelta:
        return self.policy.remaining_lockout(self.repository.load(), self.clock())

    def attempt_login(self, identity: str, credential: str) -> GateResult:
        """
        Handle one login submission

        Args:
            identity: Email entered by the user
            credential: Password entered by the user (never logged)

        Returns:
            Authorized, Rejected, Locked or Forbidden

        Raises:
            ValueError: identity or credential is empty
        """
        if not identity or not credential:
            raise ValueError("identity and credential are required")

        # SECURITY: every browser session shares the persisted counter
        with STATE_LOCK:
            return self._attempt(identity, credential)

    def _attempt(self, identity: str, credential: str) -> GateResult:
        state = self.repository.load()
        now = self.clock()

        # SECURITY: No credential reaches the provider while locked
        if self.policy.is_locked(state, now):
            logger.info(f"Login refused for {mask_identity(identity)}: lockout active")
            return Locked(self.policy.remaining_lockout(state, now))

        expired = self.policy.on_expiry(state, now)
        if expired != state:
            state = expired
            self._persist(state)

        try:
            user = self.provider.authenticate(identity, credential)
        except InvalidCredentialsError:
            logger.info(f"Invalid credentials for {mask_identity(identity)}")
            return self._record_failure(state)
        except ProviderTransportError as e:
            logger.warning(f"Identity provider unavailable: {str(e)}")
            if not self.settings.count_transport_errors:
                return Rejected(self.policy.attempts_remaining(state))
            return self._record_failure(state)
        except Exception as e:
            logger.error(f"Unexpected identity provider error: {type(e).__name__}", exc_info=True)
            if not self.settings.count_transport_errors:
                return Rejected(self.policy.attempts_remaining(state))
            return self._record_failure(state)

        # SECURITY: Re-check who actually signed in
        if not self.settings.is_privileged(user.identity):
            self._revoke(user.identity)
            logger.warning(f"Non-admin sign in refused for {mask_identity(user.identity)}")
            return Forbidden()

        self._persist(self.policy.on_success(state))
        logger.info(f"Admin login succeeded for {mask_identity(user.identity)}")
        return Authorized(user.identity)

    def _record_failure(self, state: LockoutState) -> GateResult:
        now = self.clock()
        new_state = self.policy.on_failure(state, now)
        self._persist(new_state)

        if self.policy.is_locked(new_state, now):
            logger.warning(
                f"Admin login locked after {new_state.failed_attempts} failed attempts"
            )
            return Locked(self.policy.remaining_lockout(new_state, now))
        return Rejected(self.policy.attempts_remaining(new_state))

    def _revoke(self, identity: str) -> None:
        try:
            self.provider.revoke_session(identity)
        except Exception as e:
            logger.error(f"Could not revoke session for {mask_identity(identity)}: {str(e)}",
                         exc_info=True)

    def _persist(self, state: LockoutState) -> None:
        try:
            self.repository.save(state)
        except OSError as e:
            # Repository keeps the state in memory and keeps enforcing it
            logger.error(f"Failed to persist lockout state: {str(e)}", exc_info=True)
