"""
Session management for the admin console

VERSION HISTORY:
2.1.0 - Lockout file repository shared across browser sessions - 10/20/26
2.0.0 - Single-admin session backed by the authorization gate - 10/19/26
      CHANGES:
      - login() delegates to AuthorizationGate (lockout + single admin check)
      - Idle session timeout with warning window
      - logout() revokes the Supabase session
      - require_admin() re-checks the signed-in email on every page
      - Removed role/module permission system
1.0.0 - Hybrid permission system with role-based and user-specific access - 11/11/25
KEY FUNCTIONS:
- Supabase Auth integration (sign in/sign out) through the gate
- Session state management
- Activity logging for login/logout/lockout
- Idle timeout (session_expired, seconds_until_timeout)
"""
import logging
import time
from typing import Dict, Optional

import streamlit as st

from auth.gate import AuthorizationGate, Authorized, Forbidden, GateResult, Locked, Rejected
from auth.provider import SupabaseIdentityProvider, mask_identity
from config.database import ActivityLogger, Database
from config.settings import GateSettings, get_settings
from utils.lockout_store import STATE_LOCK, JsonFileStore, LockoutRepository, SessionStateStore
from utils.lockout_timer import LockoutTimer

logger = logging.getLogger(__name__)

# One repository per lockout file, shared by every browser session
_FILE_REPOSITORIES: Dict[str, LockoutRepository] = {}


def session_expired(last_activity: Optional[float], now: float, timeout_seconds: float) -> bool:
    """True when the session has been idle for at least timeout_seconds"""
    if last_activity is None:
        return False
    return now - last_activity >= timeout_seconds


def seconds_until_timeout(last_activity: Optional[float], now: float, timeout_seconds: float) -> int:
    """Seconds left before the idle timeout (never negative)"""
    if last_activity is None:
        return int(timeout_seconds)
    return max(0, int(timeout_seconds - (now - last_activity)))


def build_repository(settings: GateSettings) -> LockoutRepository:
    """Durable file store when a path is configured, session state otherwise"""
    path = settings.lockout_store_path
    if path:
        with STATE_LOCK:
            repository = _FILE_REPOSITORIES.get(path)
            if repository is None:
                repository = LockoutRepository(JsonFileStore(path), settings.max_attempts)
                _FILE_REPOSITORIES[path] = repository
        return repository
    return LockoutRepository(SessionStateStore(prefix="lockout_"), settings.max_attempts)


class SessionManager:
    """
    Manages the admin session

    Only the configured admin email can hold an authenticated session.
    """

    @staticmethod
    def init_session():
        """Initialize session state variables"""
        if 'authenticated' not in st.session_state:
            st.session_state.authenticated = False
        if 'user' not in st.session_state:
            st.session_state.user = None
        if 'last_activity' not in st.session_state:
            st.session_state.last_activity = None

    @staticmethod
    def get_gate() -> AuthorizationGate:
        """Get this browser session's gate (created on first use)"""
        if 'admin_gate' not in st.session_state:
            settings = get_settings()
            provider = SupabaseIdentityProvider(Database.create_auth_client)
            st.session_state.admin_gate = AuthorizationGate(
                settings, provider, build_repository(settings)
            )
        return st.session_state.admin_gate

    @staticmethod
    def get_timer() -> LockoutTimer:
        gate = SessionManager.get_gate()
        return LockoutTimer(gate.policy, gate.repository, gate.clock)

    @staticmethod
    def login(email: str, password: str) -> GateResult:
        """
        Handle an admin login attempt

        Args:
            email: Admin email
            password: Admin password

        Returns:
            GateResult from the authorization gate
        """
        result = SessionManager.get_gate().attempt_login(email, password)
        masked = mask_identity(email)

        if isinstance(result, Authorized):
            st.session_state.authenticated = True
            st.session_state.user = {'email': result.identity}
            st.session_state.last_activity = time.time()
            ActivityLogger.log(
                user_id=None,
                action_type='login',
                description=f"Admin {masked} logged in"
            )
        elif isinstance(result, Forbidden):
            ActivityLogger.log(
                user_id=None,
                action_type='login_forbidden',
                description=f"Non-admin account {masked} refused, session revoked",
                success=False
            )
        elif isinstance(result, Locked):
            ActivityLogger.log(
                user_id=None,
                action_type='login_lockout',
                description="Admin login locked after repeated failures",
                metadata={'remaining_seconds': int(result.remaining.total_seconds())},
                success=False
            )
        elif isinstance(result, Rejected):
            ActivityLogger.log(
                user_id=None,
                action_type='login_failed',
                description=f"Failed admin login for {masked}",
                metadata={'attempts_remaining': result.attempts_remaining},
                success=False
            )
        return result

    @staticmethod
    def logout(reason: str = 'logout'):
        """Revoke the Supabase session and clear local state"""
        user = st.session_state.get('user')
        if user:
            try:
                SessionManager.get_gate().provider.revoke_session(user['email'])
            except Exception as e:
                logger.error(f"Logout sign out failed: {str(e)}", exc_info=True)
            ActivityLogger.log(
                user_id=None,
                action_type=reason,
                description=f"Admin {mask_identity(user['email'])} signed out ({reason})"
            )

        st.session_state.authenticated = False
        st.session_state.user = None
        st.session_state.last_activity = None

    @staticmethod
    def check_session_timeout() -> bool:
        """
        Sign out an idle session

        Returns:
            True if the session was timed out
        """
        if not SessionManager.is_logged_in():
            return False
        timeout = get_settings().session_timeout.total_seconds()
        if session_expired(st.session_state.get('last_activity'), time.time(), timeout):
            SessionManager.logout(reason='session_timeout')
            return True
        st.session_state.last_activity = time.time()
        return False

    @staticmethod
    def seconds_until_timeout() -> int:
        timeout = get_settings().session_timeout.total_seconds()
        return seconds_until_timeout(st.session_state.get('last_activity'), time.time(), timeout)

    @staticmethod
    def is_logged_in() -> bool:
        """Check if the admin is logged in"""
        return st.session_state.get('authenticated', False)

    @staticmethod
    def get_user() -> Optional[Dict]:
        """Get current user"""
        return st.session_state.get('user')

    @staticmethod
    def is_admin() -> bool:
        """Check the signed-in email against the configured admin"""
        user = st.session_state.get('user')
        if not user or not SessionManager.is_logged_in():
            return False
        return get_settings().is_privileged(user.get('email'))

    @staticmethod
    def require_admin():
        """Require admin access or stop execution"""
        if not SessionManager.is_admin():
            st.error("⛔ Admin Access Required")
            st.warning("This section is only accessible to the store administrator.")
            st.stop()
