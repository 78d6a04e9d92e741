"""
Admin gate settings

VERSION HISTORY:
1.1.0 - Safer secrets handling - 10/20/26
      CHANGES:
      - String booleans ("false", "no", "0") parsed explicitly
      - Missing or invalid [admin] settings show an error page instead of a traceback
1.0.0 - Gate settings loaded from Streamlit secrets - 10/19/26
      ADDITIONS:
      - GateSettings frozen at startup (max attempts, lockout duration,
        privileged admin email, session timeout)
      - load_settings() reads the [admin] section of st.secrets
KEY FUNCTIONS:
- GateSettings dataclass
- load_settings() / get_settings() (cached for the process)
- load_settings_or_stop() for page code

Expected secrets.toml layout:

    [supabase]
    url = "https://xyz.supabase.co"
    anon_key = "..."

    [admin]
    email = "owner@example.com"
    max_attempts = 5
    lockout_minutes = 15
    session_timeout_minutes = 30
    session_warning_minutes = 5
    count_transport_errors = true
    lockout_store_path = ".streamlit/admin_lockout.json"
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional

import streamlit as st

logger = logging.getLogger(__name__)


def normalize_identity(identity: Optional[str]) -> str:
    """Emails compare case-insensitively and without surrounding whitespace"""
    return (identity or "").strip().lower()


def _as_bool(value: Any) -> bool:
    """TOML booleans pass through; strings such as "false" or "no" are parsed"""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class GateSettings:
    """Process-wide gate configuration (never mutated at runtime)"""
    privileged_identity: str
    max_attempts: int = 5
    lockout_duration: timedelta = timedelta(minutes=15)
    session_timeout: timedelta = timedelta(minutes=30)
    session_warning: timedelta = timedelta(minutes=5)
    count_transport_errors: bool = True
    lockout_store_path: str = ".streamlit/admin_lockout.json"

    def __post_init__(self):
        if not normalize_identity(self.privileged_identity):
            raise ValueError("privileged_identity must be a non-empty email")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.lockout_duration <= timedelta(0):
            raise ValueError("lockout_duration must be positive")
        object.__setattr__(self, "privileged_identity",
                           normalize_identity(self.privileged_identity))

    def is_privileged(self, identity: Optional[str]) -> bool:
        """True iff identity is the single admin identity"""
        return normalize_identity(identity) == self.privileged_identity


def load_settings(secrets: Optional[Mapping[str, Any]] = None) -> GateSettings:
    """
    Build GateSettings from a secrets mapping

    Args:
        secrets: Mapping shaped like st.secrets (defaults to st.secrets)

    Returns:
        GateSettings

    Raises:
        KeyError: if the [admin] email is missing
    """
    if secrets is None:
        secrets = st.secrets

    admin = secrets.get("admin", {})
    if "email" not in admin:
        raise KeyError("admin.email is not configured in secrets")

    return GateSettings(
        privileged_identity=admin["email"],
        max_attempts=int(admin.get("max_attempts", 5)),
        lockout_duration=timedelta(minutes=float(admin.get("lockout_minutes", 15))),
        session_timeout=timedelta(minutes=float(admin.get("session_timeout_minutes", 30))),
        session_warning=timedelta(minutes=float(admin.get("session_warning_minutes", 5))),
        count_transport_errors=_as_bool(admin.get("count_transport_errors", True)),
        lockout_store_path=str(admin.get("lockout_store_path", ".streamlit/admin_lockout.json")),
    )


def load_settings_or_stop(secrets: Optional[Mapping[str, Any]] = None) -> GateSettings:
    """Load settings, or show a sanitized error and stop the page"""
    try:
        return load_settings(secrets)
    except (KeyError, ValueError, TypeError, FileNotFoundError) as e:
        st.error("Admin login is not configured. Please contact support.")
        logger.error(f"Invalid admin settings: {str(e)}", exc_info=True)
        st.stop()


@st.cache_resource
def get_settings() -> GateSettings:
    """Load settings once per server process"""
    settings = load_settings_or_stop()
    logger.info(
        f"Admin gate configured: max_attempts={settings.max_attempts}, "
        f"lockout={settings.lockout_duration}"
    )
    return settings
