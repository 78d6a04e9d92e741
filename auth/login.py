"""
Login page and authentication UI

VERSION HISTORY:
2.0.0 - Admin-only login through the authorization gate - 10/19/26
      SECURITY IMPROVEMENTS:
      - Lockout state persisted across restarts (5 attempts, 15-minute lockout)
      - Live lockout countdown that clears itself when the lockout ends
      - Non-admin accounts are signed out immediately
      - Idle session warning in the sidebar
      REMOVED:
      - Password reset forms (handled by Supabase outside this console)
1.0.1 - Added login rate limiting - 11/12/25
1.0.0 - Login page with Supabase authentication - 11/11/25
KEY FUNCTIONS:
- Email/password login form
- Gate result messages (remaining attempts, lockout time)
- Lockout countdown fragment (1 second refresh)
- Logout button for sidebar
- User info and session timeout display
"""
from datetime import timedelta

import streamlit as st

from auth.gate import Authorized, Forbidden, GateResult, Locked, Rejected
from auth.session import SessionManager
from config.settings import get_settings
from utils.rate_limiter import format_lockout_message


def show_login_page():
    """Display the admin login page"""

    # Center the login form
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown("# 🔐 Admin Login")
        st.markdown("---")

        timer = SessionManager.get_timer()
        if timer.tick() > timedelta(0):
            show_lockout_countdown()
            return

        with st.form("login_form"):
            email = st.text_input("Email", placeholder="admin@yourstore.com")
            password = st.text_input("Password", type="password")
            submit = st.form_submit_button("Login", width='stretch', type="primary")

            if submit:
                if not email or not password:
                    st.error("Please enter both email and password")
                else:
                    handle_login(email, password)

        st.caption("🛡️ Access restricted to the store administrator")


@st.fragment(run_every=1)
def show_lockout_countdown():
    """Show the remaining lockout time, refreshed every second"""
    render_lockout_countdown(SessionManager.get_timer().tick())


def render_lockout_countdown(remaining: timedelta):
    """Rerun into the login form once the lockout is over"""
    if remaining <= timedelta(0):
        st.rerun()
        return

    st.error(f"❌ {format_lockout_message(remaining)}")
    st.warning("⏳ Please wait before trying again")


def handle_login(email: str, password: str):
    """
    Handle a login submission

    Args:
        email: Admin email
        password: Admin password
    """
    with st.spinner("Logging in..."):
        result = SessionManager.login(email, password)

    show_gate_result(result)


def show_gate_result(result: GateResult):
    """Render a gate result as user-facing messages"""
    if isinstance(result, Authorized):
        st.success("✅ Login successful! Redirecting...")
        st.rerun()

    elif isinstance(result, Rejected):
        st.error("❌ Invalid email or password")
        if result.attempts_remaining <= 2:  # Warn when few attempts remain
            st.warning(f"⚠️ {result.attempts_remaining} attempt(s) remaining before temporary lockout")

    elif isinstance(result, Locked):
        st.error(f"❌ {format_lockout_message(result.remaining)}")
        st.warning("⏳ Please wait before trying again")

    elif isinstance(result, Forbidden):
        st.error("⛔ This account does not have access to the admin console")
        st.info("You have been signed out.")


def show_logout_button():
    """Display logout button in sidebar"""
    if st.sidebar.button("🚪 Logout", width='stretch'):
        SessionManager.logout()
        st.rerun()


def show_user_info():
    """Display current admin info in sidebar"""
    user = SessionManager.get_user()

    if user:
        st.sidebar.markdown("---")
        st.sidebar.markdown("### 👤 Admin")
        st.sidebar.write(f"**Email:** {user.get('email')}")
        with st.sidebar:
            show_session_timer()
        st.sidebar.markdown("---")


@st.fragment(run_every=30)
def show_session_timer():
    """Warn before the idle timeout and sign out once it passes"""
    remaining = SessionManager.seconds_until_timeout()

    if remaining <= 0:
        SessionManager.logout(reason='session_timeout')
        st.rerun(scope="app")

    if remaining <= get_settings().session_warning.total_seconds():
        st.warning(f"⏱️ Session expires in {remaining // 60}m {remaining % 60}s")
