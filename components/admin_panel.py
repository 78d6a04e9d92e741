"""
Admin panel components
Security overview for the admin console

VERSION HISTORY:
2.0.0 - Security log and lockout status - 10/19/26
      CHANGES:
      - Activity log view limited to auth events (login, failures,
        lockouts, refused accounts, logout, session timeout)
      - Lockout status panel reading the persisted gate state
      - Removed user, permission and module management
1.0.0 - Admin panel with activity logs - 11/11/25
KEY FUNCTIONS:
- show_security_log(): filterable auth event table with CSV export
- show_lockout_status(): current failed attempts and lockout expiry
- summarize_security_events(): counts used by the summary metrics
"""
from datetime import datetime
from typing import Dict

import pandas as pd
import streamlit as st

from auth.session import SessionManager
from config.database import ActivityLogger
from utils.csv_utils import security_log_to_csv
from utils.rate_limiter import format_lockout_message

AUTH_ACTIONS = ['login', 'login_failed', 'login_lockout', 'login_forbidden', 'logout', 'session_timeout']


def summarize_security_events(df: pd.DataFrame) -> Dict[str, int]:
    """
    Count auth events by outcome

    Args:
        df: Activity log rows (needs 'action_type' and 'success' columns)

    Returns:
        Dict with total, logins, failures, lockouts and forbidden counts
    """
    if df.empty:
        return {'total': 0, 'logins': 0, 'failures': 0, 'lockouts': 0, 'forbidden': 0}

    actions = df['action_type']
    return {
        'total': len(df),
        'logins': int((actions == 'login').sum()),
        'failures': int((actions == 'login_failed').sum()),
        'lockouts': int((actions == 'login_lockout').sum()),
        'forbidden': int((actions == 'login_forbidden').sum()),
    }


def show_lockout_status():
    """Show the persisted lockout state of this device"""
    gate = SessionManager.get_gate()
    state = gate.current_state()

    st.markdown("### 🛡️ Login Protection")
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Failed attempts", state.failed_attempts)
    with col2:
        st.metric("Attempts before lockout", gate.policy.attempts_remaining(state))

    remaining = gate.remaining_lockout()
    if remaining.total_seconds() > 0:
        st.error(f"🔒 {format_lockout_message(remaining)}")
    else:
        st.success("🔓 Login is open")


def show_security_log():
    """Admin panel for viewing auth activity"""
    SessionManager.require_admin()

    st.markdown("### 📊 Security Log")
    st.markdown("Login activity for the admin console")
    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        action_filter = st.selectbox("Filter by action", options=['All'] + AUTH_ACTIONS)
    with col2:
        limit = st.number_input("Entries to load", min_value=10, max_value=1000, value=100, step=10)

    logs = ActivityLogger.get_logs(
        action_types=None if action_filter == 'All' else [action_filter],
        limit=int(limit)
    )

    if not logs:
        st.info("No activity logs found")
        return

    df = pd.DataFrame(logs)
    summary = summarize_security_events(df)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Logins", summary['logins'])
    with col2:
        st.metric("Failed", summary['failures'])
    with col3:
        st.metric("Lockouts", summary['lockouts'])
    with col4:
        st.metric("Refused accounts", summary['forbidden'])

    st.markdown("---")

    columns = [c for c in ['created_at', 'action_type', 'description', 'success'] if c in df.columns]
    display_df = df[columns].copy()
    display_df = display_df.rename(columns={
        'created_at': 'Timestamp',
        'action_type': 'Action',
        'description': 'Description',
        'success': 'Status'
    })

    if 'Timestamp' in display_df.columns:
        display_df['Timestamp'] = pd.to_datetime(display_df['Timestamp'], errors='coerce').dt.strftime('%Y-%m-%d %H:%M:%S')

    if 'Status' in display_df.columns:
        display_df['Status'] = display_df['Status'].map({
            True: '✅ Success',
            False: '❌ Failed',
            None: '➖ N/A'
        })

    st.dataframe(display_df, width='stretch', hide_index=True)

    # SECURITY: descriptions can contain user-entered text
    csv = security_log_to_csv(df)
    st.download_button(
        label="📥 Download as CSV",
        data=csv,
        file_name=f"security_log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv",
        mime="text/csv"
    )
