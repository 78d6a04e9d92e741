"""
Main application entry point
Store admin console guarded by the admin login gate

VERSION HISTORY:
2.0.0 - Single-admin console - 10/19/26
      CHANGES:
      - Login goes through AuthorizationGate (persisted lockout, single
        admin identity, non-admin sessions revoked)
      - Idle session timeout checked on every rerun
      - Pages reduced to Home (login protection status) and Security Log
1.1.0 - Enhanced security with whitelisted module loading - 11/12/25
      SECURITY IMPROVEMENTS:
      - Added explicit authentication/authorization checks
      - Sanitized error messages to prevent information disclosure
1.0.0 - Initial multi-app dashboard with role-based access - 11/11/25
KEY FUNCTIONS:
- Login page or admin console routing
- Sidebar navigation, user info and logout
"""
import logging

import streamlit as st

from auth import (
    SessionManager,
    show_login_page,
    show_logout_button,
    show_user_info
)
from components.sidebar import show_sidebar, show_page_breadcrumb
from components.admin_panel import show_lockout_status, show_security_log

logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="Store Admin",
    page_icon="🛍️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Initialize session
SessionManager.init_session()


def show_home():
    """Admin home page"""
    user = SessionManager.get_user()
    st.markdown(f"### Welcome back, {user.get('email')}! 👋")
    st.markdown("---")
    show_lockout_status()


def main():
    """Main application logic"""

    if SessionManager.check_session_timeout():
        st.info("⏱️ Your session expired due to inactivity. Please log in again.")

    if not SessionManager.is_logged_in():
        show_login_page()
        return

    # SECURITY: every page re-checks the signed-in identity
    SessionManager.require_admin()

    show_sidebar()
    show_user_info()
    show_logout_button()
    show_page_breadcrumb()

    current_page = st.session_state.get('current_page', 'home')
    try:
        if current_page == 'security_log':
            show_security_log()
        else:
            show_home()
    except Exception as e:
        # SECURITY: Don't expose internal error details to user
        st.error("An error occurred while loading the page")
        logger.error(f"Error rendering page {current_page}: {str(e)}", exc_info=True)


if __name__ == "__main__":
    main()
