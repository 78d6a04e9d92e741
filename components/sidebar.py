"""
Sidebar navigation component
"""
import streamlit as st

# page key -> (icon, label)
PAGES = {
    'home': ('🏠', 'Home'),
    'security_log': ('📊', 'Security Log'),
}


def show_sidebar():
    """Display sidebar navigation for the admin console"""

    with st.sidebar:
        st.markdown("# 🛍️ Store Admin")
        st.markdown("---")

        current_page = st.session_state.get('current_page', 'home')

        for page_key, (icon, label) in PAGES.items():
            if st.button(
                f"{icon} {label}",
                key=f"nav_{page_key}",
                width='stretch',
                type="primary" if current_page == page_key else "secondary"
            ):
                st.session_state.current_page = page_key
                st.rerun()


def show_page_breadcrumb():
    """Show current page breadcrumb"""
    icon, label = PAGES.get(st.session_state.get('current_page', 'home'), PAGES['home'])
    st.markdown(f"**{icon} {label}**")
    st.markdown("---")
