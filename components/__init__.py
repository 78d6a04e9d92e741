"""
UI Components package
"""
from .sidebar import show_sidebar, show_page_breadcrumb
from .admin_panel import (
    show_security_log,
    show_lockout_status,
    summarize_security_events
)

__all__ = [
    'show_sidebar',
    'show_page_breadcrumb',
    'show_security_log',
    'show_lockout_status',
    'summarize_security_events'
]
