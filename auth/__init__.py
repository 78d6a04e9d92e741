"""
Authentication package
"""
from .gate import AuthorizationGate, Authorized, Rejected, Locked, Forbidden, GateResult
from .provider import SupabaseIdentityProvider, AuthenticatedUser
from .session import SessionManager
from .login import (
    show_login_page,
    show_logout_button,
    show_user_info,
    handle_login
)

__all__ = [
    'AuthorizationGate',
    'Authorized',
    'Rejected',
    'Locked',
    'Forbidden',
    'GateResult',
    'SupabaseIdentityProvider',
    'AuthenticatedUser',
    'SessionManager',
    'show_login_page',
    'show_logout_button',
    'show_user_info',
    'handle_login'
]
