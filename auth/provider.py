"""
Supabase Auth identity provider

VERSION HISTORY:
1.0.0 - Identity provider adapter for the admin gate - 10/19/26
      ADDITIONS:
      - authenticate() wraps sign_in_with_password and maps failures onto
        InvalidCredentialsError / ProviderTransportError
      - revoke_session() signs out the session created by authenticate()
KEY FUNCTIONS:
- One auth client per browser session (sessions are never shared between
  users of the same server process)
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from supabase import Client

from utils.errors import InvalidCredentialsError, ProviderTransportError

logger = logging.getLogger(__name__)

# Supabase Auth messages that mean the credential pair itself was refused
CREDENTIAL_ERRORS = (
    "invalid login credentials",
    "email not confirmed",
    "user not found",
    "invalid_credentials",
)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity returned by a successful sign in"""
    identity: str
    user_id: Optional[str] = None


def mask_identity(identity: Optional[str]) -> str:
    """Mask an email for log lines: owner@example.com -> o***@example.com"""
    if not identity:
        return "<empty>"
    local, sep, domain = identity.partition("@")
    return f"{local[:1]}***{sep}{domain}"


class SupabaseIdentityProvider:
    """
    Authenticates against Supabase Auth

    Args:
        client_factory: Returns a Supabase client dedicated to this provider
    """

    def __init__(self, client_factory: Callable[[], Client]):
        self._client_factory = client_factory
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def authenticate(self, identity: str, credential: str) -> AuthenticatedUser:
        """
        Sign in with email and password

        Raises:
            InvalidCredentialsError: Supabase refused the credential pair
            ProviderTransportError: Supabase unreachable or unexpected failure
        """
        try:
            response = self.client.auth.sign_in_with_password({
                "email": identity,
                "password": credential
            })
        except Exception as e:
            error_message = str(e).lower()
            error_code = str(getattr(e, "code", "") or "").lower()
            if any(marker in error_message or marker == error_code for marker in CREDENTIAL_ERRORS):
                raise InvalidCredentialsError("Invalid email or password") from e
            raise ProviderTransportError(f"Authentication request failed: {type(e).__name__}") from e

        if not response or not response.user:
            raise InvalidCredentialsError("Invalid email or password")

        return AuthenticatedUser(
            identity=response.user.email or "",
            user_id=getattr(response.user, "id", None)
        )

    def revoke_session(self, identity: str) -> None:
        """
        Sign out the session created by the last authenticate() call

        Raises:
            ProviderTransportError: sign out failed
        """
        try:
            self.client.auth.sign_out()
        except Exception as e:
            raise ProviderTransportError(
                f"Session revocation failed for {mask_identity(identity)}"
            ) from e
