"""
Error taxonomy for the admin login gate

VERSION HISTORY:
1.0.0 - Identity provider errors and friendly messages - 10/19/26
      ADDITIONS:
      - IdentityProviderError base with InvalidCredentialsError and
        ProviderTransportError
      - friendly_error_message() maps Supabase failures to sanitized text
"""
from typing import Optional


class IdentityProviderError(Exception):
    """Raised by an identity provider when authentication does not succeed"""


class InvalidCredentialsError(IdentityProviderError):
    """The provider rejected the identity/credential pair"""


class ProviderTransportError(IdentityProviderError):
    """The provider could not be reached or answered with an unexpected error"""


def friendly_error_message(error: Optional[BaseException],
                           fallback: str = "Connection error. Please try again.") -> str:
    """
    Map a provider or database error to a message safe to show users

    Args:
        error: The exception raised by Supabase (or None)
        fallback: Message used when nothing more specific matches

    Returns:
        User-facing message without technical details
    """
    if isinstance(error, InvalidCredentialsError):
        return "Invalid email or password"

    message = str(error or "").lower()
    code = getattr(error, "code", None)

    if "network" in message or "connection" in message:
        return "No internet connection. Check your network."
    if "timeout" in message or "timed out" in message:
        return "The request took too long. Please try again."
    if "row-level security" in message:
        return "You don't have permission to perform this action."
    if code == "23505":  # unique violation
        return "This record already exists."
    if code == "23503":  # foreign key violation
        return "Cannot modify: related to other data."
    return fallback
