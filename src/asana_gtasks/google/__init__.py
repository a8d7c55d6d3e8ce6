"""Google OAuth utilities for the Tasks API."""

from asana_gtasks.google.exceptions import (
    AuthorizationRequired,
    CredentialsNotFoundError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenError,
)
from asana_gtasks.google.oauth import GoogleOAuth

__all__ = [
    "GoogleOAuth",
    "GoogleAuthError",
    "AuthorizationRequired",
    "CredentialsNotFoundError",
    "TokenError",
    "ScopeMismatchError",
]
