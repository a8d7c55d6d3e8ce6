"""Google authentication exceptions."""


class GoogleAuthError(Exception):
    """Base exception for Google authentication errors."""

    pass


class CredentialsNotFoundError(GoogleAuthError):
    """Raised when OAuth client credentials are missing."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Credentials file not found at {path}. "
            "Download OAuth client credentials from Google Cloud Console and run "
            "'asana-gtasks google import <path>'."
        )


class TokenError(GoogleAuthError):
    """Raised when the OAuth token is missing, invalid or cannot be refreshed."""

    pass


class ScopeMismatchError(GoogleAuthError):
    """Raised when token scopes don't match required scopes."""

    def __init__(self, missing_scopes: set[str]):
        self.missing_scopes = missing_scopes
        super().__init__(f"Token missing required scopes: {missing_scopes}")


class AuthorizationRequired(GoogleAuthError):
    """Raised when an API call needs interactive OAuth consent first."""

    def __init__(self, auth_url: str, message: str | None = None):
        self.auth_url = auth_url
        super().__init__(message or f"Authorization required. Visit: {auth_url}")
