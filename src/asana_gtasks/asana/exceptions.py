"""Asana API exceptions."""


class AsanaError(Exception):
    """Base exception for Asana errors."""

    pass


class AsanaAPIError(AsanaError):
    """Raised when the Asana API returns an error or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AsanaAuthError(AsanaAPIError):
    """Raised when the access token is rejected."""

    pass
