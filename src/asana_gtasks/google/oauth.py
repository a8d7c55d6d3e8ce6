"""Google OAuth for the Tasks API, built on Authlib.

The sync runs unattended, so it relies on a refresh token obtained once with
``asana-gtasks google login``. Tokens are stored in Google's ``token.json``
layout so they stay readable by google-auth tooling:

    google/credentials.json - OAuth client credentials
    google/token.json       - OAuth tokens
"""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2 import OAuth2Error
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from asana_gtasks.config import GOOGLE_CREDENTIALS, GOOGLE_TOKEN
from asana_gtasks.google.exceptions import (
    CredentialsNotFoundError,
    ScopeMismatchError,
    TokenError,
)

logger = logging.getLogger(__name__)


SCOPES = {
    "tasks": "https://www.googleapis.com/auth/tasks",
    "tasks_readonly": "https://www.googleapis.com/auth/tasks.readonly",
}


def resolve_scopes(scopes: list[str]) -> list[str]:
    """Resolve scope names ("tasks") to full URLs.

    Raises:
        ValueError: If a name is neither a known scope nor a URL.
    """
    resolved = []
    for scope in scopes:
        if scope.startswith("https://"):
            resolved.append(scope)
        elif scope in SCOPES:
            resolved.append(SCOPES[scope])
        else:
            raise ValueError(
                f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
            )
    return resolved


def _to_authlib_token(token_data: dict[str, Any]) -> dict[str, Any]:
    """Convert a Google token.json payload to Authlib's token dict."""
    expiry = token_data.get("expiry")
    if expiry and isinstance(expiry, str):
        expires_at = datetime.fromisoformat(expiry.replace("Z", "+00:00")).timestamp()
    else:
        expires_at = expiry

    return {
        "access_token": token_data.get("token"),
        "refresh_token": token_data.get("refresh_token"),
        "token_type": token_data.get("type", "Bearer"),
        "expires_at": expires_at,
        "scope": " ".join(token_data.get("scopes", [])),
    }


class GoogleOAuth:
    """OAuth session for Google APIs.

    Example:
        >>> auth = GoogleOAuth(scopes=["tasks"])
        >>> if not auth.is_authorized():
        ...     print(f"Visit: {auth.get_authorization_url()}")
        ...     auth.fetch_token(input("Paste redirect URL: "))
        >>> service = auth.build_service("tasks", "v1")
    """

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        scopes: list[str] | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        token_path: str | Path | None = None,
        credentials_path: str | Path | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            scopes: Scope names (e.g., ["tasks"]) or full URLs. Defaults to ["tasks"].
            client_id: OAuth client ID (loaded from credentials file if not provided).
            client_secret: OAuth client secret (loaded from credentials file if not provided).
            token_path: Where tokens are stored. Defaults to google/token.json.
            credentials_path: OAuth client credentials file. Defaults to google/credentials.json.
        """
        self.token_path = Path(token_path) if token_path else GOOGLE_TOKEN
        self.credentials_path = Path(credentials_path) if credentials_path else GOOGLE_CREDENTIALS
        self.required_scopes = resolve_scopes(scopes or ["tasks"])

        if not client_id or not client_secret:
            client_id, client_secret = self._load_client_credentials()

        self.client_id = client_id
        self.client_secret = client_secret

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri="http://localhost:0",
            token=self._load_token(),
            update_token=self._save_token,
            token_endpoint=self.TOKEN_URL,
            grant_type="refresh_token",
            token_endpoint_auth_method="client_secret_post",
        )

        self.last_refresh: datetime | None = None

    def _load_client_credentials(self) -> tuple[str, str]:
        """Load OAuth client credentials from file."""
        if not self.credentials_path.exists():
            raise CredentialsNotFoundError(str(self.credentials_path))

        with open(self.credentials_path) as f:
            creds = json.load(f)

        # Desktop ("installed") and web application clients both work
        app_creds = creds.get("installed") or creds.get("web")
        if not app_creds:
            raise ValueError("Invalid credentials.json format. Expected 'installed' or 'web' key.")

        return app_creds["client_id"], app_creds["client_secret"]

    def _load_token(self) -> dict[str, Any] | None:
        """Load token from storage, or None if absent or unusable."""
        if not self.token_path.exists():
            logger.info("No existing Google token found")
            return None

        try:
            with open(self.token_path) as f:
                token_data = json.load(f)
            if not isinstance(token_data, dict):
                raise ValueError(f"expected a JSON object, got {type(token_data).__name__}")

            missing = set(self.required_scopes) - set(token_data.get("scopes", []))
            if missing:
                logger.warning(f"Google token missing required scopes: {missing}")
                return None

            return _to_authlib_token(token_data)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load Google token: {e}")
            return None

    def _save_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Save token to storage (Authlib update_token callback)."""
        if access_token:
            token["access_token"] = access_token
        if refresh_token:
            token["refresh_token"] = refresh_token

        token_scopes = set(token.get("scope", "").split())
        missing = set(self.required_scopes) - token_scopes
        if missing:
            raise ScopeMismatchError(missing)

        google_token = {
            "token": token["access_token"],
            "refresh_token": token.get("refresh_token"),
            "token_uri": self.TOKEN_URL,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scopes": sorted(token_scopes),
            "type": token.get("token_type", "Bearer"),
            "expiry": token.get("expires_at"),
        }

        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as f:
            json.dump(google_token, f, indent=2)

        self.last_refresh = datetime.now()
        logger.info("Google token saved")

    def is_authorized(self) -> bool:
        """Check if we hold a token carrying every required scope."""
        if not self.session.token:
            return False

        token_scopes = set(self.session.token.get("scope", "").split())
        return set(self.required_scopes).issubset(token_scopes)

    def get_authorization_url(self) -> str:
        """Start the consent flow and return the URL the user must visit."""
        authorization_url, _state = self.session.create_authorization_url(
            self.AUTHORIZE_URL,
            access_type="offline",
            prompt="consent",
            include_granted_scopes="true",
        )
        return authorization_url

    def fetch_token(self, authorization_response: str) -> dict[str, Any]:
        """Complete the consent flow.

        Args:
            authorization_response: The full redirect URL from the OAuth callback.

        Returns:
            The fetched token dict.
        """
        token = self.session.fetch_token(
            self.TOKEN_URL,
            authorization_response=authorization_response,
            client_secret=self.client_secret,
        )
        self._save_token(token)
        return token

    def get_credentials(self) -> GoogleCredentials:
        """Get google-auth credentials, refreshing the token if it expired.

        Raises:
            TokenError: If not authorized or the refresh fails.
        """
        if not self.is_authorized():
            raise TokenError("Not authorized or missing required scopes")

        expires_at = self.session.token.get("expires_at", 0)
        if expires_at and expires_at < datetime.now().timestamp():
            logger.info("Google token expired, refreshing...")
            try:
                self.session.refresh_token(
                    self.TOKEN_URL,
                    refresh_token=self.session.token.get("refresh_token"),
                )
            except OAuth2Error as e:
                raise TokenError(f"Failed to refresh token: {e}") from e

        return GoogleCredentials(
            token=self.session.token["access_token"],
            refresh_token=self.session.token.get("refresh_token"),
            token_uri=self.TOKEN_URL,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.required_scopes,
        )

    def build_service(self, service_name: str = "tasks", version: str = "v1"):
        """Build a Google API service with current credentials."""
        return build(service_name, version, credentials=self.get_credentials())

    def get_token_info(self) -> dict[str, Any]:
        """Describe the current token: status, scopes, expiry."""
        if not self.session.token:
            return {"status": "no_token"}

        token = self.session.token
        expires_at = token.get("expires_at", 0)

        if expires_at:
            expires_in = expires_at - datetime.now().timestamp()
            expires_str = str(timedelta(seconds=int(max(0, expires_in))))
            is_expired = expires_in < 0
        else:
            expires_str = "unknown"
            is_expired = False

        return {
            "status": "expired" if is_expired else "valid",
            "scopes": token.get("scope", "").split(),
            "expires_in": expires_str,
            "has_refresh_token": bool(token.get("refresh_token")),
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }
