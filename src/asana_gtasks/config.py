"""Run configuration and credential locations.

Credentials live in the repository root:
    .env                  - ASANA_ACCESS_TOKEN, ASANA_WORKSPACE_GID, ...
    google/credentials.json - Google OAuth client credentials
    google/token.json       - Google OAuth tokens

The .env file is loaded on import. Variables already present in the
environment take precedence, so a scheduler can inject secrets directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# __file__ is src/asana_gtasks/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
GOOGLE_DIR = REPO_ROOT / "google"

ENV_FILE = REPO_ROOT / ".env"
GOOGLE_CREDENTIALS = GOOGLE_DIR / "credentials.json"
GOOGLE_TOKEN = GOOGLE_DIR / "token.json"

# Name of the "Today" section in Asana's My Tasks
DEFAULT_SECTION_NAME = "今日"
DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_DUE_HOUR = 9
DEFAULT_PACING_SECONDS = 0.5


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of variables that were added to the environment.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def _env(name: str) -> str | None:
    """Read an environment variable, treating blank values as unset."""
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class SyncConfig:
    """Immutable configuration for one sync run."""

    asana_access_token: str | None
    asana_workspace_gid: str | None
    google_task_list_id: str | None = None
    section_name: str = DEFAULT_SECTION_NAME
    timezone: str = DEFAULT_TIMEZONE
    due_hour: int = DEFAULT_DUE_HOUR
    pacing_seconds: float = DEFAULT_PACING_SECONDS

    @classmethod
    def from_env(cls) -> SyncConfig:
        """Build configuration from environment variables.

        Raises:
            ValueError: If SYNC_DUE_HOUR or SYNC_PACING_SECONDS is not a number.
        """
        return cls(
            asana_access_token=_env("ASANA_ACCESS_TOKEN"),
            asana_workspace_gid=_env("ASANA_WORKSPACE_GID"),
            google_task_list_id=_env("GOOGLE_TASK_LIST_ID"),
            section_name=_env("ASANA_SECTION_NAME") or DEFAULT_SECTION_NAME,
            timezone=_env("SYNC_TIMEZONE") or DEFAULT_TIMEZONE,
            due_hour=int(_env("SYNC_DUE_HOUR") or DEFAULT_DUE_HOUR),
            pacing_seconds=float(_env("SYNC_PACING_SECONDS") or DEFAULT_PACING_SECONDS),
        )

    def validate(self) -> list[str]:
        """Validate required configuration. Returns list of errors."""
        errors = []

        if not self.asana_access_token:
            errors.append("ASANA_ACCESS_TOKEN is required")

        if not self.asana_workspace_gid:
            errors.append("ASANA_WORKSPACE_GID is required")

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"SYNC_TIMEZONE is not a known time zone: {self.timezone}")

        if not 0 <= self.due_hour <= 23:
            errors.append(f"SYNC_DUE_HOUR must be between 0 and 23, got {self.due_hour}")

        if self.pacing_seconds < 0:
            errors.append("SYNC_PACING_SECONDS must not be negative")

        return errors


def ensure_google_dir() -> Path:
    """Create google credentials directory if it doesn't exist.

    Returns:
        Path to google directory.
    """
    GOOGLE_DIR.mkdir(parents=True, exist_ok=True)
    return GOOGLE_DIR


def get_credential_status() -> dict:
    """Get status of all configured credentials.

    Returns:
        Dictionary with credential status. Secret values are never included.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "asana": {
            "access_token": bool(_env("ASANA_ACCESS_TOKEN")),
            "workspace_gid": _env("ASANA_WORKSPACE_GID"),
            "section_name": _env("ASANA_SECTION_NAME") or DEFAULT_SECTION_NAME,
        },
        "google": {
            "credentials": GOOGLE_CREDENTIALS.exists(),
            "token": GOOGLE_TOKEN.exists(),
            "task_list_id": _env("GOOGLE_TASK_LIST_ID"),
        },
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
