"""CLI for asana-gtasks.

Usage:
    asana-gtasks status                    # Show configuration status
    asana-gtasks sync [--verbose]          # Run one sync
    asana-gtasks list [--tasklist ID]      # List open tasks in the target list
    asana-gtasks google login              # Interactive OAuth login
    asana-gtasks google status             # Show OAuth token status
    asana-gtasks google import <path>      # Import OAuth client credentials

Schedule ``asana-gtasks sync`` with cron or a systemd timer.
"""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
import webbrowser
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _mark(value) -> str:
    return "[x]" if value else "[ ]"


def cmd_status() -> int:
    """Show which settings and credential files are present."""
    from asana_gtasks.config import get_credential_status

    status = get_credential_status()

    print("=" * 60)
    print("ASANA-GTASKS STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {status['repo_root']}")
    print(f".env:       {_mark(status['env_file'])}")
    print()

    print("Asana:")
    print(f"  access token:  {_mark(status['asana']['access_token'])}")
    print(f"  workspace gid: {status['asana']['workspace_gid'] or '[ ]'}")
    print(f"  section:       {status['asana']['section_name']}")
    print()

    print("Google:")
    print(f"  credentials.json: {_mark(status['google']['credentials'])}")
    print(f"  token.json:       {_mark(status['google']['token'])}")
    print(f"  task list id:     {status['google']['task_list_id'] or '(default)'}")
    print()

    return 0


def cmd_sync(verbose: bool = False) -> int:
    """Run one sync and return 0 if every task was created."""
    from asana_gtasks.sync import run_sync

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)

    outcome = run_sync()

    print(
        f"fetched={outcome.fetched} created={outcome.created} "
        f"failed={outcome.failed} aborted={outcome.aborted}"
    )
    for error in outcome.errors:
        print(f"  [{error.stage}] {error.message}", file=sys.stderr)

    return 0 if outcome.ok else 1


def cmd_list(tasklist_id: str | None = None) -> int:
    """List open tasks in the configured (or first) Google Tasks list."""
    from googleapiclient.errors import HttpError

    from asana_gtasks.config import SyncConfig
    from asana_gtasks.google import GoogleAuthError
    from asana_gtasks.tasks import TasksClient

    client = TasksClient()
    try:
        tasklist_id = tasklist_id or SyncConfig.from_env().google_task_list_id
        if not tasklist_id:
            lists = client.list_task_lists(max_results=1)
            if not lists:
                print("No task lists found.")
                return 0
            tasklist_id = lists[0].id

        tasks = client.list_tasks(tasklist_id)
    except (GoogleAuthError, HttpError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Tasks in list {tasklist_id}:")
    if not tasks:
        print("  (no tasks)")
    for task in tasks:
        print(f"  - {task.title} (due: {task.due or 'none'}, ID: {task.id})")
    return 0


def google_login(no_browser: bool = False) -> int:
    """Interactive Google OAuth login for the Tasks scope."""
    from asana_gtasks.google import CredentialsNotFoundError, GoogleOAuth

    print("=" * 60)
    print("ASANA-GTASKS GOOGLE LOGIN")
    print("=" * 60)

    try:
        auth = GoogleOAuth(scopes=["tasks"])
    except CredentialsNotFoundError as e:
        print(f"\nError: {e}")
        return 1

    if auth.is_authorized() and auth.get_token_info()["status"] == "valid":
        print("\nAlready authorized with valid token")
        return google_status()

    print("\nA browser window will open for Google consent.")
    print("After granting access, copy the redirect URL back here.\n")

    url = auth.get_authorization_url()
    print(f"Authorization URL:\n{url}\n")

    if not no_browser:
        webbrowser.open(url)

    redirect_url = input("Paste redirect URL: ").strip()
    if not redirect_url:
        print("No URL provided; aborting.")
        return 1

    try:
        auth.fetch_token(redirect_url)
    except Exception as e:
        print(f"\nError: {e}")
        return 1

    print("\nToken saved successfully!")
    return google_status()


def google_status() -> int:
    """Show Google OAuth token status."""
    from asana_gtasks.google import CredentialsNotFoundError, GoogleOAuth

    try:
        auth = GoogleOAuth(scopes=["tasks"])
    except CredentialsNotFoundError as e:
        print(f"Error: {e}")
        return 1

    info = auth.get_token_info()
    if info["status"] == "no_token":
        print("No token found - run 'asana-gtasks google login'")
        return 1

    print(f"Status     : {info['status']}")
    print(f"Scopes     : {', '.join(info.get('scopes', []))}")
    print(f"Expires in : {info.get('expires_in', 'unknown')}")
    print(f"Refresh    : {'yes' if info.get('has_refresh_token') else 'no'}")
    return 0


def google_import(source_path: str) -> int:
    """Copy OAuth client credentials into the repo's google/ directory."""
    from asana_gtasks.config import GOOGLE_CREDENTIALS, ensure_google_dir

    source = Path(source_path).expanduser()
    if not source.exists():
        print(f"Error: File not found: {source}")
        return 1

    try:
        with open(source) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}")
        return 1

    key = "installed" if "installed" in data else "web" if "web" in data else None
    if key is None:
        print("Error: Invalid OAuth credentials format")
        print("Expected 'installed' or 'web' key in JSON")
        return 1

    ensure_google_dir()
    shutil.copy2(source, GOOGLE_CREDENTIALS)

    print("Imported OAuth credentials")
    print(f"  From: {source}")
    print(f"  To:   {GOOGLE_CREDENTIALS}")
    print(f"  Client ID: {data[key].get('client_id', 'unknown')[:40]}...")
    print()
    print("Next: Run 'asana-gtasks google login' to authorize")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asana-gtasks",
        description="Copy the Asana 'Today' section into Google Tasks",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("status", help="Show configuration status")

    sync_parser = subparsers.add_parser("sync", help="Run one sync")
    sync_parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    list_parser = subparsers.add_parser("list", help="List open tasks in the Google Tasks list")
    list_parser.add_argument("--tasklist", help="Task list ID (default: configured or first list)")

    google_parser = subparsers.add_parser("google", help="Google OAuth management")
    google_subparsers = google_parser.add_subparsers(dest="google_command", help="Command")

    login_parser = google_subparsers.add_parser("login", help="Interactive OAuth login")
    login_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open browser automatically",
    )
    google_subparsers.add_parser("status", help="Show token status")
    import_parser = google_subparsers.add_parser("import", help="Import OAuth credentials")
    import_parser.add_argument("path", help="Path to credentials.json file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "status":
        return cmd_status()

    if args.command == "sync":
        return cmd_sync(args.verbose)

    if args.command == "list":
        return cmd_list(args.tasklist)

    if args.command == "google":
        if args.google_command == "login":
            return google_login(args.no_browser)
        if args.google_command == "status":
            return google_status()
        if args.google_command == "import":
            return google_import(args.path)

        print("usage: asana-gtasks google {login,status,import}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
