"""Google Tasks API client implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from asana_gtasks.google import GoogleOAuth
from asana_gtasks.google.exceptions import AuthorizationRequired


@dataclass
class TaskList:
    """Represents a Google Tasks list."""

    id: str
    title: str


@dataclass
class Task:
    """Represents a Google Task."""

    id: str
    title: str
    status: str  # "needsAction" or "completed"
    notes: str | None = None
    due: str | None = None  # RFC 3339 as returned by the API


class TasksClient:
    """Google Tasks API client with OAuth authentication.

    Usage:
        client = TasksClient()
        lists = client.list_task_lists(max_results=1)
        client.create_task(title="Review PR", tasklist_id=lists[0].id)

    Note:
        Requires OAuth authorization. Run `asana-gtasks google login` once.
    """

    def __init__(
        self,
        scopes: list[str] | None = None,
        service: Any = None,
    ) -> None:
        """Initialize Tasks client.

        Args:
            scopes: OAuth scopes. Defaults to ["tasks"].
            service: Prebuilt googleapiclient service; skips OAuth when given.
        """
        self._scopes = scopes or ["tasks"]
        self._service: Any = service

    def _get_service(self) -> Any:
        """Get or create Tasks API service."""
        if self._service is None:
            auth = GoogleOAuth(scopes=self._scopes)
            if not auth.is_authorized():
                raise AuthorizationRequired(
                    auth.get_authorization_url(),
                    "Tasks API requires OAuth authorization. "
                    "Run 'asana-gtasks google login' to authorize.",
                )
            self._service = auth.build_service("tasks", "v1")
        return self._service

    def ensure_authorized(self) -> None:
        """Build the service now so missing credentials surface before any write.

        Raises:
            GoogleAuthError: If credentials or the token are missing or unusable.
        """
        self._get_service()

    # =========================================================================
    # Task Lists
    # =========================================================================

    def list_task_lists(self, max_results: int | None = None) -> list[TaskList]:
        """List task lists in the order the API returns them.

        Args:
            max_results: Maximum number of lists to return.

        Returns:
            List of TaskList objects.
        """
        service = self._get_service()
        kwargs: dict[str, Any] = {}
        if max_results:
            kwargs["maxResults"] = max_results

        results = service.tasklists().list(**kwargs).execute()
        return [self._parse_task_list(item) for item in results.get("items", [])]

    def _parse_task_list(self, data: dict) -> TaskList:
        """Parse task list from API response."""
        return TaskList(id=data["id"], title=data.get("title", ""))

    # =========================================================================
    # Tasks
    # =========================================================================

    def list_tasks(
        self,
        tasklist_id: str = "@default",
        show_completed: bool = False,
        max_results: int = 100,
    ) -> list[Task]:
        """List tasks in a task list.

        Args:
            tasklist_id: Task list ID or "@default" for primary list.
            show_completed: Include completed tasks.
            max_results: Maximum number of tasks to return.

        Returns:
            List of Task objects.
        """
        service = self._get_service()
        results = (
            service.tasks()
            .list(
                tasklist=tasklist_id,
                showCompleted=show_completed,
                maxResults=max_results,
            )
            .execute()
        )
        return [self._parse_task(item) for item in results.get("items", [])]

    def create_task(
        self,
        title: str,
        tasklist_id: str = "@default",
        notes: str | None = None,
        due: str | None = None,
        status: str = "needsAction",
    ) -> Task:
        """Create a new task.

        Args:
            title: Task title.
            tasklist_id: Task list ID or "@default" for primary list.
            notes: Task notes/description.
            due: RFC 3339 timestamp, e.g. "2025-03-05T00:00:00.000Z".
            status: "needsAction" or "completed".

        Returns:
            Created Task.

        Raises:
            googleapiclient.errors.HttpError: If the API rejects the request.
        """
        service = self._get_service()

        body: dict[str, Any] = {"title": title, "status": status}
        if notes:
            body["notes"] = notes
        if due:
            body["due"] = due

        result = service.tasks().insert(tasklist=tasklist_id, body=body).execute()
        return self._parse_task(result)

    def _parse_task(self, data: dict) -> Task:
        """Parse task from API response."""
        return Task(
            id=data["id"],
            title=data.get("title", ""),
            status=data.get("status", "needsAction"),
            notes=data.get("notes"),
            due=data.get("due"),
        )
