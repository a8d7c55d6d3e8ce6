"""Asana REST API client.

Read-only access to the pieces of Asana the sync needs: the caller's
"My Tasks" list, its sections, and the incomplete tasks in a section.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from asana_gtasks.asana.exceptions import AsanaAPIError, AsanaAuthError
from asana_gtasks.result import Failed, NotFound, Ok, Result

logger = logging.getLogger(__name__)

TASK_FIELDS = "name,notes,due_on,due_at,permalink_url,gid,completed"


@dataclass
class SourceTask:
    """Represents an Asana task as read by the sync."""

    gid: str
    name: str
    notes: str = ""
    due_on: str | None = None  # YYYY-MM-DD
    due_at: str | None = None  # ISO 8601, wins over due_on
    permalink_url: str | None = None
    completed: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SourceTask:
        """Parse task from API response."""
        return cls(
            gid=str(data["gid"]),
            name=data.get("name") or "",
            notes=data.get("notes") or "",
            due_on=data.get("due_on"),
            due_at=data.get("due_at"),
            permalink_url=data.get("permalink_url"),
            completed=bool(data.get("completed", False)),
        )


class AsanaClient:
    """Asana API client with bearer token authentication.

    Public methods never raise on HTTP failures. They return a ``Result``:
    ``Ok`` with the data, ``NotFound`` for a legitimate absence, or
    ``Failed`` with a reason that has already been logged.

    Example:
        >>> with AsanaClient(access_token="1/1234:abcd") as client:
        ...     result = client.get_user_task_list_gid("1200000000000000")
    """

    BASE_URL = "https://app.asana.com/api/1.0"

    def __init__(
        self,
        access_token: str,
        http_client: httpx.Client | None = None,
    ):
        """Initialize Asana client.

        Args:
            access_token: Asana personal access token.
            http_client: Preconfigured httpx client (e.g. with a mock transport).
        """
        self.access_token = access_token
        self._client = http_client or httpx.Client(timeout=30.0)

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated API request.

        Args:
            method: HTTP method.
            endpoint: API endpoint (e.g., "/users/me").
            params: Query parameters.
            json: JSON body for POST/PUT.

        Returns:
            The ``data`` member of the response envelope, or the whole
            parsed body when there is no envelope.

        Raises:
            AsanaAuthError: If the token is rejected.
            AsanaAPIError: On transport errors, non-2xx status or invalid JSON.
        """
        url = f"{self.BASE_URL}{endpoint}"
        logger.debug(f"Asana API call: {method} {url}")

        try:
            response = self._client.request(
                method, url, headers=self._get_headers(), params=params, json=json
            )
        except httpx.HTTPError as e:
            raise AsanaAPIError(f"Request failed: {e}") from e

        if response.status_code in (401, 403):
            raise AsanaAuthError(
                f"Access denied: {response.text}", status_code=response.status_code
            )
        if not 200 <= response.status_code < 300:
            raise AsanaAPIError(
                f"API error: {response.text}", status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise AsanaAPIError(
                f"Invalid JSON in response: {e}. Response: {response.text}",
                status_code=response.status_code,
            ) from e

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    def call(
        self,
        endpoint: str,
        method: str = "GET",
        payload: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Result:
        """Call the API and wrap the outcome.

        Args:
            endpoint: API endpoint relative to the base URL.
            method: HTTP method.
            payload: JSON body.
            params: Query parameters.

        Returns:
            ``Ok(data)`` on a 2xx response, ``Failed(reason)`` otherwise.
        """
        try:
            return Ok(self._request(method, endpoint, params=params, json=payload))
        except AsanaAPIError as e:
            logger.error(
                f"Asana API request failed: {method} {self.BASE_URL}{endpoint} "
                f"(status {e.status_code}): {e}"
            )
            return Failed(str(e))

    def get_user_task_list_gid(self, workspace_gid: str) -> Result:
        """Get the gid of the caller's "My Tasks" list in a workspace.

        Args:
            workspace_gid: Asana workspace gid.

        Returns:
            ``Ok(gid)`` or ``Failed``.
        """
        result = self.call(
            "/users/me/user_task_list",
            params={"workspace": workspace_gid, "opt_fields": "gid"},
        )
        if not isinstance(result, Ok):
            return result

        data = result.value
        if isinstance(data, dict) and data.get("gid"):
            logger.info(f"User task list gid: {data['gid']}")
            return Ok(str(data["gid"]))

        logger.error(f"User task list response has no gid: {data!r}")
        return Failed("user task list response has no gid")

    def find_section_gid(self, collection_gid: str, name: str) -> Result:
        """Find a section by exact name.

        Args:
            collection_gid: Gid of the project or user task list.
            name: Section name, matched case-sensitively.

        Returns:
            ``Ok(gid)`` of the first match in server order, ``NotFound`` if no
            section has that name, or ``Failed`` if the sections could not be read.
        """
        logger.info(f"Looking up section '{name}' in {collection_gid}")
        result = self.call(
            f"/projects/{collection_gid}/sections",
            params={"opt_fields": "name,gid"},
        )
        if not isinstance(result, Ok):
            return result

        sections = result.value
        if not isinstance(sections, list):
            logger.error(f"Unexpected sections response for {collection_gid}: {sections!r}")
            return Failed("sections response is not a list")

        for section in sections:
            if section.get("name") == name:
                logger.info(f"Found section '{name}': {section['gid']}")
                return Ok(str(section["gid"]))

        logger.info(f"No section named '{name}' in {collection_gid}")
        return NotFound(name)

    def fetch_section_tasks(self, collection_gid: str, section_name: str) -> Result:
        """Get incomplete tasks from a named section.

        Args:
            collection_gid: Gid of the project or user task list.
            section_name: Section name to read from.

        Returns:
            ``Ok(list[SourceTask])``. The list is empty when the section does
            not exist. ``Failed`` when the section or its tasks could not be read.
        """
        section = self.find_section_gid(collection_gid, section_name)
        if isinstance(section, NotFound):
            return Ok([])
        if not isinstance(section, Ok):
            return section

        result = self.call(
            f"/sections/{section.value}/tasks",
            params={"completed": "false", "opt_fields": TASK_FIELDS},
        )
        if not isinstance(result, Ok):
            return result

        data = result.value
        if not isinstance(data, list):
            logger.error(f"Unexpected tasks response for section {section.value}: {data!r}")
            return Failed("tasks response is not a list")

        tasks = [SourceTask.from_api(item) for item in data]
        tasks = [task for task in tasks if not task.completed]
        logger.info(f"Fetched {len(tasks)} incomplete task(s) from section '{section_name}'")
        return Ok(tasks)

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
