"""Google Tasks API client.

Usage:
    from asana_gtasks.tasks import TasksClient

    client = TasksClient()
    lists = client.list_task_lists()
    task = client.create_task(
        title="Review PR",
        tasklist_id=lists[0].id,
        due="2026-01-25T00:00:00.000Z",
    )

OAuth Setup:
    1. Download OAuth credentials from Google Cloud Console
    2. Import: asana-gtasks google import ~/Downloads/credentials.json
    3. Authorize: asana-gtasks google login
"""

from __future__ import annotations

from asana_gtasks.tasks.client import Task, TaskList, TasksClient

__all__ = ["TasksClient", "Task", "TaskList"]
