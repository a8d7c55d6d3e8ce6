"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from asana_gtasks.asana import SourceTask
from asana_gtasks.config import SyncConfig
from asana_gtasks.tasks import Task, TaskList


class FakeTasksClient:
    """In-memory stand-in for TasksClient that records calls."""

    def __init__(self, lists=None, fail_on=(), list_error=None, auth_error=None):
        self.lists = lists if lists is not None else [TaskList(id="list-1", title="My Tasks")]
        self.fail_on = set(fail_on)
        self.list_error = list_error
        self.auth_error = auth_error
        self.auth_calls = 0
        self.list_calls = []
        self.created = []

    def ensure_authorized(self):
        self.auth_calls += 1
        if self.auth_error:
            raise self.auth_error

    def list_task_lists(self, max_results=None):
        self.list_calls.append(max_results)
        if self.list_error:
            raise self.list_error
        return self.lists[:max_results] if max_results else list(self.lists)

    def create_task(self, title, tasklist_id="@default", notes=None, due=None, status="needsAction"):
        index = len(self.created)
        self.created.append(
            {"title": title, "tasklist_id": tasklist_id, "notes": notes, "due": due, "status": status}
        )
        if index in self.fail_on:
            raise RuntimeError(f"insert failed for task {index}")
        return Task(id=f"g{index}", title=title, status=status, notes=notes, due=due)


@pytest.fixture
def config():
    """A valid configuration with no pause between calls."""
    return SyncConfig(
        asana_access_token="test-token",
        asana_workspace_gid="ws-1",
        pacing_seconds=0,
    )


@pytest.fixture
def fixed_now():
    """2025-03-05 10:00 in Tokyo."""
    return datetime(2025, 3, 5, 1, 0, tzinfo=timezone.utc)


@pytest.fixture
def source_tasks():
    """Five Asana tasks with assorted due dates."""
    return [
        SourceTask(gid="1", name="Write report", notes="draft", due_on="2025-03-05"),
        SourceTask(gid="2", name="Call Bob", due_at="2025-03-06T05:00:00.000Z"),
        SourceTask(gid="3", name="Review PR", permalink_url="https://app.asana.com/0/0/3"),
        SourceTask(gid="4", name=""),
        SourceTask(gid="5", name="Plan trip", due_on="2025-04-01", due_at="2025-04-02T00:00:00Z"),
    ]
