"""Tests for the Google Tasks client."""

from unittest.mock import MagicMock, patch

import pytest

from asana_gtasks.google import AuthorizationRequired, CredentialsNotFoundError
from asana_gtasks.tasks import TasksClient


@pytest.fixture
def service():
    """A stand-in for the googleapiclient Tasks service."""
    return MagicMock()


class TestTasksClient:
    """Test TasksClient against a mocked service."""

    def test_list_task_lists(self, service):
        """Should parse lists and pass maxResults."""
        service.tasklists.return_value.list.return_value.execute.return_value = {
            "items": [
                {"id": "L1", "title": "My Tasks", "updated": "2025-03-01T10:00:00.000Z"},
            ]
        }
        client = TasksClient(service=service)

        lists = client.list_task_lists(max_results=1)

        service.tasklists.return_value.list.assert_called_once_with(maxResults=1)
        assert len(lists) == 1
        assert lists[0].id == "L1"
        assert lists[0].title == "My Tasks"

    def test_list_task_lists_empty(self, service):
        """Should return an empty list when the account has none."""
        service.tasklists.return_value.list.return_value.execute.return_value = {}
        assert TasksClient(service=service).list_task_lists() == []

    def test_create_task(self, service):
        """Should insert title, notes, status and due."""
        service.tasks.return_value.insert.return_value.execute.return_value = {
            "id": "T1",
            "title": "Write report [3/5期限]",
            "status": "needsAction",
            "due": "2025-03-05T00:00:00.000Z",
        }
        client = TasksClient(service=service)

        task = client.create_task(
            title="Write report [3/5期限]",
            tasklist_id="L1",
            notes="Asanaタスク詳細:\n",
            due="2025-03-05T00:00:00.000Z",
        )

        service.tasks.return_value.insert.assert_called_once_with(
            tasklist="L1",
            body={
                "title": "Write report [3/5期限]",
                "status": "needsAction",
                "notes": "Asanaタスク詳細:\n",
                "due": "2025-03-05T00:00:00.000Z",
            },
        )
        assert task.id == "T1"
        assert task.status == "needsAction"

    def test_create_task_minimal(self, service):
        """Should omit empty notes and due."""
        service.tasks.return_value.insert.return_value.execute.return_value = {"id": "T2"}
        TasksClient(service=service).create_task(title="Plain")

        service.tasks.return_value.insert.assert_called_once_with(
            tasklist="@default", body={"title": "Plain", "status": "needsAction"}
        )

    def test_list_tasks(self, service):
        """Should list open tasks."""
        service.tasks.return_value.list.return_value.execute.return_value = {
            "items": [{"id": "T1", "title": "A", "status": "completed"}]
        }
        tasks = TasksClient(service=service).list_tasks("L1")

        service.tasks.return_value.list.assert_called_once_with(
            tasklist="L1", showCompleted=False, maxResults=100
        )
        assert tasks[0].status == "completed"

    def test_requires_authorization(self):
        """Should raise AuthorizationRequired without a token."""
        with patch("asana_gtasks.tasks.client.GoogleOAuth") as oauth_cls:
            oauth_cls.return_value.is_authorized.return_value = False
            oauth_cls.return_value.get_authorization_url.return_value = "https://auth"

            with pytest.raises(AuthorizationRequired) as exc_info:
                TasksClient().list_task_lists()

        assert exc_info.value.auth_url == "https://auth"

    def test_ensure_authorized_builds_service_once(self):
        """Should build the service up front and reuse it."""
        with patch("asana_gtasks.tasks.client.GoogleOAuth") as oauth_cls:
            oauth_cls.return_value.is_authorized.return_value = True
            client = TasksClient()
            client.ensure_authorized()
            client.ensure_authorized()

        oauth_cls.return_value.build_service.assert_called_once_with("tasks", "v1")

    def test_ensure_authorized_missing_credentials(self, tmp_path):
        """Should raise CredentialsNotFoundError before any API call."""
        with patch("asana_gtasks.google.oauth.GOOGLE_CREDENTIALS", tmp_path / "missing.json"):
            with pytest.raises(CredentialsNotFoundError):
                TasksClient().ensure_authorized()
