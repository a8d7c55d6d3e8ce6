"""Tests for writing Google Tasks."""

from dataclasses import replace

from asana_gtasks.asana import SourceTask
from asana_gtasks.google import CredentialsNotFoundError
from asana_gtasks.sync import FixedPacing, TaskDraft, TaskWriter, compose_notes
from asana_gtasks.tasks import TaskList
from conftest import FakeTasksClient


def make_writer(tasks_client, config, fixed_now, sleeps=None):
    sleeps = sleeps if sleeps is not None else []
    return TaskWriter(
        tasks_client,
        config,
        pacing=FixedPacing(0),
        sleep=sleeps.append,
        clock=lambda: fixed_now,
    )


class TestTaskDraft:
    """Test building Google Task drafts."""

    def test_title_with_due_suffix(self):
        """Should append the due suffix to the title."""
        task = SourceTask(gid="1", name="Write report", due_on="2025-03-05")
        draft = TaskDraft.from_source(task, "2025-03-05T00:00:00.000Z")
        assert draft.title == "Write report [3/5期限]"
        assert draft.status == "needsAction"
        assert draft.due == "2025-03-05T00:00:00.000Z"

    def test_title_without_due(self):
        """Should keep the title unchanged when there is no due date."""
        draft = TaskDraft.from_source(SourceTask(gid="1", name="Review PR"), "d")
        assert draft.title == "Review PR"

    def test_untitled_task(self):
        """Should use a placeholder for tasks without a name."""
        draft = TaskDraft.from_source(SourceTask(gid="1", name=""), "d")
        assert draft.title == "名称未設定タスク"

    def test_notes_embed_source_fields(self):
        """Should embed notes, permalink and gid verbatim."""
        notes = compose_notes("abc", "https://x", "123")
        assert "abc" in notes
        assert "https://x" in notes
        assert "123" in notes

    def test_notes_placeholders(self):
        """Should fall back to N/A when there is no permalink."""
        notes = compose_notes(None, None, "9")
        assert "Asanaリンク: N/A" in notes
        assert notes.endswith("AsanaタスクGID: 9")


class TestTaskWriter:
    """Test TaskWriter.write_all."""

    def test_one_call_per_task_with_shared_due(self, config, fixed_now, source_tasks):
        """Should create every task with the same due time."""
        client = FakeTasksClient()
        report = make_writer(client, config, fixed_now).write_all(source_tasks)

        assert len(client.created) == len(source_tasks)
        assert {call["due"] for call in client.created} == {"2025-03-05T00:00:00.000Z"}
        assert {call["tasklist_id"] for call in client.created} == {"list-1"}
        assert {call["status"] for call in client.created} == {"needsAction"}
        assert report.attempted == report.created == 5
        assert report.failed == 0
        assert not report.aborted

    def test_titles(self, config, fixed_now, source_tasks):
        """Should build titles from name and due date."""
        client = FakeTasksClient()
        make_writer(client, config, fixed_now).write_all(source_tasks)

        assert [call["title"] for call in client.created] == [
            "Write report [3/5期限]",
            "Call Bob [3/6期限]",
            "Review PR",
            "名称未設定タスク",
            "Plan trip [4/2期限]",
        ]

    def test_uses_first_list_by_default(self, config, fixed_now, source_tasks):
        """Should ask for one list when none is configured."""
        client = FakeTasksClient(lists=[TaskList("a", "A"), TaskList("b", "B")])
        report = make_writer(client, config, fixed_now).write_all(source_tasks[:1])

        assert client.list_calls == [1]
        assert report.tasklist_id == "a"

    def test_configured_list_skips_lookup(self, config, fixed_now, source_tasks):
        """Should use the configured list without listing."""
        client = FakeTasksClient()
        config = replace(config, google_task_list_id="configured")
        make_writer(client, config, fixed_now).write_all(source_tasks[:2])

        assert client.list_calls == []
        assert {call["tasklist_id"] for call in client.created} == {"configured"}

    def test_no_lists_aborts(self, config, fixed_now, source_tasks):
        """Should make no creation calls when the account has no lists."""
        client = FakeTasksClient(lists=[])
        report = make_writer(client, config, fixed_now).write_all(source_tasks)

        assert client.created == []
        assert report.aborted
        assert report.errors[0].stage == "tasklist"

    def test_list_error_aborts(self, config, fixed_now, source_tasks):
        """Should abort when listing task lists raises."""
        client = FakeTasksClient(list_error=RuntimeError("403 forbidden"))
        report = make_writer(client, config, fixed_now).write_all(source_tasks)

        assert client.created == []
        assert report.aborted
        assert "403 forbidden" in report.errors[0].message

    def test_missing_authorization_aborts_once(self, config, fixed_now, source_tasks):
        """Should abort with one auth error even when a list is configured."""
        client = FakeTasksClient(auth_error=CredentialsNotFoundError("/nowhere/credentials.json"))
        sleeps = []
        config = replace(config, google_task_list_id="configured")
        report = make_writer(client, config, fixed_now, sleeps).write_all(source_tasks)

        assert report.aborted
        assert client.created == []
        assert sleeps == []
        assert [error.stage for error in report.errors] == ["auth"]
        assert "/nowhere/credentials.json" in report.errors[0].message

    def test_failure_does_not_stop_remaining(self, config, fixed_now, source_tasks):
        """Should still attempt tasks 4 and 5 after task 3 fails."""
        client = FakeTasksClient(fail_on={2})
        report = make_writer(client, config, fixed_now).write_all(source_tasks)

        assert len(client.created) == 5
        assert report.created == 4
        assert report.failed == 1
        assert not report.aborted
        assert report.errors[0].stage == "write"
        assert "Review PR" in report.errors[0].message

    def test_pauses_after_every_attempt(self, config, fixed_now, source_tasks):
        """Should pause after successes and failures alike."""
        client = FakeTasksClient(fail_on={0, 3})
        sleeps = []
        writer = TaskWriter(
            client,
            config,
            pacing=FixedPacing(0.5),
            sleep=sleeps.append,
            clock=lambda: fixed_now,
        )
        writer.write_all(source_tasks)

        assert sleeps == [0.5] * 5

    def test_default_pacing_from_config(self, config):
        """Should build the pacing policy from the configured delay."""
        writer = TaskWriter(FakeTasksClient(), replace(config, pacing_seconds=1.5))
        assert writer.pacing.wait(0) == 1.5

    def test_empty_batch(self, config, fixed_now):
        """Should do nothing but resolve the list for an empty batch."""
        client = FakeTasksClient()
        report = make_writer(client, config, fixed_now).write_all([])
        assert client.created == []
        assert report.attempted == 0
