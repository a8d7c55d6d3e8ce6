"""Create Google Tasks from Asana tasks."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from asana_gtasks.asana import SourceTask
from asana_gtasks.config import SyncConfig
from asana_gtasks.google import GoogleAuthError
from asana_gtasks.result import Failed, NotFound, Ok, Result
from asana_gtasks.sync.due import fixed_due_timestamp
from asana_gtasks.sync.models import SyncError, TaskDraft, WriteReport
from asana_gtasks.sync.pacing import FixedPacing, PacingPolicy
from asana_gtasks.tasks import TasksClient

logger = logging.getLogger(__name__)


class TaskWriter:
    """Writes one Google Task per Asana task into a single list.

    Every task created by one ``write_all`` call gets the same due time.
    A failed creation is logged and skipped; the remaining tasks are still
    attempted.
    """

    def __init__(
        self,
        tasks_client: TasksClient,
        config: SyncConfig,
        pacing: PacingPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
    ):
        self.tasks_client = tasks_client
        self.config = config
        self.pacing = pacing or FixedPacing(config.pacing_seconds)
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def resolve_tasklist_id(self) -> Result:
        """Use the configured list, or fall back to the first list on the account.

        Returns:
            ``Ok(id)``, ``NotFound`` if the account has no lists, or
            ``Failed`` if the lists could not be read.
        """
        if self.config.google_task_list_id:
            return Ok(self.config.google_task_list_id)

        try:
            lists = self.tasks_client.list_task_lists(max_results=1)
        except Exception as e:
            logger.error(f"Failed to list Google Tasks lists: {e}")
            return Failed(f"could not list task lists: {e}")

        if not lists:
            logger.error("No Google Tasks list found. Create at least one list in Google Tasks.")
            return NotFound("task list")

        logger.info(f"Using default Google Tasks list: {lists[0].id} ({lists[0].title})")
        return Ok(lists[0].id)

    def write_all(self, tasks: list[SourceTask]) -> WriteReport:
        """Create a Google Task for each Asana task.

        Args:
            tasks: Asana tasks to copy.

        Returns:
            WriteReport with counts and per-task errors. ``aborted`` is set
            when Google Tasks is not authorized or no destination list is
            available, in which case nothing was created.
        """
        report = WriteReport()

        try:
            self.tasks_client.ensure_authorized()
        except (GoogleAuthError, ValueError) as e:
            logger.error(f"Google Tasks is not authorized: {e}")
            report.aborted = True
            report.errors.append(SyncError("auth", str(e)))
            return report

        tasklist = self.resolve_tasklist_id()
        if not isinstance(tasklist, Ok):
            reason = tasklist.reason if isinstance(tasklist, Failed) else "no Google Tasks list exists"
            report.aborted = True
            report.errors.append(SyncError("tasklist", reason))
            return report

        due = fixed_due_timestamp(self.config.timezone, self.config.due_hour, self._clock())
        logger.info(f"Google Tasks due time for this run: {due} (UTC)")
        report.tasklist_id = tasklist.value
        report.due = due

        for index, task in enumerate(tasks):
            draft = TaskDraft.from_source(task, due)
            report.attempted += 1

            try:
                created = self.tasks_client.create_task(
                    title=draft.title,
                    tasklist_id=tasklist.value,
                    notes=draft.notes,
                    due=draft.due,
                    status=draft.status,
                )
            except Exception as e:
                report.failed += 1
                report.errors.append(SyncError("write", f"'{draft.title}' (Asana {task.gid}): {e}"))
                logger.error(f"Failed to create Google Task '{draft.title}': {e}")
            else:
                report.created += 1
                logger.info(f"Created Google Task '{created.title}' (ID: {created.id})")

            self._sleep(self.pacing.wait(index))

        return report
