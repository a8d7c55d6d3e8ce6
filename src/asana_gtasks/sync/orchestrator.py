"""Run one Asana "Today" to Google Tasks sync."""

from __future__ import annotations

import logging

from asana_gtasks.asana import AsanaClient
from asana_gtasks.config import SyncConfig
from asana_gtasks.result import Failed, Ok
from asana_gtasks.sync.models import SyncOutcome
from asana_gtasks.sync.pacing import PacingPolicy
from asana_gtasks.sync.writer import TaskWriter
from asana_gtasks.tasks import TasksClient

logger = logging.getLogger(__name__)


def _reason(result) -> str:
    return result.reason if isinstance(result, Failed) else repr(result)


def run_sync(
    config: SyncConfig | None = None,
    asana_client: AsanaClient | None = None,
    tasks_client: TasksClient | None = None,
    pacing: PacingPolicy | None = None,
) -> SyncOutcome:
    """Copy the incomplete tasks of the Asana "Today" section to Google Tasks.

    Called without arguments, reads configuration from the environment and
    builds real API clients, which is how a scheduler invokes it. Never
    raises; every problem ends up in the returned outcome and in the log.

    Args:
        config: Run configuration. Defaults to ``SyncConfig.from_env()``.
        asana_client: Asana client to use instead of building one.
        tasks_client: Google Tasks client to use instead of building one.
        pacing: Pause policy between creation calls.

    Returns:
        SyncOutcome with fetched/created/failed counts and errors.
    """
    outcome = SyncOutcome()
    owned_client: AsanaClient | None = None

    try:
        if config is None:
            try:
                config = SyncConfig.from_env()
            except ValueError as e:
                logger.error(f"Invalid configuration: {e}")
                return outcome.abort("config", str(e))

        errors = config.validate()
        if errors:
            for error in errors:
                logger.error(f"Configuration error: {error}")
            return outcome.abort("config", "; ".join(errors))

        logger.info(f"Asana workspace: {config.asana_workspace_gid}")
        logger.info(f"Google Tasks list: {config.google_task_list_id or '(default)'}")

        if asana_client is None:
            asana_client = owned_client = AsanaClient(config.asana_access_token)

        logger.info("Resolving Asana My Tasks list...")
        task_list = asana_client.get_user_task_list_gid(config.asana_workspace_gid)
        if not isinstance(task_list, Ok):
            logger.error("Could not get the Asana My Tasks list gid")
            return outcome.abort("identity", _reason(task_list))

        logger.info(f"Fetching tasks from section '{config.section_name}'...")
        fetched = asana_client.fetch_section_tasks(task_list.value, config.section_name)
        if not isinstance(fetched, Ok):
            logger.error(f"Error while fetching tasks from section '{config.section_name}'")
            return outcome.abort("fetch", _reason(fetched))

        tasks = fetched.value
        outcome.fetched = len(tasks)
        if not tasks:
            logger.info(f"No tasks to sync in Asana section '{config.section_name}'")
            return outcome

        logger.info(f"Found {len(tasks)} task(s), creating Google Tasks...")
        writer = TaskWriter(tasks_client or TasksClient(), config, pacing=pacing)
        outcome.record(writer.write_all(tasks))

        logger.info(
            f"Sync finished: {outcome.fetched} fetched, {outcome.created} created, "
            f"{outcome.failed} failed"
        )
    except Exception as e:
        logger.exception(f"Unexpected error during sync: {e}")
        outcome.abort("unexpected", f"{type(e).__name__}: {e}")
    finally:
        if owned_client is not None:
            owned_client.close()

    return outcome
