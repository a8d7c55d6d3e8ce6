"""Asana "Today" section to Google Tasks sync pipeline.

Usage:
    from asana_gtasks.sync import run_sync

    outcome = run_sync()
    print(outcome.created, outcome.failed)
"""

from __future__ import annotations

from asana_gtasks.sync.due import fixed_due_timestamp, format_due_suffix
from asana_gtasks.sync.models import (
    SyncError,
    SyncOutcome,
    TaskDraft,
    WriteReport,
    compose_notes,
)
from asana_gtasks.sync.orchestrator import run_sync
from asana_gtasks.sync.pacing import FixedPacing, PacingPolicy
from asana_gtasks.sync.writer import TaskWriter

__all__ = [
    "run_sync",
    "TaskWriter",
    "TaskDraft",
    "SyncOutcome",
    "SyncError",
    "WriteReport",
    "FixedPacing",
    "PacingPolicy",
    "compose_notes",
    "fixed_due_timestamp",
    "format_due_suffix",
]
