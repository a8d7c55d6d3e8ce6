"""Data passed between sync stages."""

from __future__ import annotations

from dataclasses import dataclass, field

from asana_gtasks.asana import SourceTask
from asana_gtasks.sync.due import format_due_suffix

UNTITLED_TASK = "名称未設定タスク"


def compose_notes(notes: str | None, permalink_url: str | None, gid: str) -> str:
    """Build Google Task notes that point back to the Asana task."""
    return (
        f"Asanaタスク詳細:\n{notes or ''}\n\n"
        f"Asanaリンク: {permalink_url or 'N/A'}\n"
        f"AsanaタスクGID: {gid}"
    )


@dataclass
class TaskDraft:
    """A Google Task about to be created."""

    title: str
    notes: str
    due: str
    status: str = "needsAction"

    @classmethod
    def from_source(cls, task: SourceTask, due: str) -> TaskDraft:
        """Build a draft from an Asana task and the run's due timestamp."""
        title = task.name or UNTITLED_TASK
        suffix = format_due_suffix(task.due_on, task.due_at)
        if suffix:
            title = f"{title} {suffix}"

        return cls(
            title=title,
            notes=compose_notes(task.notes, task.permalink_url, task.gid),
            due=due,
        )


@dataclass
class SyncError:
    """Something that went wrong during a run."""

    stage: str  # config, identity, fetch, tasklist, write, unexpected
    message: str


@dataclass
class WriteReport:
    """What the writer did with one batch of tasks."""

    attempted: int = 0
    created: int = 0
    failed: int = 0
    aborted: bool = False
    tasklist_id: str | None = None
    due: str | None = None
    errors: list[SyncError] = field(default_factory=list)


@dataclass
class SyncOutcome:
    """Result of one sync run."""

    fetched: int = 0
    created: int = 0
    failed: int = 0
    aborted: bool = False
    errors: list[SyncError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the run completed and every task was created."""
        return not self.aborted and not self.errors

    def abort(self, stage: str, message: str) -> SyncOutcome:
        """Record a fatal error and mark the run as aborted."""
        self.aborted = True
        self.errors.append(SyncError(stage, message))
        return self

    def record(self, report: WriteReport) -> None:
        """Fold a writer report into the outcome."""
        self.created += report.created
        self.failed += report.failed
        self.errors.extend(report.errors)
        if report.aborted:
            self.aborted = True
