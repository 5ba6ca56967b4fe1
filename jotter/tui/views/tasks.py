"""Task table."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Protocol

from jotter.models import STATUS_COMPLETED, STATUS_PENDING, Task
from jotter.repository import TaskListOptions
from jotter.tui.data_table import DataTable, DataTableOptions
from jotter.tui.dispatcher import Command, action_command
from jotter.tui.providers import Field, FilterState, ListAction
from jotter.tui.views.detail import format_task

DEFAULT_LIMIT = 50


class TaskRepository(Protocol):
    def list(self, opts: TaskListOptions) -> list[Task]:
        ...

    def update(self, task: Task) -> None:
        ...


class TaskActionError(Exception):
    """Raised when a task action does not apply to the selected task."""


@dataclass(frozen=True)
class TaskRecord:
    task: Task

    def get_field(self, name: str) -> Any:
        t = self.task
        fields = {
            "id": t.id,
            "uuid": t.uuid,
            "description": t.description,
            "status": t.status,
            "priority": t.priority,
            "project": t.project,
            "tags": t.tags,
            "due": t.due,
            "entry": t.entry,
            "start": t.start,
            "end": t.end,
            "modified": t.modified,
            "annotations": t.annotations,
        }
        return fields.get(name, "")


class TaskDataSource:
    """Tasks, newest first. Pending only unless ``show_all`` or a status is given."""

    def __init__(
        self,
        repo: TaskRepository,
        show_all: bool = False,
        status: str = "",
        priority: str = "",
        project: str = "",
    ):
        self.repo = repo
        self.show_all = show_all
        self.status = status
        self.priority = priority
        self.project = project

    def _options(self, opts: FilterState) -> TaskListOptions:
        status = self.status
        if not status and not self.show_all:
            status = STATUS_PENDING
        return TaskListOptions(
            status=status,
            priority=self.priority,
            project=self.project,
            sort_by="modified",
            sort_order="DESC",
            limit=opts.limit or DEFAULT_LIMIT,
        )

    def load(self, opts: FilterState) -> list[TaskRecord]:
        return [TaskRecord(task) for task in self.repo.list(self._options(opts))]

    def count(self, opts: FilterState) -> int:
        return len(self.load(opts))


def format_description(value: Any) -> str:
    desc = f"{value}"
    if len(desc) > 38:
        return desc[:35] + "..."
    return desc


def format_status(value: Any) -> str:
    return f"{value}"[:8]


def format_priority(value: Any) -> str:
    priority = f"{value}"
    if not priority:
        return "-"
    return priority.title()


def format_project(value: Any) -> str:
    project = f"{value}"
    if not project:
        return "-"
    if len(project) > 13:
        return project[:10] + "..."
    return project


TASK_FIELDS = (
    Field("id", "ID", 4),
    Field("description", "Description", 40, format_description),
    Field("status", "Status", 10, format_status),
    Field("priority", "Priority", 10, format_priority),
    Field("project", "Project", 15, format_project),
)


def mark_done_action(repo: TaskRepository) -> ListAction:
    """The "d" action: complete the selected task, then reload."""

    def handler(record: TaskRecord) -> Command:
        def work() -> str:
            task = record.task
            if task.status == STATUS_COMPLETED:
                raise TaskActionError("task already completed")
            repo.update(replace(task, status=STATUS_COMPLETED, end=datetime.now(timezone.utc)))
            return f"task {task.id} completed"

        return action_command("mark done", work)

    return ListAction("d", "mark done", handler)


def new_task_table(
    repo: TaskRepository,
    opts: DataTableOptions | None = None,
    show_all: bool = False,
    status: str = "",
    priority: str = "",
    project: str = "",
) -> DataTable:
    opts = opts or DataTableOptions()
    if not opts.title:
        title = "Tasks (showing all)" if show_all else "Tasks (pending only)"
        opts = replace(opts, title=title)
    if opts.view_handler is None:
        opts = replace(opts, view_handler=lambda record: format_task(record.task))
    if not opts.actions:
        opts = replace(opts, actions=(mark_done_action(repo),))
    opts = replace(opts, fields=TASK_FIELDS)

    source = TaskDataSource(repo, show_all, status, priority, project)
    return DataTable(source, opts)
