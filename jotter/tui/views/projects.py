"""Project summary table."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Protocol

from jotter.models import ProjectSummary
from jotter.tui.data_table import DataTable, DataTableOptions
from jotter.tui.providers import Field, FilterState
from jotter.tui.views.tags import format_task_count


class ProjectRepository(Protocol):
    def get_projects(self) -> list[ProjectSummary]:
        ...


@dataclass(frozen=True)
class ProjectSummaryRecord:
    summary: ProjectSummary

    def get_field(self, name: str) -> Any:
        if name == "name":
            return self.summary.name
        if name == "task_count":
            return self.summary.task_count
        return ""


class ProjectDataSource:
    def __init__(self, repo: ProjectRepository):
        self.repo = repo

    def load(self, opts: FilterState) -> list[ProjectSummaryRecord]:
        return [ProjectSummaryRecord(summary) for summary in self.repo.get_projects()]

    def count(self, opts: FilterState) -> int:
        return len(self.repo.get_projects())


PROJECT_FIELDS = (
    Field("name", "Project Name", 30),
    Field("task_count", "Task Count", 15, format_task_count),
)


def new_project_table(repo: ProjectRepository, opts: DataTableOptions | None = None) -> DataTable:
    opts = opts or DataTableOptions()
    opts = replace(opts, title=opts.title or "Projects", fields=opts.fields or PROJECT_FIELDS)
    return DataTable(ProjectDataSource(repo), opts)
