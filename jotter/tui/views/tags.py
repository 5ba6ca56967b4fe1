"""Tag summary table."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Protocol

from jotter.models import TagSummary
from jotter.tui.data_table import DataTable, DataTableOptions
from jotter.tui.providers import Field, FilterState


class TagRepository(Protocol):
    def get_tags(self) -> list[TagSummary]:
        ...


def pluralize_count(count: int) -> str:
    return "" if count == 1 else "s"


def format_task_count(value: Any) -> str:
    if isinstance(value, int):
        return f"{value} task{pluralize_count(value)}"
    return f"{value}"


@dataclass(frozen=True)
class TagSummaryRecord:
    summary: TagSummary

    def get_field(self, name: str) -> Any:
        if name == "name":
            return self.summary.name
        if name == "task_count":
            return self.summary.task_count
        return ""


class TagDataSource:
    def __init__(self, repo: TagRepository):
        self.repo = repo

    def load(self, opts: FilterState) -> list[TagSummaryRecord]:
        return [TagSummaryRecord(summary) for summary in self.repo.get_tags()]

    def count(self, opts: FilterState) -> int:
        return len(self.repo.get_tags())


TAG_FIELDS = (
    Field("name", "Tag Name", 25),
    Field("task_count", "Task Count", 15, format_task_count),
)


def new_tag_table(repo: TagRepository, opts: DataTableOptions | None = None) -> DataTable:
    opts = opts or DataTableOptions()
    opts = replace(opts, title=opts.title or "Tags", fields=opts.fields or TAG_FIELDS)
    return DataTable(TagDataSource(repo), opts)
