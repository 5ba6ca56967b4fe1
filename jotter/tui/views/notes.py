"""Note list."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Protocol

from jotter.models import Note, format_datetime
from jotter.repository import NoteListOptions
from jotter.tui.data_list import DataList, DataListOptions
from jotter.tui.providers import FilterState
from jotter.tui.views.detail import format_note


class NoteRepository(Protocol):
    def list(self, opts: NoteListOptions) -> list[Note]:
        ...


@dataclass(frozen=True)
class NoteRecord:
    note: Note

    def get_field(self, name: str) -> Any:
        n = self.note
        fields = {
            "id": n.id,
            "title": n.title,
            "content": n.content,
            "tags": n.tags,
            "archived": n.archived,
            "created": n.created,
            "modified": n.modified,
            "file_path": n.file_path,
        }
        return fields.get(name, "")

    def get_title(self) -> str:
        return self.note.title

    def get_description(self) -> str:
        parts = []
        if self.note.tags:
            parts.append(", ".join(self.note.tags))
        parts.append("Modified: " + format_datetime(self.note.modified))
        return " • ".join(parts)

    def get_filter_value(self) -> str:
        return " ".join([self.note.title, self.note.content, *self.note.tags])


class NoteDataSource:
    """Notes, hiding archived ones unless ``show_archived``."""

    def __init__(self, repo: NoteRepository, show_archived: bool = False, tags: tuple[str, ...] = ()):
        self.repo = repo
        self.show_archived = show_archived
        self.tags = tuple(tags)

    def load(self, opts: FilterState) -> list[NoteRecord]:
        repo_opts = NoteListOptions(
            archived=None if self.show_archived else False,
            tags=self.tags,
            content=opts.search,
            limit=max(opts.limit, 0),
        )
        return [NoteRecord(note) for note in self.repo.list(repo_opts)]

    def count(self, opts: FilterState) -> int:
        return len(self.load(opts))

    def search(self, query: str, opts: FilterState) -> list[NoteRecord]:
        return self.load(opts.with_search(query))


def new_note_list(
    repo: NoteRepository,
    opts: DataListOptions | None = None,
    show_archived: bool = False,
    tags: tuple[str, ...] = (),
) -> DataList:
    opts = opts or DataListOptions()
    opts = replace(opts, title=opts.title or "Notes", show_search=True, searchable=True)
    if opts.view_handler is None:
        opts = replace(opts, view_handler=lambda record: format_note(record.note))

    return DataList(NoteDataSource(repo, show_archived, tags), opts)
