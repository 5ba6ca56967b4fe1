"""Publication list: notes linked to a remote publishing record."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Protocol

from jotter.models import Note, format_datetime
from jotter.tui.data_list import DataList, DataListOptions
from jotter.tui.providers import FilterState
from jotter.tui.views.detail import format_publication

FILTER_ALL = "all"
FILTER_PUBLISHED = "published"
FILTER_DRAFT = "draft"
FILTERS = (FILTER_ALL, FILTER_PUBLISHED, FILTER_DRAFT)


class PublicationRepository(Protocol):
    def get_leaflet_notes(self) -> list[Note]:
        ...

    def list_published(self) -> list[Note]:
        ...

    def list_drafts(self) -> list[Note]:
        ...


def _status(note: Note) -> str:
    return FILTER_DRAFT if note.is_draft else FILTER_PUBLISHED


@dataclass(frozen=True)
class PublicationRecord:
    note: Note

    def get_field(self, name: str) -> Any:
        n = self.note
        fields = {
            "id": n.id,
            "title": n.title,
            "status": _status(n),
            "published_at": n.published_at,
            "modified": n.modified,
            "leaflet_rkey": n.leaflet_rkey,
            "leaflet_cid": n.leaflet_cid,
        }
        return fields.get(name, "")

    def get_title(self) -> str:
        return f"[{self.note.id}] {self.note.title} ({_status(self.note)})"

    def get_description(self) -> str:
        n = self.note
        parts = []
        if n.published_at:
            parts.append("Published: " + format_datetime(n.published_at))
        parts.append("Modified: " + format_datetime(n.modified))
        if n.leaflet_rkey is not None:
            parts.append("rkey: " + n.leaflet_rkey)
        return " • ".join(parts)

    def get_filter_value(self) -> str:
        values = [self.note.title, self.note.content]
        if self.note.leaflet_rkey is not None:
            values.append(self.note.leaflet_rkey)
        return " ".join(values)


def _matches(note: Note, query: str) -> bool:
    query = query.lower()
    if query in note.title.lower() or query in note.content.lower():
        return True
    return note.leaflet_rkey is not None and query in note.leaflet_rkey.lower()


class PublicationDataSource:
    """Publications filtered by ``all``, ``published`` or ``draft``."""

    def __init__(self, repo: PublicationRepository, filter: str = FILTER_ALL):
        self.repo = repo
        self.filter = filter

    def _notes(self) -> list[Note]:
        if self.filter == FILTER_PUBLISHED:
            return self.repo.list_published()
        if self.filter == FILTER_DRAFT:
            return self.repo.list_drafts()
        return self.repo.get_leaflet_notes()

    def load(self, opts: FilterState) -> list[PublicationRecord]:
        notes = self._notes()
        if opts.search:
            notes = [n for n in notes if _matches(n, opts.search)]
        if 0 < opts.limit < len(notes):
            notes = notes[:opts.limit]
        return [PublicationRecord(note) for note in notes]

    def count(self, opts: FilterState) -> int:
        return len(self.load(opts))

    def search(self, query: str, opts: FilterState) -> list[PublicationRecord]:
        return self.load(opts.with_search(query))


def new_publication_list(
    repo: PublicationRepository, opts: DataListOptions | None = None, filter: str = FILTER_ALL
) -> DataList:
    opts = opts or DataListOptions()
    opts = replace(opts, title=opts.title or "Publications", show_search=True, searchable=True)
    if opts.view_handler is None:
        opts = replace(opts, view_handler=lambda record: format_publication(record.note))

    return DataList(PublicationDataSource(repo, filter), opts)
