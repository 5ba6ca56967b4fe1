"""
File-backed repositories over the JSON store.

Each call re-reads the store, so independent concurrent reads never share
mutable state.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from jotter import store as store_mod
from jotter.models import Book, Note, ProjectSummary, TagSummary, Task

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class RepositoryError(Exception):
    """Raised when a repository write is rejected."""


@dataclass(frozen=True)
class TaskListOptions:
    status: str = ""
    priority: str = ""
    project: str = ""
    context: str = ""
    search: str = ""
    sort_by: str = "modified"
    sort_order: str = "DESC"
    limit: int = 0
    offset: int = 0


@dataclass(frozen=True)
class NoteListOptions:
    archived: bool | None = None
    tags: tuple[str, ...] = ()
    content: str = ""
    limit: int = 0


@dataclass(frozen=True)
class BookListOptions:
    status: str = ""
    search: str = ""
    limit: int = 0


def _sort_key(value):
    """Order-safe key: None sorts before everything else."""
    if value is None:
        return (0, _EPOCH)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (1, value)
    return (1, value)


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def _apply_limit(items: list, limit: int, offset: int = 0) -> list:
    if limit > 0:
        return items[offset:offset + limit]
    return items


class _FileRepository:
    def __init__(self, store_file: Path):
        self.store_file = store_file

    def _read(self) -> dict:
        return store_mod.read_store(self.store_file)


class FileTaskRepository(_FileRepository):
    """Task repository reading from and writing to the JSON store."""

    def list(self, opts: TaskListOptions) -> list[Task]:
        tasks = [Task.from_dict(t) for t in self._read()["tasks"]]

        if opts.status:
            tasks = [t for t in tasks if t.status == opts.status]
        if opts.priority:
            tasks = [t for t in tasks if t.priority.lower() == opts.priority.lower()]
        if opts.project:
            tasks = [t for t in tasks if t.project == opts.project]
        if opts.context:
            tasks = [t for t in tasks if t.context == opts.context]
        if opts.search:
            tasks = [
                t for t in tasks
                if _contains(t.description, opts.search)
                or _contains(t.project, opts.search)
                or _contains(t.context, opts.search)
                or any(_contains(tag, opts.search) for tag in t.tags)
            ]

        reverse = opts.sort_order.upper() == "DESC"
        sort_by = opts.sort_by or "modified"
        tasks.sort(key=lambda t: _sort_key(getattr(t, sort_by, None)), reverse=reverse)

        return _apply_limit(tasks, opts.limit, opts.offset)

    def update(self, task: Task) -> None:
        data = self._read()
        ok, message = store_mod.update_task(data, task.to_dict())
        if not ok:
            raise RepositoryError(message)
        store_mod.save_store(self.store_file, data)
        logger.info("updated task %s", task.id)

    def get_tags(self) -> list[TagSummary]:
        counts: Counter[str] = Counter()
        for raw in self._read()["tasks"]:
            for tag in set(raw.get("tags", [])):
                counts[tag] += 1
        return [TagSummary(name, counts[name]) for name in sorted(counts)]

    def get_projects(self) -> list[ProjectSummary]:
        counts = Counter(
            raw["project"] for raw in self._read()["tasks"] if raw.get("project")
        )
        return [ProjectSummary(name, counts[name]) for name in sorted(counts)]


class FileNoteRepository(_FileRepository):
    """Note repository, including the publication views of notes."""

    def _notes(self) -> list[Note]:
        notes = [Note.from_dict(n) for n in self._read()["notes"]]
        notes.sort(key=lambda n: _sort_key(n.modified), reverse=True)
        return notes

    def list(self, opts: NoteListOptions) -> list[Note]:
        notes = self._notes()

        if opts.archived is not None:
            notes = [n for n in notes if n.archived == opts.archived]
        if opts.tags:
            notes = [n for n in notes if all(tag in n.tags for tag in opts.tags)]
        if opts.content:
            notes = [
                n for n in notes
                if _contains(n.title, opts.content) or _contains(n.content, opts.content)
            ]

        return _apply_limit(notes, opts.limit)

    def get_leaflet_notes(self) -> list[Note]:
        return [n for n in self._notes() if n.is_publication]

    def list_published(self) -> list[Note]:
        return [n for n in self._notes() if n.is_publication and not n.is_draft]

    def list_drafts(self) -> list[Note]:
        return [n for n in self._notes() if n.is_publication and n.is_draft]


class FileBookRepository(_FileRepository):
    """Book repository reading from the JSON store."""

    def list(self, opts: BookListOptions) -> list[Book]:
        books = [Book.from_dict(b) for b in self._read()["books"]]

        if opts.status:
            books = [b for b in books if b.status == opts.status]
        if opts.search:
            books = [
                b for b in books
                if _contains(b.title, opts.search) or _contains(b.author, opts.search)
            ]

        books.sort(key=lambda b: _sort_key(b.added), reverse=True)
        return _apply_limit(books, opts.limit)
