"""
Domain models for jotter.

Immutable snapshots of stored entities. Conversion helpers translate to and
from the JSON store's dict representation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_DELETED = "deleted"

BOOK_STATUSES = ("queued", "reading", "finished", "removed")

DATE_FORMAT = "%Y-%m-%d %H:%M"


def parse_datetime(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def format_datetime(value: datetime | None) -> str:
    """Format a datetime the way every view shows it."""
    if value is None:
        return ""
    return value.strftime(DATE_FORMAT)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of a task."""

    id: int
    uuid: str
    description: str
    status: str = STATUS_PENDING
    priority: str = ""
    project: str = ""
    context: str = ""
    tags: tuple[str, ...] = ()
    due: datetime | None = None
    entry: datetime | None = None
    modified: datetime | None = None
    start: datetime | None = None
    end: datetime | None = None
    annotations: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            id=data["id"],
            uuid=data.get("uuid", ""),
            description=data.get("description", ""),
            status=data.get("status", STATUS_PENDING),
            priority=data.get("priority", ""),
            project=data.get("project", ""),
            context=data.get("context", ""),
            tags=tuple(data.get("tags", [])),
            due=parse_datetime(data.get("due")),
            entry=parse_datetime(data.get("entry")),
            modified=parse_datetime(data.get("modified")),
            start=parse_datetime(data.get("start")),
            end=parse_datetime(data.get("end")),
            annotations=tuple(data.get("annotations", [])),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "uuid": self.uuid,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "project": self.project,
            "context": self.context,
            "tags": list(self.tags),
            "due": _iso(self.due),
            "entry": _iso(self.entry),
            "modified": _iso(self.modified),
            "start": _iso(self.start),
            "end": _iso(self.end),
            "annotations": list(self.annotations),
        }


@dataclass(frozen=True)
class Note:
    """Immutable snapshot of a markdown note, including publication metadata."""

    id: int
    title: str
    content: str = ""
    tags: tuple[str, ...] = ()
    archived: bool = False
    created: datetime | None = None
    modified: datetime | None = None
    file_path: str = ""
    is_draft: bool = True
    published_at: datetime | None = None
    leaflet_rkey: str | None = None
    leaflet_cid: str | None = None

    @property
    def is_publication(self) -> bool:
        """A note becomes a publication once it is linked to a remote record."""
        return self.leaflet_rkey is not None

    @classmethod
    def from_dict(cls, data: dict) -> Note:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            content=data.get("content", ""),
            tags=tuple(data.get("tags", [])),
            archived=data.get("archived", False),
            created=parse_datetime(data.get("created")),
            modified=parse_datetime(data.get("modified")),
            file_path=data.get("file_path", ""),
            is_draft=data.get("is_draft", True),
            published_at=parse_datetime(data.get("published_at")),
            leaflet_rkey=data.get("leaflet_rkey"),
            leaflet_cid=data.get("leaflet_cid"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "archived": self.archived,
            "created": _iso(self.created),
            "modified": _iso(self.modified),
            "file_path": self.file_path,
            "is_draft": self.is_draft,
            "published_at": _iso(self.published_at),
            "leaflet_rkey": self.leaflet_rkey,
            "leaflet_cid": self.leaflet_cid,
        }


@dataclass(frozen=True)
class Book:
    """Immutable snapshot of a book in the reading list."""

    id: int
    title: str
    author: str = ""
    status: str = "queued"
    progress: int = 0
    pages: int = 0
    rating: float = 0.0
    notes: str = ""
    added: datetime | None = None
    started: datetime | None = None
    finished: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Book:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            author=data.get("author", ""),
            status=data.get("status", "queued"),
            progress=data.get("progress", 0),
            pages=data.get("pages", 0),
            rating=data.get("rating", 0.0),
            notes=data.get("notes", ""),
            added=parse_datetime(data.get("added")),
            started=parse_datetime(data.get("started")),
            finished=parse_datetime(data.get("finished")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "status": self.status,
            "progress": self.progress,
            "pages": self.pages,
            "rating": self.rating,
            "notes": self.notes,
            "added": _iso(self.added),
            "started": _iso(self.started),
            "finished": _iso(self.finished),
        }


@dataclass(frozen=True)
class TagSummary:
    """A tag with the number of tasks carrying it."""

    name: str
    task_count: int


@dataclass(frozen=True)
class ProjectSummary:
    """A project with the number of tasks assigned to it."""

    name: str
    task_count: int
