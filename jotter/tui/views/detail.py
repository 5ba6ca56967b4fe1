"""
Detail views.

Each entity is described as markdown, then rendered to plain text with
rich so the browser can scroll it line by line.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.markdown import Markdown

from jotter.models import Book, Note, Task, format_datetime

RENDER_WIDTH = 80


def render_markdown(text: str, width: int = RENDER_WIDTH) -> str:
    """Render markdown to plain, width-wrapped text."""
    console = Console(width=width, file=StringIO(), record=True, color_system=None)
    console.print(Markdown(text))
    return console.export_text()


def _body(content: str) -> str:
    """Note content without a leading h1, which the view already shows."""
    content = content.strip()
    if not content.startswith("# "):
        return content
    return "\n".join(content.split("\n")[1:])


def task_markdown(task: Task) -> str:
    lines = [
        f"# Task {task.id}",
        "",
        f"- **UUID:** {task.uuid}",
        f"- **Description:** {task.description}",
        f"- **Status:** {task.status}",
    ]
    if task.priority:
        lines.append(f"- **Priority:** {task.priority}")
    if task.project:
        lines.append(f"- **Project:** {task.project}")
    if task.tags:
        lines.append(f"- **Tags:** {', '.join(task.tags)}")
    if task.due:
        lines.append(f"- **Due:** {format_datetime(task.due)}")
    lines.append(f"- **Created:** {format_datetime(task.entry)}")
    lines.append(f"- **Modified:** {format_datetime(task.modified)}")
    if task.start:
        lines.append(f"- **Started:** {format_datetime(task.start)}")
    if task.end:
        lines.append(f"- **Completed:** {format_datetime(task.end)}")
    if task.annotations:
        lines += ["", "**Annotations:**", ""]
        lines.extend(f"- {annotation}" for annotation in task.annotations)
    return "\n".join(lines) + "\n"


def note_markdown(note: Note) -> str:
    lines = [f"# {note.title}", ""]
    if note.tags:
        lines += ["**Tags:** " + ", ".join(f"`{tag}`" for tag in note.tags), ""]
    lines += [
        f"- **Created:** {format_datetime(note.created)}",
        f"- **Modified:** {format_datetime(note.modified)}",
        "",
        "---",
        "",
        _body(note.content),
    ]
    return "\n".join(lines)


def publication_markdown(note: Note) -> str:
    status = "draft" if note.is_draft else "published"
    lines = [f"# {note.title}", "", f"- **Status:** {status}"]
    if note.published_at:
        lines.append(f"- **Published:** {format_datetime(note.published_at)}")
    lines.append(f"- **Modified:** {format_datetime(note.modified)}")
    if note.leaflet_rkey is not None:
        lines.append(f"- **RKey:** `{note.leaflet_rkey}`")
    if note.leaflet_cid is not None:
        lines.append(f"- **CID:** `{note.leaflet_cid}`")
    lines += ["", "---", "", _body(note.content)]
    return "\n".join(lines)


def book_markdown(book: Book) -> str:
    lines = [f"# {book.title}", ""]
    if book.author:
        lines.append(f"- **Author:** {book.author}")
    if book.status:
        lines.append(f"- **Status:** {book.status.title()}")
    if book.progress > 0:
        lines.append(f"- **Progress:** {book.progress}%")
    if book.pages > 0:
        lines.append(f"- **Pages:** {book.pages}")
    if book.rating > 0:
        lines.append(f"- **Rating:** {book.rating:.1f}/5")
    lines.append(f"- **Added:** {format_datetime(book.added)}")
    if book.started:
        lines.append(f"- **Started:** {format_datetime(book.started)}")
    if book.finished:
        lines.append(f"- **Finished:** {format_datetime(book.finished)}")
    if book.notes:
        lines += ["", "**Notes:**", "", book.notes]
    return "\n".join(lines) + "\n"


def format_task(task: Task) -> str:
    return render_markdown(task_markdown(task))


def format_note(note: Note) -> str:
    return render_markdown(note_markdown(note))


def format_publication(note: Note) -> str:
    return render_markdown(publication_markdown(note))


def format_book(book: Book) -> str:
    return render_markdown(book_markdown(book))
