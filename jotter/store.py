"""
JSON document store for jotter.

Single source of truth for stored entities. All writes go through here and
every document is validated against the bundled schema.

Document layout:
    {
      "version": "1.0",
      "created_at": ..., "updated_at": ...,
      "tasks": [...], "notes": [...], "books": [...],
      "events": [...]
    }
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from jsonschema import SchemaError, ValidationError, validate

from jotter.models import STATUS_COMPLETED, STATUS_PENDING, parse_datetime

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"
STORE_SCHEMA = "store"
STORE_VERSION = "1.0"


class StoreError(Exception):
    """Raised when the store file cannot be read or fails validation."""


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def validate_json(data: dict, schema_name: str = STORE_SCHEMA) -> tuple[bool, str]:
    """Validate JSON data against schema. Returns (valid, error_message)."""
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        return False, f"Schema not found: {schema_path}"

    try:
        schema = json.loads(schema_path.read_text())
        validate(instance=data, schema=schema)
        return True, ""
    except SchemaError as e:
        return False, f"Invalid schema: {e.message}"
    except ValidationError as e:
        # Build a helpful error message with path to the error
        path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        return False, f"Validation error at '{path}': {e.message}"


def init_store() -> dict:
    """Create a new, empty store document."""
    store = {
        "version": STORE_VERSION,
        "created_at": now_iso(),
        "updated_at": now_iso(),
        "tasks": [],
        "notes": [],
        "books": [],
        "events": [],
    }
    add_event(store, "initialized")
    return store


def load_store(path: Path) -> dict | None:
    """Load store from file or return None if it doesn't exist.

    Raises StoreError when the file exists but is unreadable or invalid.
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise StoreError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise StoreError(f"Cannot read {path}: {e}") from e

    valid, error = validate_json(data)
    if not valid:
        raise StoreError(error)
    return data


def read_store(path: Path) -> dict:
    """Load store, falling back to an empty document when none exists yet."""
    store = load_store(path)
    if store is None:
        return init_store()
    return store


def save_store(path: Path, store: dict) -> None:
    """Save store to file."""
    store["updated_at"] = now_iso()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(store, indent=2))
    logger.debug("saved store to %s", path)


def add_event(store: dict, event_type: str, entity: str = None, entity_id: int = None, details: dict = None) -> None:
    """Append event to the store's event log."""
    event = {
        "timestamp": now_iso(),
        "type": event_type,
    }
    if entity:
        event["entity"] = entity
    if entity_id is not None:
        event["entity_id"] = entity_id
    if details:
        event["details"] = details
    store.setdefault("events", []).append(event)


def next_id(items: list[dict]) -> int:
    """Next free integer id for a collection."""
    return max((item["id"] for item in items), default=0) + 1


def _find(items: list[dict], item_id: int) -> dict | None:
    for item in items:
        if item["id"] == item_id:
            return item
    return None


def add_task(
    store: dict,
    description: str,
    priority: str = "",
    project: str = "",
    tags: list[str] | None = None,
    due: str | None = None,
) -> tuple[bool, str]:
    """Add a pending task."""
    if not description.strip():
        return False, "Task description cannot be empty"
    if due is not None and parse_datetime(due) is None:
        return False, f"Invalid due date: {due!r} (expected ISO 8601, e.g. 2024-05-01 or 2024-05-01T09:00)"

    task_id = next_id(store["tasks"])
    timestamp = now_iso()
    store["tasks"].append({
        "id": task_id,
        "uuid": str(uuid.uuid4()),
        "description": description,
        "status": STATUS_PENDING,
        "priority": priority,
        "project": project,
        "context": "",
        "tags": tags or [],
        "due": due,
        "entry": timestamp,
        "modified": timestamp,
        "start": None,
        "end": None,
        "annotations": [],
    })
    add_event(store, "task_added", entity="task", entity_id=task_id)
    return True, f"Task {task_id} added"


def update_task(store: dict, task: dict) -> tuple[bool, str]:
    """Replace a stored task with an updated copy."""
    existing = _find(store["tasks"], task["id"])
    if existing is None:
        return False, f"Task not found: {task['id']}"

    existing.update(task)
    existing["modified"] = now_iso()
    add_event(store, "task_updated", entity="task", entity_id=task["id"])
    return True, f"Task {task['id']} updated"


def complete_task(store: dict, task_id: int) -> tuple[bool, str]:
    """Mark task as completed."""
    task = _find(store["tasks"], task_id)
    if task is None:
        return False, f"Task not found: {task_id}"
    if task["status"] == STATUS_COMPLETED:
        return False, f"Task {task_id} already completed"

    timestamp = now_iso()
    task["status"] = STATUS_COMPLETED
    task["end"] = timestamp
    task["modified"] = timestamp
    add_event(store, "task_completed", entity="task", entity_id=task_id)
    return True, f"Task {task_id} completed"


def add_note(store: dict, title: str, content: str = "", tags: list[str] | None = None) -> tuple[bool, str]:
    """Add a note."""
    if not title.strip():
        return False, "Note title cannot be empty"

    note_id = next_id(store["notes"])
    timestamp = now_iso()
    store["notes"].append({
        "id": note_id,
        "title": title,
        "content": content,
        "tags": tags or [],
        "archived": False,
        "created": timestamp,
        "modified": timestamp,
        "file_path": "",
        "is_draft": True,
        "published_at": None,
        "leaflet_rkey": None,
        "leaflet_cid": None,
    })
    add_event(store, "note_added", entity="note", entity_id=note_id)
    return True, f"Note {note_id} added"


def archive_note(store: dict, note_id: int) -> tuple[bool, str]:
    """Archive a note so default listings hide it."""
    note = _find(store["notes"], note_id)
    if note is None:
        return False, f"Note not found: {note_id}"
    if note["archived"]:
        return False, f"Note {note_id} already archived"

    note["archived"] = True
    note["modified"] = now_iso()
    add_event(store, "note_archived", entity="note", entity_id=note_id)
    return True, f"Note {note_id} archived"


def link_publication(
    store: dict, note_id: int, rkey: str, cid: str | None = None, draft: bool = True
) -> tuple[bool, str]:
    """Attach publication metadata to a note."""
    note = _find(store["notes"], note_id)
    if note is None:
        return False, f"Note not found: {note_id}"

    timestamp = now_iso()
    note["leaflet_rkey"] = rkey
    note["leaflet_cid"] = cid
    note["is_draft"] = draft
    note["published_at"] = None if draft else timestamp
    note["modified"] = timestamp
    add_event(store, "note_linked", entity="note", entity_id=note_id, details={"rkey": rkey, "draft": draft})
    status = "draft" if draft else "published"
    return True, f"Note {note_id} linked as {status}"


def add_book(
    store: dict, title: str, author: str = "", pages: int = 0, status: str = "queued"
) -> tuple[bool, str]:
    """Add a book to the reading list."""
    if not title.strip():
        return False, "Book title cannot be empty"

    book_id = next_id(store["books"])
    store["books"].append({
        "id": book_id,
        "title": title,
        "author": author,
        "status": status,
        "progress": 0,
        "pages": pages,
        "rating": 0.0,
        "notes": "",
        "added": now_iso(),
        "started": None,
        "finished": None,
    })
    add_event(store, "book_added", entity="book", entity_id=book_id)
    return True, f"Book {book_id} added"
