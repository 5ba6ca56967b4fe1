"""Shared fixtures for jotter tests."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from jotter import logging_setup
from jotter.tui.browser import Browser, BrowserConfig
from jotter.tui.dispatcher import InlineDispatcher
from jotter.tui.keys import default_keymap, key_press
from jotter.tui.providers import FilterState
from jotter.tui.render import ListLayout


@dataclass(frozen=True)
class MockItem:
    """Satisfies both the list and the table render contracts."""

    title: str
    description: str = ""

    def get_title(self) -> str:
        return self.title

    def get_description(self) -> str:
        return self.description

    def get_filter_value(self) -> str:
        return f"{self.title} {self.description}"

    def get_field(self, name: str) -> Any:
        return {"title": self.title, "description": self.description}.get(name, "")


class MockSource:
    """In-memory source recording every call."""

    def __init__(self, items=(), load_error=None, count_error=None, search_error=None):
        self.items = list(items)
        self.load_error = load_error
        self.count_error = count_error
        self.search_error = search_error
        self.load_calls: list[FilterState] = []
        self.search_calls: list[tuple[str, FilterState]] = []

    def load(self, opts: FilterState) -> list:
        self.load_calls.append(opts)
        if self.load_error:
            raise self.load_error
        return list(self.items)

    def count(self, opts: FilterState) -> int:
        if self.count_error:
            raise self.count_error
        return len(self.items)

    def search(self, query: str, opts: FilterState) -> list:
        self.search_calls.append((query, opts))
        if self.search_error:
            raise self.search_error
        return [i for i in self.items if query.lower() in i.get_filter_value().lower()]


class Harness:
    """Drives a Browser synchronously through an InlineDispatcher."""

    def __init__(self, browser: Browser):
        self.browser = browser
        self.dispatcher = InlineDispatcher(browser.handle_message)

    @property
    def state(self):
        return self.browser.state

    def start(self) -> Harness:
        self.dispatcher.dispatch_all(self.browser.init())
        return self

    def press(self, *keys: str) -> None:
        for key in keys:
            self.dispatcher.dispatch_all(self.browser.handle_key(key_press(key)))


@pytest.fixture
def make_source():
    return MockSource


@pytest.fixture
def make_item():
    return MockItem


@pytest.fixture
def items() -> list[MockItem]:
    return [
        MockItem("alpha", "first"),
        MockItem("beta", "second"),
        MockItem("gamma", "third"),
    ]


@pytest.fixture
def source(items: list[MockItem]) -> MockSource:
    return MockSource(items)


@pytest.fixture
def make_harness(source: MockSource):
    """Factory for started harnesses around a list-shaped browser."""

    def _make(
        src: MockSource | None = None,
        actions=(),
        show_search: bool = False,
        searchable: bool = False,
        view_handler=None,
        filter_state: FilterState | None = None,
        start: bool = True,
    ) -> Harness:
        config = BrowserConfig(
            title="Items",
            keymap=default_keymap(actions, search=show_search),
            layout=ListLayout(),
            show_search=show_search,
            searchable=searchable,
            view_handler=view_handler,
        )
        harness = Harness(Browser(src or source, config, filter_state))
        return harness.start() if start else harness

    return _make


@pytest.fixture
def store_data() -> dict:
    """A store document with fixed timestamps so ordering is deterministic."""
    return {
        "version": "1.0",
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
        "tasks": [
            {
                "id": 1, "uuid": "u-1", "description": "Write docs", "status": "pending",
                "priority": "high", "project": "jotter", "context": "", "tags": ["docs", "work"],
                "due": None, "entry": "2024-01-01T09:00:00+00:00",
                "modified": "2024-01-01T09:00:00+00:00", "start": None, "end": None,
                "annotations": [],
            },
            {
                "id": 2, "uuid": "u-2", "description": "Fix bug", "status": "pending",
                "priority": "low", "project": "jotter", "context": "office", "tags": ["work"],
                "due": None, "entry": "2024-01-02T09:00:00+00:00",
                "modified": "2024-01-03T09:00:00+00:00", "start": None, "end": None,
                "annotations": [],
            },
            {
                "id": 3, "uuid": "u-3", "description": "Buy milk", "status": "completed",
                "priority": "", "project": "home", "context": "", "tags": [],
                "due": None, "entry": "2024-01-02T10:00:00+00:00",
                "modified": "2024-01-02T10:00:00+00:00", "start": None,
                "end": "2024-01-02T11:00:00+00:00", "annotations": [],
            },
        ],
        "notes": [
            {
                "id": 1, "title": "Ideas", "content": "Plan the garden", "tags": ["home"],
                "archived": False, "created": "2024-01-01T08:00:00+00:00",
                "modified": "2024-01-01T08:00:00+00:00", "file_path": "",
                "is_draft": True, "published_at": None, "leaflet_rkey": None, "leaflet_cid": None,
            },
            {
                "id": 2, "title": "Launch post", "content": "We shipped", "tags": ["work"],
                "archived": False, "created": "2024-01-02T08:00:00+00:00",
                "modified": "2024-01-04T08:00:00+00:00", "file_path": "",
                "is_draft": False, "published_at": "2024-01-04T08:00:00+00:00",
                "leaflet_rkey": "RK-launch", "leaflet_cid": "cid-1",
            },
            {
                "id": 3, "title": "Draft essay", "content": "Half written", "tags": ["work"],
                "archived": False, "created": "2024-01-03T08:00:00+00:00",
                "modified": "2024-01-03T08:00:00+00:00", "file_path": "",
                "is_draft": True, "published_at": None, "leaflet_rkey": "rk-essay", "leaflet_cid": None,
            },
            {
                "id": 4, "title": "Old journal", "content": "Archived thoughts", "tags": [],
                "archived": True, "created": "2023-12-01T08:00:00+00:00",
                "modified": "2023-12-01T08:00:00+00:00", "file_path": "",
                "is_draft": True, "published_at": None, "leaflet_rkey": None, "leaflet_cid": None,
            },
        ],
        "books": [
            {
                "id": 1, "title": "Dune", "author": "Frank Herbert", "status": "reading",
                "progress": 40, "pages": 600, "rating": 0.0, "notes": "",
                "added": "2024-01-01T00:00:00+00:00", "started": None, "finished": None,
            },
            {
                "id": 2, "title": "Emma", "author": "Jane Austen", "status": "queued",
                "progress": 0, "pages": 400, "rating": 0.0, "notes": "",
                "added": "2024-01-05T00:00:00+00:00", "started": None, "finished": None,
            },
        ],
        "events": [],
    }


@pytest.fixture
def store_file(tmp_path: Path, store_data: dict) -> Path:
    path = tmp_path / "jotter.json"
    path.write_text(json.dumps(store_data))
    return path


@pytest.fixture
def isolated_logging(monkeypatch):
    """Detach the jotter logger from whatever a test configures."""
    monkeypatch.setattr(logging_setup, "_CONFIGURED_PATH", None)
    logger = logging.getLogger(logging_setup.LOGGER_NAME)
    saved = list(logger.handlers)
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
