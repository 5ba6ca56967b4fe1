"""
Browser state machine.

One controller drives every entity browser. It consumes key presses and
result messages, mutates its BrowserState, and returns the commands the
caller must dispatch. It never performs I/O itself.

Modes:
    NAVIGATING -> SEARCHING   "/" (when search is shown)
    NAVIGATING -> VIEWING     on ViewRendered after enter/v
    any        -> HELP        "?" (help never nests)
    HELP/VIEWING -> NAVIGATING  esc, backspace, q
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from jotter.tui.dispatcher import Command, count_command, load_command, search_command, view_command
from jotter.tui.keys import Action, KeyMap, KeyPress, Mode, Routed, default_keymap, route
from jotter.tui.messages import (
    ActionFailed,
    CountLoaded,
    LoadFailed,
    Message,
    RecordsLoaded,
    ReloadRequested,
    SearchFailed,
    ViewRendered,
)
from jotter.tui.providers import FilterState, ListSource
from jotter.tui.render import ListLayout, TableLayout, render

logger = logging.getLogger(__name__)

DEFAULT_VIEW_WIDTH = 80
DEFAULT_VIEW_HEIGHT = 20
# Header and footer rows around the detail viewport
VIEW_CHROME_HEIGHT = 5


@dataclass
class Viewport:
    """Scroll window over the detail content."""

    width: int = DEFAULT_VIEW_WIDTH
    height: int = DEFAULT_VIEW_HEIGHT
    offset: int = 0

    def _max_offset(self, content: str) -> int:
        return max(len(content.splitlines()) - self.height, 0)

    def scroll(self, delta: int, content: str) -> None:
        self.offset = min(max(self.offset + delta, 0), self._max_offset(content))

    def top(self) -> None:
        self.offset = 0

    def bottom(self, content: str) -> None:
        self.offset = self._max_offset(content)

    def visible(self, content: str) -> str:
        lines = content.splitlines()
        return "\n".join(lines[self.offset:self.offset + self.height])


@dataclass
class BrowserState:
    records: list[Any] = field(default_factory=list)
    selected: int = 0
    mode: Mode = Mode.NAVIGATING
    search_query: str = ""
    total_count: int = 0
    loading: bool = True
    error: Exception | None = None
    view_content: str = ""
    viewport: Viewport = field(default_factory=Viewport)
    quitting: bool = False

    def clamp_selection(self) -> None:
        if not self.records:
            self.selected = 0
        elif self.selected >= len(self.records):
            self.selected = len(self.records) - 1

    def selected_record(self) -> Any | None:
        if not self.records:
            return None
        return self.records[self.selected]


@dataclass(frozen=True)
class BrowserConfig:
    """Per-browser presentation and behaviour settings."""

    title: str = "Items"
    keymap: KeyMap = field(default_factory=default_keymap)
    layout: ListLayout | TableLayout = field(default_factory=ListLayout)
    show_search: bool = False
    searchable: bool = False
    view_handler: Callable[[Any], str] | None = None


class Browser:
    """Generic interactive browser over a data source."""

    def __init__(self, source: ListSource, config: BrowserConfig, filter_state: FilterState | None = None):
        self.source = source
        self.config = config
        self.filter_state = filter_state or FilterState()
        self.state = BrowserState(search_query=self.filter_state.search)
        self.generation = 0

    def init(self) -> list[Command]:
        """Commands for the initial load."""
        return self._reload()

    def view(self) -> str:
        return render(self.state, self.config)

    def resize(self, width: int, height: int) -> None:
        viewport = self.state.viewport
        viewport.width = width
        viewport.height = max(height - VIEW_CHROME_HEIGHT, 1)

    def _reload(self) -> list[Command]:
        """Start a new load cycle; results from older cycles are dropped."""
        self.generation += 1
        self.state.loading = True
        opts = self.filter_state
        if opts.search and self.config.searchable:
            first = search_command(self.source, opts.search, opts, self.generation)
        else:
            first = load_command(self.source, opts, self.generation)
        return [first, count_command(self.source, opts, self.generation)]

    def _is_stale(self, message: Message) -> bool:
        generation = getattr(message, "generation", None)
        return generation is not None and generation < self.generation

    # -- keys -----------------------------------------------------------

    def handle_key(self, press: KeyPress) -> list[Command]:
        routed = route(press, self.state.mode, self.config.keymap)
        if routed is None:
            return []

        mode = self.state.mode
        if mode is Mode.HELP:
            self._leave_overlay()
            return []
        if mode is Mode.VIEWING:
            return self._handle_viewing(routed)
        if mode is Mode.SEARCHING:
            return self._handle_searching(routed)
        return self._handle_navigating(routed)

    def _leave_overlay(self) -> None:
        self.state.mode = Mode.NAVIGATING
        self.state.view_content = ""

    def _handle_viewing(self, routed: Routed) -> list[Command]:
        state = self.state
        content = state.view_content
        action = routed.action

        if action is Action.HELP:
            state.view_content = ""
            state.mode = Mode.HELP
        elif action in (Action.BACK, Action.QUIT):
            self._leave_overlay()
        elif action is Action.SCROLL_UP:
            state.viewport.scroll(-1, content)
        elif action is Action.SCROLL_DOWN:
            state.viewport.scroll(1, content)
        elif action is Action.PAGE_UP:
            state.viewport.scroll(-max(state.viewport.height // 2, 1), content)
        elif action is Action.PAGE_DOWN:
            state.viewport.scroll(max(state.viewport.height // 2, 1), content)
        elif action is Action.TOP:
            state.viewport.top()
        elif action is Action.BOTTOM:
            state.viewport.bottom(content)
        return []

    def _handle_searching(self, routed: Routed) -> list[Command]:
        state = self.state
        action = routed.action

        if action is Action.INPUT:
            state.search_query += routed.text
            return []
        if action is Action.DELETE_CHAR:
            state.search_query = state.search_query[:-1]
            return []

        state.mode = Mode.NAVIGATING
        if action is Action.COMMIT and self.config.searchable:
            self.filter_state = self.filter_state.with_search(state.search_query)
            self.generation += 1
            state.loading = True
            logger.debug("search committed: %r", state.search_query)
            return [search_command(self.source, state.search_query, self.filter_state, self.generation)]

        state.search_query = self.filter_state.search
        return []

    def _handle_navigating(self, routed: Routed) -> list[Command]:
        state = self.state
        action = routed.action

        if action is Action.QUIT:
            state.quitting = True
        elif action is Action.UP:
            if state.selected > 0:
                state.selected -= 1
        elif action is Action.DOWN:
            if state.selected < len(state.records) - 1:
                state.selected += 1
        elif action is Action.JUMP:
            if routed.index < len(state.records):
                state.selected = routed.index
        elif action is Action.VIEW:
            record = state.selected_record()
            if record is not None and self.config.view_handler is not None:
                return [view_command(self.config.view_handler, record)]
        elif action is Action.SEARCH:
            state.mode = Mode.SEARCHING
            state.search_query = ""
        elif action is Action.REFRESH:
            if not state.loading:
                return self._reload()
        elif action is Action.HELP:
            state.mode = Mode.HELP
        elif action is Action.CUSTOM:
            return self._run_action(routed.action_key)
        return []

    def _run_action(self, key: str) -> list[Command]:
        record = self.state.selected_record()
        if record is None:
            return []
        for action in self.config.keymap.actions:
            if action.key == key:
                logger.debug("running action %r", action.description)
                return [action.handler(record)]
        return []

    # -- results --------------------------------------------------------

    def handle_message(self, message: Message) -> list[Command]:
        if self._is_stale(message):
            logger.debug("dropping stale %s (generation %s < %s)",
                         type(message).__name__, message.generation, self.generation)
            return []

        state = self.state
        if isinstance(message, RecordsLoaded):
            state.records = list(message.records)
            state.loading = False
            state.error = None
            state.clamp_selection()
        elif isinstance(message, CountLoaded):
            state.total_count = message.count
        elif isinstance(message, (LoadFailed, SearchFailed)):
            logger.warning("%s: %s", type(message).__name__, message.error)
            state.error = message.error
            state.loading = False
        elif isinstance(message, ActionFailed):
            logger.warning("ActionFailed: %s", message.error)
            state.error = message.error
        elif isinstance(message, ViewRendered):
            if state.mode is Mode.NAVIGATING:
                state.view_content = message.content
                state.viewport.offset = 0
                state.mode = Mode.VIEWING
        elif isinstance(message, ReloadRequested):
            logger.debug("reload requested: %s", message.reason)
            return self._reload()
        return []
