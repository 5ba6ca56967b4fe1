"""
Command dispatch.

A Command wraps one data-contract call. Running it always yields exactly one
message: failures are converted by the command's ``on_error`` factory, so
nothing raised inside a command crosses back into the browser.

Dispatchers decide *where* commands run. ``InlineDispatcher`` runs them on the
caller's thread (scripting and tests); the interactive app uses textual
thread workers (see app.py).
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

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

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """Deferred unit of work producing one message."""

    label: str
    thunk: Callable[[], Message]
    on_error: Callable[[Exception], Message] = ActionFailed

    def run(self) -> Message:
        try:
            return self.thunk()
        except Exception as exc:
            logger.debug("command %s failed: %s", self.label, exc)
            return self.on_error(exc)


class Dispatcher(Protocol):
    def dispatch(self, command: Command) -> Any:
        ...


def load_command(source: ListSource, opts: FilterState, generation: int) -> Command:
    """Load records for a filter snapshot."""

    def thunk() -> Message:
        return RecordsLoaded(tuple(source.load(opts)), generation)

    return Command("load", thunk, lambda exc: LoadFailed(exc, generation))


def count_command(source: ListSource, opts: FilterState, generation: int) -> Command:
    """Count records for a filter snapshot. Failures degrade to zero."""

    def thunk() -> Message:
        return CountLoaded(source.count(opts), generation)

    def on_error(exc: Exception) -> Message:
        logger.debug("count failed, showing 0: %s", exc)
        return CountLoaded(0, generation)

    return Command("count", thunk, on_error)


def search_command(source: ListSource, query: str, opts: FilterState, generation: int) -> Command:
    def thunk() -> Message:
        return RecordsLoaded(tuple(source.search(query, opts)), generation)

    return Command("search", thunk, lambda exc: SearchFailed(exc, generation))


def view_command(handler: Callable[[Any], str], record: Any) -> Command:
    """Format a record's detail view."""
    return Command("view", lambda: ViewRendered(handler(record)))


def action_command(label: str, work: Callable[[], str | None]) -> Command:
    """Run a mutating action, then ask the browser to reload.

    ``work`` performs the change and may return a short description of it;
    any exception it raises becomes an ActionFailed message.
    """

    def thunk() -> Message:
        return ReloadRequested(work() or label)

    return Command(label, thunk)


class InlineDispatcher:
    """Runs commands synchronously and feeds results back to a handler.

    Follow-up commands returned by the handler are queued and run in order
    until none remain.
    """

    def __init__(self, handle: Callable[[Message], Iterable[Command]]):
        self._handle = handle
        self._queue: deque[Command] = deque()
        self.history: list[Message] = []

    def dispatch(self, command: Command) -> Message:
        message = command.run()
        self.history.append(message)
        self._queue.extend(self._handle(message))
        return message

    def dispatch_all(self, commands: Iterable[Command]) -> None:
        self._queue.extend(commands)
        while self._queue:
            self.dispatch(self._queue.popleft())
