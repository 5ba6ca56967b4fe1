"""Result messages fed back into the browser.

Every dispatched command produces exactly one of these. ``generation`` tags
the load/count/search that produced a result; ``None`` means the result is
not tied to a load cycle and is always applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class RecordsLoaded:
    records: tuple[Any, ...]
    generation: int | None = None


@dataclass(frozen=True)
class LoadFailed:
    error: Exception
    generation: int | None = None


@dataclass(frozen=True)
class SearchFailed:
    error: Exception
    generation: int | None = None


@dataclass(frozen=True)
class CountLoaded:
    count: int
    generation: int | None = None


@dataclass(frozen=True)
class ViewRendered:
    content: str


@dataclass(frozen=True)
class ActionFailed:
    error: Exception


@dataclass(frozen=True)
class ReloadRequested:
    """Emitted by actions that changed stored data."""

    reason: str = ""


Message = Union[
    RecordsLoaded,
    LoadFailed,
    SearchFailed,
    CountLoaded,
    ViewRendered,
    ActionFailed,
    ReloadRequested,
]
