"""
Data and render contracts for the browser.

Protocols define the interface; entity adapters in views/ implement them
and can be swapped for testing or alternative data sources.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from jotter.tui.dispatcher import Command


@dataclass(frozen=True)
class FilterState:
    """Immutable snapshot of the query driving a load."""

    search: str = ""
    limit: int = 0
    offset: int = 0
    sort_by: str = ""
    sort_order: str = ""
    filters: Mapping[str, Any] = field(default_factory=dict)

    def with_search(self, query: str) -> FilterState:
        return replace(self, search=query)


class ListItem(Protocol):
    """Render contract for list-shaped browsers."""

    def get_title(self) -> str:
        ...

    def get_description(self) -> str:
        ...

    def get_filter_value(self) -> str:
        """Text a search should consider for this item."""
        ...


class DataRecord(Protocol):
    """Render contract for table-shaped browsers."""

    def get_field(self, name: str) -> Any:
        """Value of a named column; unknown names yield an empty string."""
        ...


class DataSource(Protocol):
    """Data contract for table-shaped browsers."""

    def load(self, opts: FilterState) -> list[Any]:
        ...

    def count(self, opts: FilterState) -> int:
        ...


class ListSource(Protocol):
    """Data contract for list-shaped browsers."""

    def load(self, opts: FilterState) -> list[Any]:
        ...

    def count(self, opts: FilterState) -> int:
        ...

    def search(self, query: str, opts: FilterState) -> list[Any]:
        ...


@dataclass(frozen=True)
class Field:
    """A table column."""

    name: str
    title: str
    width: int
    formatter: Callable[[Any], str] | None = None

    def format(self, value: Any) -> str:
        if self.formatter is not None:
            return self.formatter(value)
        return f"{value}"


@dataclass(frozen=True)
class ListAction:
    """A caller-defined key that runs a command against the selected record."""

    key: str
    description: str
    handler: Callable[[Any], Command]
