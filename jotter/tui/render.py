"""
View rendering.

Pure functions of browser state: the same state always renders the same
text, and rendering never changes state.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jotter.tui.keys import KeyMap, Mode
from jotter.tui.providers import Field

if TYPE_CHECKING:
    from jotter.tui.browser import BrowserConfig, BrowserState

SCROLL_HINT = "↑/↓/pgup/pgdn: scroll | g/G: top/bottom | q/esc: back | ?: help"
SEARCH_HINT = "Press Enter to search, Esc to cancel"
EMPTY_HINT = "Press r to refresh, q to quit"
HELP_FOOTER = "Press ?, esc or q to close help"
CURSOR = "▎"
RULE = "─"

ItemRenderer = Callable[[Any, bool], str]


def default_item_renderer(item: Any, selected: bool) -> str:
    prefix = "> " if selected else "  "
    line = f"{prefix}{item.get_title()}"
    description = item.get_description()
    if description:
        line += f" - {description}"
    return line


def format_cell(field: Field, value: Any) -> str:
    """Format and fit a value into a column."""
    display = field.format(value)
    if len(display) > field.width - 1:
        display = display[:max(field.width - 4, 0)] + "..."
    return f"{display:<{field.width}}"


def _header_cells(fields: Sequence[Field]) -> str:
    return " ".join(f"{f.title:<{f.width}}" for f in fields)


def _row_cells(fields: Sequence[Field], record: Any) -> str:
    return " ".join(format_cell(f, record.get_field(f.name)) for f in fields)


@dataclass(frozen=True)
class ListLayout:
    """Rows are rendered one item per line by ``item_renderer``."""

    item_renderer: ItemRenderer = default_item_renderer
    empty_message: str = "No items found"

    def rows(self, records: Sequence[Any], selected: int) -> list[str]:
        return [self.item_renderer(item, i == selected) for i, item in enumerate(records)]


@dataclass(frozen=True)
class TableLayout:
    """Fixed-width columns under a header and a rule."""

    fields: tuple[Field, ...] = ()
    empty_message: str = "No records found"

    def rows(self, records: Sequence[Any], selected: int) -> list[str]:
        header = _header_cells(self.fields)
        lines = [f"   {header}", RULE * (3 + len(header))]
        for i, record in enumerate(records):
            prefix = " > " if i == selected else "   "
            lines.append(f"{prefix}{_row_cells(self.fields, record)}")
        return lines


def short_help(keymap: KeyMap) -> str:
    return " • ".join(f"{b.help_key} {b.help_text}" for b in keymap.short_help())


def render_help(keymap: KeyMap) -> str:
    lines = ["Key bindings", ""]
    for group in keymap.full_help():
        lines.extend(f"  {b.help_key:<10}{b.help_text}" for b in group)
        lines.append("")
    lines.append(HELP_FOOTER)
    return "\n".join(lines)


def _recovery_hint(config: BrowserConfig) -> str:
    if config.show_search:
        return EMPTY_HINT + ", / to search"
    return EMPTY_HINT


def render(state: BrowserState, config: BrowserConfig) -> str:
    """Render the current frame."""
    if state.mode is Mode.HELP:
        return render_help(config.keymap)

    if state.mode is Mode.VIEWING:
        return f"{state.viewport.visible(state.view_content)}\n\n{SCROLL_HINT}"

    header = config.title
    if state.total_count > 0:
        header += f" ({state.total_count} total)"
    if state.search_query:
        header += f" - Search: {state.search_query}"
    out = [header, ""]

    if state.mode is Mode.SEARCHING:
        out.append(f"Search: {state.search_query}{CURSOR}")
        out.append(SEARCH_HINT)
        return "\n".join(out)

    if state.loading:
        out.append("Loading...")
        return "\n".join(out)

    if state.error is not None:
        out += [f"Error: {state.error}", "", _recovery_hint(config)]
        return "\n".join(out)

    if not state.records:
        message = config.layout.empty_message
        if state.search_query:
            message += f" for search: {state.search_query}"
        out += [message, "", _recovery_hint(config)]
        return "\n".join(out)

    out.extend(config.layout.rows(state.records, state.selected))
    out.append("")
    out.append(short_help(config.keymap))
    return "\n".join(out)


def render_static_list(title: str, items: Sequence[Any], item_renderer: ItemRenderer) -> str:
    """One-shot listing for non-interactive output."""
    lines = [title, ""]
    if not items:
        lines.append("No items found")
    else:
        lines.extend(item_renderer(item, False) for item in items)
    return "\n".join(lines) + "\n"


def render_static_table(title: str, records: Sequence[Any], fields: Sequence[Field]) -> str:
    """One-shot table for non-interactive output."""
    lines = [title, ""]
    if not records:
        lines.append("No records found")
    else:
        header = _header_cells(fields)
        lines += [header, RULE * len(header)]
        lines.extend(_row_cells(fields, record) for record in records)
    return "\n".join(lines) + "\n"
