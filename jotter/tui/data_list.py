"""List-shaped browser front end."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, TextIO

from jotter.tui import app as app_mod
from jotter.tui.browser import Browser, BrowserConfig
from jotter.tui.keys import default_keymap
from jotter.tui.providers import FilterState, ListAction, ListSource
from jotter.tui.render import ItemRenderer, ListLayout, default_item_renderer, render_static_list

DEFAULT_TITLE = "Items"


@dataclass(frozen=True)
class DataListOptions:
    """Construction options for a DataList.

    ``input`` is accepted for symmetry with ``output``; the interactive
    browser reads keys through textual's own driver.
    """

    output: TextIO | None = None
    input: TextIO | None = None
    static: bool = False
    title: str = ""
    actions: tuple[ListAction, ...] = ()
    view_handler: Callable[[Any], str] | None = None
    item_renderer: ItemRenderer | None = None
    show_search: bool = False
    searchable: bool = False


class DataList:
    """Browse a ListSource interactively or print it once."""

    def __init__(self, source: ListSource, opts: DataListOptions | None = None):
        opts = opts or DataListOptions()
        self.source = source
        self.opts = replace(
            opts,
            output=sys.stdout if opts.output is None else opts.output,
            input=sys.stdin if opts.input is None else opts.input,
            title=opts.title or DEFAULT_TITLE,
            item_renderer=opts.item_renderer or default_item_renderer,
        )

    def config(self) -> BrowserConfig:
        return BrowserConfig(
            title=self.opts.title,
            keymap=default_keymap(self.opts.actions, search=self.opts.show_search),
            layout=ListLayout(self.opts.item_renderer),
            show_search=self.opts.show_search,
            searchable=self.opts.searchable,
            view_handler=self.opts.view_handler,
        )

    def new_browser(self, filter_state: FilterState | None = None) -> Browser:
        return Browser(self.source, self.config(), filter_state)

    def browse(self) -> None:
        self.browse_with_options(FilterState())

    def browse_with_options(self, filter_state: FilterState) -> None:
        if self.opts.static:
            self.static_display(filter_state)
            return
        app_mod.run(self.new_browser(filter_state))

    def static_display(self, filter_state: FilterState) -> None:
        """Print every item once. Load errors are printed, then re-raised."""
        try:
            items = self.source.load(filter_state)
        except Exception as e:
            print(f"Error: {e}", file=self.opts.output)
            raise
        self.opts.output.write(render_static_list(self.opts.title, items, self.opts.item_renderer))
