"""Table-shaped browser front end."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, TextIO

from jotter.tui import app as app_mod
from jotter.tui.browser import Browser, BrowserConfig
from jotter.tui.keys import default_keymap
from jotter.tui.providers import DataSource, Field, FilterState, ListAction
from jotter.tui.render import TableLayout, render_static_table

DEFAULT_TITLE = "Data"


@dataclass(frozen=True)
class DataTableOptions:
    output: TextIO | None = None
    input: TextIO | None = None
    static: bool = False
    title: str = ""
    fields: tuple[Field, ...] = ()
    actions: tuple[ListAction, ...] = ()
    view_handler: Callable[[Any], str] | None = None


class DataTable:
    """Browse a DataSource as fixed-width columns, or print it once."""

    def __init__(self, source: DataSource, opts: DataTableOptions | None = None):
        opts = opts or DataTableOptions()
        self.source = source
        self.opts = replace(
            opts,
            output=sys.stdout if opts.output is None else opts.output,
            input=sys.stdin if opts.input is None else opts.input,
            title=opts.title or DEFAULT_TITLE,
            fields=tuple(opts.fields),
        )

    def config(self) -> BrowserConfig:
        return BrowserConfig(
            title=self.opts.title,
            keymap=default_keymap(self.opts.actions, search=False),
            layout=TableLayout(self.opts.fields),
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
        """Print every record once. Load errors are printed, then re-raised."""
        try:
            records = self.source.load(filter_state)
        except Exception as e:
            print(f"Error: {e}", file=self.opts.output)
            raise
        self.opts.output.write(render_static_table(self.opts.title, records, self.opts.fields))
