"""
Textual host for a Browser.

The app owns the terminal. Key events and worker results are fed into the
browser one at a time on the app's message pump; commands run in thread
workers and post their single result message back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.events import Key, Resize
from textual.message import Message
from textual.widgets import Static
from textual.worker import Worker

from jotter.tui.browser import Browser
from jotter.tui.dispatcher import Command
from jotter.tui.keys import KeyPress

logger = logging.getLogger(__name__)


class CommandResult(Message):
    """Carries a command's result from a worker thread to the app."""

    def __init__(self, result) -> None:
        super().__init__()
        self.result = result


class WorkerDispatcher:
    """Runs each command in a textual thread worker."""

    def __init__(self, app: App) -> None:
        self._app = app

    def dispatch(self, command: Command) -> Worker:
        def work() -> None:
            self._app.post_message(CommandResult(command.run()))

        return self._app.run_worker(
            work,
            name=command.label,
            group="commands",
            thread=True,
            exit_on_error=False,
        )


class BrowserApp(App):
    """Full-screen browser."""

    CSS = """
    Screen {
        background: $surface;
    }

    #frame {
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", show=False, priority=True),
    ]

    def __init__(self, browser: Browser, **kwargs) -> None:
        super().__init__(**kwargs)
        self.browser = browser
        self.dispatcher = WorkerDispatcher(self)
        self.title = browser.config.title

    def compose(self) -> ComposeResult:
        yield Static(Text(self.browser.view()), id="frame", markup=False)

    def on_mount(self) -> None:
        self.browser.resize(self.size.width, self.size.height)
        self._dispatch(self.browser.init())
        self._refresh_frame()

    def on_resize(self, event: Resize) -> None:
        self.browser.resize(event.size.width, event.size.height)
        self._refresh_frame()

    def on_key(self, event: Key) -> None:
        event.prevent_default()
        self._handle_press(KeyPress(event.key, event.character))

    def action_interrupt(self) -> None:
        self._handle_press(KeyPress("ctrl+c"))

    def on_command_result(self, message: CommandResult) -> None:
        self._dispatch(self.browser.handle_message(message.result))
        self._refresh_frame()

    def _handle_press(self, press: KeyPress) -> None:
        self._dispatch(self.browser.handle_key(press))
        if self.browser.state.quitting:
            logger.debug("browser quit")
            self.exit()
            return
        self._refresh_frame()

    def _dispatch(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self.dispatcher.dispatch(command)

    def _refresh_frame(self) -> None:
        self.query_one("#frame", Static).update(Text(self.browser.view()))


def run(browser: Browser) -> None:
    """Run a browser until the user quits."""
    BrowserApp(browser).run()
