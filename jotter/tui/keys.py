"""
Key routing for the browser.

Input mode determines which bindings are live. Each browser builds its own
immutable KeyMap; nothing here is process-global.

Keys are matched against textual's key name *and* the typed character, so a
binding for "/" also fires for the "slash" key event.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from jotter.tui.providers import ListAction


class Mode(Enum):
    NAVIGATING = "navigating"
    SEARCHING = "searching"
    VIEWING = "viewing"
    HELP = "help"


class Action(Enum):
    UP = "up"
    DOWN = "down"
    VIEW = "view"
    SEARCH = "search"
    REFRESH = "refresh"
    QUIT = "quit"
    BACK = "back"
    HELP = "help"
    JUMP = "jump"
    CUSTOM = "custom"
    # SEARCHING
    INPUT = "input"
    DELETE_CHAR = "delete_char"
    COMMIT = "commit"
    CANCEL = "cancel"
    # VIEWING
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TOP = "top"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class KeyPress:
    """A key event, decoupled from textual's event class."""

    key: str
    character: str | None = None


def key_press(name: str) -> KeyPress:
    """Build a KeyPress the way textual reports it for ``name``."""
    if len(name) == 1:
        return KeyPress(name, name)
    return KeyPress(name)


@dataclass(frozen=True)
class KeyBinding:
    keys: tuple[str, ...]
    help_key: str
    help_text: str

    def matches(self, press: KeyPress) -> bool:
        if press.key in self.keys:
            return True
        return press.character is not None and press.character in self.keys


@dataclass(frozen=True)
class Routed:
    """Result of routing a key: the action plus its payload."""

    action: Action
    index: int = 0
    action_key: str = ""
    text: str = ""


SEARCH_BINDING = KeyBinding(("/", "slash"), "/", "search")

JUMP_KEYS = tuple(str(n) for n in range(1, 10))

# Detail viewport scrolling
_SCROLL_UP = KeyBinding(("up", "k"), "↑/k", "scroll up")
_SCROLL_DOWN = KeyBinding(("down", "j"), "↓/j", "scroll down")
_PAGE_UP = KeyBinding(("pageup", "b"), "pgup/b", "page up")
_PAGE_DOWN = KeyBinding(("pagedown", "f"), "pgdown/f", "page down")
_TOP = KeyBinding(("home", "g"), "home/g", "go to top")
_BOTTOM = KeyBinding(("end", "G"), "end/G", "go to bottom")

_DELETE_KEYS = ("backspace", "ctrl+h")


@dataclass(frozen=True)
class KeyMap:
    up: KeyBinding = KeyBinding(("up", "k"), "↑/k", "move up")
    down: KeyBinding = KeyBinding(("down", "j"), "↓/j", "move down")
    enter: KeyBinding = KeyBinding(("enter",), "enter", "select")
    view: KeyBinding = KeyBinding(("v",), "v", "view")
    search: KeyBinding | None = SEARCH_BINDING
    refresh: KeyBinding = KeyBinding(("r",), "r", "refresh")
    quit: KeyBinding = KeyBinding(("q", "ctrl+c"), "q", "quit")
    back: KeyBinding = KeyBinding(("escape", "backspace"), "esc", "back")
    help: KeyBinding = KeyBinding(("?", "question_mark"), "?", "help")
    actions: tuple[ListAction, ...] = ()

    def action_bindings(self) -> tuple[KeyBinding, ...]:
        return tuple(KeyBinding((a.key,), a.key, a.description) for a in self.actions)

    def short_help(self) -> tuple[KeyBinding, ...]:
        """Bindings shown under the list."""
        bindings = [self.up, self.down, self.enter]
        if self.search is not None:
            bindings.append(self.search)
        bindings += [self.help, self.quit]
        return tuple(bindings)

    def full_help(self) -> tuple[tuple[KeyBinding, ...], ...]:
        """Binding groups shown by the help overlay."""
        second = [self.refresh, self.help, self.quit, self.back]
        if self.search is not None:
            second.insert(0, self.search)
        groups = [(self.up, self.down, self.enter, self.view), tuple(second)]
        if self.actions:
            groups.append(self.action_bindings())
        return tuple(groups)


def default_keymap(actions: tuple[ListAction, ...] = (), search: bool = True) -> KeyMap:
    return KeyMap(search=SEARCH_BINDING if search else None, actions=tuple(actions))


def _route_help(press: KeyPress, keymap: KeyMap) -> Routed | None:
    if keymap.help.matches(press):
        return Routed(Action.HELP)
    if keymap.back.matches(press):
        return Routed(Action.BACK)
    if keymap.quit.matches(press):
        return Routed(Action.QUIT)
    return None


def _route_viewing(press: KeyPress, keymap: KeyMap) -> Routed | None:
    routed = _route_help(press, keymap)
    if routed is not None:
        return routed
    for binding, action in (
        (_SCROLL_UP, Action.SCROLL_UP),
        (_SCROLL_DOWN, Action.SCROLL_DOWN),
        (_PAGE_UP, Action.PAGE_UP),
        (_PAGE_DOWN, Action.PAGE_DOWN),
        (_TOP, Action.TOP),
        (_BOTTOM, Action.BOTTOM),
    ):
        if binding.matches(press):
            return Routed(action)
    return None


def _route_searching(press: KeyPress) -> Routed | None:
    if press.key == "escape":
        return Routed(Action.CANCEL)
    if press.key == "enter":
        return Routed(Action.COMMIT)
    if press.key in _DELETE_KEYS:
        return Routed(Action.DELETE_CHAR)
    char = press.character
    if char and len(char) == 1 and char.isprintable():
        return Routed(Action.INPUT, text=char)
    return None


def _route_navigating(press: KeyPress, keymap: KeyMap) -> Routed | None:
    if keymap.quit.matches(press):
        return Routed(Action.QUIT)
    if keymap.up.matches(press):
        return Routed(Action.UP)
    if keymap.down.matches(press):
        return Routed(Action.DOWN)
    if keymap.enter.matches(press) or keymap.view.matches(press):
        return Routed(Action.VIEW)
    if keymap.search is not None and keymap.search.matches(press):
        return Routed(Action.SEARCH)
    if keymap.refresh.matches(press):
        return Routed(Action.REFRESH)
    if keymap.help.matches(press):
        return Routed(Action.HELP)
    if keymap.back.matches(press):
        return Routed(Action.BACK)

    for i, key in enumerate(JUMP_KEYS):
        if press.key == key or press.character == key:
            return Routed(Action.JUMP, index=i)

    for action in keymap.actions:
        if press.key == action.key or press.character == action.key:
            return Routed(Action.CUSTOM, action_key=action.key)

    return None


def route(press: KeyPress, mode: Mode, keymap: KeyMap) -> Routed | None:
    """Map a key press to an action for the current mode.

    Returns None for keys with no meaning in that mode.
    """
    if mode is Mode.HELP:
        return _route_help(press, keymap)
    if mode is Mode.VIEWING:
        return _route_viewing(press, keymap)
    if mode is Mode.SEARCHING:
        return _route_searching(press)
    return _route_navigating(press, keymap)
