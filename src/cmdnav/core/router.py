"""Turn discrete input events into navigator mutations.

Key dispatch priority, highest first:

1. editing   - text-edit handling only
2. filtering - filter-input handling only
3. normal navigation

The router performs no I/O. Every call returns an ``Action`` the outer
loop must honor: ``QUIT`` ends without a command, ``ACCEPT`` ends and hands
``Navigator.synthesize()`` to the caller, ``NEXT_THEME`` asks the front end
to move to its next theme.

Key names follow Textual's (``enter``, ``escape``, ``tab``, ``shift+tab``,
``backspace``, ``up`` ...); printable input is read from ``character``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from .model import FlagKind
from .navigator import Focus, Navigator, SCROLLABLE


class Action(Enum):
    NONE = "none"
    QUIT = "quit"
    ACCEPT = "accept"
    NEXT_THEME = "next_theme"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    character: Optional[str] = None

    @classmethod
    def char(cls, ch: str) -> "KeyEvent":
        """Event for a printable character typed on its own."""
        return cls(key=ch, character=ch)

    @property
    def printable(self) -> Optional[str]:
        ch = self.character
        if ch and len(ch) == 1 and ch.isprintable():
            return ch
        return None


@dataclass(frozen=True)
class ClickEvent:
    """Primary click on ``row`` (0-based, relative to the first shown item) of a panel."""

    panel: Focus
    row: int = 0


@dataclass(frozen=True)
class ScrollEvent:
    delta: int


@dataclass(frozen=True)
class ResizeEvent:
    panel: Focus
    height: int


Event = Union[KeyEvent, ClickEvent, ScrollEvent, ResizeEvent]

_UP_KEYS = ("up",)
_DOWN_KEYS = ("down",)


class InputRouter:
    """Routes events to a ``Navigator``.

    Usage:
        router = InputRouter(navigator)
        action = router.handle(KeyEvent("enter"))
    """

    def __init__(self, navigator: Navigator, debug_logger: Optional[Callable[[str], None]] = None):
        self.nav = navigator
        self._log = debug_logger or (lambda msg: None)

    def handle(self, event: Event) -> Action:
        if isinstance(event, KeyEvent):
            return self.handle_key(event)
        if isinstance(event, ClickEvent):
            return self.handle_click(event)
        if isinstance(event, ScrollEvent):
            if not self.nav.editing:
                self.nav.move_selection(event.delta)
            return Action.NONE
        if isinstance(event, ResizeEvent):
            self.nav.set_viewport(event.panel, event.height)
            return Action.NONE
        return Action.NONE

    # --- Keys -----------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> Action:
        if self.nav.editing:
            return self._handle_editing_key(event)
        if self.nav.filtering:
            return self._handle_filter_key(event)
        return self._handle_normal_key(event)

    def _handle_normal_key(self, event: KeyEvent) -> Action:
        nav = self.nav
        key = event.key
        ch = event.printable

        if ch == "q":
            return Action.QUIT
        if ch == "T":
            return Action.NEXT_THEME
        if ch == "/":
            nav.start_filtering()
            return Action.NONE
        if key == "tab":
            nav.focus_next()
            return Action.NONE
        if key == "shift+tab":
            nav.focus_prev()
            return Action.NONE
        if key == "escape":
            if nav.at_root:
                return Action.QUIT
            nav.leave()
            return Action.NONE
        if key == "enter":
            return self.activate()
        if key in _UP_KEYS or ch == "k":
            nav.move_selection(-1)
            return Action.NONE
        if key in _DOWN_KEYS or ch == "j":
            nav.move_selection(1)
            return Action.NONE
        if key == "pageup":
            nav.move_selection(-self._page())
            return Action.NONE
        if key == "pagedown":
            nav.move_selection(self._page())
            return Action.NONE
        if key == "home":
            nav.move_selection(-nav.visible_len(nav.focus))
            return Action.NONE
        if key == "end":
            nav.select_last()
            return Action.NONE
        if key == "space" or ch == " ":
            if nav.focus is Focus.FLAGS:
                flag = nav.selected_flag()
                if flag is not None:
                    nav.toggle_flag(flag)
            return Action.NONE
        if key == "backspace":
            if nav.focus is Focus.FLAGS:
                flag = nav.selected_flag()
                if flag is not None:
                    nav.decrement_flag(flag)
            return Action.NONE
        if key == "left" or ch == "h":
            nav.leave()
            return Action.NONE
        if key == "right" or ch == "l":
            node = nav.selected_subcommand()
            if node is not None:
                nav.enter(node.name)
            return Action.NONE
        return Action.NONE

    def _handle_editing_key(self, event: KeyEvent) -> Action:
        nav = self.nav
        if event.key in ("escape", "enter"):
            nav.finish_editing()
            return Action.NONE
        if event.key == "backspace":
            nav.set_edit_text(nav.edit_text[:-1])
            return Action.NONE
        ch = event.printable
        if ch is not None:
            nav.set_edit_text(nav.edit_text + ch)
        return Action.NONE

    def _handle_filter_key(self, event: KeyEvent) -> Action:
        nav = self.nav
        key = event.key
        if key == "escape":
            nav.stop_filtering(keep=False)
            return Action.NONE
        if key == "enter":
            nav.stop_filtering(keep=True)
            return Action.NONE
        if key in ("tab", "shift+tab"):
            nav.stop_filtering(keep=False)
            if key == "tab":
                nav.focus_next()
            else:
                nav.focus_prev()
            return Action.NONE
        if key == "backspace":
            nav.set_filter_text(nav.filter_text[:-1])
            return Action.NONE
        if key in _UP_KEYS:
            nav.move_selection(-1)
            return Action.NONE
        if key in _DOWN_KEYS:
            nav.move_selection(1)
            return Action.NONE
        ch = event.printable
        if ch is not None:
            nav.set_filter_text(nav.filter_text + ch)
        return Action.NONE

    # --- Activation -----------------------------------------------------

    def activate(self) -> Action:
        """Confirm-key behaviour for the focused panel."""
        nav = self.nav
        focus = nav.focus
        if focus is Focus.COMMANDS:
            node = nav.selected_subcommand()
            if node is not None:
                nav.enter(node.name)
            return Action.NONE
        if focus is Focus.FLAGS:
            flag = nav.selected_flag()
            if flag is None:
                return Action.NONE
            if flag.kind is FlagKind.VALUED:
                if flag.choices:
                    nav.cycle_flag_choice(flag)
                else:
                    nav.start_editing()
            else:
                nav.toggle_flag(flag)
            return Action.NONE
        if focus is Focus.ARGS:
            arg = nav.selected_arg()
            if arg is None:
                return Action.NONE
            if arg.choices:
                nav.cycle_arg_choice(arg)
            else:
                nav.start_editing()
            return Action.NONE
        self._log(f"accept: {nav.synthesize()}")
        return Action.ACCEPT

    # --- Mouse ----------------------------------------------------------

    def handle_click(self, event: ClickEvent) -> Action:
        nav = self.nav
        if nav.editing:
            nav.finish_editing()
        if nav.filtering:
            nav.stop_filtering(keep=True)

        was_focused = nav.focus is event.panel
        if not nav.set_focus(event.panel):
            return Action.NONE

        if event.panel is Focus.PREVIEW:
            return Action.ACCEPT if was_focused else Action.NONE

        viewport = nav.cursor(event.panel).viewport
        if event.row < 0 or (viewport and event.row >= viewport):
            return Action.NONE
        index = nav.scroll_offset(event.panel) + event.row
        if index >= nav.visible_len(event.panel):
            return Action.NONE
        if was_focused and nav.selected_index(event.panel) == index:
            return self.activate()
        nav.select(event.panel, index)
        return Action.NONE

    def _page(self) -> int:
        panel = self.nav.focus
        if panel not in SCROLLABLE:
            return 1
        return max(1, self.nav.cursor(panel).viewport)
