"""Textual front end for the command navigator.

Layout:
- breadcrumb of the current command path
- Commands panel (left), Flags and Args panels (right)
- help bar with context help and key hints
- live preview of the synthesized command

All keys go through one focusable ``KeyForwarder`` to the ``InputRouter``;
the app only renders navigator state and honors the returned ``Action``.
Theme switching stays on F1/F2/F3; T cycles through the themes.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, Static

from ..core.model import UsageSpec
from ..core.navigator import Focus, Navigator
from ..core.router import Action, ClickEvent, Event, InputRouter, KeyEvent, ResizeEvent, ScrollEvent
from ..log_manager import LogManager
from . import render
from .panels import KeyForwarder, PanelView


THEMES = ("ledger", "analyst", "seminar")
THEME_CLASSES = tuple(f"theme-{name}" for name in THEMES)

PANEL_IDS: Dict[Focus, str] = {
    Focus.COMMANDS: "commands",
    Focus.FLAGS: "flags",
    Focus.ARGS: "args",
    Focus.PREVIEW: "preview",
}

PANEL_LABELS: Dict[Focus, str] = {
    Focus.COMMANDS: "Commands",
    Focus.FLAGS: "Flags",
    Focus.ARGS: "Args",
    Focus.PREVIEW: "Command",
}


class NavigatorApp(App):
    """Browse a command tree and return the composed command line.

    ``run()`` returns the synthesized command on accept and None on quit
    or abort.
    """

    CSS_PATH = "themes.tcss"
    TITLE = "cmdnav"

    THEMES = THEMES
    DEFAULT_THEME = "ledger"

    BINDINGS = [
        Binding("f1", "switch_theme('ledger')", "Ledger", priority=True),
        Binding("f2", "switch_theme('analyst')", "Analyst", priority=True),
        Binding("f3", "switch_theme('seminar')", "Seminar", priority=True),
        Binding("ctrl+c", "abort", "Abort", priority=True),
    ]

    def __init__(
        self,
        spec: UsageSpec,
        bin_override: Optional[str] = None,
        start_theme: Optional[str] = None,
        log_manager: Optional[LogManager] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.log_manager = log_manager or LogManager()
        self.navigator = Navigator(
            spec,
            bin_override=bin_override,
            debug_logger=self.log_manager.logger("events"),
        )
        self.router = InputRouter(self.navigator, debug_logger=self.log_manager.logger("events"))
        self.palette_name = start_theme if start_theme in self.THEMES else self.DEFAULT_THEME
        self.sub_title = spec.about or spec.name
        self._panels: Dict[Focus, PanelView] = {}
        self._view_mounted = False

    def compose(self) -> ComposeResult:
        yield Header(id="header")
        self.breadcrumb = Static("", id="breadcrumb")
        yield self.breadcrumb
        self.forwarder = KeyForwarder(id="navigator")
        with self.forwarder:
            with Horizontal(id="body"):
                yield self._make_panel(Focus.COMMANDS)
                with Vertical(id="detail"):
                    yield self._make_panel(Focus.FLAGS)
                    yield self._make_panel(Focus.ARGS)
            self.help_bar = Static("", id="help-bar")
            yield self.help_bar
            yield self._make_panel(Focus.PREVIEW)
        yield Footer(id="footer")

    def _make_panel(self, panel: Focus) -> PanelView:
        view = PanelView("", id=PANEL_IDS[panel], classes="panel")
        view.border_title = PANEL_LABELS[panel]
        view.set_click_handler(lambda row, p=panel: self.route_event(ClickEvent(p, row)))
        if panel is not Focus.PREVIEW:
            view.set_scroll_handler(self._on_wheel)
            view.set_size_listener(lambda height, p=panel: self.route_event(ResizeEvent(p, height)))
        self._panels[panel] = view
        return view

    def on_mount(self) -> None:
        self.add_class(f"theme-{self.palette_name}")
        self.forwarder.set_key_handler(self._on_key_forwarded)
        self.forwarder.focus()
        self._view_mounted = True
        self.refresh_view()

    # --- Actions ----------------------------------------------------------

    def action_switch_theme(self, theme: str) -> None:
        # Remove previous theme classes and apply the new one
        for cls in THEME_CLASSES:
            self.remove_class(cls)
        self.add_class(f"theme-{theme}")
        self.palette_name = theme
        self.log_manager.add("events", f"Switched theme → {theme}")
        self.refresh_view()

    def action_next_theme(self) -> None:
        idx = self.THEMES.index(self.palette_name)
        self.action_switch_theme(self.THEMES[(idx + 1) % len(self.THEMES)])

    def action_abort(self) -> None:
        self.log_manager.add("events", "abort")
        self.exit(None)

    # --- Event plumbing ---------------------------------------------------

    def _on_key_forwarded(self, key: str, character: Optional[str]) -> None:
        self.log_manager.add("debug", f"key={key!r} char={character!r}")
        self.route_event(KeyEvent(key, character))

    def _on_wheel(self, delta: int) -> None:
        self.route_event(ScrollEvent(delta))

    def route_event(self, event: Event) -> Action:
        """Route one input event and honor the resulting action."""
        action = self.router.handle(event)
        if action is Action.ACCEPT:
            self.exit(self.navigator.synthesize())
        elif action is Action.QUIT:
            self.log_manager.add("events", "quit")
            self.exit(None)
        elif action is Action.NEXT_THEME:
            self.action_next_theme()
        else:
            self.refresh_view()
        return action

    # --- Rendering --------------------------------------------------------

    def refresh_view(self) -> None:
        if not self._view_mounted:
            return
        nav = self.navigator
        theme = self.palette_name
        builders: Dict[Focus, Callable] = {
            Focus.COMMANDS: render.commands_text,
            Focus.FLAGS: render.flags_text,
            Focus.ARGS: render.args_text,
            Focus.PREVIEW: render.preview_text,
        }
        self.breadcrumb.update(render.breadcrumb(nav, theme))
        for panel, view in self._panels.items():
            view.update(builders[panel](nav, theme))
            view.border_title = render.panel_title(nav, panel, PANEL_LABELS[panel])
            view.set_class(nav.focus is panel, "is-focused")
        self.help_bar.update(render.help_bar_text(nav, theme))
