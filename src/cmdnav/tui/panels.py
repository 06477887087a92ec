from __future__ import annotations

from typing import Callable, Optional

from textual.containers import Container
from textual.events import Click, Key, MouseScrollDown, MouseScrollUp, Resize
from textual.widgets import Static


# Handled by app-level bindings instead of the router.
PASSTHROUGH_KEYS = frozenset({"f1", "f2", "f3", "ctrl+c"})


class KeyForwarder(Container):
    """Focusable container that forwards keystrokes to a handler.

    The app sets a handler receiving ``(key, character)``; every key except
    the passthrough ones is consumed so Textual's own focus bindings (Tab)
    never fire while the navigator owns the keyboard.
    """

    can_focus = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._handler: Optional[Callable[[str, Optional[str]], None]] = None

    def set_key_handler(self, handler: Callable[[str, Optional[str]], None]) -> None:
        self._handler = handler

    def on_key(self, event: Key) -> None:
        key = (event.key or "").lower()
        if self._handler is None or key in PASSTHROUGH_KEYS:
            return
        event.stop()
        event.prevent_default()
        self._handler(key, event.character)


class PanelView(Static):
    """One bordered panel; forwards clicks, wheel and size changes.

    Rows reported to the click handler are 0-based and relative to the
    first line inside the border.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._click_handler: Optional[Callable[[int], None]] = None
        self._scroll_handler: Optional[Callable[[int], None]] = None
        self._size_listener: Optional[Callable[[int], None]] = None

    def set_click_handler(self, handler: Callable[[int], None]) -> None:
        self._click_handler = handler

    def set_scroll_handler(self, handler: Callable[[int], None]) -> None:
        """Set wheel handler; receives -1 for up and +1 for down."""
        self._scroll_handler = handler

    def set_size_listener(self, callback: Callable[[int], None]) -> None:
        """Set callback invoked with the inner height when the widget is resized."""
        self._size_listener = callback

    def on_click(self, event: Click) -> None:
        # y == 0 is the top border
        if self._click_handler is None or event.y < 1:
            return
        event.stop()
        self._click_handler(event.y - 1)

    def on_mouse_scroll_up(self, event: MouseScrollUp) -> None:
        if self._scroll_handler is None:
            return
        event.stop()
        self._scroll_handler(-1)

    def on_mouse_scroll_down(self, event: MouseScrollDown) -> None:
        if self._scroll_handler is None:
            return
        event.stop()
        self._scroll_handler(1)

    def on_resize(self, event: Resize) -> None:
        if self._size_listener:
            self._size_listener(self.content_size.height)
