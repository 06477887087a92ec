"""Navigation state machine over the command tree.

The Navigator owns one explicit state object (path, per-panel cursors,
focus, editing/filtering modes, filter text) plus the value store. The
input router drives it one event at a time; the renderer only reads it.

Panels are Commands, Flags, Args and Preview. Focus never rests on a panel
whose (unfiltered) item set is empty: ``repair_focus`` runs after every
position change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .fuzzy import MatchScore, score_item
from .model import CommandNode, FlagKind, FlagSpec, UsageSpec
from .synthesizer import CommandSynthesizer
from .values import (
    ArgValue,
    BoolValue,
    CountValue,
    FlagValue,
    TextValue,
    ValueStore,
    next_choice,
)


class Focus(Enum):
    COMMANDS = "commands"
    FLAGS = "flags"
    ARGS = "args"
    PREVIEW = "preview"


FOCUS_ORDER: Tuple[Focus, ...] = (Focus.COMMANDS, Focus.FLAGS, Focus.ARGS, Focus.PREVIEW)
SCROLLABLE: Tuple[Focus, ...] = (Focus.COMMANDS, Focus.FLAGS, Focus.ARGS)

PREVIEW_HELP = "Press Enter to accept the command, Esc to go back"


@dataclass
class PanelCursor:
    """Selection index, scroll offset and viewport height of one list panel."""

    index: int = 0
    scroll: int = 0
    viewport: int = 0


@dataclass
class NavigationState:
    command_path: List[str] = field(default_factory=list)
    cursors: Dict[Focus, PanelCursor] = field(
        default_factory=lambda: {panel: PanelCursor() for panel in SCROLLABLE}
    )
    focus: Focus = Focus.PREVIEW
    editing: bool = False
    filtering: bool = False
    filter_text: str = ""
    arg_values: List[ArgValue] = field(default_factory=list)


class Navigator:
    """Tree position, focus, selection and value editing for one spec.

    Usage:
        nav = Navigator(spec)
        nav.enter("deploy")
        nav.focus_next()
        nav.synthesize()
    """

    def __init__(
        self,
        spec: UsageSpec,
        bin_override: Optional[str] = None,
        debug_logger: Optional[Callable[[str], None]] = None,
    ):
        """Initialize at the root of ``spec``.

        Args:
            spec: Immutable command tree
            bin_override: Replaces the usage spec's binary name in synthesized output
            debug_logger: Optional callback receiving state-change messages
        """
        self.spec = spec
        self.store = ValueStore()
        self.state = NavigationState()
        self.synthesizer = CommandSynthesizer(spec, self.store, bin_override=bin_override)
        self._log = debug_logger or (lambda msg: None)
        self._edit_target: Optional[Tuple[Focus, str]] = None
        self._sync()
        self.state.focus = self.available_panels()[0]

    # --- Read accessors -------------------------------------------------

    @property
    def command_path(self) -> List[str]:
        return list(self.state.command_path)

    @property
    def focus(self) -> Focus:
        return self.state.focus

    @property
    def editing(self) -> bool:
        return self.state.editing

    @property
    def filtering(self) -> bool:
        return self.state.filtering

    @property
    def filter_text(self) -> str:
        return self.state.filter_text

    @property
    def arg_values(self) -> List[ArgValue]:
        return self.state.arg_values

    @property
    def at_root(self) -> bool:
        return not self.state.command_path

    @property
    def current_node(self) -> CommandNode:
        return self.spec.resolve(tuple(self.state.command_path))

    def cursor(self, panel: Focus) -> PanelCursor:
        return self.state.cursors.get(panel, PanelCursor())

    def selected_index(self, panel: Focus) -> int:
        return self.cursor(panel).index

    def scroll_offset(self, panel: Focus) -> int:
        return self.cursor(panel).scroll

    def filter_applies(self, panel: Focus) -> bool:
        return bool(self.state.filter_text) and self.state.focus is panel

    # --- Panel contents -------------------------------------------------

    def all_subcommands(self) -> List[CommandNode]:
        return self.current_node.visible_children()

    def all_flags(self) -> List[FlagSpec]:
        """Visible flags of the current node followed by the root's globals."""
        node = self.current_node
        if node is self.spec.root:
            return node.visible_flags()
        own = [f for f in node.visible_flags() if not self.spec.is_global_flag(f.name)]
        return own + [f for f in self.spec.global_flags() if not f.hidden]

    def all_args(self) -> List[ArgValue]:
        return list(self.state.arg_values)

    def visible_subcommands(self) -> List[CommandNode]:
        items = self.all_subcommands()
        if not self.filter_applies(Focus.COMMANDS):
            return items
        return [c for c in items if self._command_score(c).matched]

    def visible_flags(self) -> List[FlagSpec]:
        items = self.all_flags()
        if not self.filter_applies(Focus.FLAGS):
            return items
        return [f for f in items if self._flag_score(f).matched]

    def visible_args(self) -> List[ArgValue]:
        items = self.all_args()
        if not self.filter_applies(Focus.ARGS):
            return items
        return [a for a in items if self._arg_score(a).matched]

    def visible_len(self, panel: Focus) -> int:
        if panel is Focus.COMMANDS:
            return len(self.visible_subcommands())
        if panel is Focus.FLAGS:
            return len(self.visible_flags())
        if panel is Focus.ARGS:
            return len(self.visible_args())
        return 1

    def match_scores(self, panel: Focus) -> Dict[str, MatchScore]:
        """Scores keyed by item name for ``panel``; empty unless the filter applies."""
        if not self.filter_applies(panel):
            return {}
        if panel is Focus.COMMANDS:
            return {c.name: self._command_score(c) for c in self.all_subcommands()}
        if panel is Focus.FLAGS:
            return {f.name: self._flag_score(f) for f in self.all_flags()}
        if panel is Focus.ARGS:
            return {a.name: self._arg_score(a) for a in self.all_args()}
        return {}

    def _command_score(self, node: CommandNode) -> MatchScore:
        return score_item(node.name, node.help, self.state.filter_text, extra_names=node.aliases)

    def _flag_score(self, flag: FlagSpec) -> MatchScore:
        return score_item(flag.label, flag.help, self.state.filter_text, extra_names=(flag.name,))

    def _arg_score(self, arg: ArgValue) -> MatchScore:
        return score_item(arg.name, arg.help, self.state.filter_text)

    def selected_subcommand(self) -> Optional[CommandNode]:
        return _at(self.visible_subcommands(), self.selected_index(Focus.COMMANDS))

    def selected_flag(self) -> Optional[FlagSpec]:
        return _at(self.visible_flags(), self.selected_index(Focus.FLAGS))

    def selected_arg(self) -> Optional[ArgValue]:
        return _at(self.visible_args(), self.selected_index(Focus.ARGS))

    # --- Flag values ----------------------------------------------------

    def _flag_path(self, flag: FlagSpec) -> Tuple[str, ...]:
        if self.spec.is_global_flag(flag.name):
            return ()
        return tuple(self.state.command_path)

    def flag_value(self, flag: FlagSpec) -> FlagValue:
        return self.store.value(self._flag_path(flag), flag.name)

    def set_flag_value(self, flag: FlagSpec, value: FlagValue) -> None:
        self.store.set_value(self._flag_path(flag), flag.name, value)

    def toggle_flag(self, flag: FlagSpec) -> None:
        """Flip a boolean flag or bump a counted one; valued flags are untouched."""
        value = self.flag_value(flag)
        if isinstance(value, BoolValue):
            self.set_flag_value(flag, BoolValue(not value.on))
        elif isinstance(value, CountValue):
            self.set_flag_value(flag, CountValue(value.count + 1))

    def decrement_flag(self, flag: FlagSpec) -> None:
        value = self.flag_value(flag)
        if isinstance(value, CountValue):
            self.set_flag_value(flag, CountValue(max(0, value.count - 1)))

    def cycle_flag_choice(self, flag: FlagSpec) -> None:
        value = self.flag_value(flag)
        current = value.text if isinstance(value, TextValue) else ""
        self.set_flag_value(flag, TextValue(next_choice(current, flag.choices)))

    def cycle_arg_choice(self, arg: ArgValue) -> None:
        arg.value = next_choice(arg.value, arg.choices)

    # --- Transitions ----------------------------------------------------

    def enter(self, name: str) -> bool:
        """Descend into a visible child of the current node.

        Args:
            name: Child name or alias

        Returns:
            True if the position changed
        """
        child = self.current_node.find_child(name)
        if child is None:
            return False
        self._leave_position()
        self.state.command_path.append(child.name)
        self._sync()
        self._log(f"enter → {' '.join(self.state.command_path)}")
        return True

    def leave(self) -> bool:
        """Pop the last path segment; no-op at the root."""
        if not self.state.command_path:
            return False
        self._leave_position()
        self.state.command_path.pop()
        self._sync()
        self._log(f"leave → {' '.join(self.state.command_path) or '(root)'}")
        return True

    def navigate_to(self, path: Sequence[str]) -> None:
        """Jump to ``path`` from the root, stopping at the first unknown segment."""
        while self.leave():
            pass
        for segment in path:
            if not self.enter(segment):
                break

    def _leave_position(self) -> None:
        self.finish_editing()
        self.store.remember_args(self.state.command_path, self.state.arg_values)

    def _sync(self) -> None:
        """Reset cursors and filter, then initialize values for the new position."""
        for cursor in self.state.cursors.values():
            cursor.index = 0
            cursor.scroll = 0
        self.state.filtering = False
        self.state.filter_text = ""

        path = tuple(self.state.command_path)
        node = self.current_node
        self.store.ensure_initialized((), self.spec.root.visible_flags())
        if path:
            own = [f for f in node.visible_flags() if not self.spec.is_global_flag(f.name)]
            self.store.ensure_initialized(path, own)
        self.state.arg_values = self.store.rebuild_args(node, path)
        self.repair_focus()

    # --- Focus ----------------------------------------------------------

    def available_panels(self) -> List[Focus]:
        """Panels with at least one item, in focus order; Preview is always last."""
        panels = []
        if self.all_subcommands():
            panels.append(Focus.COMMANDS)
        if self.all_flags():
            panels.append(Focus.FLAGS)
        if self.all_args():
            panels.append(Focus.ARGS)
        panels.append(Focus.PREVIEW)
        return panels

    def repair_focus(self) -> None:
        panels = self.available_panels()
        if self.state.focus not in panels:
            self._log(f"focus {self.state.focus.value} empty → {panels[0].value}")
            self.state.focus = panels[0]

    def set_focus(self, panel: Focus) -> bool:
        if panel not in self.available_panels():
            return False
        if panel is not self.state.focus:
            self.state.filter_text = ""
            self.state.filtering = False
            self.state.focus = panel
            self._log(f"focus → {panel.value}")
        return True

    def focus_next(self) -> None:
        self._cycle_focus(1)

    def focus_prev(self) -> None:
        self._cycle_focus(-1)

    def _cycle_focus(self, step: int) -> None:
        panels = self.available_panels()
        try:
            idx = (panels.index(self.state.focus) + step) % len(panels)
        except ValueError:
            idx = 0
        self.set_focus(panels[idx])

    # --- Selection ------------------------------------------------------

    def move_selection(self, delta: int) -> None:
        """Move the focused panel's selection by ``delta``, clamped, no wraparound."""
        panel = self.state.focus
        if panel not in SCROLLABLE:
            return
        self.select(panel, self.selected_index(panel) + delta)

    def select(self, panel: Focus, index: int) -> None:
        if panel not in SCROLLABLE:
            return
        cursor = self.state.cursors[panel]
        cursor.index = _clamp(index, self.visible_len(panel))
        self.ensure_visible(panel)

    def select_last(self) -> None:
        panel = self.state.focus
        self.select(panel, self.visible_len(panel) - 1)

    def clamp_selection(self) -> None:
        for panel in SCROLLABLE:
            self.select(panel, self.selected_index(panel))

    def set_viewport(self, panel: Focus, height: int) -> None:
        if panel not in SCROLLABLE:
            return
        self.state.cursors[panel].viewport = max(0, height)
        self.ensure_visible(panel)

    def ensure_visible(self, panel: Focus) -> None:
        """Keep ``scroll <= index < scroll + viewport`` for ``panel``."""
        cursor = self.state.cursors[panel]
        if cursor.viewport <= 0:
            return
        if cursor.index < cursor.scroll:
            cursor.scroll = cursor.index
        elif cursor.index >= cursor.scroll + cursor.viewport:
            cursor.scroll = cursor.index - cursor.viewport + 1
        max_scroll = max(0, self.visible_len(panel) - cursor.viewport)
        cursor.scroll = max(0, min(cursor.scroll, max_scroll))

    # --- Filtering ------------------------------------------------------

    def start_filtering(self) -> None:
        self.state.filtering = True
        self.state.filter_text = ""

    def stop_filtering(self, keep: bool) -> None:
        self.state.filtering = False
        if not keep:
            self.state.filter_text = ""
        self.clamp_selection()

    def set_filter_text(self, text: str) -> None:
        self.state.filter_text = text
        panel = self.state.focus
        if panel in SCROLLABLE:
            self.state.cursors[panel].scroll = 0
            self.select(panel, 0)

    # --- Editing --------------------------------------------------------

    def start_editing(self) -> bool:
        """Begin live-editing the selected valued flag or free-text arg."""
        focus = self.state.focus
        if focus is Focus.FLAGS:
            flag = self.selected_flag()
            if flag is None or flag.kind is not FlagKind.VALUED or flag.choices:
                return False
            self._edit_target = (focus, flag.name)
        elif focus is Focus.ARGS:
            arg = self.selected_arg()
            if arg is None or arg.choices:
                return False
            self._edit_target = (focus, arg.name)
        else:
            return False
        self.state.editing = True
        return True

    def finish_editing(self) -> None:
        self.state.editing = False
        self._edit_target = None

    @property
    def edit_text(self) -> str:
        """Current text of the value being edited ("" when not editing)."""
        if not self.state.editing or self._edit_target is None:
            return ""
        panel, name = self._edit_target
        if panel is Focus.FLAGS:
            flag = self._find_flag(name)
            value = self.flag_value(flag) if flag else None
            return value.text if isinstance(value, TextValue) else ""
        arg = self._find_arg(name)
        return arg.value if arg else ""

    def set_edit_text(self, text: str) -> None:
        if not self.state.editing or self._edit_target is None:
            return
        panel, name = self._edit_target
        if panel is Focus.FLAGS:
            flag = self._find_flag(name)
            if flag is not None:
                self.set_flag_value(flag, TextValue(text))
        else:
            arg = self._find_arg(name)
            if arg is not None:
                arg.value = text

    def is_edit_target(self, panel: Focus, name: str) -> bool:
        return self.state.editing and self._edit_target == (panel, name)

    def _find_flag(self, name: str) -> Optional[FlagSpec]:
        return next((f for f in self.all_flags() if f.name == name), None)

    def _find_arg(self, name: str) -> Optional[ArgValue]:
        return next((a for a in self.state.arg_values if a.name == name), None)

    # --- Output ---------------------------------------------------------

    def synthesize(self) -> str:
        return self.synthesizer.synthesize(self.state.command_path, self.state.arg_values)

    def current_help(self) -> Optional[str]:
        """Help text of the highlighted item in the focused panel."""
        focus = self.state.focus
        if focus is Focus.COMMANDS:
            node = self.selected_subcommand()
            return node.help if node else None
        if focus is Focus.FLAGS:
            flag = self.selected_flag()
            return flag.help if flag else None
        if focus is Focus.ARGS:
            arg = self.selected_arg()
            return (arg.help or None) if arg else None
        return PREVIEW_HELP


def _clamp(index: int, length: int) -> int:
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


def _at(items, index: int):
    if 0 <= index < len(items):
        return items[index]
    return None
