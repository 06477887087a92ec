"""Rich ``Text`` builders for each panel.

Pure functions of the navigator state: nothing here mutates it.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from rich.text import Text

from ..core.fuzzy import MatchScore
from ..core.model import FlagKind, FlagSpec
from ..core.navigator import Focus, Navigator
from ..core.values import BoolValue, CountValue, TextValue


PALETTES: Dict[str, Dict[str, str]] = {
    "ledger": {
        "selected": "bold black on #d7c49e",
        "cursor": "bold #d7c49e",
        "match": "bold underline #b5651d",
        "dim": "#8a8170",
        "value": "#5f8700",
        "global": "#875f00",
        "required": "bold #af0000",
        "prompt": "bold #875f00",
    },
    "analyst": {
        "selected": "bold black on #5fafd7",
        "cursor": "bold #5fafd7",
        "match": "bold underline #ffaf00",
        "dim": "#6c7a89",
        "value": "#87d787",
        "global": "#af87ff",
        "required": "bold #ff5f5f",
        "prompt": "bold #5fafd7",
    },
    "seminar": {
        "selected": "bold white on #5f5f87",
        "cursor": "bold #d787af",
        "match": "bold underline #ffd75f",
        "dim": "#8787af",
        "value": "#afd7af",
        "global": "#d787af",
        "required": "bold #ff8787",
        "prompt": "bold #d787af",
    },
}

EDIT_CURSOR = "▏"

KEY_HINTS = {
    "normal": "↑↓ move • Enter select • Space toggle • Tab panel • / filter • Esc back • T theme • q quit",
    "filtering": "type to filter • ↑↓ move • Enter keep • Esc clear • Tab panel",
    "editing": "type value • Backspace delete • Enter/Esc done",
}

T = TypeVar("T")


def palette(theme: str) -> Dict[str, str]:
    return PALETTES.get(theme, PALETTES["ledger"])


def window(items: Sequence[T], nav: Navigator, panel: Focus) -> List[T]:
    """Slice of ``items`` currently scrolled into view."""
    cursor = nav.cursor(panel)
    if cursor.viewport <= 0:
        return list(items[cursor.scroll:])
    return list(items[cursor.scroll:cursor.scroll + cursor.viewport])


def highlighted(text: str, positions: Iterable[int], base: str, match_style: str) -> Text:
    """``text`` in ``base`` style with the characters at ``positions`` emphasized."""
    out = Text(text, style=base)
    for pos in positions:
        if 0 <= pos < len(text):
            out.stylize(match_style, pos, pos + 1)
    return out


def _row_prefix(nav: Navigator, panel: Focus, index: int, colors: Dict[str, str]) -> Text:
    if index != nav.selected_index(panel):
        return Text("  ")
    style = colors["cursor"] if nav.focus is panel else colors["dim"]
    return Text("▸ ", style=style)


def _row_style(nav: Navigator, panel: Focus, index: int, colors: Dict[str, str]) -> str:
    if nav.focus is panel and index == nav.selected_index(panel):
        return colors["selected"]
    return ""


def _help_suffix(help_text: Optional[str], score: Optional[MatchScore], colors: Dict[str, str]) -> Text:
    if not help_text:
        return Text("")
    positions = score.help_positions if score else ()
    out = Text("  ")
    out.append_text(highlighted(help_text, positions, colors["dim"], colors["match"]))
    return out


def breadcrumb(nav: Navigator, theme: str) -> Text:
    colors = palette(theme)
    out = Text(nav.synthesizer.bin_name, style=colors["prompt"])
    for segment in nav.command_path:
        out.append(" › ", style=colors["dim"])
        out.append(segment)
    return out


def commands_text(nav: Navigator, theme: str) -> Text:
    colors = palette(theme)
    items = nav.visible_subcommands()
    if not items:
        return Text("(no subcommands)", style=colors["dim"])
    scores = nav.match_scores(Focus.COMMANDS)
    offset = nav.scroll_offset(Focus.COMMANDS)
    lines = []
    for i, node in enumerate(window(items, nav, Focus.COMMANDS), start=offset):
        score = scores.get(node.name)
        line = _row_prefix(nav, Focus.COMMANDS, i, colors)
        name = highlighted(
            node.name,
            score.name_positions if score else (),
            _row_style(nav, Focus.COMMANDS, i, colors),
            colors["match"],
        )
        line.append_text(name)
        if node.aliases:
            line.append(f" ({', '.join(node.aliases)})", style=colors["dim"])
        if node.has_children:
            line.append(" ›", style=colors["dim"])
        line.append_text(_help_suffix(node.help, score, colors))
        lines.append(line)
    return Text("\n").join(lines)


def flag_indicator(nav: Navigator, flag: FlagSpec) -> str:
    value = nav.flag_value(flag)
    if isinstance(value, BoolValue):
        return "[✓]" if value.on else "[ ]"
    if isinstance(value, CountValue):
        return f"[{value.count}]" if value.count else "[ ]"
    if isinstance(value, TextValue):
        return "[•]" if value.text else "[·]"
    return "[ ]"


def flags_text(nav: Navigator, theme: str) -> Text:
    colors = palette(theme)
    items = nav.visible_flags()
    if not items:
        return Text("(no flags)", style=colors["dim"])
    scores = nav.match_scores(Focus.FLAGS)
    offset = nav.scroll_offset(Focus.FLAGS)
    lines = []
    for i, flag in enumerate(window(items, nav, Focus.FLAGS), start=offset):
        score = scores.get(flag.name)
        line = _row_prefix(nav, Focus.FLAGS, i, colors)
        line.append(flag_indicator(nav, flag) + " ", style=colors["value"])
        line.append_text(
            highlighted(
                flag.label,
                score.name_positions if score else (),
                _row_style(nav, Focus.FLAGS, i, colors),
                colors["match"],
            )
        )
        if flag.required:
            line.append("*", style=colors["required"])
        if flag.is_global:
            line.append(" [G]", style=colors["global"])
        if flag.kind is FlagKind.VALUED:
            line.append_text(_flag_value_text(nav, flag, colors))
        line.append_text(_help_suffix(flag.help, score, colors))
        lines.append(line)
    return Text("\n").join(lines)


def _flag_value_text(nav: Navigator, flag: FlagSpec, colors: Dict[str, str]) -> Text:
    value = nav.flag_value(flag)
    text = value.text if isinstance(value, TextValue) else ""
    out = Text(" = ", style=colors["dim"])
    if nav.is_edit_target(Focus.FLAGS, flag.name):
        out.append(text, style=colors["value"])
        out.append(EDIT_CURSOR, style=colors["cursor"])
    elif text:
        out.append(text, style=colors["value"])
    elif flag.choices:
        out.append("{" + "|".join(flag.choices) + "}", style=colors["dim"])
    else:
        out.append(f"<{flag.arg_name or flag.name}>", style=colors["dim"])
    return out


def args_text(nav: Navigator, theme: str) -> Text:
    colors = palette(theme)
    items = nav.visible_args()
    if not items:
        return Text("(no arguments)", style=colors["dim"])
    scores = nav.match_scores(Focus.ARGS)
    offset = nav.scroll_offset(Focus.ARGS)
    lines = []
    for i, arg in enumerate(window(items, nav, Focus.ARGS), start=offset):
        score = scores.get(arg.name)
        line = _row_prefix(nav, Focus.ARGS, i, colors)
        line.append("<")
        line.append_text(
            highlighted(
                arg.name,
                score.name_positions if score else (),
                _row_style(nav, Focus.ARGS, i, colors),
                colors["match"],
            )
        )
        line.append(">")
        if arg.required:
            line.append("*", style=colors["required"])
        line.append(" = ", style=colors["dim"])
        if nav.is_edit_target(Focus.ARGS, arg.name):
            line.append(arg.value, style=colors["value"])
            line.append(EDIT_CURSOR, style=colors["cursor"])
        elif arg.value:
            line.append(arg.value, style=colors["value"])
        elif arg.choices:
            line.append("{" + "|".join(arg.choices) + "}", style=colors["dim"])
        else:
            line.append("(empty)", style=colors["dim"])
        line.append_text(_help_suffix(arg.help, score, colors))
        lines.append(line)
    return Text("\n").join(lines)


def mode_name(nav: Navigator) -> str:
    if nav.editing:
        return "editing"
    if nav.filtering:
        return "filtering"
    return "normal"


def help_bar_text(nav: Navigator, theme: str) -> Text:
    colors = palette(theme)
    out = Text()
    help_text = nav.current_help()
    if help_text:
        out.append(help_text)
        out.append("\n")
    out.append(KEY_HINTS[mode_name(nav)], style=colors["dim"])
    return out


def preview_text(nav: Navigator, theme: str) -> Text:
    colors = palette(theme)
    prefix = "▶ " if nav.focus is Focus.PREVIEW else "$ "
    out = Text(prefix, style=colors["prompt"])
    out.append(nav.synthesize(), style=colors["selected"] if nav.focus is Focus.PREVIEW else "")
    return out


def panel_title(nav: Navigator, panel: Focus, label: str) -> str:
    """Border title, showing the live filter when it applies to ``panel``."""
    if nav.focus is panel and (nav.filtering or nav.filter_text):
        return f"{label} /{nav.filter_text}"
    return label
