"""Serialize navigation state into a shell-ready command string.

Synthesis is pure and total: unrenderable flags (no short or long form)
are skipped silently, so there is always some string to show.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .model import CommandNode, FlagSpec, UsageSpec
from .values import ArgValue, BoolValue, CountValue, FlagValue, TextValue, ValueStore


def quote(text: str) -> str:
    """Double-quote ``text`` iff it contains a space."""
    return f'"{text}"' if " " in text else text


def render_flag(flag: FlagSpec, value: FlagValue) -> Optional[str]:
    """Render one flag value, or None when it contributes nothing.

    Args:
        flag: Flag declaration (for its short/long forms)
        value: Current value

    Returns:
        The rendered fragment (may contain several space-joined tokens)
    """
    if isinstance(value, BoolValue):
        if not value.on:
            return None
        return flag.primary_form
    if isinstance(value, CountValue):
        if value.count <= 0:
            return None
        if flag.short:
            return "-" + flag.short[0] * value.count
        if flag.long:
            return " ".join([f"--{flag.long[0]}"] * value.count)
        return None
    if isinstance(value, TextValue):
        if not value.text:
            return None
        form = flag.primary_form
        if form is None:
            return None
        return f"{form} {quote(value.text)}"
    raise TypeError(f"unknown flag value: {value!r}")


class CommandSynthesizer:
    """Builds the command line from the usage spec, the value store and the current args."""

    def __init__(self, spec: UsageSpec, store: ValueStore, bin_override: Optional[str] = None):
        self.spec = spec
        self.store = store
        self.bin_override = bin_override

    @property
    def bin_name(self) -> str:
        return self.bin_override or self.spec.display_bin

    def parts(self, command_path: Sequence[str], arg_values: Sequence[ArgValue]) -> List[str]:
        """Rendered fragments in emission order."""
        parts = [self.bin_name]

        root_values = self.store.get(())
        for flag in self.spec.global_flags():
            if flag.name in root_values:
                self._push(parts, flag, root_values[flag.name])

        self._push_level(parts, self.spec.root, ())

        node = self.spec.root
        for depth, segment in enumerate(command_path):
            parts.append(segment)
            child = node.find_child(segment)
            if child is None:
                break
            node = child
            self._push_level(parts, node, tuple(command_path[: depth + 1]))

        for arg in arg_values:
            if arg.value:
                parts.append(quote(arg.value))
        return parts

    def synthesize(self, command_path: Sequence[str], arg_values: Sequence[ArgValue]) -> str:
        return " ".join(self.parts(command_path, arg_values))

    def _push_level(self, parts: List[str], node: CommandNode, path) -> None:
        values = self.store.get(path)
        for flag in node.flags:
            # globals were emitted once from the root entry
            if self.spec.is_global_flag(flag.name):
                continue
            if flag.name in values:
                self._push(parts, flag, values[flag.name])

    @staticmethod
    def _push(parts: List[str], flag: FlagSpec, value: FlagValue) -> None:
        rendered = render_flag(flag, value)
        if rendered:
            parts.append(rendered)
