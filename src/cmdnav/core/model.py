"""Immutable command tree loaded from a usage spec.

The tree is built once (see ``cmdnav.spec_loader``) before the navigator
starts and is shared read-only for the navigator's whole lifetime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class FlagKind(Enum):
    """How a flag takes its value."""

    BOOLEAN = "boolean"
    COUNTED = "counted"
    VALUED = "valued"


@dataclass(frozen=True)
class FlagSpec:
    """A flag declared on a command.

    ``short`` and ``long`` hold the bare forms without dashes
    (``("v",)`` / ``("verbose",)``).
    """

    name: str
    short: Tuple[str, ...] = ()
    long: Tuple[str, ...] = ()
    kind: FlagKind = FlagKind.BOOLEAN
    choices: Tuple[str, ...] = ()
    default: Tuple[str, ...] = ()
    required: bool = False
    is_global: bool = False
    hidden: bool = False
    help: Optional[str] = None
    arg_name: Optional[str] = None

    @property
    def label(self) -> str:
        """Display form, e.g. ``-f, --force``; falls back to the name."""
        parts = [f"-{s}" for s in self.short] + [f"--{l}" for l in self.long]
        return ", ".join(parts) if parts else self.name

    @property
    def primary_form(self) -> Optional[str]:
        """Long form if present, else short, else None (unrenderable)."""
        if self.long:
            return f"--{self.long[0]}"
        if self.short:
            return f"-{self.short[0]}"
        return None


@dataclass(frozen=True)
class ArgSpec:
    """A positional argument declared on a command."""

    name: str
    required: bool = False
    choices: Tuple[str, ...] = ()
    default: Optional[str] = None
    hidden: bool = False
    help: Optional[str] = None


@dataclass(frozen=True)
class CommandNode:
    """One command in the tree, with its ordered children, flags and args."""

    name: str
    help: Optional[str] = None
    children: Tuple["CommandNode", ...] = ()
    flags: Tuple[FlagSpec, ...] = ()
    args: Tuple[ArgSpec, ...] = ()
    hidden: bool = False
    aliases: Tuple[str, ...] = ()

    def visible_children(self) -> List["CommandNode"]:
        return [c for c in self.children if not c.hidden]

    def visible_flags(self) -> List[FlagSpec]:
        return [f for f in self.flags if not f.hidden]

    def visible_args(self) -> List[ArgSpec]:
        return [a for a in self.args if not a.hidden]

    def find_child(self, name: str) -> Optional["CommandNode"]:
        """Look up a visible child by name or alias.

        Args:
            name: Child name or one of its aliases

        Returns:
            The matching child, or None
        """
        for child in self.visible_children():
            if child.name == name:
                return child
        for child in self.visible_children():
            if name in child.aliases:
                return child
        return None

    @property
    def has_children(self) -> bool:
        return bool(self.visible_children())


@dataclass(frozen=True)
class UsageSpec:
    """Root of a loaded usage spec.

    ``bin`` is the executable name used in synthesized commands; ``name``
    is the human-readable title and the fallback when ``bin`` is empty.
    """

    name: str
    root: CommandNode
    bin: str = ""
    about: Optional[str] = None

    @property
    def display_bin(self) -> str:
        return self.bin or self.name

    def global_flags(self) -> List[FlagSpec]:
        """Global flags declared on the root, in declared order."""
        return [f for f in self.root.flags if f.is_global]

    def is_global_flag(self, name: str) -> bool:
        """True if a visible root global is named ``name``.

        Hidden globals never take over a child flag of the same name.
        """
        return any(f.name == name and not f.hidden for f in self.global_flags())

    def resolve(self, path: Tuple[str, ...]) -> CommandNode:
        """Walk ``path`` from the root, stopping at the first unknown segment."""
        node = self.root
        for segment in path:
            child = node.find_child(segment)
            if child is None:
                break
            node = child
        return node
