"""Per-command-path storage of editable flag and argument values.

Flag entries are created lazily on the first visit to a path and live for
the whole process, so revisiting a subtree keeps earlier edits. Global
flags live only in the root entry (key ``""``).

Every lookup is total: a missing entry reads as an empty mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from .model import ArgSpec, CommandNode, FlagKind, FlagSpec


@dataclass(frozen=True)
class BoolValue:
    on: bool = False


@dataclass(frozen=True)
class CountValue:
    count: int = 0


@dataclass(frozen=True)
class TextValue:
    text: str = ""


FlagValue = Union[BoolValue, CountValue, TextValue]

CommandPath = Tuple[str, ...]


def path_key(path: Sequence[str]) -> str:
    """Canonical store key for a command path (space-joined)."""
    return " ".join(path)


def initial_flag_value(flag: FlagSpec) -> FlagValue:
    """Default value for a freshly initialized flag, by kind."""
    if flag.kind is FlagKind.BOOLEAN:
        return BoolValue(False)
    if flag.kind is FlagKind.COUNTED:
        return CountValue(0)
    if flag.kind is FlagKind.VALUED:
        return TextValue(_valid_default(flag.default[0] if flag.default else "", flag.choices))
    raise ValueError(f"unknown flag kind: {flag.kind!r}")


def _valid_default(text: str, choices: Sequence[str]) -> str:
    if choices and text not in choices:
        return ""
    return text


def next_choice(current: str, choices: Sequence[str]) -> str:
    """Cycle to the choice after ``current``; empty or unknown starts at the first."""
    if not choices:
        return current
    try:
        idx = (list(choices).index(current) + 1) % len(choices)
    except ValueError:
        idx = 0
    return choices[idx]


@dataclass
class ArgValue:
    """Mutable value of one positional argument at the current position."""

    name: str
    value: str = ""
    required: bool = False
    choices: Tuple[str, ...] = ()
    help: str = ""


@dataclass
class ValueStore:
    """Flag values keyed by command path, plus remembered argument text."""

    flags: Dict[str, Dict[str, FlagValue]] = field(default_factory=dict)
    args: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def is_initialized(self, path: Sequence[str]) -> bool:
        return path_key(path) in self.flags

    def ensure_initialized(self, path: Sequence[str], flag_specs: Iterable[FlagSpec]) -> None:
        """Create defaulted values for ``path`` unless an entry already exists.

        Args:
            path: Command path being visited
            flag_specs: Visible flags owned by that path (globals only at the root)
        """
        key = path_key(path)
        if key in self.flags:
            return
        self.flags[key] = {f.name: initial_flag_value(f) for f in flag_specs if not f.hidden}

    def get(self, path: Sequence[str]) -> Mapping[str, FlagValue]:
        return self.flags.get(path_key(path), {})

    def get_mut(self, path: Sequence[str]) -> Dict[str, FlagValue]:
        return self.flags.setdefault(path_key(path), {})

    def value(self, path: Sequence[str], name: str) -> FlagValue:
        """Stored value for one flag; a missing value reads as ``BoolValue(False)``."""
        return self.get(path).get(name, BoolValue(False))

    def set_value(self, path: Sequence[str], name: str, value: FlagValue) -> None:
        self.get_mut(path)[name] = value

    def remember_args(self, path: Sequence[str], arg_values: Iterable[ArgValue]) -> None:
        """Keep the typed text of ``arg_values`` so a later rebuild can restore it."""
        self.args[path_key(path)] = {a.name: a.value for a in arg_values}

    def rebuild_args(self, node: CommandNode, path: Sequence[str] = ()) -> List[ArgValue]:
        """Build a fresh argument list for ``node``.

        Remembered text for ``path`` wins over the declared default; nothing in
        the store is modified.
        """
        remembered = self.args.get(path_key(path), {})
        return [_arg_value(spec, remembered) for spec in node.visible_args()]


def _arg_value(spec: ArgSpec, remembered: Mapping[str, str]) -> ArgValue:
    if spec.name in remembered:
        text = remembered[spec.name]
    else:
        text = _valid_default(spec.default or "", spec.choices)
    return ArgValue(
        name=spec.name,
        value=text,
        required=spec.required,
        choices=tuple(spec.choices),
        help=spec.help or "",
    )
