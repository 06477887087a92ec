"""Build the immutable command tree from a JSON spec document.

A document looks like::

    {
      "name": "My CLI",
      "bin": "mycli",
      "cmd": {
        "flags": [{"short": ["v"], "long": ["verbose"], "count": true, "global": true}],
        "subcommands": [
          {"name": "deploy", "args": [{"name": "environment", "required": true,
                                       "choices": ["dev", "staging", "prod"]}]}
        ]
      }
    }

The root command may also be given inline (top-level ``flags``/``subcommands``).
Documents come from a file or from the stdout of a spec command.
"""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .core.model import ArgSpec, CommandNode, FlagKind, FlagSpec, UsageSpec


class SpecLoadError(Exception):
    """Raised when a spec document cannot be read or is malformed."""


def load_spec_file(path: Path) -> UsageSpec:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecLoadError(f"Failed to read usage spec '{path}': {exc}") from exc
    return parse_spec_text(text, source=str(path))


def load_spec_from_command(command: str) -> UsageSpec:
    """Run ``command`` through the shell and parse its stdout as a spec."""
    shell = ["cmd", "/C", command] if sys.platform == "win32" else ["sh", "-c", command]
    try:
        result = subprocess.run(shell, capture_output=True, text=True)
    except OSError as exc:
        raise SpecLoadError(f"Failed to run spec command '{command}': {exc}") from exc
    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        detail = f": {stderr}" if stderr else ""
        raise SpecLoadError(f"Spec command '{command}' failed with status {result.returncode}{detail}")
    return parse_spec_text(result.stdout, source=f"command '{command}'")


def parse_spec_text(text: str, source: str = "<string>") -> UsageSpec:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SpecLoadError(f"Failed to parse usage spec from {source}: {exc}") from exc
    return spec_from_dict(data, source=source)


def spec_from_dict(data: Dict[str, Any], source: str = "<dict>") -> UsageSpec:
    """Convert a decoded spec document into a ``UsageSpec``.

    Args:
        data: Decoded JSON object
        source: Description used in error messages

    Returns:
        The loaded spec

    Raises:
        SpecLoadError: If the document shape is invalid
    """
    if not isinstance(data, dict):
        raise SpecLoadError(f"Usage spec from {source} must be a JSON object")
    cmd_data = data.get("cmd")
    if cmd_data is None:
        cmd_data = {k: v for k, v in data.items() if k not in ("bin", "about", "cmd")}
    name = str(data.get("name") or data.get("bin") or "")
    bin_name = str(data.get("bin") or "")
    if not (name or bin_name):
        raise SpecLoadError(f"Usage spec from {source} needs a 'name' or 'bin'")
    root = _command(cmd_data, default_name=bin_name or name, where="cmd")
    return UsageSpec(name=name, bin=bin_name, root=root, about=data.get("about"))


def _command(data: Any, default_name: str, where: str) -> CommandNode:
    if not isinstance(data, dict):
        raise SpecLoadError(f"{where}: command must be an object")
    name = str(data.get("name") or default_name)
    if not name:
        raise SpecLoadError(f"{where}: command is missing 'name'")
    children = tuple(
        _command(child, default_name="", where=f"{where}.subcommands[{i}]")
        for i, child in enumerate(_list(data, "subcommands", where))
    )
    flags = tuple(
        _flag(flag, where=f"{where}.flags[{i}]") for i, flag in enumerate(_list(data, "flags", where))
    )
    args = tuple(
        _arg(arg, where=f"{where}.args[{i}]") for i, arg in enumerate(_list(data, "args", where))
    )
    return CommandNode(
        name=name,
        help=data.get("help"),
        children=children,
        flags=flags,
        args=args,
        hidden=bool(data.get("hide", False)),
        aliases=_strings(data.get("aliases")),
    )


def _flag(data: Any, where: str) -> FlagSpec:
    if not isinstance(data, dict):
        raise SpecLoadError(f"{where}: flag must be an object")
    short = tuple(s.lstrip("-") for s in _strings(data.get("short")))
    long = tuple(s.lstrip("-") for s in _strings(data.get("long")))
    name = str(data.get("name") or (long[0] if long else "") or (short[0] if short else ""))
    if not name:
        raise SpecLoadError(f"{where}: flag needs a 'name', 'long' or 'short'")
    return FlagSpec(
        name=name,
        short=short,
        long=long,
        kind=_flag_kind(data, where),
        choices=_strings(data.get("choices")),
        default=_text_defaults(data.get("default")),
        required=bool(data.get("required", False)),
        is_global=bool(data.get("global", False)),
        hidden=bool(data.get("hide", False)),
        help=data.get("help"),
        arg_name=data.get("arg"),
    )


def _flag_kind(data: Dict[str, Any], where: str) -> FlagKind:
    kind = data.get("kind")
    if kind is not None:
        try:
            return FlagKind(kind)
        except ValueError:
            raise SpecLoadError(f"{where}: unknown flag kind {kind!r}") from None
    if data.get("count"):
        return FlagKind.COUNTED
    if data.get("arg") or data.get("choices") or _text_defaults(data.get("default")):
        return FlagKind.VALUED
    return FlagKind.BOOLEAN


def _arg(data: Any, where: str) -> ArgSpec:
    if not isinstance(data, dict):
        raise SpecLoadError(f"{where}: arg must be an object")
    name = data.get("name")
    if not name:
        raise SpecLoadError(f"{where}: arg is missing 'name'")
    defaults = _strings(data.get("default"))
    return ArgSpec(
        name=str(name).strip("<>[]"),
        required=bool(data.get("required", False)),
        choices=_strings(data.get("choices")),
        default=defaults[0] if defaults else None,
        hidden=bool(data.get("hide", False)),
        help=data.get("help"),
    )


def _list(data: Dict[str, Any], key: str, where: str) -> List[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise SpecLoadError(f"{where}.{key} must be a list")
    return value


def _strings(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return (str(value),)


def _text_defaults(value: Any) -> Tuple[str, ...]:
    """Text defaults of a flag; booleans and empty strings are dropped."""
    items = value if isinstance(value, (list, tuple)) else [value]
    return tuple(str(v) for v in items if v is not None and not isinstance(v, bool) and str(v))
