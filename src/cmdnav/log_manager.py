from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Deque, Dict


CATEGORIES = ("events", "errors", "debug")


@dataclass
class LogManager:
    """Simple line-buffered log manager by category.

    Categories: events, errors, debug
    """

    max_lines: int = 2000
    buffers: Dict[str, Deque[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in CATEGORIES:
            self.buffers[name] = deque(maxlen=self.max_lines)

    def add(self, category: str, message: str) -> None:
        buf = self.buffers.setdefault(category, deque(maxlen=self.max_lines))
        for line in message.splitlines() or [message]:
            buf.append(line)

    def text(self, category: str) -> str:
        buf = self.buffers.get(category)
        if not buf:
            return ""
        return "\n".join(buf)

    def logger(self, category: str) -> Callable[[str], None]:
        """Callback that appends to ``category`` (for ``debug_logger=`` params)."""
        return lambda message: self.add(category, message)

    def dump(self, path: Path) -> Path:
        """Write every non-empty category to ``path`` as ``[category]`` sections."""
        sections = []
        for name, buf in self.buffers.items():
            if buf:
                sections.append(f"[{name}]\n" + "\n".join(buf))
        path.write_text("\n\n".join(sections) + "\n", encoding="utf-8")
        return path
