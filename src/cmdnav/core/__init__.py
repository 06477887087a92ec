"""Navigation and command-composition engine.

Quick Start
-----------
```python
from cmdnav.core import InputRouter, KeyEvent, Navigator

nav = Navigator(spec)
router = InputRouter(nav)
router.handle(KeyEvent("enter"))
print(nav.synthesize())
```

Core Components
---------------
- **Navigator**: tree position, focus, selection, filter and edit modes
- **InputRouter**: key/click/scroll/resize events → navigator mutations
- **ValueStore**: per-path flag values, remembered argument text
- **CommandSynthesizer**: state → shell-ready command string
- **match / score_item**: ordered-subsequence fuzzy matching
"""

from .fuzzy import FuzzyMatch, MatchScore, match, score_item
from .model import ArgSpec, CommandNode, FlagKind, FlagSpec, UsageSpec
from .navigator import FOCUS_ORDER, Focus, Navigator
from .router import Action, ClickEvent, InputRouter, KeyEvent, ResizeEvent, ScrollEvent
from .synthesizer import CommandSynthesizer, render_flag
from .values import ArgValue, BoolValue, CountValue, FlagValue, TextValue, ValueStore

__all__ = [
    "Action",
    "ArgSpec",
    "ArgValue",
    "BoolValue",
    "ClickEvent",
    "CommandNode",
    "CommandSynthesizer",
    "CountValue",
    "FOCUS_ORDER",
    "FlagKind",
    "FlagSpec",
    "FlagValue",
    "Focus",
    "FuzzyMatch",
    "InputRouter",
    "KeyEvent",
    "MatchScore",
    "Navigator",
    "ResizeEvent",
    "ScrollEvent",
    "TextValue",
    "UsageSpec",
    "ValueStore",
    "match",
    "render_flag",
    "score_item",
]
