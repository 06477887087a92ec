"""Ordered-subsequence fuzzy matching.

``match`` is case-insensitive and greedy: each query character consumes the
first unused occurrence in the candidate, scanning left to right. The
returned positions drive highlighting, so they must stay exactly the ones
that greedy scan consumed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


_WORD_SEPARATORS = frozenset(" -_./:,=")

_MATCH_SCORE = 16
_CONSECUTIVE_BONUS = 8
_BOUNDARY_BONUS = 8


@dataclass(frozen=True)
class FuzzyMatch:
    score: int
    positions: Tuple[int, ...]


def match(candidate: str, query: str) -> Optional[FuzzyMatch]:
    """Match ``query`` against ``candidate``.

    Args:
        candidate: Text being searched (item name, help text, ...)
        query: Filter text typed by the user

    Returns:
        FuzzyMatch with a score and the consumed indices, or None when the
        query is not a case-insensitive subsequence of the candidate
    """
    if not query:
        return FuzzyMatch(score=0, positions=())

    positions = []
    ci = 0
    for qch in query:
        q = qch.lower()
        while ci < len(candidate) and candidate[ci].lower() != q:
            ci += 1
        if ci >= len(candidate):
            return None
        positions.append(ci)
        ci += 1

    return FuzzyMatch(score=_score(candidate, positions), positions=tuple(positions))


def _score(candidate: str, positions) -> int:
    score = 0
    prev = -1
    for pos in positions:
        score += _MATCH_SCORE
        if prev >= 0 and pos == prev + 1:
            score += _CONSECUTIVE_BONUS
        elif prev >= 0:
            score -= pos - prev - 1
        if pos == 0 or candidate[pos - 1] in _WORD_SEPARATORS:
            score += _BOUNDARY_BONUS
        prev = pos
    return score


@dataclass(frozen=True)
class MatchScore:
    """Per-item filter result.

    ``name_positions`` index into the item's display label and
    ``help_positions`` into its help text; both are empty when that part
    did not match (or the query is empty).
    """

    name_matched: bool
    help_matched: bool
    score: int = 0
    name_positions: Tuple[int, ...] = ()
    help_positions: Tuple[int, ...] = ()

    @property
    def matched(self) -> bool:
        return self.name_matched or self.help_matched


def score_item(
    label: str,
    help_text: Optional[str],
    query: str,
    extra_names: Iterable[str] = (),
) -> MatchScore:
    """Score one displayed item against the filter query.

    The label match supplies highlight positions; ``extra_names`` (aliases,
    stable flag names) only contribute to the name-matched decision and the
    ordering key.

    Args:
        label: Text shown for the item
        help_text: Optional help text shown next to it
        query: Filter text
        extra_names: Other names the item answers to

    Returns:
        MatchScore for the item
    """
    label_hit = match(label, query)
    best = label_hit.score if label_hit else None
    name_matched = label_hit is not None
    for alt in extra_names:
        hit = match(alt, query)
        if hit is not None:
            name_matched = True
            best = hit.score if best is None else max(best, hit.score)

    help_hit = match(help_text, query) if help_text else None
    if help_hit is not None:
        best = help_hit.score if best is None else max(best, help_hit.score)

    return MatchScore(
        name_matched=name_matched,
        help_matched=help_hit is not None,
        score=best or 0,
        name_positions=label_hit.positions if label_hit else (),
        help_positions=help_hit.positions if help_hit else (),
    )
