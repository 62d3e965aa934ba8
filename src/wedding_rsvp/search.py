"""
Typo tolerant party lookup.

Scoring scale per candidate party:
    full query equals the label: +200, contained in the label: +150
    full query equals a member name: +180, contained in a member name: +120
    per distinct token against the label: equal +100, prefix +50, substring +25
    per distinct token against the first member name containing it:
        equal +80, prefix +40, equals first or last name +60, substring +15
    more than one distinct token matched: +10 per matched token
Any score at or above 180 is treated as an exact match and hides partial matches.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import SearchCancelled
from .models import Member, Party

log = logging.getLogger(__name__)

EXACT_MATCH_THRESHOLD = 180

_PUNCT_RE = re.compile(r"[^\w\s]")
_WS_RE = re.compile(r"\s+")


# ----------------------------- tokenizer -----------------------------
def tokenize(text: str) -> List[str]:
    """Lowercase ``text``, drop punctuation and split on whitespace."""
    cleaned = _PUNCT_RE.sub("", (text or "").lower())
    return [token for token in _WS_RE.split(cleaned) if token]


def build_search_index(label: str, members: Iterable[Member]) -> Tuple[str, ...]:
    """Sorted distinct tokens of the label and every member's first and last name."""
    tokens = set(tokenize(label))
    for member in members:
        tokens.update(tokenize(member.first_name))
        tokens.update(tokenize(member.last_name))
    return tuple(sorted(tokens))


# ----------------------------- cancellation -----------------------------
class CancellationToken:
    """Flag shared between a search caller and the scan it started."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise SearchCancelled("search superseded by a newer request")


# ----------------------------- scoring -----------------------------
@dataclass(frozen=True)
class ScoredResult:
    """A party paired with its score for one query."""

    party: Party
    score: int
    matched: bool


def _phrase_score(phrase: str, label: str, names: List[str]) -> int:
    score = 0
    if phrase in label:
        score += 200 if label == phrase else 150
    for name in names:
        if phrase in name:
            score += 180 if name == phrase else 120
    return score


def _label_token_score(token: str, label: str) -> int:
    if label == token:
        return 100
    if label.startswith(token):
        return 50
    if token in label:
        return 25
    return 0


def _member_token_score(token: str, party: Party, names: List[str]) -> int:
    """Score ``token`` against the first member name that contains it."""
    for member, name in zip(party.members, names):
        if token not in name:
            continue
        if name == token:
            return 80
        if name.startswith(token):
            return 40
        if token in (member.first_name.lower(), member.last_name.lower()):
            return 60
        return 15
    return 0


def score_party(query: str, party: Party) -> ScoredResult:
    """Score one candidate party against ``query``."""
    phrase = (query or "").strip().lower()
    tokens = tokenize(phrase)
    label = (party.label or "").lower()
    names = [m.full_name.lower() for m in party.members]

    if not phrase:
        return ScoredResult(party=party, score=0, matched=False)

    score = _phrase_score(phrase, label, names)
    matched = score > 0

    matched_tokens = 0
    # dict.fromkeys keeps first-seen order while dropping repeats
    for token in dict.fromkeys(tokens):
        token_score = _label_token_score(token, label) + _member_token_score(token, party, names)
        if token_score:
            matched_tokens += 1
            score += token_score
            matched = True

    if matched_tokens > 1:
        score += 10 * matched_tokens

    return ScoredResult(party=party, score=score, matched=matched)


# ----------------------------- search -----------------------------
def rank_parties(
    query: str,
    directory: Iterable[Party],
    token: Optional[CancellationToken] = None,
) -> List[ScoredResult]:
    """Return matching parties with scores, best first.

    When any result reaches :data:`EXACT_MATCH_THRESHOLD` only those results are
    kept. Raises :class:`SearchCancelled` if ``token`` is cancelled mid-scan.
    """
    if not (query or "").strip():
        return []

    results: List[ScoredResult] = []
    for party in directory:
        if token is not None:
            token.raise_if_cancelled()
        result = score_party(query, party)
        if result.matched:
            results.append(result)

    if any(r.score >= EXACT_MATCH_THRESHOLD for r in results):
        results = [r for r in results if r.score >= EXACT_MATCH_THRESHOLD]

    # sorted() is stable so ties keep directory order
    results = sorted(results, key=lambda r: r.score, reverse=True)
    log.debug("query %r matched %d parties", query, len(results))
    return results


def search_parties(
    query: str,
    directory: Iterable[Party],
    token: Optional[CancellationToken] = None,
) -> List[Party]:
    """Parties matching ``query``, most relevant first."""
    return [r.party for r in rank_parties(query, directory, token)]
