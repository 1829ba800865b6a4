# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

"""
Weighted fuzzy index over DocumentChunks.

Scores follow the Fuse convention: 0 is a perfect match, 1 the worst.
Every searchable field gets a fuzzy distance in [0, 1]:

- the whole field equals the query            -> 0
- the query is a substring of the field       -> up to SUBSTRING_SPAN,
  shrinking as the query covers more of the field
- otherwise per-term matching (difflib)       -> SUBSTRING_SPAN + the mean
  term error scaled into the rest of the range

A field only counts when its distance is within the threshold. The
document score is the product of ``max(distance, MIN_FIELD_SCORE) **
(weight / max_weight)`` over the matching fields, so heavier fields pull
the score further towards 0 and matches in several fields compound.

Queries may carry field-scoped clauses (``category:tokens``,
``tags:"smart contracts"``); those are exact, case-insensitive filters
and take no part in scoring.
"""
import re
from dataclasses import dataclass
from difflib import SequenceMatcher, get_close_matches
from typing import Iterable, Optional, Sequence

from .models import DocumentChunk, FieldMatch, SearchResult

SEARCH_FIELDS = ("title", "tags", "content", "category")
MIN_FIELD_SCORE = 0.001
SUBSTRING_SPAN = 0.1

_WORD = re.compile(r"[a-z0-9]+")
_CLAUSE = re.compile(r'\b(category|tags):(?:"([^"]*)"|(\S+))')
_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True)
class ParsedQuery:
    text: str
    categories: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.text or self.categories or self.tags)


def _clause(key: str, value: str) -> str:
    value = value.strip()
    if _WHITESPACE.search(value):
        return f'{key}:"{value}"'
    return f"{key}:{value}"


def scoped_query(
    text: str, category: Optional[str] = None, tags: Optional[Iterable[str]] = None,
) -> str:
    """Append category/tag clauses to a free-text query."""
    parts = [text] if text else []
    if category and category.strip():
        parts.append(_clause("category", category))
    for tag in tags or ():
        if tag and tag.strip():
            parts.append(_clause("tags", tag))
    return " ".join(parts)


def parse_query(query: str) -> ParsedQuery:
    categories: list[str] = []
    tags: list[str] = []

    def _collect(match: re.Match) -> str:
        raw = match.group(2) if match.group(2) is not None else match.group(3)
        value = raw.strip().lower()
        if value:
            (categories if match.group(1) == "category" else tags).append(value)
        return " "

    text = _CLAUSE.sub(_collect, query)
    return ParsedQuery(" ".join(text.lower().split()), tuple(categories), tuple(tags))


@dataclass(frozen=True)
class _FieldValue:
    original: str
    lower: str
    words: tuple[str, ...]
    word_set: frozenset[str]

    @classmethod
    def of(cls, text: str) -> "_FieldValue":
        lower = text.lower()
        words = tuple(dict.fromkeys(_WORD.findall(lower)))
        return cls(text, lower, words, frozenset(words))


@dataclass(frozen=True)
class _Entry:
    chunk: DocumentChunk
    values: dict[str, tuple[_FieldValue, ...]]
    category: str
    tags: frozenset[str]


class FuzzyIndex:
    """Immutable once built; rebuild a new index when the chunk set changes."""

    def __init__(
        self,
        chunks: Sequence[DocumentChunk],
        weights: dict[str, float],
        threshold: float = 0.4,
        min_term_length: int = 2,
    ):
        missing = set(SEARCH_FIELDS) - set(weights)
        if missing:
            raise ValueError(f"Missing field weights: {sorted(missing)}")
        top = max(weights[name] for name in SEARCH_FIELDS)
        if top <= 0:
            raise ValueError("At least one field weight must be positive")
        self.threshold = threshold
        self.min_term_length = min_term_length
        self._exponents = {name: weights[name] / top for name in SEARCH_FIELDS}
        self._entries = [self._make_entry(c) for c in chunks]

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _make_entry(chunk: DocumentChunk) -> _Entry:
        values = {
            "title": (_FieldValue.of(chunk.title),),
            "tags": tuple(_FieldValue.of(t) for t in chunk.tags),
            "content": (_FieldValue.of(chunk.content),),
            "category": (_FieldValue.of(chunk.category),),
        }
        return _Entry(
            chunk=chunk,
            values=values,
            category=chunk.category.lower(),
            tags=frozenset(t.lower() for t in chunk.tags),
        )

    # ── Search ───────────────────────────────────────

    def search(self, query: str, limit: Optional[int] = None) -> list[SearchResult]:
        parsed = parse_query(query)
        if parsed.is_empty:
            return []
        terms = [t for t in _WORD.findall(parsed.text) if len(t) >= self.min_term_length]

        scored: list[tuple[float, int, SearchResult]] = []
        for position, entry in enumerate(self._entries):
            if not self._passes_filters(entry, parsed):
                continue
            if parsed.text:
                hit = self._score_entry(entry, parsed.text, terms)
                if hit is None:
                    continue
                score, matches = hit
            else:
                score, matches = MIN_FIELD_SCORE, []
            scored.append((score, position, SearchResult(entry.chunk, score, matches)))

        scored.sort(key=lambda s: (s[0], s[1]))
        results = [r for _, _, r in scored]
        return results[:limit] if limit else results

    @staticmethod
    def _passes_filters(entry: _Entry, parsed: ParsedQuery) -> bool:
        if any(c != entry.category for c in parsed.categories):
            return False
        return all(t in entry.tags for t in parsed.tags)

    def _score_entry(
        self, entry: _Entry, text: str, terms: list[str],
    ) -> Optional[tuple[float, list[FieldMatch]]]:
        total = 1.0
        matches: list[FieldMatch] = []
        for name in SEARCH_FIELDS:
            best = None
            for value in entry.values[name]:
                hit = self._score_value(text, terms, value)
                if hit is not None and (best is None or hit[0] < best[0]):
                    best = (hit[0], value, hit[1])
            if best is None:
                continue
            distance, value, indices = best
            total *= max(distance, MIN_FIELD_SCORE) ** self._exponents[name]
            matches.append(FieldMatch(name, value.original, indices))
        if not matches:
            return None
        return total, matches

    def _score_value(
        self, text: str, terms: list[str], value: _FieldValue,
    ) -> Optional[tuple[float, tuple[tuple[int, int], ...]]]:
        if not value.lower:
            return None
        if text == value.lower:
            return 0.0, ((0, len(text) - 1),)

        if len(text) >= self.min_term_length:
            pos = value.lower.find(text)
            if pos >= 0:
                distance = SUBSTRING_SPAN * (1 - len(text) / len(value.lower))
                return distance, ((pos, pos + len(text) - 1),)

        if not terms:
            return None

        errors: list[float] = []
        spans: set[tuple[int, int]] = set()
        for term in terms:
            error, word = self._term_error(term, value)
            errors.append(error)
            if word is not None:
                start = value.lower.find(word)
                if start >= 0:
                    spans.add((start, start + len(word) - 1))

        distance = SUBSTRING_SPAN + (1 - SUBSTRING_SPAN) * sum(errors) / len(errors)
        if distance > self.threshold:
            return None
        return distance, tuple(sorted(spans))

    def _term_error(self, term: str, value: _FieldValue) -> tuple[float, Optional[str]]:
        if term in value.word_set:
            return 0.0, term
        if len(term) >= 3 and term in value.lower:
            return 0.0, term
        close = get_close_matches(term, value.words, n=1, cutoff=1 - self.threshold)
        if not close:
            return 1.0, None
        return 1.0 - SequenceMatcher(None, term, close[0]).ratio(), close[0]
