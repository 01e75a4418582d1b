"""
Fuzzy Index - Weighted multi-field substring scoring over the fuzzy partition.

Each entry exposes three searchable fields:

    name               weight 2.0   (display name)
    phonetic_key       weight 1.5   (full pinyin, CJK names only)
    phonetic_initials  weight 1.0   (pinyin initials, or word initials for
                                     multi-word latin names)

Matching is strict: the lower-cased query must occur verbatim in the field,
anywhere in it. Match quality is rapidfuzz's normalized similarity between
the query and the whole field, so a query covering more of a short field
scores higher than the same query inside a long one.
"""

from dataclasses import dataclass, field

from rapidfuzz import fuzz

from launchindex.index.entries import IndexEntry

NAME = "name"
PHONETIC_KEY = "phonetic_key"
PHONETIC_INITIALS = "phonetic_initials"

DEFAULT_WEIGHTS = {
    NAME: 2.0,
    PHONETIC_KEY: 1.5,
    PHONETIC_INITIALS: 1.0,
}


@dataclass(frozen=True)
class FieldMatch:
    """Where the query hit one field, as half-open (start, end) ranges."""
    key: str
    value: str
    indices: tuple[tuple[int, int], ...]


@dataclass(frozen=True)
class FuzzyMatch:
    """A ranked result: the entry, its composite score and matched fields."""
    entry: IndexEntry
    score: float = 0.0
    matches: tuple[FieldMatch, ...] = field(default_factory=tuple)


def find_ranges(needle: str, haystack: str) -> tuple[tuple[int, int], ...]:
    """Return every non-overlapping occurrence of needle in haystack."""
    ranges = []
    start = haystack.find(needle)
    while start != -1:
        end = start + len(needle)
        ranges.append((start, end))
        start = haystack.find(needle, end)
    return tuple(ranges)


class FuzzyIndex:
    """
    Immutable index over one generation of fuzzy-searchable entries.

    Field values are lower-cased once at construction (the original text is
    kept for highlighting); rebuilding means constructing a new index.
    """

    def __init__(self, entries, weights: dict[str, float] | None = None):
        self.weights = {**DEFAULT_WEIGHTS, **(weights or {})}
        self._rows: tuple[tuple[IndexEntry, tuple[tuple[str, str, str], ...]], ...] = tuple(
            (entry, self._fields(entry)) for entry in entries
        )

    @staticmethod
    def _fields(entry: IndexEntry) -> tuple[tuple[str, str, str], ...]:
        initials = entry.phonetic_initials or entry.word_initials
        fields = (
            (NAME, entry.display_name),
            (PHONETIC_KEY, entry.phonetic_key),
            (PHONETIC_INITIALS, initials),
        )
        return tuple((key, value, value.lower()) for key, value in fields if value)

    def __len__(self) -> int:
        return len(self._rows)

    def query(self, query: str) -> list[FuzzyMatch]:
        """
        Score every entry against the query.

        Args:
            query: Raw user input

        Returns:
            Matching entries sorted by descending score. Equal scores keep
            index order. An empty query returns [].
        """
        if not query:
            return []

        needle = query.lower()
        results = []

        for entry, fields in self._rows:
            score = 0.0
            matched = []
            for key, value, folded in fields:
                if len(needle) > len(folded):
                    continue
                ranges = find_ranges(needle, folded)
                if not ranges:
                    continue
                quality = fuzz.ratio(needle, folded) / 100.0
                score += self.weights[key] * quality
                matched.append(FieldMatch(key=key, value=value, indices=ranges))

            if matched:
                results.append(FuzzyMatch(entry=entry, score=score, matches=tuple(matched)))

        # sort is stable, so ties keep partition order
        results.sort(key=lambda m: m.score, reverse=True)
        return results
