"""
Index Snapshot - One immutable generation of the search index.

A snapshot pairs the two partitions with the structures built over them.
Readers hold one snapshot for the duration of a query, so a rebuild can
never show them a mix of old and new entries.
"""

from dataclasses import dataclass

from launchindex.index.builder import Partitions
from launchindex.index.entries import IndexEntry

from .fuzzy import FuzzyIndex
from .patterns import PatternMatcher


@dataclass(frozen=True)
class IndexSnapshot:
    generation: int
    partitions: Partitions
    fuzzy: FuzzyIndex
    patterns: PatternMatcher

    @classmethod
    def build(cls, partitions: Partitions, generation: int = 0,
              weights: dict[str, float] | None = None) -> "IndexSnapshot":
        return cls(
            generation=generation,
            partitions=partitions,
            fuzzy=FuzzyIndex(partitions.fuzzy, weights=weights),
            patterns=PatternMatcher(partitions.pattern),
        )

    @classmethod
    def empty(cls, generation: int = 0) -> "IndexSnapshot":
        return cls.build(Partitions(), generation=generation)

    @property
    def applications(self) -> tuple[IndexEntry, ...]:
        return self.partitions.applications

    def __len__(self) -> int:
        return len(self.partitions)
