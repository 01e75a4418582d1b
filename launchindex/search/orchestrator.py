"""
Search Orchestrator - The single query entry point over both partitions.

A query is answered from one snapshot:

  - empty query:  every application, unranked, in index order; no pattern
                  matches (plugins stay out of the default view)
  - otherwise:    ranked fuzzy matches, plus pattern-command matches as a
                  separate, unranked list

The caller decides how to interleave the two lists (usually fuzzy first).
"""

from dataclasses import dataclass, field
from typing import Callable

from loguru import logger

from launchindex.index.entries import IndexEntry

from .fuzzy import FuzzyMatch
from .snapshot import IndexSnapshot


@dataclass(frozen=True)
class SearchResult:
    """Results of one query, with the generation they were drawn from."""
    best_matches: list[FuzzyMatch] = field(default_factory=list)
    pattern_matches: list[IndexEntry] = field(default_factory=list)
    generation: int = 0

    def entries(self) -> list[IndexEntry]:
        """All result entries, fuzzy matches first."""
        return [m.entry for m in self.best_matches] + list(self.pattern_matches)


class SearchOrchestrator:
    """Compose fuzzy and pattern results for a query."""

    def __init__(self, snapshot_source: Callable[[], IndexSnapshot]):
        """
        Args:
            snapshot_source: Callable returning the current ready snapshot
                             (typically ReindexCoordinator.current)
        """
        self._snapshot_source = snapshot_source

    def search(self, query: str) -> SearchResult:
        """
        Answer a query from the current snapshot.

        Args:
            query: The raw search string

        Returns:
            SearchResult with best_matches and pattern_matches
        """
        snapshot = self._snapshot_source()

        if not query or not query.strip():
            # Empty query - show installed applications
            return SearchResult(
                best_matches=[FuzzyMatch(entry=app) for app in snapshot.applications],
                pattern_matches=[],
                generation=snapshot.generation,
            )

        best = snapshot.fuzzy.query(query)
        patterns = snapshot.patterns.query(query)
        logger.trace(
            f"Query {query!r} on generation {snapshot.generation}: "
            f"{len(best)} ranked, {len(patterns)} pattern"
        )
        return SearchResult(
            best_matches=best,
            pattern_matches=patterns,
            generation=snapshot.generation,
        )
