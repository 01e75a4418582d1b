"""
Search package - Fuzzy index, pattern matcher and the orchestrator over both.

Queries go through SearchOrchestrator, which reads one IndexSnapshot and
returns ranked fuzzy matches and unranked pattern matches separately.
"""

from .fuzzy import FieldMatch, FuzzyIndex, FuzzyMatch
from .orchestrator import SearchOrchestrator, SearchResult
from .patterns import PatternMatcher, compile_pattern
from .snapshot import IndexSnapshot

__all__ = [
    "FieldMatch",
    "FuzzyIndex",
    "FuzzyMatch",
    "IndexSnapshot",
    "PatternMatcher",
    "SearchOrchestrator",
    "SearchResult",
    "compile_pattern",
]
