"""
Index package - Typed entries and the builder that produces them.
"""

from .builder import Partitions, build_entries
from .entries import (
    EntryIdentity,
    EntryKind,
    FreeTextPolicy,
    IndexEntry,
    RecordKey,
    RegexPolicy,
)

__all__ = [
    "Partitions",
    "build_entries",
    "EntryIdentity",
    "EntryKind",
    "FreeTextPolicy",
    "IndexEntry",
    "RecordKey",
    "RegexPolicy",
]
