# launchindex Services Package
"""
Stateful services of the launch index.

Services own data (history, pins, index snapshots), persist it and notify
listeners through signals.
"""

from .coordinator import IndexState, ReindexCoordinator
from .history import HistoryService
from .pinned import PinnedService
from .records import HistoryRecord, PinnedRecord
from .storage import DocumentWriter, SqliteDocumentStore

__all__ = [
    "DocumentWriter",
    "HistoryRecord",
    "HistoryService",
    "IndexState",
    "PinnedRecord",
    "PinnedService",
    "ReindexCoordinator",
    "SqliteDocumentStore",
]
