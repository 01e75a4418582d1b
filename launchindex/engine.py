"""
Quick-launch engine - Wires the index, search, history and pins together.

Usage:
    engine = QuickLaunchEngine(discovery)
    engine.start()

    result = engine.search("pgsd")
    engine.launch(result.best_matches[0].entry)

    watcher.on_batch(engine.on_changed)   # external, already debounced
    ...
    engine.close()

The engine is constructed and torn down explicitly by its caller; nothing
here is process-global.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from .discovery import Discovery
from .index.entries import IndexEntry
from .search.orchestrator import SearchOrchestrator, SearchResult
from .services.coordinator import ReindexCoordinator
from .services.history import HistoryService
from .services.pinned import PinnedService
from .services.records import HistoryRecord, PinnedRecord
from .services.storage import DocumentStore, DocumentWriter, SqliteDocumentStore
from .utils.helpers import _deep_merge, default_settings, load_settings, search_weights


class QuickLaunchEngine:
    """Facade over the launch index components."""

    def __init__(self, discovery: Discovery, store: Optional[DocumentStore] = None,
                 settings: Optional[Dict[str, Any]] = None):
        self.settings = (
            _deep_merge(default_settings(), settings) if settings is not None else load_settings()
        )

        storage = self.settings["storage"]
        self._owns_store = store is None
        if store is None:
            store = SqliteDocumentStore(Path(storage["db_path"]) if storage["db_path"] else None)
        self.store = store
        self.writer = DocumentWriter(store, async_writes=storage["async_writes"])

        self.coordinator = ReindexCoordinator(
            discovery,
            weights=search_weights(self.settings),
            ready_timeout=self.settings["coordinator"]["ready_timeout"],
        )
        self.orchestrator = SearchOrchestrator(self.coordinator.current)
        self.history = HistoryService(self.writer)
        self.pinned = PinnedService(self.writer)

    def start(self, wait: bool = True) -> None:
        self.coordinator.start(wait=wait)

    def on_changed(self) -> None:
        """Forward an external change batch to the coordinator."""
        self.coordinator.on_changed()

    def search(self, query: str) -> SearchResult:
        return self.orchestrator.search(query)

    def launch(self, item: Union[IndexEntry, PinnedRecord]) -> HistoryRecord:
        """
        Record that an entry was launched.

        Starting the application or plugin is the host's job; this only
        updates history.
        """
        return self.history.record(item)

    def frequent(self) -> list[tuple[HistoryRecord, float]]:
        """Top entries by frecency, sized by the [history] settings."""
        section = self.settings["history"]
        return self.history.frequent(limit=section["max_items"], min_uses=section["min_uses"])

    def reload_user_data(self) -> None:
        """Re-read history and pins (e.g. after a plugin was uninstalled)."""
        self.history.reload()
        self.pinned.reload()

    def close(self) -> None:
        self.coordinator.close()
        self.writer.flush()
        self.writer.close()
        if self._owns_store and isinstance(self.store, SqliteDocumentStore):
            self.store.close()
        logger.debug("QuickLaunchEngine closed")
