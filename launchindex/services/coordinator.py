"""
Re-index Coordinator - Owns the index lifecycle and its snapshots.

States:

    UNINITIALIZED --start()--> LOADING --> READY
    READY --on_changed()--> LOADING --> READY

A rebuild runs discovery and the entry builder, builds a complete
IndexSnapshot off to the side and publishes it by swapping one reference.
Readers see either the old or the new generation, never a mix.

Rebuild requests arriving while LOADING are coalesced: at most one rebuild
is in flight, and any number of requests made meanwhile cause exactly one
more rebuild when it finishes.
"""

import threading
from enum import Enum
from typing import Optional

from loguru import logger

from launchindex.discovery import Discovery
from launchindex.errors import DiscoveryFailure
from launchindex.index.builder import build_entries
from launchindex.search.snapshot import IndexSnapshot

from .base import Service


class IndexState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class ReindexCoordinator(Service):
    """
    Builds and publishes index snapshots.

    Signals:
        ready: Emitted with the new IndexSnapshot after each publish
    """

    __signals__ = ("ready",)

    def __init__(self, discovery: Discovery, weights: dict[str, float] | None = None,
                 ready_timeout: float = 5.0):
        super().__init__()
        self.discovery = discovery
        self.weights = weights
        self.ready_timeout = ready_timeout

        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._state = IndexState.UNINITIALIZED
        self._snapshot: Optional[IndexSnapshot] = None
        self._generation = 0
        self._pending = False
        # bumped by close(); a rebuild started before close() must not publish
        self._epoch = 0
        self._closed = False

    @property
    def state(self) -> IndexState:
        return self._state

    @property
    def generation(self) -> int:
        snapshot = self._snapshot
        return snapshot.generation if snapshot else 0

    def start(self, wait: bool = True) -> None:
        """
        Perform the initial load.

        Args:
            wait: If False, load on a background thread and return at once.
                  Queries block (up to ready_timeout) until the first
                  snapshot is published.
        """
        self._closed = False
        if not wait:
            threading.Thread(
                target=self.request_rebuild, name="launchindex-initial-load", daemon=True
            ).start()
            return
        self.request_rebuild()

    def on_changed(self) -> None:
        """Handle one (already debounced) batch of external changes."""
        logger.debug("Change notification received, re-indexing")
        self.request_rebuild()

    def request_rebuild(self) -> bool:
        """
        Rebuild now, or mark a rebuild pending if one is in flight.

        Returns:
            True if this call ran the rebuild(s), False if it was coalesced
        """
        with self._lock:
            if self._state is IndexState.LOADING:
                self._pending = True
                logger.debug("Rebuild already in flight, coalescing request")
                return False
            self._state = IndexState.LOADING
            epoch = self._epoch

        try:
            while True:
                self._rebuild(epoch)
                with self._lock:
                    if self._pending and epoch == self._epoch:
                        self._pending = False
                        continue
                    break
        finally:
            with self._lock:
                if epoch == self._epoch:
                    self._pending = False
                    ready = self._snapshot is not None
                    self._state = IndexState.READY if ready else IndexState.UNINITIALIZED
        return True

    def _discover(self) -> tuple[list, list]:
        try:
            return list(self.discovery.get_apps()), list(self.discovery.get_plugins())
        except DiscoveryFailure:
            raise
        except Exception as e:
            raise DiscoveryFailure(f"{type(e).__name__}: {e}") from e

    def _rebuild(self, epoch: int) -> None:
        with self._lock:
            if epoch != self._epoch:
                logger.debug("Coordinator closed before rebuild, skipping")
                return
            self._generation += 1
            generation = self._generation

        try:
            apps, plugins = self._discover()
            partitions = build_entries(apps, plugins)
            snapshot = IndexSnapshot.build(partitions, generation=generation, weights=self.weights)
        except DiscoveryFailure as e:
            if self._snapshot is not None:
                logger.warning(f"Discovery failed, keeping generation {self._snapshot.generation}: {e}")
                return
            logger.warning(f"Discovery failed, starting with an empty index: {e}")
            snapshot = IndexSnapshot.empty(generation)
        except Exception:
            logger.exception("Index build failed")
            if self._snapshot is not None:
                return
            snapshot = IndexSnapshot.empty(generation)

        with self._lock:
            if epoch != self._epoch:
                logger.debug("Coordinator closed during rebuild, discarding result")
                return
            # single reference swap; readers holding the old snapshot keep it
            self._snapshot = snapshot
            self._ready.set()

        logger.debug(f"Published index generation {generation} ({len(snapshot)} entries)")
        self.emit("ready", snapshot)

    def current(self, timeout: Optional[float] = None) -> IndexSnapshot:
        """
        Get the last published snapshot.

        Before the first publish this blocks up to timeout (default
        ready_timeout) and then falls back to an empty snapshot.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        if self._closed:
            return IndexSnapshot.empty()

        self._ready.wait(self.ready_timeout if timeout is None else timeout)
        snapshot = self._snapshot
        if snapshot is None:
            logger.debug("No index published yet, serving empty results")
            return IndexSnapshot.empty()
        return snapshot

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        return self._ready.wait(timeout)

    def close(self) -> None:
        """Drop the index and return to UNINITIALIZED."""
        with self._lock:
            self._epoch += 1
            self._snapshot = None
            self._pending = False
            self._state = IndexState.UNINITIALIZED
            self._ready.clear()
            self._closed = True
        logger.debug("Coordinator closed")
