"""
History Service - Track launched entries by recency and frequency.

Each launch upserts one HistoryRecord keyed by (path, feature_code), so two
features of the same plugin are separate history lines. The list is kept
sorted by last_used descending and persisted wholesale after every
mutation under a fixed document ID.

frequent() ranks records with a Firefox-style frecency score:
  frecency_score = use_count * recency_weight

Where recency_weight depends on how recently the entry was used:
  - < 4 days: 100x multiplier
  - < 14 days: 70x multiplier
  - < 31 days: 50x multiplier
  - < 90 days: 30x multiplier
  - 90+ days: 10x multiplier
"""

import threading
import time
from dataclasses import replace
from typing import Callable, Optional, Union

from loguru import logger

from launchindex.index.entries import IndexEntry, RecordKey

from .base import Service
from .records import HistoryRecord, PinnedRecord
from .storage import DocumentWriter

HISTORY_DOC_ID = "app-history"


class HistoryService(Service):
    """
    Service for recording entry usage.

    Signals:
        changed: Emitted after every mutation (record, remove, clear, reload)

    Methods:
        record(item): Record a launch of an entry or record
        list(limit): Records in most-recent-first order
        frequent(limit, min_uses): Records ranked by frecency
        remove(path, feature_code): Forget one entry (or every feature of a path)
        clear(): Forget everything
    """

    __signals__ = ("changed",)

    def __init__(self, writer: DocumentWriter, clock: Callable[[], float] = time.time):
        super().__init__()
        self._writer = writer
        self._clock = clock
        self._lock = threading.RLock()
        self._records: list[HistoryRecord] = []
        self._load()

    def _load(self) -> None:
        data = self._writer.read(HISTORY_DOC_ID, default=[])
        if not isinstance(data, list):
            logger.warning(f"Ignoring malformed '{HISTORY_DOC_ID}' document")
            data = []

        records = []
        for doc in data:
            try:
                records.append(HistoryRecord.from_doc(doc))
            except ValueError as e:
                logger.warning(f"Skipping malformed history record: {e}")

        records.sort(key=lambda r: r.last_used, reverse=True)
        with self._lock:
            self._records = records
        logger.debug(f"Loaded {len(records)} history records")

    def reload(self) -> None:
        """Re-read history from the store (e.g. after another process changed it)."""
        self._load()
        self.emit("changed")

    def _commit(self) -> None:
        """Re-sort, snapshot and persist. Caller holds the lock."""
        # sort is stable, so a just-used record at the front stays ahead of
        # records sharing its timestamp
        self._records.sort(key=lambda r: r.last_used, reverse=True)
        self._writer.write(HISTORY_DOC_ID, [r.to_doc() for r in self._records])

    def record(self, item: Union[IndexEntry, PinnedRecord]) -> HistoryRecord:
        """
        Record a launch.

        Args:
            item: The launched IndexEntry (or a history/pinned record)

        Returns:
            The inserted or updated HistoryRecord

        Emits:
            changed: Signal to notify listeners that data has updated
        """
        now = self._clock()
        fields = PinnedRecord.fields_of(item)

        with self._lock:
            key = PinnedRecord(**fields).key
            existing = self._find(key)
            if existing is not None:
                # records handed out by list() are never mutated
                record = replace(existing, last_used=now, use_count=existing.use_count + 1)
                self._records = [r for r in self._records if r is not existing]
            else:
                record = HistoryRecord(**fields, last_used=now, use_count=1)
            self._records.insert(0, record)
            self._commit()

        logger.debug(f"Recorded launch of {record.name} ({record.use_count}x)")
        self.emit("changed")
        return record

    def _find(self, key: RecordKey) -> Optional[HistoryRecord]:
        for record in self._records:
            if record.key == key:
                return record
        return None

    def get(self, key: RecordKey) -> Optional[HistoryRecord]:
        with self._lock:
            return self._find(key)

    def __len__(self) -> int:
        return len(self._records)

    def frequent(self, limit: int = 12, min_uses: int = 1) -> list[tuple[HistoryRecord, float]]:
        """
        Get records ranked by frecency score.

        Args:
            limit: Maximum number of records to return
            min_uses: Minimum use count to include a record

        Returns:
            List of (record, frecency_score) sorted by score descending
        """
        now = self._clock()
        with self._lock:
            scored = [
                (r, self._calculate_frecency(r.use_count, r.last_used, now))
                for r in self._records
                if r.use_count >= min_uses
            ]
        scored.sort(key=lambda x: x[1], reverse=True)
        return scored[:limit]

    @staticmethod
    def _calculate_frecency(use_count: int, last_used: float, now: float) -> float:
        """
        Calculate frecency score using Firefox's algorithm.

        Args:
            use_count: Number of times the entry has been used
            last_used: Unix timestamp of last use
            now: Current Unix timestamp

        Returns:
            Frecency score (float)
        """
        age_days = (now - last_used) / (24 * 3600)

        # Determine recency weight based on age buckets
        if age_days < 4:
            recency_weight = 100
        elif age_days < 14:
            recency_weight = 70
        elif age_days < 31:
            recency_weight = 50
        elif age_days < 90:
            recency_weight = 30
        else:
            recency_weight = 10

        return use_count * recency_weight

    def remove(self, path: str, feature_code: Optional[str] = None) -> int:
        """
        Remove history records.

        Args:
            path: Application path or plugin directory
            feature_code: If provided, remove only that plugin feature.
                          If None, remove every record for the path.

        Returns:
            Number of records removed

        Emits:
            changed: Signal to notify listeners
        """
        with self._lock:
            before = len(self._records)
            if feature_code is None:
                self._records = [r for r in self._records if r.path != path]
            else:
                self._records = [
                    r for r in self._records
                    if not (r.path == path and r.feature_code == feature_code)
                ]
            removed = before - len(self._records)
            if removed:
                self._commit()

        if removed:
            self.emit("changed")
        return removed

    def clear(self) -> None:
        """Remove every history record."""
        with self._lock:
            self._records = []
            self._commit()
        self.emit("changed")

    # kept last: inside the class body this name shadows the builtin
    def list(self, limit: Optional[int] = None) -> list[HistoryRecord]:
        """
        Get records, most recently used first.

        Args:
            limit: Maximum number of records; all when None or 0
        """
        with self._lock:
            if limit:
                return self._records[:limit]
            return list(self._records)
