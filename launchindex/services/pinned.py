"""
Pinned Service - User-curated, user-ordered list of entries.

Order is never derived from usage: pin() appends, reorder() replaces the
whole order (drag-to-reorder UIs), move() shifts a single item. An entry
appears at most once. Every mutation persists the full list.
"""

import threading
from typing import Optional, Union

from loguru import logger

from launchindex.index.entries import IndexEntry, RecordKey

from .base import Service
from .records import PinnedRecord
from .storage import DocumentWriter

PINNED_DOC_ID = "pinned-apps"


class PinnedService(Service):
    """
    Pinned entries, in the order the user arranged them.

    Signals:
        changed: Emitted after every mutation
    """

    __signals__ = ("changed",)

    def __init__(self, writer: DocumentWriter):
        super().__init__()
        self._writer = writer
        self._lock = threading.RLock()
        self._records: list[PinnedRecord] = []
        self._load()

    def _load(self) -> None:
        data = self._writer.read(PINNED_DOC_ID, default=[])
        if not isinstance(data, list):
            logger.warning(f"Ignoring malformed '{PINNED_DOC_ID}' document")
            data = []

        records, seen = [], set()
        for doc in data:
            try:
                record = PinnedRecord.from_doc(doc)
            except ValueError as e:
                logger.warning(f"Skipping malformed pinned record: {e}")
                continue
            if record.key in seen:
                continue
            seen.add(record.key)
            records.append(record)

        with self._lock:
            self._records = records
        logger.debug(f"Loaded {len(records)} pinned entries")

    def reload(self) -> None:
        """Re-read pins from the store."""
        self._load()
        self.emit("changed")

    def _save(self) -> None:
        self._writer.write(PINNED_DOC_ID, [r.to_doc() for r in self._records])

    def _matches(self, record: PinnedRecord, path: str, feature_code: Optional[str]) -> bool:
        # Without a feature code, any record for the path matches
        if feature_code is None:
            return record.path == path
        return record.path == path and record.feature_code == feature_code

    def is_pinned(self, path: str, feature_code: Optional[str] = None) -> bool:
        with self._lock:
            return any(self._matches(r, path, feature_code) for r in self._records)

    def pin(self, item: Union[IndexEntry, PinnedRecord]) -> bool:
        """
        Pin an entry at the end of the list.

        Returns:
            True if added, False if it was already pinned
        """
        record = PinnedRecord.from_item(item)
        with self._lock:
            if any(r.key == record.key for r in self._records):
                return False
            self._records.append(record)
            self._save()

        logger.debug(f"Pinned {record.name}")
        self.emit("changed")
        return True

    def unpin(self, path: str, feature_code: Optional[str] = None) -> bool:
        """
        Unpin an entry.

        Args:
            path: Application path or plugin directory
            feature_code: If provided, unpin only that plugin feature

        Returns:
            True if anything was removed
        """
        with self._lock:
            kept = [r for r in self._records if not self._matches(r, path, feature_code)]
            if len(kept) == len(self._records):
                return False
            self._records = kept
            self._save()

        self.emit("changed")
        return True

    def reorder(self, new_order: list[Union[IndexEntry, PinnedRecord]]) -> None:
        """
        Replace the pinned list with a caller-supplied order.

        Duplicate keys in new_order are dropped (first occurrence wins).
        """
        records, seen = [], set()
        for item in new_order:
            record = PinnedRecord.from_item(item)
            if record.key in seen:
                continue
            seen.add(record.key)
            records.append(record)

        with self._lock:
            self._records = records
            self._save()
        self.emit("changed")

    def move(self, key: RecordKey, new_index: int) -> bool:
        """
        Move one pinned entry to a new position.

        Args:
            key: RecordKey of the entry to move
            new_index: New position (0-indexed), clamped to the list bounds

        Returns:
            False if the entry is not pinned
        """
        with self._lock:
            for index, record in enumerate(self._records):
                if record.key == key:
                    break
            else:
                return False

            self._records.pop(index)
            new_index = max(0, min(new_index, len(self._records)))
            self._records.insert(new_index, record)
            self._save()

        self.emit("changed")
        return True

    def clear(self) -> None:
        with self._lock:
            self._records = []
            self._save()
        self.emit("changed")

    def __len__(self) -> int:
        return len(self._records)

    # kept last: inside the class body this name shadows the builtin
    def list(self) -> list[PinnedRecord]:
        """Pinned records in user order."""
        with self._lock:
            return list(self._records)
