"""
Records - Denormalized entry snapshots kept by the history and pinned stores.

Records outlive index rebuilds, so they copy the display fields they need
instead of referencing an IndexEntry.
"""

from dataclasses import dataclass
from typing import Optional, Union

from launchindex.index.entries import EntryKind, IndexEntry, RecordKey


@dataclass
class PinnedRecord:
    """A pinned entry: identity plus display fields, no usage statistics."""
    name: str
    path: str
    kind: EntryKind = EntryKind.APPLICATION
    icon: Optional[str] = None
    feature_code: Optional[str] = None
    explain: str = ""

    @property
    def key(self) -> RecordKey:
        if self.kind is EntryKind.APPLICATION:
            return RecordKey(self.path)
        return RecordKey(self.path, self.feature_code)

    @classmethod
    def fields_of(cls, item: Union[IndexEntry, "PinnedRecord"]) -> dict:
        """Extract the shared display fields from an entry or another record."""
        if isinstance(item, IndexEntry):
            return {
                "name": item.display_name,
                "path": item.path,
                "kind": item.kind,
                "icon": item.icon,
                "feature_code": item.feature_code,
                "explain": item.explain,
            }
        return {
            "name": item.name,
            "path": item.path,
            "kind": item.kind,
            "icon": item.icon,
            "feature_code": item.feature_code,
            "explain": item.explain,
        }

    @classmethod
    def from_item(cls, item: Union[IndexEntry, "PinnedRecord"]) -> "PinnedRecord":
        return cls(**cls.fields_of(item))

    def to_doc(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "icon": self.icon,
            "kind": self.kind.value,
            "feature_code": self.feature_code,
            "explain": self.explain,
        }

    @classmethod
    def _doc_fields(cls, doc) -> dict:
        """
        Validate the shared part of a stored document.

        Raises:
            ValueError: If required fields are missing or mistyped
        """
        if not isinstance(doc, dict):
            raise ValueError("record is not an object")
        name, path = doc.get("name"), doc.get("path")
        if not isinstance(name, str) or not isinstance(path, str) or not path:
            raise ValueError("record needs string 'name' and 'path'")
        return {
            "name": name,
            "path": path,
            "kind": EntryKind(doc.get("kind", EntryKind.APPLICATION.value)),
            "icon": doc.get("icon"),
            "feature_code": doc.get("feature_code"),
            "explain": doc.get("explain") or "",
        }

    @classmethod
    def from_doc(cls, doc) -> "PinnedRecord":
        return cls(**cls._doc_fields(doc))


@dataclass
class HistoryRecord(PinnedRecord):
    """A used entry with recency and frequency statistics."""
    last_used: float = 0.0
    use_count: int = 1

    def to_doc(self) -> dict:
        doc = super().to_doc()
        doc["last_used"] = self.last_used
        doc["use_count"] = self.use_count
        return doc

    @classmethod
    def from_doc(cls, doc) -> "HistoryRecord":
        fields = cls._doc_fields(doc)
        last_used = doc.get("last_used", 0)
        use_count = doc.get("use_count", 1)
        if not isinstance(last_used, (int, float)) or not isinstance(use_count, int) or use_count < 1:
            raise ValueError("record has invalid usage statistics")
        return cls(**fields, last_used=float(last_used), use_count=use_count)
