"""
Document Storage - Revisioned key-value persistence for history and pins.

The store contract is small:

    get(key)            -> Document | None
    put(key, value, rev) -> PutResult(ok, id, rev)

Writes are last-write-wins guarded by revision tokens: a put must carry the
revision it read, otherwise the store raises ConflictError. DocumentWriter
does the read-before-write and runs it off the caller's thread so that
in-memory mutations never wait on disk.
"""

import json
import sqlite3
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, NamedTuple, Optional, Protocol

from loguru import logger

from launchindex.errors import ConflictError, PersistenceFailure

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "launchindex"


class Document(NamedTuple):
    id: str
    rev: str
    value: Any


class PutResult(NamedTuple):
    ok: bool
    id: str
    rev: str


class DocumentStore(Protocol):
    def get(self, key: str) -> Optional[Document]: ...

    def put(self, key: str, value: Any, rev: Optional[str] = None) -> PutResult: ...


def _next_rev(current: Optional[str]) -> str:
    seq = int(current.split("-", 1)[0]) if current else 0
    return f"{seq + 1}-{uuid.uuid4().hex}"


class SqliteDocumentStore:
    """
    DocumentStore backed by a single SQLite file.

    Values are stored as JSON text. The connection is shared between threads
    and serialized with a lock.
    """

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            DEFAULT_DATA_DIR.mkdir(parents=True, exist_ok=True)
            db_path = DEFAULT_DATA_DIR / "store.db"
        else:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.db_path = Path(db_path)
        self._lock = threading.Lock()

        try:
            # Persistent connection with WAL mode for better concurrency
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._init_database()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Cannot open document store at {self.db_path}: {e}") from e
        logger.debug(f"SqliteDocumentStore opened at {self.db_path}")

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                id TEXT PRIMARY KEY,
                rev TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at INTEGER
            )
        """)
        self._conn.commit()

    def get(self, key: str) -> Optional[Document]:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT rev, value FROM documents WHERE id = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Failed to read {key!r}: {e}") from e

        if row is None:
            return None
        rev, raw = row
        try:
            return Document(id=key, rev=rev, value=json.loads(raw))
        except ValueError as e:
            raise PersistenceFailure(f"Document {key!r} is not valid JSON: {e}") from e

    def put(self, key: str, value: Any, rev: Optional[str] = None) -> PutResult:
        """
        Write a document.

        Args:
            key: Document ID
            value: JSON-serializable value
            rev: Revision of the stored document (None when creating)

        Raises:
            ConflictError: If rev does not match the stored revision
            PersistenceFailure: If the value cannot be encoded or written
        """
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceFailure(f"Document {key!r} is not JSON-serializable: {e}") from e

        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT rev FROM documents WHERE id = ?", (key,)
                ).fetchone()
                current = row[0] if row else None
                if rev != current:
                    raise ConflictError(key, expected=rev, actual=current)

                new_rev = _next_rev(current)
                self._conn.execute("""
                    INSERT INTO documents (id, rev, value, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        rev = excluded.rev,
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """, (key, new_rev, payload, int(time.time())))
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Failed to write {key!r}: {e}") from e

        return PutResult(ok=True, id=key, rev=new_rev)

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class DocumentWriter:
    """
    Read-before-write persistence with fire-and-forget semantics.

    With async_writes, writes run in order on a single worker thread and the
    caller gets a Future it may ignore. Failures are logged, never raised.
    """

    def __init__(self, store: DocumentStore, async_writes: bool = True):
        self.store = store
        self._executor = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="launchindex-writer")
            if async_writes else None
        )

    def read(self, key: str, default):
        """Return the stored value for key, or default when missing or unreadable."""
        try:
            doc = self.store.get(key)
        except PersistenceFailure as e:
            logger.warning(f"Falling back to empty '{key}': {e}")
            return default
        except Exception:
            logger.exception(f"Unexpected error reading '{key}'")
            return default
        return default if doc is None else doc.value

    def write(self, key: str, value) -> Optional[Future]:
        """Persist value under key. Returns a Future when writing asynchronously."""
        if self._executor is None:
            self._write_now(key, value)
            return None
        return self._executor.submit(self._write_now, key, value)

    def _write_now(self, key: str, value) -> Optional[PutResult]:
        try:
            doc = self.store.get(key)
            result = self.store.put(key, value, doc.rev if doc else None)
        except PersistenceFailure as e:
            logger.warning(f"Failed to persist '{key}': {e}")
            return None
        except Exception:
            logger.exception(f"Unexpected error persisting '{key}'")
            return None

        logger.debug(f"Persisted '{key}' at rev {result.rev}")
        return result

    def flush(self) -> None:
        """Block until every queued write has finished."""
        if self._executor is not None:
            self._executor.submit(lambda: None).result()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
