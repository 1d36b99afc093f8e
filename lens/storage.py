"""
SQLite-backed string-keyed blob store for Audience Lens.

Schema
──────
table: blobs
  key   TEXT PRIMARY KEY
  value TEXT NOT NULL   (opaque serialised payload, e.g. a JSON array)
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from lens.errors import StorageError, StorageWriteError

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "lens.db"


class SQLiteBlobStore:
    """Synchronous get / set / remove of named string values.

    Every operation opens its own connection, so an instance is cheap to
    share but offers no isolation between concurrent writers.
    """

    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self.path = Path(path) if path else DEFAULT_DB_PATH
        self._initialised = False

    @contextmanager
    def _connect(self):
        """Yield a connected sqlite3.Connection, creating the file/dir if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.path))
        try:
            if not self._initialised:
                conn.execute(
                    "CREATE TABLE IF NOT EXISTS blobs ("
                    "key TEXT PRIMARY KEY, value TEXT NOT NULL)"
                )
                self._initialised = True
                logger.info("Blob store initialised at %s", self.path)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under *key*, or None if absent.

        Raises:
            StorageError: If the database cannot be read.
        """
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM blobs WHERE key = ?", (key,)
                ).fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Could not read {key!r} from {self.path}: {exc}") from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value.

        Raises:
            StorageWriteError: If the write is rejected (disk full, read-only, …).
        """
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO blobs (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
        except (sqlite3.Error, OSError) as exc:
            raise StorageWriteError(f"Could not write {key!r} to {self.path}: {exc}") from exc

    def remove(self, key: str) -> None:
        """Delete *key* if present."""
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM blobs WHERE key = ?", (key,))
        except (sqlite3.Error, OSError) as exc:
            raise StorageWriteError(f"Could not remove {key!r} from {self.path}: {exc}") from exc
