"""
SQLite replay store.

Persists spent payment hashes in a single table. Each thread gets its own
connection; claims rely on the table's primary key so they stay atomic across
threads and processes sharing the same database file.
"""

import logging
import sqlite3
import threading
import time
from pathlib import Path
from typing import List, Union

from lnpaywall.errors import StorageUnavailable

logger = logging.getLogger(__name__)


class SQLiteReplayStore:
    """Replay store backed by an SQLite database file."""

    def __init__(self, path: Union[str, Path], timeout: float = 5.0):
        """Open (and if needed create) the database.

        Args:
            path: Database file, created along with its parent directory
            timeout: Seconds to wait for a locked database before failing

        Raises:
            StorageUnavailable: If the database cannot be opened or initialized
        """
        self.path = Path(path)
        self.timeout = timeout
        self._local = threading.local()
        self._connections: List[sqlite3.Connection] = []
        self._connections_lock = threading.Lock()

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot create directory for {self.path}: {exc}") from exc

        self._execute(
            """
            CREATE TABLE IF NOT EXISTS used_proofs (
                key TEXT PRIMARY KEY,
                used_at INTEGER NOT NULL
            )
            """
        )
        logger.info(f"[storage] Using SQLite replay store at {self.path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(
                str(self.path),
                timeout=self.timeout,
                isolation_level=None,
                check_same_thread=False,
            )
            self._local.conn = conn
            with self._connections_lock:
                self._connections.append(conn)
        return conn

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self._get_connection().execute(sql, params)
        except sqlite3.Error as exc:
            raise StorageUnavailable(f"SQLite error on {self.path}: {exc}") from exc

    def was_used(self, key: str) -> bool:
        row = self._execute("SELECT 1 FROM used_proofs WHERE key = ?", (key,)).fetchone()
        return row is not None

    def mark_used(self, key: str) -> None:
        self._execute(
            "INSERT OR IGNORE INTO used_proofs (key, used_at) VALUES (?, ?)",
            (key, int(time.time())),
        )

    def try_claim(self, key: str) -> bool:
        cursor = self._execute(
            "INSERT OR IGNORE INTO used_proofs (key, used_at) VALUES (?, ?)",
            (key, int(time.time())),
        )
        # rowcount is 0 when the primary key already existed
        return cursor.rowcount == 0

    def close(self) -> None:
        """Close every connection opened by this store."""
        with self._connections_lock:
            connections, self._connections = self._connections, []
        for conn in connections:
            conn.close()
        self._local = threading.local()
