from __future__ import annotations

"""
SQLite backend for the keeper's store.

What the keeper relies on, and how this backend provides it:

- Ownership acceptance and genesis import write several keys through one
  `batch()`. A batch is a single `BEGIN IMMEDIATE ... COMMIT`; any exception
  inside the `with` block rolls all of it back, so a half-accepted ownership
  transfer or a partial genesis can never be observed.
- Genesis export and the controller/minter/denylist enumerations need a
  stable order that matches `MemoryKV`. Keys are BLOBs, which SQLite compares
  with memcmp, so `ORDER BY k` gives the same order.
- Single-key transitions (role updates, denylist, pause) write outside any
  batch and autocommit.

One table, `records(k BLOB PRIMARY KEY, v BLOB NOT NULL)`, WAL journal.
"""

import os
import sqlite3
from typing import Iterator, Optional, Tuple, Union

from .kv import KV

PathLike = Union[str, "os.PathLike[str]"]

_SCHEMA = "CREATE TABLE IF NOT EXISTS records (k BLOB PRIMARY KEY, v BLOB NOT NULL)"
_UPSERT = "INSERT INTO records(k, v) VALUES(?, ?) ON CONFLICT(k) DO UPDATE SET v=excluded.v"
_DELETE = "DELETE FROM records WHERE k = ?"


def _upper_bound(prefix: bytes) -> Optional[bytes]:
    """First key past every key that starts with `prefix` (None: no bound)."""
    stripped = prefix.rstrip(b"\xff")
    if not stripped:
        return None
    return stripped[:-1] + bytes([stripped[-1] + 1])


class SQLiteBatch:
    """Writes buffered in one immediate transaction; rolled back on error."""

    __slots__ = ("_conn", "_active")

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._active = False

    def _require_active(self) -> None:
        if not self._active:
            raise RuntimeError("batch used outside its with-block")

    def __enter__(self) -> "SQLiteBatch":
        if self._active:
            raise RuntimeError("batches do not nest")
        # IMMEDIATE takes the write lock up front, so the batch cannot fail
        # half-way on a busy database.
        self._conn.execute("BEGIN IMMEDIATE")
        self._active = True
        return self

    def put(self, key: bytes, value: bytes) -> None:
        self._require_active()
        self._conn.execute(_UPSERT, (bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        self._require_active()
        self._conn.execute(_DELETE, (bytes(key),))

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self._active = False
        self._conn.execute("ROLLBACK" if exc_type is not None else "COMMIT")
        return None


class SQLiteKV(KV):
    """
    Store for a node that keeps module state on disk. `path=":memory:"` gives
    a throwaway database; `create=False` refuses to start on a missing file
    (so a typo in `store_uri` does not silently begin from empty state).
    """

    __slots__ = ("_conn",)

    def __init__(self, path: PathLike = ":memory:", *, create: bool = True) -> None:
        target = os.fspath(path)
        if not create and target != ":memory:" and not os.path.exists(target):
            raise FileNotFoundError(f"no store at {target}")
        # Autocommit mode; batches manage their own transactions.
        self._conn = sqlite3.connect(target, isolation_level=None, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        self._conn.execute(_SCHEMA)

    def get(self, key: bytes) -> Optional[bytes]:
        row = self._conn.execute("SELECT v FROM records WHERE k = ?", (bytes(key),)).fetchone()
        return None if row is None else bytes(row[0])

    def has(self, key: bytes) -> bool:
        return self._conn.execute("SELECT 1 FROM records WHERE k = ?", (bytes(key),)).fetchone() is not None

    def iter_prefix(self, prefix: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """Key-ordered snapshot of every record under `prefix`."""
        hi = _upper_bound(prefix)
        if hi is None:
            rows = self._conn.execute(
                "SELECT k, v FROM records WHERE k >= ? ORDER BY k", (bytes(prefix),)
            ).fetchall()
        else:
            rows = self._conn.execute(
                "SELECT k, v FROM records WHERE k >= ? AND k < ? ORDER BY k",
                (bytes(prefix), hi),
            ).fetchall()
        for k, v in rows:
            yield bytes(k), bytes(v)

    def put(self, key: bytes, value: bytes) -> None:
        self._conn.execute(_UPSERT, (bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        self._conn.execute(_DELETE, (bytes(key),))

    def batch(self) -> SQLiteBatch:
        return SQLiteBatch(self._conn)

    def close(self) -> None:
        self._conn.close()

    def __len__(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM records").fetchone()[0]


__all__ = ["SQLiteKV", "SQLiteBatch"]
