from __future__ import annotations

"""
fiattokenfactory.store
======================

Backend selection for the keeper's key-value store.

URIs
----
- "memory://"                 → MemoryKV (tests, dev)
- "sqlite:///path/to/ftf.db"  → SQLite file (path after the third slash)
- "sqlite:///:memory:"        → in-memory SQLite
- bare path ending in ".db"   → SQLite file

>>> kv = open_store("memory://")
>>> kv.put(b"k", b"v"); kv.get(b"k")
b'v'
"""

from typing import Tuple

from .kv import KV, Batch, Prefix, ReadOnlyKV
from .memory import MemoryKV
from .sqlite import SQLiteKV


def _parse_uri(uri: str) -> Tuple[str, str]:
    u = uri.strip()
    if u.startswith("memory://"):
        return ("memory", "")
    if u.startswith("sqlite:///"):
        return ("sqlite", u[len("sqlite:///") :] or ":memory:")
    if u.endswith(".db"):
        return ("sqlite", u)
    raise ValueError(f"Unsupported store URI: {uri!r}")


def open_store(uri: str, create: bool = True) -> KV:
    backend, target = _parse_uri(uri)
    if backend == "memory":
        return MemoryKV()
    return SQLiteKV(target, create=create)


__all__ = [
    "KV",
    "ReadOnlyKV",
    "Batch",
    "Prefix",
    "MemoryKV",
    "SQLiteKV",
    "open_store",
]
