from __future__ import annotations

"""In-memory KV with sorted prefix iteration, for tests and dev nodes."""

import bisect
import threading
from typing import Dict, Iterator, List, Optional, Tuple

from .kv import KV


class MemoryBatch:
    __slots__ = ("_kv", "_ops")

    def __init__(self, kv: "MemoryKV") -> None:
        self._kv = kv
        self._ops: List[Tuple[bytes, Optional[bytes]]] = []

    def put(self, key: bytes, value: bytes) -> None:
        self._ops.append((bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        self._ops.append((bytes(key), None))

    def __enter__(self) -> "MemoryBatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        if exc_type is None:
            self._kv._apply(self._ops)
        self._ops = []
        return None


class MemoryKV(KV):
    """
    Dict-backed KV. A sorted key index keeps `iter_prefix` ordered, matching
    the SQLite backend.
    """

    __slots__ = ("_m", "_keys", "_lock")

    def __init__(self) -> None:
        self._m: Dict[bytes, bytes] = {}
        self._keys: List[bytes] = []
        self._lock = threading.RLock()

    def get(self, key: bytes) -> Optional[bytes]:
        return self._m.get(key)

    def has(self, key: bytes) -> bool:
        return key in self._m

    def iter_prefix(self, prefix: bytes) -> Iterator[Tuple[bytes, bytes]]:
        with self._lock:
            i = bisect.bisect_left(self._keys, prefix)
            snapshot = []
            while i < len(self._keys) and self._keys[i].startswith(prefix):
                k = self._keys[i]
                snapshot.append((k, self._m[k]))
                i += 1
        yield from snapshot

    def close(self) -> None:
        pass

    def put(self, key: bytes, value: bytes) -> None:
        self._apply([(bytes(key), bytes(value))])

    def delete(self, key: bytes) -> None:
        self._apply([(bytes(key), None)])

    def batch(self) -> MemoryBatch:
        return MemoryBatch(self)

    def _apply(self, ops: List[Tuple[bytes, Optional[bytes]]]) -> None:
        with self._lock:
            for k, v in ops:
                if v is None:
                    if self._m.pop(k, None) is not None:
                        del self._keys[bisect.bisect_left(self._keys, k)]
                else:
                    if k not in self._m:
                        bisect.insort(self._keys, k)
                    self._m[k] = v

    def __len__(self) -> int:
        return len(self._m)


__all__ = ["MemoryKV", "MemoryBatch"]
