from __future__ import annotations

"""
KV interface & key prefixes
===========================

The keeper reaches persistence only through this backend-agnostic contract:

- get / has / iter_prefix   (reads; iteration is lexicographic by key)
- put / delete              (single writes; delete is idempotent)
- batch()                   (atomic multi-key write, context manager)

Keys are built with `Prefix`, which length-prefixes each part so keys never
need delimiter escaping and sort stably:

>>> OWNER = Prefix(b"owner")
>>> OWNER.key() == OWNER.raw
True

Batching
--------
>>> with kv.batch() as b:
...     b.put(OWNER.key(), b"...")
...     b.delete(PENDING_OWNER.key())

Nothing in this file performs I/O.
"""

from typing import Iterator, Optional, Protocol, Tuple, Union, runtime_checkable

NS_SEP = b"/"

KeyPart = Union[bytes, bytearray, memoryview, str, int]


class Prefix:
    """
    A logical namespace. `.raw` is the bare prefix, `.key(*parts)` appends
    length-prefixed parts.
    """

    __slots__ = ("_raw",)

    def __init__(self, ns: Union[bytes, str]) -> None:
        ns_b = ns.encode("ascii") if isinstance(ns, str) else bytes(ns)
        if not ns_b:
            raise ValueError("namespace must be non-empty")
        self._raw = ns_b.rstrip(NS_SEP) + NS_SEP

    @property
    def raw(self) -> bytes:
        return self._raw

    def key(self, *parts: KeyPart) -> bytes:
        out = bytearray(self._raw)
        for p in parts:
            pb = _part_to_bytes(p)
            out.extend(_uvarint(len(pb)))
            out.extend(pb)
        return bytes(out)

    def strip(self, key: bytes) -> bytes:
        """Inverse of `key(part)` for single-part keys."""
        if not key.startswith(self._raw):
            raise ValueError("key is not under this prefix")
        rest = key[len(self._raw) :]
        n, off = _read_uvarint(rest)
        if off + n != len(rest):
            raise ValueError("key is not a single-part key")
        return rest[off:]

    def __repr__(self) -> str:
        return f"Prefix({self._raw!r})"


def _part_to_bytes(p: KeyPart) -> bytes:
    if isinstance(p, (bytes, bytearray, memoryview)):
        return bytes(p)
    if isinstance(p, str):
        return p.encode("utf-8")
    if isinstance(p, int):
        if p < 0:
            raise ValueError("negative ints not supported in key parts")
        return p.to_bytes(max(1, (p.bit_length() + 7) // 8), "big")
    raise TypeError(f"unsupported key part type: {type(p)!r}")


def _uvarint(n: int) -> bytes:
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(0x80 | b)
        else:
            out.append(b)
            return bytes(out)


def _read_uvarint(buf: bytes) -> Tuple[int, int]:
    n = 0
    shift = 0
    for i, b in enumerate(buf):
        n |= (b & 0x7F) << shift
        if not b & 0x80:
            return n, i + 1
        shift += 7
    raise ValueError("truncated varint")


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class ReadOnlyKV(Protocol):
    def get(self, key: bytes) -> Optional[bytes]: ...

    def has(self, key: bytes) -> bool: ...

    def iter_prefix(self, prefix: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """Yield (key, value) pairs under `prefix` in lexicographic key order."""
        ...

    def close(self) -> None: ...


@runtime_checkable
class Batch(Protocol):
    """Write batch; applied atomically on clean exit, discarded on exception."""

    def put(self, key: bytes, value: bytes) -> None: ...
    def delete(self, key: bytes) -> None: ...

    def __enter__(self) -> "Batch": ...
    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...


@runtime_checkable
class KV(ReadOnlyKV, Protocol):
    def put(self, key: bytes, value: bytes) -> None: ...

    def delete(self, key: bytes) -> None: ...

    def batch(self) -> Batch: ...


__all__ = ["Prefix", "ReadOnlyKV", "Batch", "KV"]
