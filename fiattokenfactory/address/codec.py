from __future__ import annotations

"""
codec.py: cross-chain address canonicalization

Addresses reach the module under many prefixes (`cosmos1…`, `osmo1…`,
`penumbra1…`). Denylist entries and role comparisons must not depend on the
prefix, so everything is reduced to raw payload bytes and, for storage and
display, re-encoded under the local prefix:

    hrp, raw = decode_to_bytes("cosmos1hjz2rjqfn7yhaawqgfk6j6hv5dtf9nau70fusm")
    encode("noble", raw)   # 'noble1hjz2rjqfn7yhaawqgfk6j6hv5dtf9naukvu5g4'

Decoding applies no length ceiling unless a limit is passed. Every failure is reported
as `MalformedAddress`.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from fiattokenfactory.address import bech32 as _b32
from fiattokenfactory.errors import MalformedAddress


def decode(address: str, limit: Optional[int] = None) -> Tuple[str, List[int]]:
    """Decode to (prefix, 5-bit payload words), either checksum. No ceiling unless `limit` is given."""
    if not isinstance(address, str):
        raise MalformedAddress("address must be a string", address=repr(address))
    try:
        hrp, data5, _enc = _b32.bech32_decode(address, limit=limit)
    except _b32.Bech32Error as e:
        raise MalformedAddress(str(e), address=address) from e
    return hrp, data5


def decode_to_bytes(address: str, limit: Optional[int] = None) -> Tuple[str, bytes]:
    """Decode to (prefix, raw 8-bit payload)."""
    hrp, data5 = decode(address, limit)
    try:
        raw = bytes(_b32.convertbits(data5, 5, 8, pad=False))
    except _b32.Bech32Error as e:
        raise MalformedAddress(str(e), address=address) from e
    return hrp, raw


def encode(prefix: str, raw: bytes, use_alt_checksum: bool = False) -> str:
    """
    Encode raw payload bytes under `prefix`. `use_alt_checksum` selects
    bech32m; the default is classic bech32.
    """
    if not isinstance(prefix, str):
        raise MalformedAddress("prefix must be a string", details={"prefix": repr(prefix)})
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise MalformedAddress("payload must be bytes-like")
    enc = _b32.Encoding.BECH32M if use_alt_checksum else _b32.Encoding.BECH32
    try:
        return _b32.bech32_encode(prefix, _b32.convertbits(bytes(raw), 8, 5, pad=True), enc)
    except _b32.Bech32Error as e:
        raise MalformedAddress(str(e), details={"prefix": prefix}) from e


@dataclass(frozen=True)
class AddressCodec:
    """Codec bound to the local chain prefix."""

    hrp: str = "noble"
    limit: Optional[int] = None

    def to_bytes(self, address: str) -> bytes:
        return decode_to_bytes(address, self.limit)[1]

    def from_bytes(self, raw: bytes) -> str:
        return encode(self.hrp, raw)

    def canonicalize(self, address: str) -> str:
        """Re-encode any-prefix `address` under the local prefix (bech32)."""
        return self.from_bytes(self.to_bytes(address))

    def is_valid(self, address: str) -> bool:
        try:
            decode_to_bytes(address, self.limit)
        except MalformedAddress:
            return False
        return True


__all__ = ["decode", "decode_to_bytes", "encode", "AddressCodec"]
