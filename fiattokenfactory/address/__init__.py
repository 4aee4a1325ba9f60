"""
Address handling: bech32/bech32m primitives and the no-limit codec used to
canonicalize addresses from any chain to raw bytes.
"""

from __future__ import annotations

from .bech32 import Encoding, STANDARD_MAX_LENGTH, bech32_decode, bech32_encode, convertbits
from .codec import AddressCodec, decode, decode_to_bytes, encode

__all__ = [
    "AddressCodec",
    "Encoding",
    "STANDARD_MAX_LENGTH",
    "bech32_decode",
    "bech32_encode",
    "convertbits",
    "decode",
    "decode_to_bytes",
    "encode",
]
