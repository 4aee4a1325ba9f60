from __future__ import annotations

"""
Bech32 / Bech32m primitives with a configurable length ceiling
==============================================================

BIP-0173 / BIP-0350 encoder and decoder shared by every address path in the
module. The only departure from the reference decoder is that the overall
length ceiling (90 characters) is a parameter: `bech32_decode(s, limit=None)`
accepts addresses of any length, which is what counterpart chains with long
(Taproot-style, shielded) addresses need. Checksum and bit-regrouping logic
is identical for both paths.

    hrp, data5, enc = bech32_decode("cosmos1...", limit=None)
    raw = bytes(convertbits(data5, 5, 8, pad=False))
    s = bech32_encode("noble", convertbits(raw, 8, 5), Encoding.BECH32)

References
----------
BIP-0173: https://github.com/bitcoin/bips/blob/master/bip-0173.mediawiki
BIP-0350: https://github.com/bitcoin/bips/blob/master/bip-0350.mediawiki
"""

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

# 32-character alphabet per BIP-0173.
CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_REV = {c: i for i, c in enumerate(CHARSET)}

SEPARATOR = "1"
CHECKSUM_LEN = 6
MIN_LENGTH = 8
STANDARD_MAX_LENGTH = 90

_GENERATORS = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


class Encoding(Enum):
    """Checksum variant; the value is the constant the polymod must equal."""

    BECH32 = 1
    BECH32M = 0x2BC830A3


class Bech32Error(ValueError):
    pass


# ---------------------------------------------------------------------------
# Checksum
# ---------------------------------------------------------------------------


def _polymod(values: Iterable[int]) -> int:
    chk = 1
    for v in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i in range(5):
            if (top >> i) & 1:
                chk ^= _GENERATORS[i]
    return chk


def _hrp_expand(hrp: str) -> List[int]:
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _create_checksum(hrp: str, data: Sequence[int], encoding: Encoding) -> List[int]:
    values = _hrp_expand(hrp) + list(data)
    polymod = _polymod(values + [0] * CHECKSUM_LEN) ^ encoding.value
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LEN)]


def _verify_checksum(hrp: str, data: Sequence[int]) -> Optional[Encoding]:
    pm = _polymod(_hrp_expand(hrp) + list(data))
    for enc in Encoding:
        if pm == enc.value:
            return enc
    return None


def _check_hrp(hrp: str) -> None:
    if not hrp:
        raise Bech32Error("empty human-readable prefix")
    if any(ord(c) < 33 or ord(c) > 126 for c in hrp):
        raise Bech32Error("invalid character in human-readable prefix")


# ---------------------------------------------------------------------------
# Encode / decode
# ---------------------------------------------------------------------------


def bech32_encode(hrp: str, data: Sequence[int], encoding: Encoding = Encoding.BECH32) -> str:
    """
    Encode HRP + 5-bit data words. No length ceiling is applied; the caller
    decides whether the result is acceptable to its counterpart.
    """
    _check_hrp(hrp)
    if any(d < 0 or d > 31 for d in data):
        raise Bech32Error("data values must be 5-bit (0..31)")
    hrp = hrp.lower()
    combined = list(data) + _create_checksum(hrp, data, encoding)
    return hrp + SEPARATOR + "".join(CHARSET[d] for d in combined)


def bech32_decode(
    bech: str, limit: Optional[int] = STANDARD_MAX_LENGTH
) -> Tuple[str, List[int], Encoding]:
    """
    Decode a bech32/bech32m string into (hrp, data words without checksum,
    encoding). `limit=None` disables the total-length ceiling.
    """
    if len(bech) < MIN_LENGTH:
        raise Bech32Error(f"invalid length {len(bech)}, minimum is {MIN_LENGTH}")
    if limit is not None and len(bech) > limit:
        raise Bech32Error(f"invalid length {len(bech)}, maximum is {limit}")

    if bech.lower() != bech and bech.upper() != bech:
        raise Bech32Error("mixed-case string")
    bech = bech.lower()

    pos = bech.rfind(SEPARATOR)
    if pos < 0:
        raise Bech32Error("missing separator '1'")
    if pos < 1:
        raise Bech32Error("empty human-readable prefix")
    if pos + CHECKSUM_LEN + 1 > len(bech):
        raise Bech32Error("invalid position of separator '1'")

    hrp = bech[:pos]
    _check_hrp(hrp)

    data: List[int] = []
    for c in bech[pos + 1 :]:
        v = CHARSET_REV.get(c)
        if v is None:
            raise Bech32Error(f"invalid character {c!r} in data part")
        data.append(v)

    enc = _verify_checksum(hrp, data)
    if enc is None:
        raise Bech32Error("checksum does not validate as bech32 or bech32m")
    return hrp, data[:-CHECKSUM_LEN], enc


# ---------------------------------------------------------------------------
# Bit squashing (BIP-0173 "convertbits")
# ---------------------------------------------------------------------------


def convertbits(
    data: Iterable[int], from_bits: int, to_bits: int, pad: bool = True
) -> List[int]:
    """
    General power-of-2 base conversion, e.g. convertbits(raw, 8, 5) to build
    data words and convertbits(words, 5, 8, pad=False) to recover bytes.

    With pad=False the leftover group must be shorter than `from_bits` and
    all zero.
    """
    acc = 0
    bits = 0
    ret: List[int] = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1

    for value in data:
        if value < 0 or (value >> from_bits):
            raise Bech32Error(f"value {value} does not fit in {from_bits} bits")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            ret.append((acc >> bits) & maxv)

    if pad:
        if bits:
            ret.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits:
        raise Bech32Error("incomplete trailing group longer than padding allows")
    elif (acc << (to_bits - bits)) & maxv:
        raise Bech32Error("non-zero padding bits")

    return ret


__all__ = [
    "CHARSET",
    "SEPARATOR",
    "STANDARD_MAX_LENGTH",
    "Encoding",
    "Bech32Error",
    "bech32_encode",
    "bech32_decode",
    "convertbits",
]
