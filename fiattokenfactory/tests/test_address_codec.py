"""
Cross-chain address codec.

Vectors are real addresses from counterpart chains together with the same
payload under the local prefix; decoding must never apply the 90-character
ceiling.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fiattokenfactory.address import (
    STANDARD_MAX_LENGTH,
    AddressCodec,
    Encoding,
    bech32_decode,
    bech32_encode,
    decode,
    decode_to_bytes,
    encode,
)
from fiattokenfactory.errors import MalformedAddress

PENUMBRA_NOBLE = (
    "noble1ld2kghffzgwq4597ejpgmnwxa7ju0cndytuxtsjh8qhjyfuwq0rwd5flnw4a3fgclw7m5puh50nskn2c88flhne2hzchnpxru609d5wgmqqvhdf0sy2tktqfcm2p2tmxq2k7my"
)

VECTORS = [
    # (name, foreign, prefix, bech32m, local)
    (
        "cosmos",
        "cosmos1hjz2rjqfn7yhaawqgfk6j6hv5dtf9nau70fusm",
        "cosmos",
        False,
        "noble1hjz2rjqfn7yhaawqgfk6j6hv5dtf9naukvu5g4",
    ),
    (
        "osmosis",
        "osmo1fl48vsnmsdzcv85q5d2q4z5ajdha8yu3aq6l09",
        "osmo",
        False,
        "noble1fl48vsnmsdzcv85q5d2q4z5ajdha8yu3acu8pe",
    ),
    (
        "dydx",
        "dydx18vgsfaarveyg7xy585657ak8a9jvut9z8yuzmv",
        "dydx",
        False,
        "noble18vgsfaarveyg7xy585657ak8a9jvut9zx78wr4",
    ),
    (
        "namada",
        "tpknam1qzdjad7ta2246ms4z82dz8zhv2trhw7w4fpnpuj56ekjakwcc3xqwvzr6ak",
        "tpknam",
        True,
        "noble1qzdjad7ta2246ms4z82dz8zhv2trhw7w4fpnpuj56ekjakwcc3xqwmvmf5j",
    ),
    (
        "penumbra",
        "penumbra1ld2kghffzgwq4597ejpgmnwxa7ju0cndytuxtsjh8qhjyfuwq0rwd5flnw4a3fgclw7m5puh50nskn2c88flhne2hzchnpxru609d5wgmqqvhdf0sy2tktqfcm2p2tmxceqwvv",
        "penumbra",
        True,
        PENUMBRA_NOBLE,
    ),
    (
        "penumbra-compat",
        "penumbracompat11ld2kghffzgwq4597ejpgmnwxa7ju0cndytuxtsjh8qhjyfuwq0rwd5flnw4a3fgclw7m5puh50nskn2c88flhne2hzchnpxru609d5wgmqqvhdf0sy2tktqfcm2p2tmxeuc86n",
        "penumbracompat1",
        False,
        PENUMBRA_NOBLE,
    ),
]


@pytest.mark.parametrize("name,foreign,prefix,alt,local", VECTORS, ids=[v[0] for v in VECTORS])
def test_vectors_round_trip_through_local_prefix(name, foreign, prefix, alt, local):
    hrp, raw = decode_to_bytes(foreign)
    assert hrp == prefix
    assert encode("noble", raw) == local

    hrp2, raw2 = decode_to_bytes(local)
    assert hrp2 == "noble"
    assert raw2 == raw
    assert encode(prefix, raw2, use_alt_checksum=alt) == foreign


def test_long_address_bypasses_length_ceiling():
    foreign = VECTORS[4][1]
    assert len(foreign) > STANDARD_MAX_LENGTH

    # The reference ceiling still applies when asked for.
    with pytest.raises(ValueError):
        bech32_decode(foreign)

    hrp, data5 = decode(foreign)
    assert hrp == "penumbra"
    assert len(data5) > 0


def test_decode_reports_checksum_variant():
    assert bech32_decode(VECTORS[0][1])[2] is Encoding.BECH32
    assert bech32_decode(VECTORS[3][1], limit=None)[2] is Encoding.BECH32M


def test_uppercase_input_is_accepted():
    hrp, raw = decode_to_bytes(VECTORS[0][1].upper())
    assert hrp == "cosmos"
    assert encode("noble", raw) == VECTORS[0][4]


def _flip_last(s: str) -> str:
    return s[:-1] + ("q" if s[-1] != "q" else "p")


@pytest.mark.parametrize(
    "bad",
    [
        "",  # too short
        "a1qqqqq",  # shorter than 8
        "noblehjz2rjqfn7yhaawqgfk6j6hv5dtf9naukvu5g4",  # no separator
        "1qqqqqqqqqqqq",  # empty prefix
        "noble1qqqqq",  # fewer than 6 checksum chars after the separator
        "noble1hjz2rjqfn7yhaawqgfk6j6hv5dtf9naukvu5gb",  # 'b' outside the alphabet
        _flip_last("noble1hjz2rjqfn7yhaawqgfk6j6hv5dtf9naukvu5g4"),  # checksum
        "Noble1hjz2rjqfn7yhaawqgfk6j6hv5dtf9naukvu5g4",  # mixed case
        " noble1hjz2rjqfn7yhaawqgfk6j6hv5dtf9naukvu5g4",  # space in prefix
    ],
)
def test_malformed_addresses_are_rejected(bad):
    with pytest.raises(MalformedAddress):
        decode_to_bytes(bad)
    assert not AddressCodec().is_valid(bad)


def test_non_zero_padding_is_rejected():
    # One byte needs two 5-bit words; a set bit in the 2-bit tail is padding.
    s = bech32_encode("noble", [0, 1])
    hrp, words = decode(s)
    assert hrp == "noble" and words == [0, 1]
    with pytest.raises(MalformedAddress) as ei:
        decode_to_bytes(s)
    assert "padding" in ei.value.reason


def test_overlong_trailing_group_is_rejected():
    with pytest.raises(MalformedAddress):
        decode_to_bytes(bech32_encode("noble", [0, 0, 0]))


def test_non_string_input():
    with pytest.raises(MalformedAddress):
        decode(b"noble1...")  # type: ignore[arg-type]


@pytest.mark.parametrize("prefix", [5, b"noble", None])
def test_encode_rejects_non_string_prefix(prefix):
    with pytest.raises(MalformedAddress):
        encode(prefix, b"\x01")  # type: ignore[arg-type]


def test_codec_canonicalize_collapses_prefixes():
    codec = AddressCodec("noble")
    assert codec.canonicalize(VECTORS[0][1]) == VECTORS[0][4]
    assert codec.canonicalize(VECTORS[0][4]) == VECTORS[0][4]
    assert codec.to_bytes(VECTORS[0][1]) == codec.to_bytes(VECTORS[0][4])
    assert codec.from_bytes(codec.to_bytes(VECTORS[5][1])) == PENUMBRA_NOBLE


# -- Properties --------------------------------------------------------------

_hrp = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=16)


@given(hrp=_hrp, raw=st.binary(min_size=1, max_size=80), alt=st.booleans())
def test_encode_decode_round_trip(hrp, raw, alt):
    s = encode(hrp, raw, use_alt_checksum=alt)
    assert s == s.lower()
    got_hrp, got_raw = decode_to_bytes(s)
    assert got_hrp == hrp
    assert got_raw == raw
    assert bech32_decode(s, limit=None)[2] is (Encoding.BECH32M if alt else Encoding.BECH32)


@given(raw=st.binary(min_size=1, max_size=64))
def test_prefix_does_not_change_payload(raw):
    a = encode("cosmos", raw)
    b = encode("noble", raw, use_alt_checksum=True)
    assert decode_to_bytes(a)[1] == decode_to_bytes(b)[1] == raw
