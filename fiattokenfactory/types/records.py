from __future__ import annotations

"""
Persisted records of the fiat token factory.

Each record is a small frozen dataclass stored as a canonical CBOR map of its
fields. Singleton roles hold one address; controller, minter and denylist
entries are keyed by address.
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Type, TypeVar

import cbor2

from fiattokenfactory.errors import FiatTokenError


class Role(str, Enum):
    OWNER = "owner"
    PENDING_OWNER = "pending_owner"
    MASTER_MINTER = "master_minter"
    PAUSER = "pauser"
    BLACKLISTER = "blacklister"
    MINTER_CONTROLLER = "minter_controller"
    MINTER = "minter"


@dataclass(frozen=True)
class Owner:
    address: str


@dataclass(frozen=True)
class PendingOwner:
    address: str


@dataclass(frozen=True)
class MasterMinter:
    address: str


@dataclass(frozen=True)
class Pauser:
    address: str


@dataclass(frozen=True)
class Blacklister:
    address: str


@dataclass(frozen=True)
class MinterController:
    controller: str
    minter: str


@dataclass(frozen=True)
class Minter:
    address: str
    allowance: int


@dataclass(frozen=True)
class Blacklisted:
    address_bz: bytes


@dataclass(frozen=True)
class Paused:
    paused: bool


@dataclass(frozen=True)
class MintingDenom:
    denom: str


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


R = TypeVar("R")


class RecordDecodeError(FiatTokenError):
    code = "FTF_RECORD_DECODE"


def encode_record(record: Any) -> bytes:
    return cbor2.dumps(asdict(record), canonical=True)


def decode_record(cls: Type[R], data: bytes) -> R:
    try:
        obj = cbor2.loads(data)
    except Exception as e:
        raise RecordDecodeError(f"cannot decode {cls.__name__} record") from e
    if not isinstance(obj, dict):
        raise RecordDecodeError(f"{cls.__name__} record is not a map")
    names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    if set(obj) != names:
        raise RecordDecodeError(
            f"{cls.__name__} record fields mismatch",
            details={"expected": sorted(names), "got": sorted(map(str, obj))},
        )
    return cls(**obj)  # type: ignore[call-arg]


def record_to_json(record: Any) -> Dict[str, Any]:
    d = asdict(record)
    return {k: (v.hex() if isinstance(v, bytes) else v) for k, v in d.items()}


__all__ = [
    "Role",
    "Owner",
    "PendingOwner",
    "MasterMinter",
    "Pauser",
    "Blacklister",
    "MinterController",
    "Minter",
    "Blacklisted",
    "Paused",
    "MintingDenom",
    "Coin",
    "RecordDecodeError",
    "encode_record",
    "decode_record",
    "record_to_json",
]
