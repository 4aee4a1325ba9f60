from __future__ import annotations

"""
Genesis import/export.

`GenesisState` mirrors everything the keeper persists. Blacklist entries are
raw address bytes (hex in JSON); every other address is a bech32 string under
any prefix and is canonicalized on import.

    state = GenesisState.load_json("genesis.json")
    init_genesis(keeper, state)
    assert export_genesis(keeper).to_dict() == ...
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from fiattokenfactory import metrics
from fiattokenfactory.address import decode_to_bytes
from fiattokenfactory.config import FiatTokenConfig
from fiattokenfactory.errors import InvalidGenesis, MalformedAddress
from fiattokenfactory.keeper import keys
from fiattokenfactory.keeper.keeper import Keeper
from fiattokenfactory.types.records import (
    Blacklisted,
    Blacklister,
    MasterMinter,
    Minter,
    MinterController,
    MintingDenom,
    Owner,
    Paused,
    Pauser,
    Role,
    encode_record,
    record_to_json,
)

logger = logging.getLogger(__name__)


def _raw(address: str, where: str) -> bytes:
    try:
        return decode_to_bytes(address)[1]
    except MalformedAddress as e:
        raise InvalidGenesis(f"invalid {where} address", details={"address": address, "reason": e.reason}) from e


@dataclass
class GenesisState:
    owner: Optional[str] = None
    master_minter: Optional[str] = None
    pauser: Optional[str] = None
    blacklister: Optional[str] = None
    minter_controllers: List[MinterController] = field(default_factory=list)
    minters: List[Minter] = field(default_factory=list)
    blacklisted: List[bytes] = field(default_factory=list)
    paused: bool = False
    minting_denom: str = FiatTokenConfig.minting_denom

    @classmethod
    def default(cls, config: Optional[FiatTokenConfig] = None) -> "GenesisState":
        return cls(minting_denom=(config or FiatTokenConfig()).minting_denom)

    def validate(self) -> None:
        if not self.minting_denom:
            raise InvalidGenesis("minting denom must be set")

        holders: Dict[bytes, str] = {}

        def claim(address: str, role: Role, *, share: bool = False) -> None:
            raw = _raw(address, role.value)
            held = holders.get(raw)
            if held is not None and not (share and held == role.value):
                raise InvalidGenesis(
                    "address holds more than one role",
                    details={"address": address, "roles": [held, role.value]},
                )
            holders[raw] = role.value

        for role, addr in (
            (Role.OWNER, self.owner),
            (Role.MASTER_MINTER, self.master_minter),
            (Role.PAUSER, self.pauser),
            (Role.BLACKLISTER, self.blacklister),
        ):
            if addr is not None:
                claim(addr, role)

        controlled: Dict[bytes, str] = {}
        for mc in self.minter_controllers:
            claim(mc.controller, Role.MINTER_CONTROLLER)
            minter_raw = _raw(mc.minter, "minter")
            if minter_raw in controlled:
                raise InvalidGenesis(
                    "minter is controlled by more than one controller",
                    details={"minter": mc.minter},
                )
            controlled[minter_raw] = mc.controller
            claim(mc.minter, Role.MINTER)

        minters = set()
        for mn in self.minters:
            # A minter record may share its address with a controller's target.
            claim(mn.address, Role.MINTER, share=True)
            minter_raw = _raw(mn.address, "minter")
            if minter_raw in minters:
                raise InvalidGenesis("duplicate minter", details={"address": mn.address})
            minters.add(minter_raw)
            if mn.allowance < 0:
                raise InvalidGenesis(
                    "minter allowance cannot be negative",
                    details={"address": mn.address, "allowance": mn.allowance},
                )

        seen = set()
        for raw in self.blacklisted:
            if not raw:
                raise InvalidGenesis("empty blacklist entry")
            if raw in seen:
                raise InvalidGenesis("duplicate blacklist entry", details={"address_bz": raw.hex()})
            seen.add(raw)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "master_minter": self.master_minter,
            "pauser": self.pauser,
            "blacklister": self.blacklister,
            "minter_controllers": [record_to_json(mc) for mc in self.minter_controllers],
            "minters": [record_to_json(mn) for mn in self.minters],
            "blacklisted": [record_to_json(Blacklisted(raw))["address_bz"] for raw in self.blacklisted],
            "paused": self.paused,
            "minting_denom": self.minting_denom,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenesisState":
        unknown = set(data) - {f for f in cls.__dataclass_fields__}
        if unknown:
            raise InvalidGenesis("unknown genesis fields", details={"fields": sorted(unknown)})
        try:
            return cls(
                owner=data.get("owner"),
                master_minter=data.get("master_minter"),
                pauser=data.get("pauser"),
                blacklister=data.get("blacklister"),
                minter_controllers=[
                    MinterController(controller=d["controller"], minter=d["minter"])
                    for d in data.get("minter_controllers") or []
                ],
                minters=[
                    Minter(address=d["address"], allowance=int(d["allowance"]))
                    for d in data.get("minters") or []
                ],
                blacklisted=[bytes.fromhex(h) for h in data.get("blacklisted") or []],
                paused=bool(data.get("paused", False)),
                minting_denom=data.get("minting_denom") or FiatTokenConfig.minting_denom,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidGenesis(f"malformed genesis: {e}") from e

    @classmethod
    def load_json(cls, path: str | os.PathLike[str]) -> "GenesisState":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


def init_genesis(keeper: Keeper, state: GenesisState) -> None:
    """Validate `state` and write all of it in one batch."""
    state.validate()
    c = keeper.canonical
    with keeper.store.batch() as b:
        for prefix, cls, addr in (
            (keys.OWNER, Owner, state.owner),
            (keys.MASTER_MINTER, MasterMinter, state.master_minter),
            (keys.PAUSER, Pauser, state.pauser),
            (keys.BLACKLISTER, Blacklister, state.blacklister),
        ):
            if addr is not None:
                b.put(prefix.key(), encode_record(cls(c(addr))))
        for mc in state.minter_controllers:
            rec = MinterController(controller=c(mc.controller), minter=c(mc.minter))
            b.put(keys.MINTER_CONTROLLERS.key(keeper.codec.to_bytes(rec.controller)), encode_record(rec))
        for mn in state.minters:
            rec_m = Minter(address=c(mn.address), allowance=mn.allowance)
            b.put(keys.MINTERS.key(keeper.codec.to_bytes(rec_m.address)), encode_record(rec_m))
        for raw in state.blacklisted:
            b.put(keys.BLACKLISTED.key(raw), encode_record(Blacklisted(address_bz=raw)))
        b.put(keys.PAUSED.key(), encode_record(Paused(state.paused)))
        b.put(keys.MINTING_DENOM.key(), encode_record(MintingDenom(state.minting_denom)))
    metrics.set_paused(state.paused)
    logger.info(
        "genesis initialized",
        extra={
            "owner": state.owner,
            "minters": len(state.minters),
            "blacklisted": len(state.blacklisted),
        },
    )


def export_genesis(keeper: Keeper) -> GenesisState:
    def addr(rec: Any) -> Optional[str]:
        return None if rec is None else rec.address

    return GenesisState(
        owner=addr(keeper.get_owner()),
        master_minter=addr(keeper.get_master_minter()),
        pauser=addr(keeper.get_pauser()),
        blacklister=addr(keeper.get_blacklister()),
        minter_controllers=list(keeper.iter_minter_controllers()),
        minters=list(keeper.iter_minters()),
        blacklisted=[b.address_bz for b in keeper.iter_blacklisted()],
        paused=keeper.is_paused(),
        minting_denom=keeper.get_minting_denom().denom,
    )


__all__ = ["GenesisState", "init_genesis", "export_genesis"]
