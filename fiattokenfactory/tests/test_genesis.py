from __future__ import annotations

import json

import pytest

from fiattokenfactory.errors import InvalidGenesis
from fiattokenfactory.keeper import GenesisState, Keeper, export_genesis, init_genesis
from fiattokenfactory.store.memory import MemoryKV
from fiattokenfactory.store.sqlite import SQLiteKV
from fiattokenfactory.types.records import Minter, MinterController, Owner, Pauser

from .conftest import ALICE, BLACKLISTER, BOB, CONTROLLER, MASTER_MINTER, MINTER, OWNER, PAUSER, addr


def _state() -> GenesisState:
    return GenesisState(
        owner=OWNER,
        master_minter=MASTER_MINTER,
        pauser=PAUSER,
        blacklister=BLACKLISTER,
        minter_controllers=[MinterController(CONTROLLER, MINTER)],
        minters=[Minter(MINTER, 1_000_000)],
        blacklisted=[bytes([0xAA]) * 20, bytes([0x01]) * 32],
        paused=True,
        minting_denom="uusdc",
    )


def test_default_is_empty_and_valid():
    st = GenesisState.default()
    st.validate()
    assert st.owner is None and st.minters == [] and st.minting_denom == "uusdc"


def test_init_and_export_round_trip(keeper):
    init_genesis(keeper, _state())

    assert keeper.get_owner() == Owner(OWNER)
    assert keeper.get_pauser() == Pauser(PAUSER)
    assert keeper.is_paused()
    assert keeper.is_blacklisted(addr(0xAA))

    exported = export_genesis(keeper)
    # Denylist keys are length-prefixed, so the 20-byte entry sorts first.
    assert exported == _state()


def test_foreign_prefixes_are_canonicalized(keeper):
    st = GenesisState(owner=addr(1, hrp="cosmos"), minters=[Minter(addr(6, hrp="osmo"), 5)])
    init_genesis(keeper, st)
    out = export_genesis(keeper)
    assert out.owner == OWNER
    assert out.minters == [Minter(MINTER, 5)]


def test_dict_round_trip_and_json(tmp_path):
    st = _state()
    d = st.to_dict()
    assert d["blacklisted"][0] == "aa" * 20
    assert d["minters"] == [{"address": MINTER, "allowance": 1_000_000}]

    p = tmp_path / "genesis.json"
    p.write_text(json.dumps(d), encoding="utf-8")
    assert GenesisState.load_json(p) == st


def test_from_dict_rejects_unknown_fields():
    with pytest.raises(InvalidGenesis, match="unknown"):
        GenesisState.from_dict({"owner": OWNER, "admins": []})
    with pytest.raises(InvalidGenesis):
        GenesisState.from_dict({"blacklisted": ["zz"]})


@pytest.mark.parametrize(
    "mutate",
    [
        lambda s: setattr(s, "owner", "noble1bogus"),
        lambda s: setattr(s, "pauser", OWNER),
        lambda s: setattr(s, "minting_denom", ""),
        lambda s: s.minter_controllers.append(MinterController(CONTROLLER, ALICE)),
        lambda s: s.minter_controllers.append(MinterController(BOB, MINTER)),
        lambda s: s.minter_controllers.append(MinterController(ALICE, OWNER)),
        lambda s: s.minter_controllers.append(MinterController(ALICE, CONTROLLER)),
        lambda s: s.minters.append(Minter(ALICE, -1)),
        lambda s: s.blacklisted.append(bytes([0xAA]) * 20),
    ],
    ids=[
        "bad-address",
        "shared-role",
        "no-denom",
        "duplicate-controller",
        "minter-two-controllers",
        "controller-target-is-owner",
        "controller-target-is-controller",
        "negative-allowance",
        "duplicate-blacklist",
    ],
)
def test_validate_rejects(mutate, keeper):
    st = _state()
    mutate(st)
    with pytest.raises(InvalidGenesis):
        st.validate()
    with pytest.raises(InvalidGenesis):
        init_genesis(keeper, st)
    # Nothing written on failure.
    assert keeper.get_owner() is None


def test_sqlite_backend_matches_memory(tmp_path):
    mem = Keeper(MemoryKV())
    sql = Keeper(SQLiteKV(tmp_path / "ftf.db"))
    for k in (mem, sql):
        init_genesis(k, _state())
    assert export_genesis(mem) == export_genesis(sql)
