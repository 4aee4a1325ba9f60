"""
Shared fixtures:
- fresh in-memory keeper per test (with a recording fake bank)
- deterministic sample addresses under the local prefix
- a keeper pre-populated with owner, master minter, pauser and blacklister
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

import pytest

from fiattokenfactory.address import encode
from fiattokenfactory.config import FiatTokenConfig
from fiattokenfactory.keeper import Keeper, MsgServer
from fiattokenfactory.store.memory import MemoryKV
from fiattokenfactory.types.records import Coin


def addr(n: int, hrp: str = "noble") -> str:
    """Deterministic 20-byte account address #n."""
    return encode(hrp, bytes([n]) * 20)


class FakeBank:
    """Records bank calls and keeps naive balances per (holder, denom)."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, ...]] = []
        self.balances: Dict[Tuple[str, str], int] = defaultdict(int)
        self.supply: Dict[str, int] = defaultdict(int)

    def mint_coins(self, module: str, coins: Sequence[Coin]) -> None:
        self.calls.append(("mint_coins", module))
        for c in coins:
            self.balances[(module, c.denom)] += c.amount
            self.supply[c.denom] += c.amount

    def burn_coins(self, module: str, coins: Sequence[Coin]) -> None:
        self.calls.append(("burn_coins", module))
        for c in coins:
            self.balances[(module, c.denom)] -= c.amount
            self.supply[c.denom] -= c.amount

    def send_coins_from_module_to_account(self, module: str, address: str, coins: Sequence[Coin]) -> None:
        self.calls.append(("module_to_account", module, address))
        for c in coins:
            self.balances[(module, c.denom)] -= c.amount
            self.balances[(address, c.denom)] += c.amount

    def send_coins_from_account_to_module(self, address: str, module: str, coins: Sequence[Coin]) -> None:
        self.calls.append(("account_to_module", address, module))
        for c in coins:
            self.balances[(address, c.denom)] -= c.amount
            self.balances[(module, c.denom)] += c.amount


OWNER = addr(1)
MASTER_MINTER = addr(2)
PAUSER = addr(3)
BLACKLISTER = addr(4)
CONTROLLER = addr(5)
MINTER = addr(6)
ALICE = addr(7)
BOB = addr(8)
MALLORY = addr(9)


@pytest.fixture
def bank() -> FakeBank:
    return FakeBank()


@pytest.fixture
def keeper(bank: FakeBank) -> Keeper:
    return Keeper(MemoryKV(), bank=bank, config=FiatTokenConfig())


@pytest.fixture
def server(keeper: Keeper) -> MsgServer:
    return MsgServer(keeper)


@pytest.fixture
def staffed(keeper: Keeper) -> Keeper:
    """Keeper with owner, master minter, pauser and blacklister assigned."""
    from fiattokenfactory.types.records import Owner

    keeper.set_owner(Owner(OWNER))
    keeper.update_master_minter(OWNER, MASTER_MINTER)
    keeper.update_pauser(OWNER, PAUSER)
    keeper.update_blacklister(OWNER, BLACKLISTER)
    return keeper


@pytest.fixture
def minting(staffed: Keeper) -> Keeper:
    """Staffed keeper with CONTROLLER → MINTER and a 1000uusdc allowance."""
    staffed.configure_minter_controller(MASTER_MINTER, CONTROLLER, MINTER)
    staffed.configure_minter(CONTROLLER, MINTER, 1000)
    return staffed
