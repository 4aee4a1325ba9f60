from __future__ import annotations

import pytest

from fiattokenfactory.errors import Paused, Unauthorized, UserNotFound
from fiattokenfactory.keeper import SendRestriction
from fiattokenfactory.metrics import REGISTRY
from fiattokenfactory.types.msgs import MsgPause, MsgUnpause
from fiattokenfactory.types.records import Coin

from .conftest import ALICE, BLACKLISTER, BOB, OWNER, PAUSER

USDC = [Coin("uusdc", 10)]
OTHER = [Coin("uatom", 10)]


def _paused_gauge() -> float:
    return REGISTRY.get_sample_value("fiattokenfactory_paused")


def test_pauser_required(keeper):
    with pytest.raises(UserNotFound, match="pauser is not set"):
        keeper.pause(PAUSER)


def test_pause_unpause(staffed, server):
    with pytest.raises(Unauthorized, match="you are not the pauser"):
        staffed.pause(OWNER)
    assert not staffed.is_paused()

    server.handle(MsgPause(from_address=PAUSER))
    assert staffed.is_paused()
    assert _paused_gauge() == 1.0

    server.handle(MsgUnpause(from_address=PAUSER))
    assert not staffed.is_paused()
    assert _paused_gauge() == 0.0


def test_pause_is_repeatable(staffed):
    staffed.pause(PAUSER)
    staffed.pause(PAUSER)
    assert staffed.is_paused()


def test_restriction_allows_clean_transfer(staffed):
    hook = SendRestriction(staffed)
    assert hook.check(ALICE, BOB, USDC) == BOB
    assert hook(ALICE, BOB, USDC) == BOB


def test_restriction_blocks_while_paused(staffed):
    hook = SendRestriction(staffed)
    staffed.pause(PAUSER)
    assert hook.is_paused()
    with pytest.raises(Paused):
        hook.check(ALICE, BOB, USDC)
    # Other denoms are not this module's business.
    assert hook.check(ALICE, BOB, OTHER) == BOB


@pytest.mark.parametrize("side", ["sender", "recipient"])
def test_restriction_blocks_blacklisted(staffed, side):
    hook = SendRestriction(staffed)
    target = ALICE if side == "sender" else BOB
    staffed.blacklist(BLACKLISTER, target)
    assert hook.is_blacklisted(target)

    with pytest.raises(Unauthorized, match=f"{side} address is blacklisted") as ei:
        hook.check(ALICE, BOB, USDC)
    assert ei.value.details["address"] == target

    assert hook.check(ALICE, BOB, OTHER) == BOB
    with pytest.raises(Unauthorized):
        hook.check(ALICE, BOB, [Coin("uatom", 1), Coin("uusdc", 1)])


def test_restriction_counts_decisions(staffed):
    hook = SendRestriction(staffed)
    before = REGISTRY.get_sample_value(
        "fiattokenfactory_send_restrictions_total", {"result": "allowed"}
    ) or 0.0
    hook.check(ALICE, BOB, USDC)
    after = REGISTRY.get_sample_value("fiattokenfactory_send_restrictions_total", {"result": "allowed"})
    assert after == before + 1
