from __future__ import annotations

"""
Transfer hook consulted by the host's bank on every send.

Only transfers that include the minting denom are inspected; anything else
passes untouched.
"""

import logging
from typing import Sequence

from fiattokenfactory import metrics
from fiattokenfactory.errors import Paused, Unauthorized
from fiattokenfactory.keeper.keeper import Keeper
from fiattokenfactory.types.records import Coin

logger = logging.getLogger(__name__)


class SendRestriction:
    def __init__(self, keeper: Keeper) -> None:
        self.keeper = keeper

    def is_blacklisted(self, address: str) -> bool:
        return self.keeper.is_blacklisted(address)

    def is_paused(self) -> bool:
        return self.keeper.is_paused()

    def check(self, sender: str, recipient: str, coins: Sequence[Coin]) -> str:
        """
        Return the (unchanged) recipient when the transfer may proceed.

        Raises Paused while the module is paused and Unauthorized when either
        side is on the denylist.
        """
        denom = self.keeper.get_minting_denom().denom
        if not any(c.denom == denom for c in coins):
            metrics.record_send_restriction("skipped")
            return recipient

        if self.is_paused():
            metrics.record_send_restriction("paused")
            raise Paused("the chain is paused", action="send")

        for side, address in (("sender", sender), ("recipient", recipient)):
            if self.is_blacklisted(address):
                metrics.record_send_restriction("blacklisted")
                logger.warning("transfer blocked", extra={"side": side, "address": address})
                raise Unauthorized(
                    f"{side} address is blacklisted",
                    action="send",
                    details={"address": address},
                )

        metrics.record_send_restriction("allowed")
        return recipient

    __call__ = check


__all__ = ["SendRestriction"]
