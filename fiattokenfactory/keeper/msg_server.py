from __future__ import annotations

"""
Message server: one handler per request type, each returning the matching
empty response.

Named handlers (`update_pauser`, `blacklist`, ...) assume the request already
passed `validate_basic()`; `handle(msg)` runs it first and then dispatches by
type. Every handler emits one audit line and bumps the message counter with
either "ok" or the error code; errors always propagate.
"""

import functools
import logging
from typing import Any, Callable, Dict, Type, TypeVar

from fiattokenfactory import metrics
from fiattokenfactory.errors import FiatTokenError
from fiattokenfactory.keeper.keeper import Keeper
from fiattokenfactory.logging import audit_scope
from fiattokenfactory.types import msgs as m

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _audited(fn: F) -> F:
    @functools.wraps(fn)
    def wrapper(self: "MsgServer", msg: m.Msg) -> Any:
        name = type(msg).__name__
        with audit_scope(msg_type=name, signer=msg.from_address):
            try:
                resp = fn(self, msg)
            except FiatTokenError as e:
                metrics.record_msg(name, e.code)
                logger.warning("msg rejected", extra={"action": name, "error": e.to_dict()})
                raise
            metrics.record_msg(name)
            logger.info("msg applied", extra={"action": name})
            return resp

    return wrapper  # type: ignore[return-value]


class MsgServer:
    def __init__(self, keeper: Keeper) -> None:
        self.keeper = keeper
        self._routes: Dict[Type[m.Msg], Callable[[m.Msg], Any]] = {
            m.MsgUpdateOwner: self.update_owner,
            m.MsgAcceptOwner: self.accept_owner,
            m.MsgCancelOwnerTransfer: self.cancel_owner_transfer,
            m.MsgUpdateMasterMinter: self.update_master_minter,
            m.MsgUpdatePauser: self.update_pauser,
            m.MsgUpdateBlacklister: self.update_blacklister,
            m.MsgConfigureMinterController: self.configure_minter_controller,
            m.MsgRemoveMinterController: self.remove_minter_controller,
            m.MsgConfigureMinter: self.configure_minter,
            m.MsgRemoveMinter: self.remove_minter,
            m.MsgMint: self.mint,
            m.MsgBurn: self.burn,
            m.MsgBlacklist: self.blacklist,
            m.MsgUnblacklist: self.unblacklist,
            m.MsgPause: self.pause,
            m.MsgUnpause: self.unpause,
        }

    def handle(self, msg: m.Msg) -> Any:
        """Validate `msg` and route it to its handler."""
        route = self._routes.get(type(msg))
        if route is None:
            raise TypeError(f"unrecognized message type {type(msg).__name__}")
        try:
            msg.validate_basic()
        except FiatTokenError as e:
            metrics.record_msg(type(msg).__name__, e.code)
            logger.warning(
                "msg failed validation",
                extra={"action": type(msg).__name__, "error": e.to_dict()},
            )
            raise
        return route(msg)

    # Ownership

    @_audited
    def update_owner(self, msg: m.MsgUpdateOwner) -> m.MsgUpdateOwnerResponse:
        self.keeper.propose_transfer(msg.from_address, msg.address)
        return m.MsgUpdateOwnerResponse()

    @_audited
    def accept_owner(self, msg: m.MsgAcceptOwner) -> m.MsgAcceptOwnerResponse:
        self.keeper.accept_transfer(msg.from_address)
        return m.MsgAcceptOwnerResponse()

    @_audited
    def cancel_owner_transfer(self, msg: m.MsgCancelOwnerTransfer) -> m.MsgCancelOwnerTransferResponse:
        self.keeper.cancel_transfer(msg.from_address)
        return m.MsgCancelOwnerTransferResponse()

    # Singleton roles

    @_audited
    def update_master_minter(self, msg: m.MsgUpdateMasterMinter) -> m.MsgUpdateMasterMinterResponse:
        self.keeper.update_master_minter(msg.from_address, msg.address)
        return m.MsgUpdateMasterMinterResponse()

    @_audited
    def update_pauser(self, msg: m.MsgUpdatePauser) -> m.MsgUpdatePauserResponse:
        self.keeper.update_pauser(msg.from_address, msg.address)
        return m.MsgUpdatePauserResponse()

    @_audited
    def update_blacklister(self, msg: m.MsgUpdateBlacklister) -> m.MsgUpdateBlacklisterResponse:
        self.keeper.update_blacklister(msg.from_address, msg.address)
        return m.MsgUpdateBlacklisterResponse()

    # Minter controllers & minters

    @_audited
    def configure_minter_controller(
        self, msg: m.MsgConfigureMinterController
    ) -> m.MsgConfigureMinterControllerResponse:
        self.keeper.configure_minter_controller(msg.from_address, msg.controller, msg.minter)
        return m.MsgConfigureMinterControllerResponse()

    @_audited
    def remove_minter_controller(
        self, msg: m.MsgRemoveMinterController
    ) -> m.MsgRemoveMinterControllerResponse:
        self.keeper.remove_minter_controller(msg.from_address, msg.controller)
        return m.MsgRemoveMinterControllerResponse()

    @_audited
    def configure_minter(self, msg: m.MsgConfigureMinter) -> m.MsgConfigureMinterResponse:
        self.keeper.configure_minter(msg.from_address, msg.address, msg.allowance)
        return m.MsgConfigureMinterResponse()

    @_audited
    def remove_minter(self, msg: m.MsgRemoveMinter) -> m.MsgRemoveMinterResponse:
        self.keeper.remove_minter(msg.from_address, msg.address)
        return m.MsgRemoveMinterResponse()

    @_audited
    def mint(self, msg: m.MsgMint) -> m.MsgMintResponse:
        self.keeper.mint(msg.from_address, msg.address, msg.amount)
        return m.MsgMintResponse()

    @_audited
    def burn(self, msg: m.MsgBurn) -> m.MsgBurnResponse:
        self.keeper.burn(msg.from_address, msg.amount)
        return m.MsgBurnResponse()

    # Denylist & pause

    @_audited
    def blacklist(self, msg: m.MsgBlacklist) -> m.MsgBlacklistResponse:
        self.keeper.blacklist(msg.from_address, msg.address)
        return m.MsgBlacklistResponse()

    @_audited
    def unblacklist(self, msg: m.MsgUnblacklist) -> m.MsgUnblacklistResponse:
        self.keeper.unblacklist(msg.from_address, msg.address)
        return m.MsgUnblacklistResponse()

    @_audited
    def pause(self, msg: m.MsgPause) -> m.MsgPauseResponse:
        self.keeper.pause(msg.from_address)
        return m.MsgPauseResponse()

    @_audited
    def unpause(self, msg: m.MsgUnpause) -> m.MsgUnpauseResponse:
        self.keeper.unpause(msg.from_address)
        return m.MsgUnpauseResponse()


__all__ = ["MsgServer"]
