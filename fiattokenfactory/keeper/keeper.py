from __future__ import annotations

"""
Keeper: typed access to the module's store plus every privileged transition.

Conventions
-----------
- Role addresses are stored canonically: decoded from whatever prefix they
  arrive under and re-encoded under the local prefix (bech32). Keyed entries
  (controllers, minters, denylist) use the raw payload bytes as key.
- Each transition authorizes the signer, validates its targets, and only then
  writes. Writes touching more than one key go through a single batch.
- A signer string that does not decode cannot match any stored holder, so it
  fails authorization rather than address validation. Target addresses are
  validated strictly and fail with `MalformedAddress`.
- The host serializes calls; the keeper holds no locks of its own.
"""

import logging
from typing import Callable, Iterator, List, Optional, Tuple, Type, TypeVar

from fiattokenfactory import metrics
from fiattokenfactory.address import AddressCodec
from fiattokenfactory.config import FiatTokenConfig
from fiattokenfactory.errors import (
    AlreadyPrivileged,
    BurnError,
    InvalidAllowance,
    MalformedAddress,
    MintError,
    Paused as PausedError,
    Unauthorized,
    UserNotFound,
)
from fiattokenfactory.keeper import keys
from fiattokenfactory.keeper.bank import BankKeeper
from fiattokenfactory.store import open_store
from fiattokenfactory.store.kv import KV, Prefix
from fiattokenfactory.types import ownership
from fiattokenfactory.types.ownership import NoOwner, Owned, OwnershipState, TransferPending
from fiattokenfactory.types.records import (
    Blacklisted,
    Blacklister,
    Coin,
    MasterMinter,
    Minter,
    MinterController,
    MintingDenom,
    Owner,
    Paused,
    Pauser,
    PendingOwner,
    Role,
    decode_record,
    encode_record,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Singleton roles the owner assigns directly.
_SINGLETON_ROLES = {
    Role.MASTER_MINTER: (keys.MASTER_MINTER, MasterMinter),
    Role.PAUSER: (keys.PAUSER, Pauser),
    Role.BLACKLISTER: (keys.BLACKLISTER, Blacklister),
}


class Keeper:
    def __init__(
        self,
        store: KV,
        codec: Optional[AddressCodec] = None,
        bank: Optional[BankKeeper] = None,
        config: Optional[FiatTokenConfig] = None,
    ) -> None:
        self.config = config or FiatTokenConfig()
        self.store = store
        self.codec = codec or AddressCodec(self.config.hrp, self.config.address_limit)
        self.bank = bank

    @classmethod
    def from_config(cls, config: FiatTokenConfig, bank: Optional[BankKeeper] = None) -> "Keeper":
        """Keeper over the store named by `config.store_uri`."""
        config.validate()
        return cls(open_store(config.store_uri), bank=bank, config=config)

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def canonical(self, address: str) -> str:
        """Local-prefix form of `address`; raises MalformedAddress."""
        return self.codec.canonicalize(address)

    def _signer(self, caller: str) -> str:
        try:
            return self.canonical(caller)
        except MalformedAddress:
            return caller

    def _address_key(self, prefix: Prefix, address: str) -> bytes:
        return prefix.key(self.codec.to_bytes(address))

    # ------------------------------------------------------------------
    # Raw record access
    # ------------------------------------------------------------------

    def _get(self, key: bytes, cls: Type[R]) -> Optional[R]:
        data = self.store.get(key)
        return None if data is None else decode_record(cls, data)

    def _iter(self, prefix: Prefix, cls: Type[R]) -> Iterator[R]:
        for _k, v in self.store.iter_prefix(prefix.raw):
            yield decode_record(cls, v)

    # Owner / pending owner

    def get_owner(self) -> Optional[Owner]:
        return self._get(keys.OWNER.key(), Owner)

    def set_owner(self, owner: Owner) -> None:
        self.store.put(keys.OWNER.key(), encode_record(Owner(self.canonical(owner.address))))

    def get_pending_owner(self) -> Optional[PendingOwner]:
        return self._get(keys.PENDING_OWNER.key(), PendingOwner)

    def set_pending_owner(self, pending: PendingOwner) -> None:
        self.store.put(
            keys.PENDING_OWNER.key(), encode_record(PendingOwner(self.canonical(pending.address)))
        )

    def delete_pending_owner(self) -> None:
        self.store.delete(keys.PENDING_OWNER.key())

    # Singleton roles

    def get_master_minter(self) -> Optional[MasterMinter]:
        return self._get(keys.MASTER_MINTER.key(), MasterMinter)

    def set_master_minter(self, rec: MasterMinter) -> None:
        self.store.put(keys.MASTER_MINTER.key(), encode_record(MasterMinter(self.canonical(rec.address))))

    def get_pauser(self) -> Optional[Pauser]:
        return self._get(keys.PAUSER.key(), Pauser)

    def set_pauser(self, rec: Pauser) -> None:
        self.store.put(keys.PAUSER.key(), encode_record(Pauser(self.canonical(rec.address))))

    def get_blacklister(self) -> Optional[Blacklister]:
        return self._get(keys.BLACKLISTER.key(), Blacklister)

    def set_blacklister(self, rec: Blacklister) -> None:
        self.store.put(keys.BLACKLISTER.key(), encode_record(Blacklister(self.canonical(rec.address))))

    # Minter controllers

    def get_minter_controller(self, controller: str) -> Optional[MinterController]:
        return self._get(self._address_key(keys.MINTER_CONTROLLERS, controller), MinterController)

    def set_minter_controller(self, rec: MinterController) -> None:
        canon = MinterController(self.canonical(rec.controller), self.canonical(rec.minter))
        self.store.put(self._address_key(keys.MINTER_CONTROLLERS, canon.controller), encode_record(canon))

    def delete_minter_controller(self, controller: str) -> None:
        self.store.delete(self._address_key(keys.MINTER_CONTROLLERS, controller))

    def iter_minter_controllers(self) -> Iterator[MinterController]:
        return self._iter(keys.MINTER_CONTROLLERS, MinterController)

    def controller_of(self, minter: str) -> Optional[MinterController]:
        target = self.canonical(minter)
        for mc in self.iter_minter_controllers():
            if mc.minter == target:
                return mc
        return None

    # Minters

    def get_minter(self, address: str) -> Optional[Minter]:
        return self._get(self._address_key(keys.MINTERS, address), Minter)

    def set_minter(self, rec: Minter) -> None:
        canon = Minter(self.canonical(rec.address), int(rec.allowance))
        self.store.put(self._address_key(keys.MINTERS, canon.address), encode_record(canon))

    def delete_minter(self, address: str) -> None:
        self.store.delete(self._address_key(keys.MINTERS, address))

    def iter_minters(self) -> Iterator[Minter]:
        return self._iter(keys.MINTERS, Minter)

    # Denylist

    def get_blacklisted(self, address_bz: bytes) -> Optional[Blacklisted]:
        return self._get(keys.BLACKLISTED.key(address_bz), Blacklisted)

    def set_blacklisted(self, rec: Blacklisted) -> None:
        self.store.put(keys.BLACKLISTED.key(rec.address_bz), encode_record(rec))

    def delete_blacklisted(self, address_bz: bytes) -> None:
        self.store.delete(keys.BLACKLISTED.key(address_bz))

    def iter_blacklisted(self) -> Iterator[Blacklisted]:
        return self._iter(keys.BLACKLISTED, Blacklisted)

    # Pause flag & denom

    def get_paused(self) -> Paused:
        return self._get(keys.PAUSED.key(), Paused) or Paused(False)

    def set_paused(self, rec: Paused) -> None:
        self.store.put(keys.PAUSED.key(), encode_record(rec))
        metrics.set_paused(rec.paused)

    def get_minting_denom(self) -> MintingDenom:
        return self._get(keys.MINTING_DENOM.key(), MintingDenom) or MintingDenom(self.config.minting_denom)

    def set_minting_denom(self, rec: MintingDenom) -> None:
        self.store.put(keys.MINTING_DENOM.key(), encode_record(rec))

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def ownership_state(self) -> OwnershipState:
        owner = self.get_owner()
        if owner is None:
            return NoOwner()
        pending = self.get_pending_owner()
        if pending is None:
            return Owned(owner.address)
        return TransferPending(owner.address, pending.address)

    def privileged_role(self, address: str) -> Optional[Role]:
        """The role `address` currently holds, if any."""
        addr = self.canonical(address)
        singletons: List[Tuple[Role, Optional[object]]] = [
            (Role.OWNER, self.get_owner()),
            (Role.PENDING_OWNER, self.get_pending_owner()),
            (Role.MASTER_MINTER, self.get_master_minter()),
            (Role.PAUSER, self.get_pauser()),
            (Role.BLACKLISTER, self.get_blacklister()),
        ]
        for role, rec in singletons:
            if rec is not None and getattr(rec, "address") == addr:
                return role
        if self.get_minter_controller(addr) is not None:
            return Role.MINTER_CONTROLLER
        if self.get_minter(addr) is not None or self.controller_of(addr) is not None:
            return Role.MINTER
        return None

    def is_privileged(self, address: str) -> bool:
        return self.privileged_role(address) is not None

    def require_unprivileged(self, address: str, *, allow: Tuple[Role, ...] = ()) -> str:
        """Canonical `address`, or AlreadyPrivileged if it holds a role outside `allow`."""
        addr = self.canonical(address)
        role = self.privileged_role(addr)
        if role is not None and role not in allow:
            raise AlreadyPrivileged(address=addr, held_role=role.value)
        return addr

    def is_blacklisted(self, address: str) -> bool:
        """Pure read; only fails with MalformedAddress."""
        return self.store.has(self._address_key(keys.BLACKLISTED, address))

    def is_paused(self) -> bool:
        return self.get_paused().paused

    def _require_holder(
        self, role: Role, getter: Callable[[], Optional[object]], caller: str, action: str
    ) -> str:
        rec = getter()
        if rec is None:
            raise UserNotFound(f"{role.value.replace('_', ' ')} is not set", role=role.value)
        holder = getattr(rec, "address")
        signer = self._signer(caller)
        if signer != holder:
            raise Unauthorized(
                f"you are not the {role.value.replace('_', ' ')}",
                action=action,
                required_role=role.value,
                caller=caller,
            )
        return signer

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def propose_transfer(self, caller: str, candidate: str) -> TransferPending:
        state = self.ownership_state()
        signer = self._signer(caller)
        ownership.require_owner(state, signer, "update_owner")
        cand = self.require_unprivileged(candidate)
        nxt = ownership.propose(state, signer, cand)
        self.store.put(keys.PENDING_OWNER.key(), encode_record(PendingOwner(cand)))
        logger.info("ownership transfer proposed", extra={"owner": nxt.owner, "candidate": cand})
        metrics.record_role_change(Role.PENDING_OWNER.value)
        return nxt

    def accept_transfer(self, caller: str) -> Owned:
        prev = self.ownership_state()
        nxt = ownership.accept(prev, self._signer(caller))
        with self.store.batch() as b:
            b.put(keys.OWNER.key(), encode_record(Owner(nxt.owner)))
            b.delete(keys.PENDING_OWNER.key())
        logger.info(
            "ownership transferred",
            extra={"previous_owner": getattr(prev, "owner", None), "owner": nxt.owner},
        )
        metrics.record_role_change(Role.OWNER.value)
        return nxt

    def cancel_transfer(self, caller: str) -> Owned:
        nxt = ownership.cancel(self.ownership_state(), self._signer(caller))
        self.store.delete(keys.PENDING_OWNER.key())
        logger.info("ownership transfer cancelled", extra={"owner": nxt.owner})
        metrics.record_role_change(Role.PENDING_OWNER.value)
        return nxt

    # ------------------------------------------------------------------
    # Singleton roles
    # ------------------------------------------------------------------

    def set_role(self, role: Role, caller: str, new_holder: str) -> str:
        """Owner-only assignment of master minter, pauser or blacklister."""
        if role not in _SINGLETON_ROLES:
            raise ValueError(f"{role.value} is not an owner-assigned role")
        prefix, cls = _SINGLETON_ROLES[role]
        ownership.require_owner(self.ownership_state(), self._signer(caller), f"update_{role.value}")
        holder = self.require_unprivileged(new_holder)
        self.store.put(prefix.key(), encode_record(cls(holder)))
        logger.info("role updated", extra={"role": role.value, "holder": holder})
        metrics.record_role_change(role.value)
        return holder

    def update_master_minter(self, caller: str, address: str) -> str:
        return self.set_role(Role.MASTER_MINTER, caller, address)

    def update_pauser(self, caller: str, address: str) -> str:
        return self.set_role(Role.PAUSER, caller, address)

    def update_blacklister(self, caller: str, address: str) -> str:
        return self.set_role(Role.BLACKLISTER, caller, address)

    # ------------------------------------------------------------------
    # Minter controllers & minters
    # ------------------------------------------------------------------

    def configure_minter_controller(self, caller: str, controller: str, minter: str) -> MinterController:
        self._require_holder(
            Role.MASTER_MINTER, self.get_master_minter, caller, "configure_minter_controller"
        )
        ctrl = self.require_unprivileged(controller, allow=(Role.MINTER_CONTROLLER,))
        mnt = self.require_unprivileged(minter, allow=(Role.MINTER,))
        if ctrl == mnt:
            raise AlreadyPrivileged(
                address=ctrl, message="a controller cannot control itself"
            )
        existing = self.controller_of(mnt)
        if existing is not None and existing.controller != ctrl:
            raise AlreadyPrivileged(
                address=mnt,
                held_role=Role.MINTER.value,
                message="minter is already controlled by another controller",
                details={"controller": existing.controller},
            )
        rec = MinterController(controller=ctrl, minter=mnt)
        self.set_minter_controller(rec)
        logger.info("minter controller configured", extra={"controller": ctrl, "minter": mnt})
        metrics.record_role_change(Role.MINTER_CONTROLLER.value)
        return rec

    def remove_minter_controller(self, caller: str, controller: str) -> bool:
        """Returns False when there was no mapping to remove."""
        signer = self._signer(caller)
        mm = self.get_master_minter()
        if signer != self._signer(controller) and (mm is None or signer != mm.address):
            raise Unauthorized(
                "you are not the master minter or the controller",
                action="remove_minter_controller",
                required_role=Role.MASTER_MINTER.value,
                caller=caller,
            )
        ctrl = self.canonical(controller)
        if self.get_minter_controller(ctrl) is None:
            logger.debug("minter controller not present", extra={"controller": ctrl})
            return False
        self.delete_minter_controller(ctrl)
        logger.info("minter controller removed", extra={"controller": ctrl, "by": signer})
        metrics.record_role_change(Role.MINTER_CONTROLLER.value)
        return True

    def _controlled_minter(self, caller: str, minter: str, action: str) -> str:
        signer = self._signer(caller)
        try:
            mc = self.get_minter_controller(signer)
        except MalformedAddress:
            mc = None
        if mc is None:
            raise Unauthorized(
                "you are not a controller",
                action=action,
                required_role=Role.MINTER_CONTROLLER.value,
                caller=caller,
            )
        target = self.canonical(minter)
        if mc.minter != target:
            raise Unauthorized(
                "minter address is not controlled by you",
                action=action,
                required_role=Role.MINTER_CONTROLLER.value,
                caller=caller,
                details={"minter": target, "controlled": mc.minter},
            )
        return target

    def configure_minter(self, caller: str, minter: str, allowance: int) -> Minter:
        if self.is_paused():
            raise PausedError("minting is paused", action="configure_minter")
        target = self._controlled_minter(caller, minter, "configure_minter")
        if allowance < 0:
            raise InvalidAllowance(allowance)
        rec = Minter(address=target, allowance=int(allowance))
        self.set_minter(rec)
        logger.info("minter configured", extra={"minter": target, "allowance": rec.allowance})
        metrics.record_role_change(Role.MINTER.value)
        return rec

    def remove_minter(self, caller: str, minter: str) -> None:
        target = self._controlled_minter(caller, minter, "remove_minter")
        if self.get_minter(target) is None:
            raise UserNotFound("a minter with a given address doesn't exist", role=Role.MINTER.value)
        self.delete_minter(target)
        logger.info("minter removed", extra={"minter": target})
        metrics.record_role_change(Role.MINTER.value)

    def _require_minter(self, caller: str, action: str) -> Minter:
        signer = self._signer(caller)
        try:
            m = self.get_minter(signer)
        except MalformedAddress:
            m = None
        if m is None:
            raise Unauthorized(
                "you are not a minter", action=action, required_role=Role.MINTER.value, caller=caller
            )
        if self.is_blacklisted(signer):
            raise Unauthorized("minter address is blacklisted", action=action, caller=caller)
        return m

    def _require_bank(self) -> BankKeeper:
        if self.bank is None:
            raise RuntimeError("no bank keeper configured; mint and burn are unavailable")
        return self.bank

    def mint(self, caller: str, recipient: str, coin: Coin) -> Minter:
        if self.is_paused():
            raise PausedError("minting is paused", action="mint")
        minter = self._require_minter(caller, "mint")
        to = self.canonical(recipient)
        if self.is_blacklisted(to):
            raise Unauthorized("receiver address is blacklisted", action="mint", details={"receiver": to})
        denom = self.get_minting_denom().denom
        if coin.denom != denom:
            raise MintError("minting denom is incorrect", details={"expected": denom, "got": coin.denom})
        if coin.amount <= 0:
            raise MintError("mint amount must be positive", details={"amount": coin.amount})
        if coin.amount > minter.allowance:
            raise MintError(
                "minting amount is greater than the allowance",
                details={"amount": coin.amount, "allowance": minter.allowance},
            )
        bank = self._require_bank()
        bank.mint_coins(self.config.module_account, [coin])
        bank.send_coins_from_module_to_account(self.config.module_account, to, [coin])
        rec = Minter(minter.address, minter.allowance - coin.amount)
        self.set_minter(rec)
        logger.info("minted", extra={"minter": minter.address, "to": to, "amount": str(coin)})
        return rec

    def burn(self, caller: str, coin: Coin) -> None:
        if self.is_paused():
            raise PausedError("burning is paused", action="burn")
        minter = self._require_minter(caller, "burn")
        denom = self.get_minting_denom().denom
        if coin.denom != denom:
            raise BurnError("burning denom is incorrect", details={"expected": denom, "got": coin.denom})
        if coin.amount <= 0:
            raise BurnError("burn amount must be positive", details={"amount": coin.amount})
        bank = self._require_bank()
        bank.send_coins_from_account_to_module(minter.address, self.config.module_account, [coin])
        bank.burn_coins(self.config.module_account, [coin])
        logger.info("burned", extra={"minter": minter.address, "amount": str(coin)})

    # ------------------------------------------------------------------
    # Denylist
    # ------------------------------------------------------------------

    def blacklist(self, caller: str, address: str) -> bool:
        """Returns False when the address was already blacklisted."""
        self._require_holder(Role.BLACKLISTER, self.get_blacklister, caller, "blacklist")
        raw = self.codec.to_bytes(address)
        if self.store.has(keys.BLACKLISTED.key(raw)):
            logger.debug("address already blacklisted", extra={"address": address})
            return False
        self.set_blacklisted(Blacklisted(address_bz=raw))
        logger.info("blacklisted", extra={"address": address, "address_bz": raw})
        metrics.record_blacklist_op("blacklist")
        return True

    def unblacklist(self, caller: str, address: str) -> bool:
        """Returns False when the address was not blacklisted."""
        self._require_holder(Role.BLACKLISTER, self.get_blacklister, caller, "unblacklist")
        raw = self.codec.to_bytes(address)
        if not self.store.has(keys.BLACKLISTED.key(raw)):
            logger.debug("address not blacklisted", extra={"address": address})
            return False
        self.delete_blacklisted(raw)
        logger.info("unblacklisted", extra={"address": address, "address_bz": raw})
        metrics.record_blacklist_op("unblacklist")
        return True

    # ------------------------------------------------------------------
    # Pause
    # ------------------------------------------------------------------

    def pause(self, caller: str) -> None:
        self._require_holder(Role.PAUSER, self.get_pauser, caller, "pause")
        self.set_paused(Paused(True))
        logger.info("paused")

    def unpause(self, caller: str) -> None:
        self._require_holder(Role.PAUSER, self.get_pauser, caller, "unpause")
        self.set_paused(Paused(False))
        logger.info("unpaused")


__all__ = ["Keeper"]
