from __future__ import annotations

"""
Request/response messages accepted by the msg server.

Every request carries the signer in `from_address`. `validate_basic()` runs
stateless checks (addresses decode, amounts in range) before any state is
read; it raises `MalformedAddress` or `MintError`/`BurnError`/
`InvalidAllowance`.
"""

from dataclasses import dataclass, fields
from typing import Iterable

from fiattokenfactory.address import decode_to_bytes
from fiattokenfactory.errors import BurnError, InvalidAllowance, MintError
from fiattokenfactory.types.records import Coin


def _check_addresses(*addresses: str) -> None:
    for a in addresses:
        decode_to_bytes(a)


class Msg:
    """Base for request messages; subclasses are frozen dataclasses."""

    from_address: str

    def address_fields(self) -> Iterable[str]:
        return [getattr(self, f.name) for f in fields(self) if f.name.endswith("address")]  # type: ignore[arg-type]

    def validate_basic(self) -> None:
        _check_addresses(*self.address_fields())

    @property
    def type_url(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MsgUpdateOwner(Msg):
    from_address: str
    address: str


@dataclass(frozen=True)
class MsgUpdateOwnerResponse:
    pass


@dataclass(frozen=True)
class MsgAcceptOwner(Msg):
    from_address: str


@dataclass(frozen=True)
class MsgAcceptOwnerResponse:
    pass


@dataclass(frozen=True)
class MsgCancelOwnerTransfer(Msg):
    from_address: str


@dataclass(frozen=True)
class MsgCancelOwnerTransferResponse:
    pass


# ---------------------------------------------------------------------------
# Singleton roles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MsgUpdateMasterMinter(Msg):
    from_address: str
    address: str


@dataclass(frozen=True)
class MsgUpdateMasterMinterResponse:
    pass


@dataclass(frozen=True)
class MsgUpdatePauser(Msg):
    from_address: str
    address: str


@dataclass(frozen=True)
class MsgUpdatePauserResponse:
    pass


@dataclass(frozen=True)
class MsgUpdateBlacklister(Msg):
    from_address: str
    address: str


@dataclass(frozen=True)
class MsgUpdateBlacklisterResponse:
    pass


# ---------------------------------------------------------------------------
# Minter controllers & minters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MsgConfigureMinterController(Msg):
    from_address: str
    controller: str
    minter: str

    def validate_basic(self) -> None:
        _check_addresses(self.from_address, self.controller, self.minter)


@dataclass(frozen=True)
class MsgConfigureMinterControllerResponse:
    pass


@dataclass(frozen=True)
class MsgRemoveMinterController(Msg):
    from_address: str
    controller: str

    def validate_basic(self) -> None:
        _check_addresses(self.from_address, self.controller)


@dataclass(frozen=True)
class MsgRemoveMinterControllerResponse:
    pass


@dataclass(frozen=True)
class MsgConfigureMinter(Msg):
    from_address: str
    address: str
    allowance: int

    def validate_basic(self) -> None:
        super().validate_basic()
        if self.allowance < 0:
            raise InvalidAllowance(self.allowance)


@dataclass(frozen=True)
class MsgConfigureMinterResponse:
    pass


@dataclass(frozen=True)
class MsgRemoveMinter(Msg):
    from_address: str
    address: str


@dataclass(frozen=True)
class MsgRemoveMinterResponse:
    pass


@dataclass(frozen=True)
class MsgMint(Msg):
    from_address: str
    address: str
    amount: Coin

    def validate_basic(self) -> None:
        super().validate_basic()
        if self.amount.amount <= 0:
            raise MintError("mint amount must be positive", details={"amount": str(self.amount)})


@dataclass(frozen=True)
class MsgMintResponse:
    pass


@dataclass(frozen=True)
class MsgBurn(Msg):
    from_address: str
    amount: Coin

    def validate_basic(self) -> None:
        super().validate_basic()
        if self.amount.amount <= 0:
            raise BurnError("burn amount must be positive", details={"amount": str(self.amount)})


@dataclass(frozen=True)
class MsgBurnResponse:
    pass


# ---------------------------------------------------------------------------
# Denylist & pause
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MsgBlacklist(Msg):
    from_address: str
    address: str


@dataclass(frozen=True)
class MsgBlacklistResponse:
    pass


@dataclass(frozen=True)
class MsgUnblacklist(Msg):
    from_address: str
    address: str


@dataclass(frozen=True)
class MsgUnblacklistResponse:
    pass


@dataclass(frozen=True)
class MsgPause(Msg):
    from_address: str


@dataclass(frozen=True)
class MsgPauseResponse:
    pass


@dataclass(frozen=True)
class MsgUnpause(Msg):
    from_address: str


@dataclass(frozen=True)
class MsgUnpauseResponse:
    pass


__all__ = [name for name in list(globals()) if name.startswith("Msg")]
