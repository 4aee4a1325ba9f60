"""
Types for the fiat token factory: persisted records, the ownership state
machine and the request/response messages.
"""

from __future__ import annotations

from .ownership import NoOwner, Owned, OwnershipState, TransferPending
from .records import (
    Blacklisted,
    Blacklister,
    Coin,
    MasterMinter,
    Minter,
    MinterController,
    MintingDenom,
    Owner,
    Pauser,
    PendingOwner,
    Role,
)

__all__ = [
    "NoOwner",
    "Owned",
    "OwnershipState",
    "TransferPending",
    "Blacklisted",
    "Blacklister",
    "Coin",
    "MasterMinter",
    "Minter",
    "MinterController",
    "MintingDenom",
    "Owner",
    "Pauser",
    "PendingOwner",
    "Role",
]
