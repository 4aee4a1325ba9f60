from __future__ import annotations

"""
Ownership state machine.

    NoOwner ──genesis──▶ Owned ──propose──▶ TransferPending
                           ▲                    │   │
                           └──────cancel────────┘   │
                    Owned(candidate) ◀──accept──────┘

The state is an explicit tagged union rather than "is there a pending record".
Transitions are pure functions: they validate the caller against the current
state and return the next state, or raise. Persisting the result is the
keeper's job. Privilege checks on the candidate also live in the keeper,
which is the only place that sees every role.
"""

from dataclasses import dataclass
from typing import Union

from fiattokenfactory.errors import NoPendingTransfer, Unauthorized, UserNotFound


@dataclass(frozen=True)
class NoOwner:
    pass


@dataclass(frozen=True)
class Owned:
    owner: str


@dataclass(frozen=True)
class TransferPending:
    owner: str
    candidate: str


OwnershipState = Union[NoOwner, Owned, TransferPending]


def current_owner(state: OwnershipState) -> str:
    if isinstance(state, NoOwner):
        raise UserNotFound("owner is not set", role="owner")
    return state.owner


def require_owner(state: OwnershipState, caller: str, action: str) -> str:
    owner = current_owner(state)
    if caller != owner:
        raise Unauthorized(
            "you are not the owner", action=action, required_role="owner", caller=caller
        )
    return owner


def propose(state: OwnershipState, caller: str, candidate: str) -> TransferPending:
    """Owned|TransferPending → TransferPending; a new proposal replaces an old one."""
    owner = require_owner(state, caller, "update_owner")
    return TransferPending(owner=owner, candidate=candidate)


def accept(state: OwnershipState, caller: str) -> Owned:
    if not isinstance(state, TransferPending):
        raise NoPendingTransfer()
    if caller != state.candidate:
        raise Unauthorized(
            "you are not the pending owner",
            action="accept_owner",
            required_role="pending_owner",
            caller=caller,
        )
    return Owned(owner=state.candidate)


def cancel(state: OwnershipState, caller: str) -> Owned:
    owner = require_owner(state, caller, "cancel_owner_transfer")
    if not isinstance(state, TransferPending):
        raise NoPendingTransfer()
    return Owned(owner=owner)


__all__ = [
    "NoOwner",
    "Owned",
    "TransferPending",
    "OwnershipState",
    "current_owner",
    "require_owner",
    "propose",
    "accept",
    "cancel",
]
