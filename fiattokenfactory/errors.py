from __future__ import annotations
# fiattokenfactory/errors.py
"""
Error types for the fiat token factory. Every failure a message handler can
hit is one of these; they are serializable and safe to surface in a tx result
or an audit log.

Exports:
- FiatTokenError (base)
- Unauthorized
- UserNotFound
- AlreadyPrivileged
- NoPendingTransfer
- MalformedAddress
- Paused
- MintError / BurnError
- InvalidAllowance
- InvalidGenesis
"""


import json
from typing import Any, Dict, Mapping, Optional


class FiatTokenError(Exception):
    """Base class for fiat token factory errors."""

    code: str = "FTF_ERROR"

    def __init__(self, message: str = "", *, details: Optional[Mapping[str, Any]] = None) -> None:
        self.message = message or self.__class__.__name__
        self.details = dict(details or {})
        super().__init__(self.__str__())

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.details:
            try:
                packed = json.dumps(self.details, sort_keys=True, separators=(",", ":"))
            except Exception:
                packed = str(self.details)
            return f"{self.code}: {self.message} [{packed}]"
        return f"{self.code}: {self.message}"


class Unauthorized(FiatTokenError):
    """The signer does not hold the role the action requires."""
    code = "FTF_UNAUTHORIZED"

    def __init__(
        self,
        message: str = "unauthorized",
        *,
        action: Optional[str] = None,
        required_role: Optional[str] = None,
        caller: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        if action is not None:
            d.setdefault("action", action)
        if required_role is not None:
            d.setdefault("required_role", required_role)
        if caller is not None:
            d.setdefault("caller", caller)
        super().__init__(message, details=d)


class UserNotFound(FiatTokenError):
    """A referenced role holder (owner, pauser, minter, ...) is not set."""
    code = "FTF_USER_NOT_FOUND"

    def __init__(
        self,
        message: str = "user not found",
        *,
        role: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        if role is not None:
            d.setdefault("role", role)
        super().__init__(message, details=d)


class AlreadyPrivileged(FiatTokenError):
    """Target address already holds a role; roles are mutually exclusive."""
    code = "FTF_ALREADY_PRIVILEGED"

    def __init__(
        self,
        *,
        address: str,
        held_role: Optional[str] = None,
        message: str = "this address is already privileged",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["address"] = address
        if held_role is not None:
            d["held_role"] = held_role
        super().__init__(message, details=d)


class NoPendingTransfer(FiatTokenError):
    """Accept/cancel was attempted while no ownership transfer is in flight."""
    code = "FTF_NO_PENDING_TRANSFER"

    def __init__(
        self,
        message: str = "pending owner is not set",
        *,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details)


class MalformedAddress(FiatTokenError):
    """Address decoding failed: bad checksum, bad character, bad separator, ..."""
    code = "FTF_MALFORMED_ADDRESS"

    def __init__(
        self,
        reason: str,
        *,
        address: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["reason"] = reason
        if address is not None:
            d["address"] = address
        super().__init__(f"malformed address: {reason}", details=d)
        self.reason = reason


class Paused(FiatTokenError):
    """The module is paused; minting, burning and transfers are blocked."""
    code = "FTF_PAUSED"

    def __init__(self, message: str = "the chain is paused", *, action: Optional[str] = None) -> None:
        super().__init__(message, details={"action": action} if action else None)


class MintError(FiatTokenError):
    code = "FTF_MINT"


class BurnError(FiatTokenError):
    code = "FTF_BURN"


class InvalidAllowance(FiatTokenError):
    code = "FTF_INVALID_ALLOWANCE"

    def __init__(self, allowance: int, message: str = "allowance cannot be negative") -> None:
        super().__init__(message, details={"allowance": int(allowance)})


class InvalidGenesis(FiatTokenError):
    code = "FTF_INVALID_GENESIS"


__all__ = [
    "FiatTokenError",
    "Unauthorized",
    "UserNotFound",
    "AlreadyPrivileged",
    "NoPendingTransfer",
    "MalformedAddress",
    "Paused",
    "MintError",
    "BurnError",
    "InvalidAllowance",
    "InvalidGenesis",
]
