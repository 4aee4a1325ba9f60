"""
Store key layout.

Singletons live directly under their role prefix; keyed collections append
the raw (prefix-independent) address bytes:

- OWNER.raw, PENDING_OWNER.raw, MASTER_MINTER.raw, PAUSER.raw,
  BLACKLISTER.raw, PAUSED.raw, MINTING_DENOM.raw  -> record
- MINTER_CONTROLLERS.key(<controller bytes>)      -> MinterController
- MINTERS.key(<minter bytes>)                      -> Minter
- BLACKLISTED.key(<address bytes>)                 -> Blacklisted
"""

from __future__ import annotations

from fiattokenfactory.store.kv import Prefix

OWNER = Prefix(b"ftf/owner")
PENDING_OWNER = Prefix(b"ftf/pending_owner")
MASTER_MINTER = Prefix(b"ftf/master_minter")
PAUSER = Prefix(b"ftf/pauser")
BLACKLISTER = Prefix(b"ftf/blacklister")
PAUSED = Prefix(b"ftf/paused")
MINTING_DENOM = Prefix(b"ftf/minting_denom")

MINTER_CONTROLLERS = Prefix(b"ftf/minter_controllers")
MINTERS = Prefix(b"ftf/minters")
BLACKLISTED = Prefix(b"ftf/blacklisted")
