from __future__ import annotations
"""
fiattokenfactory: permissioned fiat-token control module.

Keeps the privileged roles (owner, pending owner, master minter, pauser,
blacklister, minter controllers, minters) and the denylist of addresses that
may not transact the minting denom, plus the no-limit bech32 codec used to
canonicalize addresses from any chain.

Public surface (lazily loaded):
- address, store, types, keeper
- config, errors, logging, metrics
"""


from typing import List

from .version import __version__

__all__: List[str] = [
    "__version__",
    "address",
    "store",
    "types",
    "keeper",
    "config",
    "errors",
    "logging",
    "metrics",
]

# --- Lazy module loader (PEP 562) -------------------------------------------------
import importlib


_lazy_modules = set(__all__) - {"__version__"}


def __getattr__(name: str):
    if name in _lazy_modules:
        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(set(globals().keys()) | _lazy_modules)


def get_version() -> str:
    return __version__
