from __future__ import annotations
"""
fiattokenfactory.config: module configuration

Covers:
- Local bech32 prefix used for canonical role/display addresses
- The controlled (minting) denom and the module account name
- Optional decode length ceiling (None = no ceiling, the default)
- Store URI and logging options

Environment overrides (all optional):

  FTF_HRP=noble
  FTF_MINTING_DENOM=uusdc
  FTF_MODULE_ACCOUNT=fiattokenfactory
  FTF_ADDRESS_LIMIT=            # empty / unset = no ceiling
  FTF_STORE_URI=memory://
  FTF_LOG_LEVEL=INFO
  FTF_LOG_FORMAT=json|text

A JSON or YAML file can be given via `FTF_CONFIG_FILE=/path/to/ftf.(json|yaml|yml)`.
File values override defaults; environment overrides the file.
"""


from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional
import json
import os
import re
from pathlib import Path

import yaml


_HRP_RE = re.compile(r"^[\x21-\x7e]+$")


@dataclass
class FiatTokenConfig:
    hrp: str = "noble"
    minting_denom: str = "uusdc"
    module_account: str = "fiattokenfactory"
    address_limit: Optional[int] = None
    store_uri: str = "memory://"
    log_level: str = "INFO"
    log_format: Optional[str] = None  # "json" | "text" | None (auto)

    def validate(self) -> None:
        if not self.hrp or not _HRP_RE.match(self.hrp) or self.hrp != self.hrp.lower():
            raise ValueError(f"hrp must be non-empty lowercase printable ASCII (got {self.hrp!r}).")
        if not self.minting_denom:
            raise ValueError("minting_denom must be non-empty.")
        if not self.module_account:
            raise ValueError("module_account must be non-empty.")
        if self.address_limit is not None and self.address_limit < 8:
            raise ValueError(f"address_limit must be >= 8 or unset (got {self.address_limit}).")
        if self.log_format not in (None, "json", "text"):
            raise ValueError(f"log_format must be 'json' or 'text' (got {self.log_format!r}).")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# -------------------------- Loaders --------------------------


def _getenv_opt_int(name: str, default: Optional[int]) -> Optional[int]:
    v = os.getenv(name)
    if v is None:
        return default
    if v.strip() == "":
        return None
    try:
        return int(v.replace("_", ""))
    except ValueError as e:
        raise ValueError(f"Invalid int for {name}: {v!r}") from e


def from_env(base: Optional[FiatTokenConfig] = None, prefix: str = "FTF_") -> FiatTokenConfig:
    """Layer FTF_* environment variables on top of `base` (or defaults)."""
    cfg = base or FiatTokenConfig()
    fmt = os.getenv(f"{prefix}LOG_FORMAT")
    new_cfg = replace(
        cfg,
        hrp=os.getenv(f"{prefix}HRP", cfg.hrp),
        minting_denom=os.getenv(f"{prefix}MINTING_DENOM", cfg.minting_denom),
        module_account=os.getenv(f"{prefix}MODULE_ACCOUNT", cfg.module_account),
        address_limit=_getenv_opt_int(f"{prefix}ADDRESS_LIMIT", cfg.address_limit),
        store_uri=os.getenv(f"{prefix}STORE_URI", cfg.store_uri),
        log_level=os.getenv(f"{prefix}LOG_LEVEL", cfg.log_level).upper(),
        log_format=fmt.strip().lower() if fmt else cfg.log_format,
    )
    new_cfg.validate()
    return new_cfg


def from_file(path: str | os.PathLike[str]) -> FiatTokenConfig:
    """Load configuration from a JSON or YAML file; unknown keys are rejected."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, dict):
        raise ValueError(f"{p}: top-level config must be a mapping")

    known = set(FiatTokenConfig().to_dict())
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"{p}: unknown config keys {sorted(unknown)}")

    cfg = FiatTokenConfig(**data)
    cfg.validate()
    return cfg


def load() -> FiatTokenConfig:
    """
    Precedence:
      1) File at $FTF_CONFIG_FILE (JSON/YAML)
      2) FTF_* environment variables, applied on top
    """
    file_path = os.getenv("FTF_CONFIG_FILE")
    base = from_file(file_path) if file_path else FiatTokenConfig()
    return from_env(base=base)


def pretty(cfg: Optional[FiatTokenConfig] = None) -> str:
    return json.dumps((cfg or load()).to_dict(), indent=2, sort_keys=True)


__all__ = ["FiatTokenConfig", "from_env", "from_file", "load", "pretty"]
