"""
fiattokenfactory.logging
------------------------

Structured logging for the module:
- JSON or concise text formats
- Context-local fields via `contextvars` (height, tx, msg_type, signer)
- `extra={...}` fields rendered inline (text) or merged (JSON)

Usage
-----
    from fiattokenfactory import logging as flog

    flog.configure(json=False, level="INFO")   # once, by the host
    log = flog.get_logger(__name__)

    with flog.audit_scope(height=120, tx="ab12"):
        log.info("blacklisted", extra={"address": "noble1..."})

The host owns handler setup; library modules only call
`logging.getLogger(__name__)`. Stdlib only.
"""

from __future__ import annotations

import datetime as _dt
import json as _json
import logging
import os
import sys
import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional, TextIO

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_FTF_LOG_CONTEXT", default={})

CONTEXT_KEYS = ("height", "tx", "msg_type", "signer")

# LogRecord attributes that are never treated as structured extras.
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def context() -> Dict[str, Any]:
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


@contextmanager
def audit_scope(**fields: Any) -> Iterator[None]:
    """Bind fields for the duration of one request; restores prior context."""
    token = _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **{k: _coerce(v) for k, v in fields.items()}})
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _coerce(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).hex()
    if isinstance(v, (list, tuple)):
        return [_coerce(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _coerce(x) for k, x in v.items()}
    return str(v)


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce(v)
        for k, v in record.__dict__.items()
        if k not in _RESERVED and not k.startswith("_")
    }


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in context().items():
            payload.setdefault(k, v)
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return _json.dumps(payload, separators=(",", ":"), default=str)


class TextFormatter(logging.Formatter):
    """
    One line per record:
      2026-01-05T12:34:56.789+00:00 | INFO  | fiattokenfactory.keeper | height=12 signer=noble1.. | blacklisted address=noble1..
    """

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        ctx_str = " ".join(f"{k}={ctx[k]}" for k in CONTEXT_KEYS if ctx.get(k) is not None)
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items() if k not in ctx)

        line = f"{_utcnow_iso()} | {record.levelname:<5} | {record.name}"
        if ctx_str:
            line += f" | {ctx_str}"
        line += f" | {record.getMessage()}"
        if extras:
            line += f" {extras}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


def _decide_json(json_flag: Optional[bool], stream: TextIO) -> bool:
    if json_flag is not None:
        return json_flag
    env = os.environ.get("FTF_LOG_FORMAT", "").strip().lower()
    if env in ("json", "text"):
        return env == "json"
    try:
        return not stream.isatty()
    except Exception:
        return True


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: TextIO = sys.stderr,
    logger_name: str = "fiattokenfactory",
) -> logging.Logger:
    """
    Install a single console handler on the module's logger tree.

    json=None picks JSON for non-TTY streams (services) and text otherwise,
    unless FTF_LOG_FORMAT says so explicitly.
    """
    log = logging.getLogger(logger_name)
    log.setLevel(level if isinstance(level, int) else level.upper())
    for h in list(log.handlers):
        log.removeHandler(h)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter() if _decide_json(json, stream) else TextFormatter())
    log.addHandler(handler)
    log.propagate = False
    return log


def configure_from_config(cfg: Any, stream: TextIO = sys.stderr) -> logging.Logger:
    """Configure from a `FiatTokenConfig` (log_level, log_format)."""
    fmt = getattr(cfg, "log_format", None)
    return configure(
        json=None if fmt is None else fmt == "json",
        level=getattr(cfg, "log_level", "INFO"),
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "fiattokenfactory")


__all__ = [
    "context",
    "bind",
    "unbind",
    "audit_scope",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "configure_from_config",
    "get_logger",
]
