from __future__ import annotations

"""
Prometheus metrics for the fiat token factory.

Counters cover:
- msgs: handled messages by type and result (ok / error code)
- role changes: successful assignments/revocations by role
- blacklist ops: blacklist / unblacklist applications
- send restrictions: transfer-hook decisions (allowed / paused / blacklisted)

plus a gauge mirroring the paused flag. A dedicated registry lets the host
merge or expose it as it likes.
"""


from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

REGISTRY = CollectorRegistry()

# ────────────────────────────────────────────────────────────────────────────────
# Label conventions
#   msg:    message class name, e.g. "MsgUpdatePauser"
#   result: "ok" | error code, e.g. "FTF_UNAUTHORIZED"
#   role:   fiattokenfactory.types.records.Role value
#   op:     "blacklist" | "unblacklist"
# ────────────────────────────────────────────────────────────────────────────────

MSGS = Counter(
    "fiattokenfactory_msgs_total",
    "Messages handled by type and result.",
    labelnames=("msg", "result"),
    registry=REGISTRY,
)

ROLE_CHANGES = Counter(
    "fiattokenfactory_role_changes_total",
    "Successful role assignments or revocations by role.",
    labelnames=("role",),
    registry=REGISTRY,
)

BLACKLIST_OPS = Counter(
    "fiattokenfactory_blacklist_ops_total",
    "Denylist mutations by operation.",
    labelnames=("op",),
    registry=REGISTRY,
)

SEND_RESTRICTIONS = Counter(
    "fiattokenfactory_send_restrictions_total",
    "Transfer-hook decisions by result.",
    labelnames=("result",),
    registry=REGISTRY,
)

PAUSED = Gauge(
    "fiattokenfactory_paused",
    "1 while the module is paused, else 0.",
    registry=REGISTRY,
)


def record_msg(msg: str, result: str = "ok") -> None:
    MSGS.labels(msg=msg, result=result).inc()


def record_role_change(role: str) -> None:
    ROLE_CHANGES.labels(role=role).inc()


def record_blacklist_op(op: str) -> None:
    BLACKLIST_OPS.labels(op=op).inc()


def record_send_restriction(result: str) -> None:
    SEND_RESTRICTIONS.labels(result=result).inc()


def set_paused(paused: bool) -> None:
    PAUSED.set(1 if paused else 0)


def render() -> bytes:
    """Prometheus text exposition of this module's registry."""
    return generate_latest(REGISTRY)


__all__ = [
    "REGISTRY",
    "MSGS",
    "ROLE_CHANGES",
    "BLACKLIST_OPS",
    "SEND_RESTRICTIONS",
    "PAUSED",
    "record_msg",
    "record_role_change",
    "record_blacklist_op",
    "record_send_restriction",
    "set_paused",
    "render",
]
