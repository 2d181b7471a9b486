# Overview: Service-layer operations for the audit trail.

from __future__ import annotations

from ..models import AuditLog, new_id
from velvessa.time_utils import to_utc_z, utcnow
from .state_service import DomainState

"""
Audit trail invariants

- Append-only: entries are prepended (most recent first), never edited or removed.
- Attributed to the session user; without a session nothing is recorded.
- user_name is copied at write time, renames do not rewrite history.
- No retention policy; the log grows without bound.
"""


def add_log(state: DomainState, action: str, details: str) -> AuditLog | None:
    actor = state.current_user
    if actor is None:
        return None

    entry = AuditLog(
        id=new_id("log"),
        user_id=actor.id,
        user_name=actor.name,
        action=action,
        details=details,
        timestamp=to_utc_z(utcnow()),
    )
    state.replace("audit_logs", lambda prev: [entry, *prev])
    return entry


def logs_for_user(state: DomainState, user_id: str) -> list[AuditLog]:
    return [log for log in state.audit_logs if log.user_id == user_id]
