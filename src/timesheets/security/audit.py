"""Security audit trail for sign-ins and admin changes.

Records go to the ``timesheets.security.audit`` logger as ``key=value`` pairs.
Actors are captured as plain values up front so an event can still be written
after the request's session was rolled back and its ORM objects expired.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from timesheets.db.models import User
from timesheets.logging_config import log_security_audit_event


@dataclass(frozen=True)
class AuditActor:
    user_id: uuid.UUID
    name: str | None = None

    @classmethod
    def of(cls, user: User) -> AuditActor:
        return cls(user_id=user.id, name=user.full_name)

    def as_fields(self) -> dict[str, object]:
        return {"actor_user_id": self.user_id, "actor_name": self.name}


def _audit(
    namespace: str,
    event: str,
    *,
    outcome: str,
    actor: AuditActor | None,
    reason: str | None = None,
    **fields: object,
) -> None:
    payload: dict[str, object] = actor.as_fields() if actor is not None else {}
    payload.update(fields)
    if reason is not None:
        payload["reason"] = reason

    log_security_audit_event(
        audit_event=f"{namespace}.{event}",
        outcome=outcome,
        audit_level=logging.WARNING if outcome == "denied" else logging.INFO,
        **payload,
    )


def audit_auth_denied(
    event: str, reason: str, *, actor: AuditActor | None = None, **fields: object
) -> None:
    _audit("auth", event, outcome="denied", actor=actor, reason=reason, **fields)


def audit_auth_success(event: str, *, actor: AuditActor, **fields: object) -> None:
    _audit("auth", event, outcome="success", actor=actor, **fields)


def audit_admin_denied(event: str, reason: str, *, actor: AuditActor, **fields: object) -> None:
    _audit("admin", event, outcome="denied", actor=actor, reason=reason, **fields)


def audit_admin_success(event: str, *, actor: AuditActor, **fields: object) -> None:
    _audit("admin", event, outcome="success", actor=actor, **fields)
