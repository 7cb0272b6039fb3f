"""Audit trail for writes against clubs and their join requests."""

from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

from fastapi import Request

from club_registry.api.request_id import get_request_id
from club_registry.infra.auth import AuthenticatedUser
from club_registry.obs.logging import get_logger

audit_logger = get_logger("club_registry.audit")


async def log_club_event(
    request: Request,
    user: AuthenticatedUser,
    event: str,
    *,
    club_id: Optional[UUID] = None,
    join_request_id: Optional[UUID] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> None:
    """Record who changed which club, once the write has committed."""
    payload: dict[str, Any] = {
        "event": event,
        "method": request.method,
        "actor_id": str(user.id),
        "actor_role": user.role.value,
        "student_id": user.student_id,
        "is_admin": user.is_admin or None,
        "club_id": str(club_id) if club_id else None,
        "join_request_id": str(join_request_id) if join_request_id else None,
        "correlation_id": get_request_id(request),
    }
    if extra:
        payload.update(extra)
    audit_logger.info("club_event", extra={key: value for key, value in payload.items() if value is not None})
