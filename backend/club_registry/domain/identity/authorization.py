"""Club staff checks."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import asyncpg

from club_registry.domain.common.academic_year import current_academic_year
from club_registry.domain.common.exceptions import ForbiddenError
from club_registry.infra.auth import AuthenticatedUser
from club_registry.obs import logging as obs_logging
from club_registry.obs import metrics as obs_metrics

_log = obs_logging.get_logger("club_registry.authz")


class AuthorizationService:
    @staticmethod
    async def is_club_staff(
        pool: asyncpg.Pool,
        student_id: int,
        club_id: UUID,
        year: Optional[int] = None,
    ) -> bool:
        """Whether ``student_id`` staffs ``club_id`` in ``year`` (the current academic year by default)."""
        year = year if year is not None else current_academic_year()
        async with pool.acquire() as conn:
            found = await conn.fetchval(
                "SELECT EXISTS(SELECT 1 FROM club_staffs WHERE student_id = $1 AND club_id = $2 AND year = $3)",
                student_id,
                club_id,
                year,
            )
        return bool(found)

    @classmethod
    async def can_manage_club(cls, pool: asyncpg.Pool, user: AuthenticatedUser, club_id: UUID) -> bool:
        if user.is_admin:
            return True
        if user.student_id is None:
            return False
        return await cls.is_club_staff(pool, user.student_id, club_id)

    @classmethod
    async def require_club_staff(
        cls,
        pool: asyncpg.Pool,
        user: AuthenticatedUser,
        club_id: UUID,
        *,
        action: str,
    ) -> None:
        if await cls.can_manage_club(pool, user, club_id):
            return
        obs_metrics.inc_authz_denied(action)
        _log.info("authz_denied", extra={"action": action, "club_id": str(club_id), "user_id": str(user.id)})
        raise ForbiddenError("only staff of this club may do that")
