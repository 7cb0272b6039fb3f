"""Join request façade: submission, review and scoped listing."""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

import asyncpg

from club_registry.domain.clubs.models import ClubTable, SubmissionStatus
from club_registry.domain.common.academic_year import current_academic_year
from club_registry.domain.common.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from club_registry.domain.common.facade import EntityFacade, View
from club_registry.domain.common.fetch_level import FetchLevel
from club_registry.domain.common.schemas import RequestEnvelope
from club_registry.domain.identity.authorization import AuthorizationService
from club_registry.domain.identity.models import UserRole
from club_registry.domain.join_requests.models import ClubRequestTable
from club_registry.domain.join_requests.schemas import (
    CompactClubRequest,
    DefaultClubRequest,
    IdOnlyClubRequest,
)
from club_registry.infra.auth import AuthenticatedUser
from club_registry.obs import logging as obs_logging
from club_registry.obs import metrics as obs_metrics

_log = obs_logging.get_logger("club_registry.join_requests")


class JoinRequestService(EntityFacade[ClubRequestTable]):
    entity = "club_request"
    table = ClubRequestTable
    views = {
        FetchLevel.DEFAULT: DefaultClubRequest,
        FetchLevel.COMPACT: CompactClubRequest,
        FetchLevel.ID_ONLY: IdOnlyClubRequest,
    }

    async def submit(
        self,
        pool: asyncpg.Pool,
        club_id: UUID,
        student: AuthenticatedUser,
        fetch_level: Optional[FetchLevel] = None,
        descendant_fetch_level: Optional[FetchLevel] = None,
    ) -> View:
        """File a pending request for the current academic year.

        At most one pending or approved request may exist per student, club
        and year; the check and the insert share a transaction.
        """
        if student.student_id is None:
            raise ForbiddenError("user is not a student")
        if await ClubTable.get_by_id(pool, club_id) is None:
            raise NotFoundError(f"club with id {club_id} not found")
        year = current_academic_year()
        async with pool.acquire() as conn:
            async with conn.transaction():
                if await ClubRequestTable.count_active(conn, club_id, student.student_id, year) > 0:
                    obs_metrics.inc_join_request_conflict()
                    raise ConflictError("a pending or approved request for this club already exists")
                row = await ClubRequestTable.create(conn, club_id, student.student_id, year)
        obs_metrics.inc_join_request_created()
        _log.info(
            "join_request_created",
            extra={"club_id": str(club_id), "request_id": str(row.id), "year": year},
        )
        return await self.from_table(pool, row, self.expansion(fetch_level, descendant_fetch_level))

    async def decide(
        self,
        pool: asyncpg.Pool,
        request_id: UUID,
        status: SubmissionStatus,
        actor: AuthenticatedUser,
        fetch_level: Optional[FetchLevel] = None,
        descendant_fetch_level: Optional[FetchLevel] = None,
    ) -> View:
        """Approve or decline a pending request."""
        if status is SubmissionStatus.PENDING:
            raise BadRequestError("membership_status must be approved or declined")
        row = await self.get_row(pool, request_id)
        await AuthorizationService.require_club_staff(pool, actor, row.club_id, action="join_request.decide")
        if row.membership_status is not SubmissionStatus.PENDING:
            raise ConflictError(f"request is already {row.membership_status.value}")
        if not await ClubRequestTable.update_status(pool, request_id, status):
            raise ConflictError("request is no longer pending")
        obs_metrics.inc_join_request_decided(status.value)
        _log.info("join_request_decided", extra={"request_id": str(request_id), "status": status.value})
        return await self.get_by_id(pool, request_id, fetch_level, descendant_fetch_level)

    async def get_visible(
        self,
        pool: asyncpg.Pool,
        request_id: UUID,
        viewer: AuthenticatedUser,
        fetch_level: Optional[FetchLevel] = None,
        descendant_fetch_level: Optional[FetchLevel] = None,
    ) -> View:
        row = await self.get_row(pool, request_id)
        if not await self._can_view(pool, row, viewer):
            obs_metrics.inc_authz_denied("join_request.read")
            raise ForbiddenError("not allowed to view this request")
        return await self.from_table(pool, row, self.expansion(fetch_level, descendant_fetch_level))

    async def query_visible(
        self,
        pool: asyncpg.Pool,
        envelope: RequestEnvelope[Any, Any, Any],
        viewer: AuthenticatedUser,
    ) -> tuple[list[View], int]:
        """Teachers and admins see everything; staff see their club; students see their own."""
        if viewer.is_admin or viewer.has_role(UserRole.TEACHER):
            return await self.query(pool, envelope)
        if viewer.student_id is None:
            raise ForbiddenError("not allowed to list join requests")
        club_id = envelope.filter.data.club_id if envelope.filter and envelope.filter.data else None
        if club_id is not None and await AuthorizationService.is_club_staff(pool, viewer.student_id, club_id):
            return await self.query(pool, envelope)
        return await self.query(
            pool,
            envelope,
            extra_predicates=[("club_members.student_id", viewer.student_id)],
        )

    @staticmethod
    async def _can_view(pool: asyncpg.Pool, row: ClubRequestTable, viewer: AuthenticatedUser) -> bool:
        if viewer.is_admin or viewer.has_role(UserRole.TEACHER):
            return True
        if viewer.student_id is None:
            return False
        if viewer.student_id == row.student_id:
            return True
        return await AuthorizationService.is_club_staff(pool, viewer.student_id, row.club_id)
