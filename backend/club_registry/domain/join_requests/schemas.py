"""Join request views and request schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID

import asyncpg
from pydantic import BaseModel

from club_registry.domain.clubs.models import SubmissionStatus
from club_registry.domain.common.facade import View
from club_registry.domain.common.fetch_level import Expansion
from club_registry.domain.join_requests.models import ClubRequestTable


class IdOnlyClubRequest(View):
    id: UUID

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClubRequestTable, expansion: Expansion) -> "IdOnlyClubRequest":
        return cls(id=row.id)


class CompactClubRequest(View):
    id: UUID
    club_id: UUID
    student_id: int
    year: int
    membership_status: SubmissionStatus
    created_at: Optional[datetime] = None

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClubRequestTable, expansion: Expansion) -> "CompactClubRequest":
        return cls(
            id=row.id,
            club_id=row.club_id,
            student_id=row.student_id,
            year=row.year,
            membership_status=row.membership_status,
            created_at=row.created_at,
        )


class DefaultClubRequest(View):
    id: UUID
    club: Optional[Any] = None
    student: Optional[Any] = None
    year: int
    membership_status: SubmissionStatus
    created_at: Optional[datetime] = None

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClubRequestTable, expansion: Expansion) -> "DefaultClubRequest":
        from club_registry.domain.clubs.service import ClubService
        from club_registry.domain.students.service import StudentService

        child = expansion.nested()
        clubs = ClubService()
        students = StudentService()
        club_row = await clubs.table.get_by_id(pool, row.club_id)
        student_row = await students.table.get_by_id(pool, row.student_id)
        return cls(
            id=row.id,
            club=await clubs.from_table(pool, club_row, child) if club_row else None,
            student=await students.from_table(pool, student_row, child) if student_row else None,
            year=row.year,
            membership_status=row.membership_status,
            created_at=row.created_at,
        )


ClubRequest = Union[DefaultClubRequest, CompactClubRequest, IdOnlyClubRequest]


class QueryableClubRequest(BaseModel):
    id: Optional[UUID] = None
    club_id: Optional[UUID] = None
    student_id: Optional[int] = None
    year: Optional[int] = None
    membership_status: Optional[SubmissionStatus] = None


class UpdatableClubRequest(BaseModel):
    membership_status: SubmissionStatus
