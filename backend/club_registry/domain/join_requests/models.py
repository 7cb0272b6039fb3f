"""Storage rows for club join requests (``club_members``)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

import asyncpg

from club_registry.domain.clubs.models import SubmissionStatus
from club_registry.domain.common.facade import TableRow
from club_registry.domain.common.query_builder import TableSpec


class ClubRequestSortableField(str, Enum):
    ID = "id"
    CLUB_ID = "club_id"
    STUDENT_ID = "student_id"
    YEAR = "year"
    MEMBERSHIP_STATUS = "membership_status"
    CREATED_AT = "created_at"


CLUB_REQUEST_COLUMNS = (
    "club_members.id, club_members.created_at, club_members.club_id, club_members.student_id,"
    " club_members.year, club_members.membership_status::text AS membership_status"
)


class ClubRequestTable(TableRow):
    id: UUID
    created_at: Optional[datetime] = None
    club_id: UUID
    student_id: int
    year: int
    membership_status: SubmissionStatus

    spec = TableSpec(
        columns=CLUB_REQUEST_COLUMNS,
        source="club_members",
        primary_key="club_members.id",
        sort_columns={
            ClubRequestSortableField.ID: "club_members.id",
            ClubRequestSortableField.CLUB_ID: "club_members.club_id",
            ClubRequestSortableField.STUDENT_ID: "club_members.student_id",
            ClubRequestSortableField.YEAR: "club_members.year",
            ClubRequestSortableField.MEMBERSHIP_STATUS: "club_members.membership_status",
            ClubRequestSortableField.CREATED_AT: "club_members.created_at",
        },
        filter_columns={
            "id": "club_members.id",
            "club_id": "club_members.club_id",
            "student_id": "club_members.student_id",
            "year": "club_members.year",
            "membership_status": "club_members.membership_status::text",
        },
    )

    @classmethod
    async def count_active(cls, conn: asyncpg.Connection, club_id: UUID, student_id: int, year: int) -> int:
        """Pending or approved rows for this student, club and year."""
        total = await conn.fetchval(
            "SELECT COUNT(*) FROM club_members"
            " WHERE club_id = $1 AND student_id = $2 AND year = $3"
            " AND membership_status::text = ANY($4::text[])",
            club_id,
            student_id,
            year,
            [SubmissionStatus.PENDING.value, SubmissionStatus.APPROVED.value],
        )
        return int(total or 0)

    @classmethod
    async def create(cls, conn: asyncpg.Connection, club_id: UUID, student_id: int, year: int) -> "ClubRequestTable":
        record = await conn.fetchrow(
            "INSERT INTO club_members (club_id, student_id, year, membership_status)"
            f" VALUES ($1, $2, $3, $4) RETURNING {CLUB_REQUEST_COLUMNS}",
            club_id,
            student_id,
            year,
            SubmissionStatus.PENDING.value,
        )
        return cls.from_record(record)

    @classmethod
    async def update_status(cls, pool: asyncpg.Pool, request_id: UUID, status: SubmissionStatus) -> bool:
        """Decide a pending request; ``False`` when it was no longer pending."""
        async with pool.acquire() as conn:
            decided = await conn.fetchval(
                "UPDATE club_members SET membership_status = $1"
                " WHERE id = $2 AND membership_status = 'pending' RETURNING id",
                status.value,
                request_id,
            )
        return decided is not None
