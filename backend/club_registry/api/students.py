"""FastAPI routes for students."""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Depends, Request

from club_registry.api.envelope import pagination_meta, query_envelope, respond
from club_registry.domain.common.query_builder import resolve_page
from club_registry.domain.common.schemas import RequestEnvelope
from club_registry.domain.students.models import StudentSortableField
from club_registry.domain.students.schemas import QueryableStudent
from club_registry.domain.students.service import StudentService
from club_registry.infra.postgres import get_pool
from club_registry.settings import settings

router = APIRouter(prefix="/students", tags=["students"])

_service = StudentService()

StudentQueryEnvelope = RequestEnvelope[Any, QueryableStudent, StudentSortableField]


@router.get("")
async def list_students_endpoint(
    request: Request,
    envelope: StudentQueryEnvelope = Depends(query_envelope(StudentQueryEnvelope)),
    pool: asyncpg.Pool = Depends(get_pool),
):
    students, total = await _service.query(pool, envelope)
    page, size = resolve_page(
        envelope.pagination, default_size=settings.default_page_size, max_size=settings.max_page_size
    )
    return respond(students, pagination=pagination_meta(request, page, size, total))


@router.get("/{student_id}")
async def get_student_endpoint(
    student_id: int,
    envelope: StudentQueryEnvelope = Depends(query_envelope(StudentQueryEnvelope)),
    pool: asyncpg.Pool = Depends(get_pool),
):
    return respond(
        await _service.get_by_id(pool, student_id, envelope.fetch_level, envelope.descendant_fetch_level)
    )
