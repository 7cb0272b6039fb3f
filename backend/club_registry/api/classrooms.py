"""FastAPI routes for classrooms."""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Depends, Request

from club_registry.api.envelope import pagination_meta, query_envelope, respond
from club_registry.domain.classrooms.models import ClassroomSortableField
from club_registry.domain.classrooms.schemas import QueryableClassroom
from club_registry.domain.classrooms.service import ClassroomService
from club_registry.domain.common.query_builder import resolve_page
from club_registry.domain.common.schemas import RequestEnvelope
from club_registry.infra.postgres import get_pool
from club_registry.settings import settings

router = APIRouter(prefix="/classrooms", tags=["classrooms"])

_service = ClassroomService()

ClassroomQueryEnvelope = RequestEnvelope[Any, QueryableClassroom, ClassroomSortableField]


@router.get("")
async def list_classrooms_endpoint(
    request: Request,
    envelope: ClassroomQueryEnvelope = Depends(query_envelope(ClassroomQueryEnvelope)),
    pool: asyncpg.Pool = Depends(get_pool),
):
    classrooms, total = await _service.query(pool, envelope)
    page, size = resolve_page(
        envelope.pagination, default_size=settings.default_page_size, max_size=settings.max_page_size
    )
    return respond(classrooms, pagination=pagination_meta(request, page, size, total))


@router.get("/{classroom_id}")
async def get_classroom_endpoint(
    classroom_id: int,
    envelope: ClassroomQueryEnvelope = Depends(query_envelope(ClassroomQueryEnvelope)),
    pool: asyncpg.Pool = Depends(get_pool),
):
    return respond(
        await _service.get_by_id(pool, classroom_id, envelope.fetch_level, envelope.descendant_fetch_level)
    )
