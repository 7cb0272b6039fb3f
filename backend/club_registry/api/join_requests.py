"""FastAPI routes for club join requests."""

from __future__ import annotations

from typing import Any
from uuid import UUID

import asyncpg
from fastapi import APIRouter, Depends, Request

from club_registry.api.envelope import pagination_meta, query_envelope, respond
from club_registry.domain.common.query_builder import resolve_page
from club_registry.domain.common.schemas import RequestEnvelope
from club_registry.domain.join_requests.models import ClubRequestSortableField
from club_registry.domain.join_requests.schemas import QueryableClubRequest, UpdatableClubRequest
from club_registry.domain.join_requests.service import JoinRequestService
from club_registry.infra.auth import AuthenticatedUser, get_current_user
from club_registry.infra.postgres import get_pool
from club_registry.obs import audit as obs_audit
from club_registry.settings import settings

router = APIRouter(prefix="/join_requests", tags=["join_requests"])

_service = JoinRequestService()

JoinRequestQueryEnvelope = RequestEnvelope[Any, QueryableClubRequest, ClubRequestSortableField]
JoinRequestUpdateEnvelope = RequestEnvelope[UpdatableClubRequest, QueryableClubRequest, ClubRequestSortableField]


@router.get("")
async def list_join_requests_endpoint(
    request: Request,
    envelope: JoinRequestQueryEnvelope = Depends(query_envelope(JoinRequestQueryEnvelope)),
    auth_user: AuthenticatedUser = Depends(get_current_user),
    pool: asyncpg.Pool = Depends(get_pool),
):
    requests, total = await _service.query_visible(pool, envelope, auth_user)
    page, size = resolve_page(
        envelope.pagination, default_size=settings.default_page_size, max_size=settings.max_page_size
    )
    return respond(requests, pagination=pagination_meta(request, page, size, total))


@router.get("/{request_id}")
async def get_join_request_endpoint(
    request_id: UUID,
    envelope: JoinRequestQueryEnvelope = Depends(query_envelope(JoinRequestQueryEnvelope)),
    auth_user: AuthenticatedUser = Depends(get_current_user),
    pool: asyncpg.Pool = Depends(get_pool),
):
    join_request = await _service.get_visible(
        pool, request_id, auth_user, envelope.fetch_level, envelope.descendant_fetch_level
    )
    return respond(join_request)


@router.patch("/{request_id}")
async def decide_join_request_endpoint(
    request: Request,
    request_id: UUID,
    payload: JoinRequestUpdateEnvelope,
    auth_user: AuthenticatedUser = Depends(get_current_user),
    pool: asyncpg.Pool = Depends(get_pool),
):
    target = payload.require_data().membership_status
    join_request = await _service.decide(
        pool, request_id, target, auth_user, payload.fetch_level, payload.descendant_fetch_level
    )
    await obs_audit.log_club_event(
        request,
        auth_user,
        "join_requests.decide",
        join_request_id=request_id,
        extra={"membership_status": target.value},
    )
    return respond(join_request)
