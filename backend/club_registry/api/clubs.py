"""FastAPI routes for clubs."""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

import asyncpg
from fastapi import APIRouter, Body, Depends, Request, status

from club_registry.api.envelope import pagination_meta, query_envelope, respond
from club_registry.domain.clubs.models import ClubSortableField
from club_registry.domain.clubs.schemas import QueryableClub, UpdatableClub
from club_registry.domain.clubs.service import ClubService
from club_registry.domain.common.query_builder import resolve_page
from club_registry.domain.common.schemas import RequestEnvelope
from club_registry.domain.contacts.schemas import CreatableContact
from club_registry.domain.join_requests.service import JoinRequestService
from club_registry.infra.auth import AuthenticatedUser, get_current_student, get_current_user
from club_registry.infra.postgres import get_pool
from club_registry.obs import audit as obs_audit
from club_registry.settings import settings

router = APIRouter(prefix="/clubs", tags=["clubs"])

_club_service = ClubService()
_join_request_service = JoinRequestService()

ClubQueryEnvelope = RequestEnvelope[Any, QueryableClub, ClubSortableField]
ClubUpdateEnvelope = RequestEnvelope[UpdatableClub, QueryableClub, ClubSortableField]
ContactCreateEnvelope = RequestEnvelope[CreatableContact, Any, Any]
JoinEnvelope = RequestEnvelope[Any, Any, Any]


@router.get("")
async def list_clubs_endpoint(
    request: Request,
    envelope: ClubQueryEnvelope = Depends(query_envelope(ClubQueryEnvelope)),
    pool: asyncpg.Pool = Depends(get_pool),
):
    clubs, total = await _club_service.query(pool, envelope)
    page, size = resolve_page(
        envelope.pagination, default_size=settings.default_page_size, max_size=settings.max_page_size
    )
    return respond(clubs, pagination=pagination_meta(request, page, size, total))


@router.get("/{club_id}")
async def get_club_endpoint(
    club_id: UUID,
    envelope: ClubQueryEnvelope = Depends(query_envelope(ClubQueryEnvelope)),
    pool: asyncpg.Pool = Depends(get_pool),
):
    club = await _club_service.get_by_id(pool, club_id, envelope.fetch_level, envelope.descendant_fetch_level)
    return respond(club)


@router.patch("/{club_id}")
async def update_club_endpoint(
    request: Request,
    club_id: UUID,
    payload: ClubUpdateEnvelope,
    auth_user: AuthenticatedUser = Depends(get_current_user),
    pool: asyncpg.Pool = Depends(get_pool),
):
    data = payload.require_data()
    club = await _club_service.update_by_id(
        pool, club_id, data, auth_user, payload.fetch_level, payload.descendant_fetch_level
    )
    await obs_audit.log_club_event(
        request,
        auth_user,
        "clubs.update",
        club_id=club_id,
        extra={"columns": sorted(data.column_changes())},
    )
    return respond(club)


@router.post("/{club_id}/join", status_code=status.HTTP_201_CREATED)
async def join_club_endpoint(
    request: Request,
    club_id: UUID,
    payload: Optional[JoinEnvelope] = Body(default=None),
    auth_user: AuthenticatedUser = Depends(get_current_student),
    pool: asyncpg.Pool = Depends(get_pool),
):
    join_request = await _join_request_service.submit(
        pool,
        club_id,
        auth_user,
        payload.fetch_level if payload else None,
        payload.descendant_fetch_level if payload else None,
    )
    await obs_audit.log_club_event(request, auth_user, "clubs.join", club_id=club_id)
    return respond(join_request, status_code=status.HTTP_201_CREATED)


@router.post("/{club_id}/contacts", status_code=status.HTTP_201_CREATED)
async def add_club_contact_endpoint(
    request: Request,
    club_id: UUID,
    payload: ContactCreateEnvelope,
    auth_user: AuthenticatedUser = Depends(get_current_user),
    pool: asyncpg.Pool = Depends(get_pool),
):
    club = await _club_service.add_contact(
        pool, club_id, payload.require_data(), auth_user, payload.fetch_level, payload.descendant_fetch_level
    )
    await obs_audit.log_club_event(request, auth_user, "clubs.contacts.create", club_id=club_id)
    return respond(club, status_code=status.HTTP_201_CREATED)
