"""FastAPI routes for contacts."""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import APIRouter, Depends

from club_registry.api.envelope import query_envelope, respond
from club_registry.domain.common.schemas import RequestEnvelope
from club_registry.domain.contacts.models import ContactSortableField
from club_registry.domain.contacts.schemas import QueryableContact
from club_registry.domain.contacts.service import ContactService
from club_registry.infra.postgres import get_pool

router = APIRouter(prefix="/contacts", tags=["contacts"])

_service = ContactService()

ContactQueryEnvelope = RequestEnvelope[Any, QueryableContact, ContactSortableField]


@router.get("/{contact_id}")
async def get_contact_endpoint(
    contact_id: int,
    envelope: ContactQueryEnvelope = Depends(query_envelope(ContactQueryEnvelope)),
    pool: asyncpg.Pool = Depends(get_pool),
):
    return respond(
        await _service.get_by_id(pool, contact_id, envelope.fetch_level, envelope.descendant_fetch_level)
    )
