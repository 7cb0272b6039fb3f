"""Club façade and club write paths."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import asyncpg

from club_registry.domain.clubs.models import ClubTable
from club_registry.domain.clubs.schemas import CompactClub, DefaultClub, IdOnlyClub, UpdatableClub
from club_registry.domain.common.facade import EntityFacade, View
from club_registry.domain.common.fetch_level import FetchLevel
from club_registry.domain.contacts.schemas import CreatableContact
from club_registry.domain.contacts.service import ContactService
from club_registry.domain.identity.authorization import AuthorizationService
from club_registry.infra.auth import AuthenticatedUser
from club_registry.obs import logging as obs_logging
from club_registry.obs import metrics as obs_metrics

_log = obs_logging.get_logger("club_registry.clubs")


class ClubService(EntityFacade[ClubTable]):
    entity = "club"
    table = ClubTable
    views = {
        FetchLevel.DEFAULT: DefaultClub,
        FetchLevel.COMPACT: CompactClub,
        FetchLevel.ID_ONLY: IdOnlyClub,
    }

    async def update_by_id(
        self,
        pool: asyncpg.Pool,
        club_id: UUID,
        data: UpdatableClub,
        actor: AuthenticatedUser,
        fetch_level: Optional[FetchLevel] = None,
        descendant_fetch_level: Optional[FetchLevel] = None,
    ) -> View:
        """Patch a club's organization and club columns in one transaction, then re-read it."""
        row = await self.get_row(pool, club_id)
        await AuthorizationService.require_club_staff(pool, actor, club_id, action="club.update")
        changes = data.column_changes()
        changed = await row.update(pool, changes)
        obs_metrics.inc_club_update("updated" if changed else "noop")
        if changed:
            _log.info("club_updated", extra={"club_id": str(club_id), "columns": sorted(changes)})
        return await self.get_by_id(pool, club_id, fetch_level, descendant_fetch_level)

    async def add_contact(
        self,
        pool: asyncpg.Pool,
        club_id: UUID,
        data: CreatableContact,
        actor: AuthenticatedUser,
        fetch_level: Optional[FetchLevel] = None,
        descendant_fetch_level: Optional[FetchLevel] = None,
    ) -> View:
        """Create a contact and link it to the club atomically."""
        await self.get_row(pool, club_id)
        await AuthorizationService.require_club_staff(pool, actor, club_id, action="club.contact.create")
        async with pool.acquire() as conn:
            async with conn.transaction():
                contact = await ContactService.create(conn, data)
                await ClubTable.link_contact(conn, club_id, contact.id)
        obs_metrics.inc_club_contact_created()
        _log.info("club_contact_created", extra={"club_id": str(club_id), "contact_id": contact.id})
        return await self.get_by_id(pool, club_id, fetch_level, descendant_fetch_level)
