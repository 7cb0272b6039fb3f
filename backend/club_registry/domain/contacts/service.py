"""Contact façade."""

from __future__ import annotations

import asyncpg

from club_registry.domain.common.facade import EntityFacade
from club_registry.domain.common.fetch_level import FetchLevel
from club_registry.domain.contacts.models import ContactTable
from club_registry.domain.contacts.schemas import (
    CompactContact,
    CreatableContact,
    DefaultContact,
    IdOnlyContact,
)


class ContactService(EntityFacade[ContactTable]):
    entity = "contact"
    table = ContactTable
    views = {
        FetchLevel.DEFAULT: DefaultContact,
        FetchLevel.COMPACT: CompactContact,
        FetchLevel.ID_ONLY: IdOnlyContact,
    }

    @staticmethod
    async def create(conn: asyncpg.Connection, data: CreatableContact) -> ContactTable:
        """Insert on a caller-owned connection so it can join a wider transaction."""
        name = data.name
        return await ContactTable.create(
            conn,
            value=data.value,
            type=data.type,
            name_th=name.th if name else None,
            name_en=name.en if name else None,
            include_students=data.include_students,
            include_teachers=data.include_teachers,
            include_parents=data.include_parents,
        )
