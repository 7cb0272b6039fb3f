"""Club views and request schemas."""

from __future__ import annotations

from typing import Any, Optional, Union
from uuid import UUID

import asyncpg
from pydantic import BaseModel, Field

from club_registry.domain.clubs.models import ActivityDayHouse, ClubTable
from club_registry.domain.common.academic_year import current_academic_year
from club_registry.domain.common.facade import View
from club_registry.domain.common.fetch_level import Expansion
from club_registry.domain.common.schemas import FlexibleMultiLangString, MultiLangString

HEX_COLOR = r"^#?[0-9A-Fa-f]{6}$"


class IdOnlyClub(View):
    id: UUID

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClubTable, expansion: Expansion) -> "IdOnlyClub":
        return cls(id=row.id)


class CompactClub(View):
    id: UUID
    name: MultiLangString
    description: Optional[MultiLangString] = None
    logo_url: Optional[str] = None
    house: Optional[ActivityDayHouse] = None
    map_location: Optional[int] = None

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClubTable, expansion: Expansion) -> "CompactClub":
        return cls(
            id=row.id,
            name=MultiLangString(th=row.name_th, en=row.name_en),
            description=MultiLangString.from_columns(row.description_th, row.description_en),
            logo_url=row.logo_url,
            house=row.house,
            map_location=row.map_location,
        )


class DefaultClub(View):
    id: UUID
    name: MultiLangString
    description: Optional[MultiLangString] = None
    logo_url: Optional[str] = None
    house: Optional[ActivityDayHouse] = None
    map_location: Optional[int] = None
    background_color: Optional[str] = None
    accent_color: Optional[str] = None
    main_room: Optional[str] = None
    members: list[Any] = []
    staffs: list[Any] = []
    contacts: list[Any] = []

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClubTable, expansion: Expansion) -> "DefaultClub":
        from club_registry.domain.contacts.service import ContactService
        from club_registry.domain.students.service import StudentService

        child = expansion.nested()
        year = current_academic_year()
        students = StudentService()
        members = await students.from_tables(pool, await ClubTable.get_members(pool, row.id, year), child)
        staffs = await students.from_tables(pool, await ClubTable.get_staffs(pool, row.id, year), child)
        contacts = await ContactService().from_tables(pool, await ClubTable.get_contacts(pool, row.id), child)

        return cls(
            id=row.id,
            name=MultiLangString(th=row.name_th, en=row.name_en),
            description=MultiLangString.from_columns(row.description_th, row.description_en),
            logo_url=row.logo_url,
            house=row.house,
            map_location=row.map_location,
            background_color=row.background_color,
            accent_color=row.accent_color,
            main_room=row.main_room,
            members=members,
            staffs=staffs,
            contacts=contacts,
        )


Club = Union[DefaultClub, CompactClub, IdOnlyClub]


class QueryableClub(BaseModel):
    id: Optional[UUID] = None
    name_th: Optional[str] = None
    name_en: Optional[str] = None
    house: Optional[ActivityDayHouse] = None
    map_location: Optional[int] = None
    main_room: Optional[str] = None


class UpdatableClub(BaseModel):
    """Partial update; ``None`` leaves a column untouched."""

    name: Optional[FlexibleMultiLangString] = None
    description: Optional[FlexibleMultiLangString] = None
    main_room: Optional[str] = None
    logo_url: Optional[str] = None
    background_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    accent_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    house: Optional[ActivityDayHouse] = None
    map_location: Optional[int] = None

    def column_changes(self) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        for prefix, text in (("name", self.name), ("description", self.description)):
            if text is None:
                continue
            if text.th is not None:
                changes[f"{prefix}_th"] = text.th
            if text.en is not None:
                changes[f"{prefix}_en"] = text.en
        for column in ("main_room", "logo_url", "background_color", "accent_color", "house", "map_location"):
            value = getattr(self, column)
            if value is not None:
                changes[column] = value
        return changes
