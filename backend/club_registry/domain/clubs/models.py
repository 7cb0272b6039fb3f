"""Storage rows for clubs (a ``clubs`` row joined to its ``organizations`` row)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional
from uuid import UUID

import asyncpg

from club_registry.domain.common.facade import TableRow
from club_registry.domain.common.query_builder import TableSpec, build_update
from club_registry.domain.contacts.models import ContactTable
from club_registry.domain.students.models import STUDENT_COLUMNS, StudentTable


class ActivityDayHouse(str, Enum):
    FELIS = "felis"
    CORNICULA = "cornicula"
    SCIURUS = "sciurus"
    CYPRINUS = "cyprinus"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class ClubSortableField(str, Enum):
    ID = "id"
    NAME_TH = "name_th"
    NAME_EN = "name_en"
    HOUSE = "house"
    MAP_LOCATION = "map_location"
    CREATED_AT = "created_at"


ORGANIZATION_COLUMNS = frozenset({"name_th", "name_en", "description_th", "description_en", "main_room"})
CLUB_COLUMNS = frozenset({"logo_url", "background_color", "accent_color", "house", "map_location"})


class ClubTable(TableRow):
    id: UUID
    created_at: Optional[datetime] = None
    organization_id: int
    name_th: str
    name_en: Optional[str] = None
    description_th: Optional[str] = None
    description_en: Optional[str] = None
    main_room: Optional[str] = None
    logo_url: Optional[str] = None
    background_color: Optional[str] = None
    accent_color: Optional[str] = None
    house: Optional[ActivityDayHouse] = None
    map_location: Optional[int] = None

    spec = TableSpec(
        columns=(
            "clubs.id, clubs.created_at, clubs.organization_id, organizations.name_th, organizations.name_en,"
            " organizations.description_th, organizations.description_en, organizations.main_room,"
            " clubs.logo_url, clubs.background_color, clubs.accent_color, clubs.house::text AS house,"
            " clubs.map_location"
        ),
        source="clubs INNER JOIN organizations ON organizations.id = clubs.organization_id",
        primary_key="clubs.id",
        sort_columns={
            ClubSortableField.ID: "clubs.id",
            ClubSortableField.NAME_TH: "organizations.name_th",
            ClubSortableField.NAME_EN: "organizations.name_en",
            ClubSortableField.HOUSE: "clubs.house",
            ClubSortableField.MAP_LOCATION: "clubs.map_location",
            ClubSortableField.CREATED_AT: "clubs.created_at",
        },
        filter_columns={
            "id": "clubs.id",
            "name_th": "organizations.name_th",
            "name_en": "organizations.name_en",
            "house": "clubs.house::text",
            "map_location": "clubs.map_location",
            "main_room": "organizations.main_room",
        },
        search_columns=(
            "organizations.name_th",
            "organizations.name_en",
            "organizations.description_th",
            "organizations.description_en",
        ),
    )

    @classmethod
    async def get_members(cls, pool: asyncpg.Pool, club_id: UUID, year: int) -> list[StudentTable]:
        """Approved members for ``year``."""
        query = (
            f"SELECT {STUDENT_COLUMNS} FROM club_members"
            " INNER JOIN student ON student.id = club_members.student_id"
            " INNER JOIN people ON people.id = student.person"
            " WHERE club_members.club_id = $1 AND club_members.year = $2"
            " AND club_members.membership_status = $3"
            " ORDER BY student.id"
        )
        async with pool.acquire() as conn:
            records = await conn.fetch(query, club_id, year, SubmissionStatus.APPROVED.value)
        return [StudentTable.from_record(record) for record in records]

    @classmethod
    async def get_staffs(cls, pool: asyncpg.Pool, club_id: UUID, year: int) -> list[StudentTable]:
        query = (
            f"SELECT {STUDENT_COLUMNS} FROM club_staffs"
            " INNER JOIN student ON student.id = club_staffs.student_id"
            " INNER JOIN people ON people.id = student.person"
            " WHERE club_staffs.club_id = $1 AND club_staffs.year = $2"
            " ORDER BY student.id"
        )
        async with pool.acquire() as conn:
            records = await conn.fetch(query, club_id, year)
        return [StudentTable.from_record(record) for record in records]

    @classmethod
    async def get_contacts(cls, pool: asyncpg.Pool, club_id: UUID) -> list[ContactTable]:
        query = (
            f"SELECT {ContactTable.spec.columns} FROM club_contacts"
            " INNER JOIN contacts ON contacts.id = club_contacts.contact_id"
            " WHERE club_contacts.club_id = $1"
            " ORDER BY contacts.id"
        )
        async with pool.acquire() as conn:
            records = await conn.fetch(query, club_id)
        return [ContactTable.from_record(record) for record in records]

    async def update(self, pool: asyncpg.Pool, changes: Mapping[str, Any]) -> bool:
        """Apply column changes across both tables atomically.

        Returns ``False`` without touching storage when ``changes`` is empty.
        """
        unknown = set(changes) - ORGANIZATION_COLUMNS - CLUB_COLUMNS
        if unknown:
            raise ValueError(f"unknown club columns: {sorted(unknown)}")
        organization_update = build_update(
            "organizations",
            {column: value for column, value in changes.items() if column in ORGANIZATION_COLUMNS},
            key_column="id",
            key=self.organization_id,
        )
        club_update = build_update(
            "clubs",
            {column: value for column, value in changes.items() if column in CLUB_COLUMNS},
            key_column="id",
            key=self.id,
        )
        statements = [statement for statement in (organization_update, club_update) if statement]
        if not statements:
            return False
        async with pool.acquire() as conn:
            async with conn.transaction():
                for query, params in statements:
                    await conn.execute(query, *params)
        return True

    @staticmethod
    async def link_contact(conn: asyncpg.Connection, club_id: UUID, contact_id: int) -> None:
        await conn.execute(
            "INSERT INTO club_contacts (club_id, contact_id) VALUES ($1, $2)",
            club_id,
            contact_id,
        )
