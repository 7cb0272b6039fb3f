"""Storage rows for contacts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

import asyncpg

from club_registry.domain.common.facade import TableRow
from club_registry.domain.common.query_builder import TableSpec


class ContactType(str, Enum):
    PHONE = "phone"
    EMAIL = "email"
    FACEBOOK = "facebook"
    LINE = "line"
    INSTAGRAM = "instagram"
    WEBSITE = "website"
    DISCORD = "discord"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> "ContactType":
        # storage labels are capitalised ("Phone"); anything unrecognised is Other
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.OTHER

    @property
    def db_label(self) -> str:
        return self.value.capitalize()


class ContactSortableField(str, Enum):
    ID = "id"
    NAME_TH = "name_th"
    NAME_EN = "name_en"
    TYPE = "type"
    VALUE = "value"
    CREATED_AT = "created_at"


CONTACT_COLUMNS = (
    "contacts.id, contacts.created_at, contacts.name_th, contacts.name_en, contacts.value,"
    " contacts.type::text AS type, contacts.include_students, contacts.include_teachers,"
    " contacts.include_parents"
)


class ContactTable(TableRow):
    id: int
    created_at: Optional[datetime] = None
    name_th: Optional[str] = None
    name_en: Optional[str] = None
    value: str
    type: ContactType = ContactType.OTHER
    include_students: Optional[bool] = None
    include_teachers: Optional[bool] = None
    include_parents: Optional[bool] = None

    spec = TableSpec(
        columns=CONTACT_COLUMNS,
        source="contacts",
        primary_key="contacts.id",
        sort_columns={
            ContactSortableField.ID: "contacts.id",
            ContactSortableField.NAME_TH: "contacts.name_th",
            ContactSortableField.NAME_EN: "contacts.name_en",
            ContactSortableField.TYPE: "contacts.type",
            ContactSortableField.VALUE: "contacts.value",
            ContactSortableField.CREATED_AT: "contacts.created_at",
        },
        filter_columns={
            "id": "contacts.id",
            "type": "lower(contacts.type::text)",
            "value": "contacts.value",
            "include_students": "contacts.include_students",
            "include_teachers": "contacts.include_teachers",
            "include_parents": "contacts.include_parents",
        },
        search_columns=("contacts.name_th", "contacts.name_en", "contacts.value"),
    )

    @classmethod
    async def create(
        cls,
        conn: asyncpg.Connection,
        *,
        value: str,
        type: ContactType,
        name_th: Optional[str] = None,
        name_en: Optional[str] = None,
        include_students: Optional[bool] = None,
        include_teachers: Optional[bool] = None,
        include_parents: Optional[bool] = None,
    ) -> "ContactTable":
        record = await conn.fetchrow(
            f"""
            INSERT INTO contacts (name_th, name_en, value, type, include_students, include_teachers, include_parents)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING {CONTACT_COLUMNS}
            """,
            name_th,
            name_en,
            value,
            type.db_label,
            include_students,
            include_teachers,
            include_parents,
        )
        return cls.from_record(record)
