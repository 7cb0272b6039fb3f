"""Contact views and request schemas."""

from __future__ import annotations

from typing import Optional, Union

import asyncpg
from pydantic import BaseModel

from club_registry.domain.common.facade import View
from club_registry.domain.common.fetch_level import Expansion
from club_registry.domain.common.schemas import FlexibleMultiLangString, MultiLangString
from club_registry.domain.contacts.models import ContactTable, ContactType


class IdOnlyContact(View):
    id: int

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ContactTable, expansion: Expansion) -> "IdOnlyContact":
        return cls(id=row.id)


class CompactContact(View):
    id: int
    name: Optional[MultiLangString] = None
    value: str
    type: ContactType

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ContactTable, expansion: Expansion) -> "CompactContact":
        name = MultiLangString.from_columns(row.name_th, row.name_en)
        return cls(id=row.id, name=name, value=row.value, type=row.type)


class DefaultContact(View):
    id: int
    name: Optional[MultiLangString] = None
    value: str
    type: ContactType
    include_students: Optional[bool] = None
    include_teachers: Optional[bool] = None
    include_parents: Optional[bool] = None

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ContactTable, expansion: Expansion) -> "DefaultContact":
        return cls(
            id=row.id,
            name=MultiLangString.from_columns(row.name_th, row.name_en),
            value=row.value,
            type=row.type,
            include_students=row.include_students,
            include_teachers=row.include_teachers,
            include_parents=row.include_parents,
        )


Contact = Union[DefaultContact, CompactContact, IdOnlyContact]


class QueryableContact(BaseModel):
    id: Optional[int] = None
    type: Optional[ContactType] = None
    value: Optional[str] = None
    include_students: Optional[bool] = None
    include_teachers: Optional[bool] = None
    include_parents: Optional[bool] = None


class CreatableContact(BaseModel):
    name: Optional[FlexibleMultiLangString] = None
    value: str
    type: ContactType
    include_students: Optional[bool] = None
    include_teachers: Optional[bool] = None
    include_parents: Optional[bool] = None
