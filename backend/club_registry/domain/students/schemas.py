"""Student views and request schemas."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

import asyncpg
from pydantic import BaseModel

from club_registry.domain.common.academic_year import current_academic_year
from club_registry.domain.common.facade import View
from club_registry.domain.common.fetch_level import Expansion
from club_registry.domain.common.schemas import MultiLangString
from club_registry.domain.students.models import StudentTable


class IdOnlyStudent(View):
    id: int

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: StudentTable, expansion: Expansion) -> "IdOnlyStudent":
        return cls(id=row.id)


class CompactStudent(View):
    id: int
    prefix: Optional[MultiLangString] = None
    first_name: MultiLangString
    last_name: MultiLangString
    profile_url: Optional[str] = None
    birthdate: Optional[date] = None
    student_id: str

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: StudentTable, expansion: Expansion) -> "CompactStudent":
        return cls(
            id=row.id,
            prefix=MultiLangString.from_columns(row.prefix_th, row.prefix_en),
            first_name=MultiLangString(th=row.first_name_th, en=row.first_name_en),
            last_name=MultiLangString(th=row.last_name_th, en=row.last_name_en),
            profile_url=row.profile,
            birthdate=row.birthdate,
            student_id=row.std_id,
        )


class DefaultStudent(View):
    id: int
    prefix: Optional[MultiLangString] = None
    first_name: MultiLangString
    last_name: MultiLangString
    middle_name: Optional[MultiLangString] = None
    nickname: Optional[MultiLangString] = None
    profile_url: Optional[str] = None
    birthdate: Optional[date] = None
    student_id: str
    contacts: list[Any] = []
    classroom: Optional[Any] = None
    class_number: Optional[int] = None

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: StudentTable, expansion: Expansion) -> "DefaultStudent":
        from club_registry.domain.classrooms.models import ClassroomTable
        from club_registry.domain.classrooms.service import ClassroomService
        from club_registry.domain.contacts.service import ContactService

        child = expansion.nested()
        contacts = await ContactService().get_from_ids(pool, row.contact_ids, child)
        classroom_row = await ClassroomTable.get_by_student_id(pool, row.id, current_academic_year())
        classroom = None
        class_number = None
        if classroom_row is not None:
            classroom = await ClassroomService().from_table(pool, classroom_row, child)
            class_number = classroom_row.class_number_of(row.id)

        return cls(
            id=row.id,
            prefix=MultiLangString.from_columns(row.prefix_th, row.prefix_en),
            first_name=MultiLangString(th=row.first_name_th, en=row.first_name_en),
            last_name=MultiLangString(th=row.last_name_th, en=row.last_name_en),
            middle_name=MultiLangString.from_columns(row.middle_name_th, row.middle_name_en),
            nickname=MultiLangString.from_columns(row.nickname_th, row.nickname_en),
            profile_url=row.profile,
            birthdate=row.birthdate,
            student_id=row.std_id,
            contacts=contacts,
            classroom=classroom,
            class_number=class_number,
        )


Student = Union[DefaultStudent, CompactStudent, IdOnlyStudent]


class QueryableStudent(BaseModel):
    id: Optional[int] = None
    student_id: Optional[str] = None
    first_name_th: Optional[str] = None
    first_name_en: Optional[str] = None
    last_name_th: Optional[str] = None
    last_name_en: Optional[str] = None
    nickname_th: Optional[str] = None
    nickname_en: Optional[str] = None
