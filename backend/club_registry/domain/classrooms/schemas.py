"""Classroom views and request schemas."""

from __future__ import annotations

from typing import Any, Optional, Union

import asyncpg
from pydantic import BaseModel

from club_registry.domain.classrooms.models import ClassroomTable
from club_registry.domain.common.facade import View
from club_registry.domain.common.fetch_level import Expansion


class IdOnlyClassroom(View):
    id: int

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClassroomTable, expansion: Expansion) -> "IdOnlyClassroom":
        return cls(id=row.id)


class CompactClassroom(View):
    id: int
    number: int

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClassroomTable, expansion: Expansion) -> "CompactClassroom":
        return cls(id=row.id, number=row.number)


class DefaultClassroom(View):
    id: int
    number: int
    year: int
    students: list[Any] = []
    contacts: list[Any] = []

    @classmethod
    async def from_table(cls, pool: asyncpg.Pool, row: ClassroomTable, expansion: Expansion) -> "DefaultClassroom":
        from club_registry.domain.contacts.service import ContactService
        from club_registry.domain.students.service import StudentService

        child = expansion.nested()
        students = await StudentService().get_from_ids(pool, row.students, child)
        contacts = await ContactService().get_from_ids(pool, row.contacts, child)
        return cls(id=row.id, number=row.number, year=row.year, students=students, contacts=contacts)


Classroom = Union[DefaultClassroom, CompactClassroom, IdOnlyClassroom]


class QueryableClassroom(BaseModel):
    id: Optional[int] = None
    number: Optional[int] = None
    year: Optional[int] = None
