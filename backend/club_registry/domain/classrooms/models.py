"""Storage rows for classrooms."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

import asyncpg
from pydantic import field_validator

from club_registry.domain.common.facade import TableRow
from club_registry.domain.common.query_builder import TableSpec


class ClassroomSortableField(str, Enum):
    ID = "id"
    NUMBER = "number"
    YEAR = "year"
    CREATED_AT = "created_at"


class ClassroomTable(TableRow):
    id: int
    created_at: Optional[datetime] = None
    number: int
    year: int
    students: list[int] = []
    advisors: list[int] = []
    contacts: list[int] = []
    subjects: list[int] = []
    no_list: list[int] = []

    spec = TableSpec(
        columns=(
            "classroom.id, classroom.created_at, classroom.number, classroom.year, classroom.students,"
            " classroom.advisors, classroom.contacts, classroom.subjects, classroom.no_list"
        ),
        source="classroom",
        primary_key="classroom.id",
        sort_columns={
            ClassroomSortableField.ID: "classroom.id",
            ClassroomSortableField.NUMBER: "classroom.number",
            ClassroomSortableField.YEAR: "classroom.year",
            ClassroomSortableField.CREATED_AT: "classroom.created_at",
        },
        filter_columns={
            "id": "classroom.id",
            "number": "classroom.number",
            "year": "classroom.year",
        },
        search_columns=("CAST(classroom.number AS TEXT)",),
    )

    @field_validator("students", "advisors", "contacts", "subjects", "no_list", mode="before")
    @classmethod
    def _null_array(cls, value):
        return value or []

    def class_number_of(self, student_id: int) -> Optional[int]:
        """1-based position of ``student_id`` in the roll call, if listed."""
        try:
            return self.no_list.index(student_id) + 1
        except ValueError:
            return None

    @classmethod
    async def get_by_student_id(cls, pool: asyncpg.Pool, student_id: int, year: int) -> Optional["ClassroomTable"]:
        query = (
            f"{cls.spec.select} WHERE $1 = ANY(classroom.students) AND classroom.year = $2"
            " ORDER BY classroom.id LIMIT 1"
        )
        async with pool.acquire() as conn:
            record = await conn.fetchrow(query, student_id, year)
        return cls.from_record(record) if record else None
