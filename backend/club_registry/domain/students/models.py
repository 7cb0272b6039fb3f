"""Storage rows for students (a ``student`` row joined to its ``people`` row)."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import field_validator

from club_registry.domain.common.facade import TableRow
from club_registry.domain.common.query_builder import TableSpec


class StudentSortableField(str, Enum):
    ID = "id"
    STUDENT_ID = "student_id"
    FIRST_NAME_TH = "first_name_th"
    FIRST_NAME_EN = "first_name_en"
    LAST_NAME_TH = "last_name_th"
    LAST_NAME_EN = "last_name_en"
    CREATED_AT = "created_at"


STUDENT_COLUMNS = (
    "student.id, student.created_at, student.std_id, student.person AS person_id,"
    " people.prefix_th, people.prefix_en, people.first_name_th, people.first_name_en,"
    " people.last_name_th, people.last_name_en, people.middle_name_th, people.middle_name_en,"
    " people.nickname_th, people.nickname_en, people.birthdate, people.profile,"
    " people.contacts AS contact_ids"
)
STUDENT_SOURCE = "student INNER JOIN people ON people.id = student.person"


class StudentTable(TableRow):
    id: int
    created_at: Optional[datetime] = None
    std_id: str
    person_id: int
    prefix_th: Optional[str] = None
    prefix_en: Optional[str] = None
    first_name_th: str
    first_name_en: Optional[str] = None
    last_name_th: str
    last_name_en: Optional[str] = None
    middle_name_th: Optional[str] = None
    middle_name_en: Optional[str] = None
    nickname_th: Optional[str] = None
    nickname_en: Optional[str] = None
    birthdate: Optional[date] = None
    profile: Optional[str] = None
    contact_ids: list[int] = []

    spec = TableSpec(
        columns=STUDENT_COLUMNS,
        source=STUDENT_SOURCE,
        primary_key="student.id",
        sort_columns={
            StudentSortableField.ID: "student.id",
            StudentSortableField.STUDENT_ID: "student.std_id",
            StudentSortableField.FIRST_NAME_TH: "people.first_name_th",
            StudentSortableField.FIRST_NAME_EN: "people.first_name_en",
            StudentSortableField.LAST_NAME_TH: "people.last_name_th",
            StudentSortableField.LAST_NAME_EN: "people.last_name_en",
            StudentSortableField.CREATED_AT: "student.created_at",
        },
        filter_columns={
            "id": "student.id",
            "student_id": "student.std_id",
            "first_name_th": "people.first_name_th",
            "first_name_en": "people.first_name_en",
            "last_name_th": "people.last_name_th",
            "last_name_en": "people.last_name_en",
            "nickname_th": "people.nickname_th",
            "nickname_en": "people.nickname_en",
        },
        search_columns=(
            "people.first_name_th",
            "people.first_name_en",
            "people.last_name_th",
            "people.last_name_en",
            "people.nickname_th",
            "people.nickname_en",
            "student.std_id",
        ),
    )

    @field_validator("std_id", mode="before")
    @classmethod
    def _std_id_text(cls, value):
        return str(value) if value is not None else value

    @field_validator("contact_ids", mode="before")
    @classmethod
    def _null_array(cls, value):
        return value or []
