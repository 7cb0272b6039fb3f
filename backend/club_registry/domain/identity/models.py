"""Application users."""

from __future__ import annotations

from enum import Enum
from typing import Optional
from uuid import UUID

from club_registry.domain.common.facade import TableRow
from club_registry.domain.common.query_builder import TableSpec


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"

    @classmethod
    def _missing_(cls, value: object) -> Optional["UserRole"]:
        # some rows store the role JSON-encoded, quotes included
        if isinstance(value, str):
            cleaned = value.strip().strip('"').lower()
            for member in cls:
                if member.value == cleaned:
                    return member
        return None


class UserSortableField(str, Enum):
    ID = "id"


class UserTable(TableRow):
    id: UUID
    email: Optional[str] = None
    role: UserRole
    student: Optional[int] = None
    teacher: Optional[int] = None
    onboarded: bool = False
    is_admin: bool = False

    spec = TableSpec(
        columns=(
            "users.id, users.email, users.role::text AS role, users.student, users.teacher,"
            " COALESCE(users.onboarded, FALSE) AS onboarded, COALESCE(users.is_admin, FALSE) AS is_admin"
        ),
        source="users",
        primary_key="users.id",
        sort_columns={UserSortableField.ID: "users.id"},
        filter_columns={},
    )
