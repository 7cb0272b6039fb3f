"""Student façade."""

from __future__ import annotations

from club_registry.domain.common.facade import EntityFacade
from club_registry.domain.common.fetch_level import FetchLevel
from club_registry.domain.students.models import StudentTable
from club_registry.domain.students.schemas import CompactStudent, DefaultStudent, IdOnlyStudent


class StudentService(EntityFacade[StudentTable]):
    entity = "student"
    table = StudentTable
    views = {
        FetchLevel.DEFAULT: DefaultStudent,
        FetchLevel.COMPACT: CompactStudent,
        FetchLevel.ID_ONLY: IdOnlyStudent,
    }
