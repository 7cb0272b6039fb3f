"""Classroom façade."""

from __future__ import annotations

from club_registry.domain.classrooms.models import ClassroomTable
from club_registry.domain.classrooms.schemas import CompactClassroom, DefaultClassroom, IdOnlyClassroom
from club_registry.domain.common.facade import EntityFacade
from club_registry.domain.common.fetch_level import FetchLevel


class ClassroomService(EntityFacade[ClassroomTable]):
    entity = "classroom"
    table = ClassroomTable
    views = {
        FetchLevel.DEFAULT: DefaultClassroom,
        FetchLevel.COMPACT: CompactClassroom,
        FetchLevel.ID_ONLY: IdOnlyClassroom,
    }
