from typing import Any

import pytest
from uuid import uuid4

from club_registry.domain.clubs.models import SubmissionStatus
from club_registry.domain.common.academic_year import current_academic_year
from club_registry.domain.common.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from club_registry.domain.common.fetch_level import FetchLevel
from club_registry.domain.common.schemas import FilterConfig, RequestEnvelope
from club_registry.domain.identity.authorization import AuthorizationService
from club_registry.domain.identity.models import UserRole
from club_registry.domain.join_requests.schemas import CompactClubRequest, QueryableClubRequest
from club_registry.domain.join_requests.service import JoinRequestService
from club_registry.infra.auth import AuthenticatedUser
from fakes import club_record, request_record


@pytest.fixture
def service():
    return JoinRequestService()


@pytest.fixture
def club(fake_pool):
    record = club_record()
    fake_pool.on("WHERE clubs.id = $1", record, method="fetchrow")
    return record


def _student(student_id=1, **kwargs):
    return AuthenticatedUser(id=uuid4(), role=UserRole.STUDENT, student_id=student_id, **kwargs)


def _active_count(pool, count):
    pool.on("SELECT COUNT(*) FROM club_members WHERE club_id", count, method="fetchval")


@pytest.mark.asyncio
async def test_submit_creates_pending_request(fake_pool, service, club):
    _active_count(fake_pool, 0)
    created = request_record(club_id=club["id"], student_id=1)
    fake_pool.on("INSERT INTO club_members", created, method="fetchrow")

    view = await service.submit(fake_pool, club["id"], _student(), FetchLevel.COMPACT)

    assert isinstance(view, CompactClubRequest)
    assert view.membership_status is SubmissionStatus.PENDING
    insert = fake_pool.writes[0]
    assert insert.args == (club["id"], 1, current_academic_year(), "pending")
    assert fake_pool.transactions == ["committed"]


@pytest.mark.asyncio
async def test_submit_conflicts_without_inserting(fake_pool, service, club):
    _active_count(fake_pool, 1)

    with pytest.raises(ConflictError):
        await service.submit(fake_pool, club["id"], _student())

    assert fake_pool.writes == []
    assert fake_pool.transactions == ["rolled_back"]
    count_call = fake_pool.queries("SELECT COUNT(*) FROM club_members")[0]
    assert count_call.args[:3] == (club["id"], 1, current_academic_year())
    assert set(count_call.args[3]) == {"pending", "approved"}


@pytest.mark.asyncio
async def test_submit_to_unknown_club_is_not_found(fake_pool, service):
    with pytest.raises(NotFoundError):
        await service.submit(fake_pool, uuid4(), _student())
    assert fake_pool.writes == []


@pytest.mark.asyncio
async def test_decide_rejects_pending_target_before_any_query(fake_pool, service):
    with pytest.raises(BadRequestError):
        await service.decide(fake_pool, uuid4(), SubmissionStatus.PENDING, _student())
    assert fake_pool.calls == []


@pytest.mark.asyncio
async def test_decide_requires_staff_of_the_requests_club(fake_pool, service, club):
    record = request_record(club_id=club["id"], student_id=2)
    fake_pool.on("WHERE club_members.id = $1", record, method="fetchrow")
    fake_pool.on("FROM club_staffs WHERE student_id", False, method="fetchval")

    with pytest.raises(ForbiddenError):
        await service.decide(fake_pool, record["id"], SubmissionStatus.APPROVED, _student())

    staff_call = fake_pool.queries("FROM club_staffs")[0]
    assert staff_call.args == (1, club["id"], current_academic_year())
    assert fake_pool.writes == []


@pytest.mark.asyncio
async def test_decide_already_decided_request_conflicts(fake_pool, service, club):
    record = request_record(club_id=club["id"], status="approved")
    fake_pool.on("WHERE club_members.id = $1", record, method="fetchrow")

    with pytest.raises(ConflictError):
        await service.decide(fake_pool, record["id"], SubmissionStatus.DECLINED, _student(is_admin=True))

    assert fake_pool.writes == []


@pytest.mark.asyncio
async def test_staff_approves_pending_request(fake_pool, service, club):
    record = request_record(club_id=club["id"], student_id=2)
    fake_pool.on("WHERE club_members.id = $1", record, method="fetchrow")
    fake_pool.on("FROM club_staffs WHERE student_id", True, method="fetchval")
    fake_pool.on("UPDATE club_members", record["id"], method="fetchval")

    await service.decide(fake_pool, record["id"], SubmissionStatus.APPROVED, _student(), FetchLevel.ID_ONLY)

    update = fake_pool.writes[0]
    assert update.query == (
        "UPDATE club_members SET membership_status = $1"
        " WHERE id = $2 AND membership_status = 'pending' RETURNING id"
    )
    assert update.args == ("approved", record["id"])


@pytest.mark.asyncio
async def test_decide_conflicts_when_another_decision_lands_first(fake_pool, service, club):
    record = request_record(club_id=club["id"], student_id=2)
    fake_pool.on("WHERE club_members.id = $1", record, method="fetchrow")
    fake_pool.on("FROM club_staffs WHERE student_id", True, method="fetchval")
    # the row still reads as pending but the guarded update matches nothing
    fake_pool.on("UPDATE club_members", None, method="fetchval")

    with pytest.raises(ConflictError):
        await service.decide(fake_pool, record["id"], SubmissionStatus.DECLINED, _student())

    assert len(fake_pool.writes) == 1
    assert len(fake_pool.queries("WHERE club_members.id = $1")) == 1


@pytest.mark.asyncio
async def test_non_staff_students_only_list_their_own(fake_pool, service):
    envelope = RequestEnvelope[Any, QueryableClubRequest, Any]()

    await service.query_visible(fake_pool, envelope, _student(student_id=7))

    listing = fake_pool.queries("ORDER BY")[0]
    assert "club_members.student_id = $1" in listing.query
    assert listing.args[0] == 7


@pytest.mark.asyncio
async def test_staff_filtering_by_their_club_see_all_of_it(fake_pool, service, club):
    fake_pool.on("FROM club_staffs WHERE student_id", True, method="fetchval")
    envelope = RequestEnvelope[Any, QueryableClubRequest, Any](
        filter=FilterConfig[QueryableClubRequest](data=QueryableClubRequest(club_id=club["id"]))
    )

    await service.query_visible(fake_pool, envelope, _student(student_id=7))

    listing = fake_pool.queries("ORDER BY")[0]
    predicates = listing.query.split(" WHERE ", 1)[1].split(" ORDER BY ")[0]
    assert predicates == "club_members.club_id = $1"
    assert listing.args[0] == club["id"]


@pytest.mark.asyncio
async def test_teachers_list_everything(fake_pool, service):
    teacher = AuthenticatedUser(id=uuid4(), role=UserRole.TEACHER, teacher_id=4)
    envelope = RequestEnvelope[Any, QueryableClubRequest, Any]()

    await service.query_visible(fake_pool, envelope, teacher)

    listing = fake_pool.queries("ORDER BY")[0]
    assert "WHERE" not in listing.query
    assert fake_pool.queries("club_staffs") == []


@pytest.mark.asyncio
async def test_is_club_staff_defaults_to_current_year(fake_pool):
    fake_pool.on("FROM club_staffs WHERE student_id", True, method="fetchval")
    club_id = uuid4()

    assert await AuthorizationService.is_club_staff(fake_pool, 3, club_id) is True
    assert fake_pool.calls[0].args == (3, club_id, current_academic_year())
