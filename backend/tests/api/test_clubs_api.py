import pytest
from httpx import AsyncClient
from uuid import uuid4

from club_registry.infra import jwt as jwt_helper
from club_registry.settings import settings
from fakes import club_record, login, request_record, user_record


def _route_clubs(pool, *records, total=None):
    pool.on("FROM clubs INNER JOIN organizations", list(records), method="fetch")
    pool.on("SELECT COUNT(*) FROM clubs", total if total is not None else len(records), method="fetchval")


@pytest.mark.asyncio
async def test_list_clubs_renders_envelope_with_pagination(api_client: AsyncClient, fake_pool):
    first, second = club_record(), club_record(name_th="ชมรมดนตรี", name_en="Music")
    _route_clubs(fake_pool, first, second, total=45)

    response = await api_client.get("/clubs", params={"pagination[p]": 2, "pagination[size]": 20})

    assert response.status_code == 200
    body = response.json()
    assert body["api_version"] == settings.api_version
    assert body["error"] is None
    assert [club["id"] for club in body["data"]] == [str(first["id"]), str(second["id"])]
    # listings default to the full view with id-only descendants
    assert body["data"][0]["members"] == []
    pagination = body["meta"]["pagination"]
    assert pagination["total"] == 45
    assert pagination["size"] == 20
    assert "pagination%5Bp%5D=3" in pagination["next"] or "pagination[p]=3" in pagination["next"]
    assert pagination["prev"] is not None
    assert "pagination%5Bp%5D=3" in pagination["last"] or "pagination[p]=3" in pagination["last"]
    assert response.headers["X-Request-Id"]


@pytest.mark.asyncio
async def test_list_clubs_translates_filters_into_parameters(api_client: AsyncClient, fake_pool):
    _route_clubs(fake_pool)

    response = await api_client.get(
        "/clubs",
        params={
            "filter[data][house]": "felis",
            "filter[q]": "chess",
            "sorting[by][]": "name_en",
            "fetch_level": "compact",
        },
    )

    assert response.status_code == 200
    listing = fake_pool.queries("ORDER BY")[0]
    assert listing.args[0] == "felis"
    assert listing.args[1:5] == ("%chess%",) * 4
    assert "ORDER BY organizations.name_en ASC, clubs.id ASC" in listing.query
    assert response.json()["meta"]["pagination"]["next"] is None


@pytest.mark.asyncio
async def test_invalid_query_envelope_is_bad_request(api_client: AsyncClient, fake_pool):
    response = await api_client.get("/clubs", params={"pagination[p]": 0})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["error_type"] == "bad_request"
    assert error["source"] == "/clubs"
    assert fake_pool.calls == []


@pytest.mark.asyncio
async def test_missing_club_is_entity_not_found(api_client: AsyncClient):
    club_id = uuid4()

    response = await api_client.get(f"/clubs/{club_id}")

    assert response.status_code == 404
    body = response.json()
    assert body["data"] is None
    assert body["error"]["error_type"] == "entity_not_found"
    assert body["error"]["code"] == 404
    assert body["error"]["detail"] == f"club with id {club_id} not found"
    assert body["error"]["id"] == response.headers["X-Request-Id"]


@pytest.mark.asyncio
async def test_get_club_at_id_only(api_client: AsyncClient, fake_pool):
    record = club_record()
    fake_pool.on("WHERE clubs.id = $1", record, method="fetchrow")

    response = await api_client.get(f"/clubs/{record['id']}", params={"fetch_level": "id_only"})

    assert response.status_code == 200
    assert response.json()["data"] == {"id": str(record["id"])}


@pytest.mark.asyncio
async def test_update_requires_authentication(api_client: AsyncClient, fake_pool):
    response = await api_client.patch(f"/clubs/{uuid4()}", json={"data": {"main_room": "101"}})

    assert response.status_code == 401
    assert response.json()["error"]["error_type"] == "unauthorized"
    assert fake_pool.writes == []


@pytest.mark.asyncio
async def test_update_by_non_staff_is_forbidden(api_client: AsyncClient, fake_pool):
    record = club_record()
    fake_pool.on("WHERE clubs.id = $1", record, method="fetchrow")
    fake_pool.on("FROM club_staffs WHERE student_id", False, method="fetchval")
    headers = login(fake_pool, user_record())

    response = await api_client.patch(
        f"/clubs/{record['id']}", json={"data": {"main_room": "101"}}, headers=headers
    )

    assert response.status_code == 403
    assert response.json()["error"]["error_type"] == "forbidden"
    assert fake_pool.writes == []


@pytest.mark.asyncio
async def test_update_without_data_is_bad_request(api_client: AsyncClient, fake_pool):
    headers = login(fake_pool, user_record())

    response = await api_client.patch(f"/clubs/{uuid4()}", json={"fetch_level": "compact"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["detail"] == "request body is empty"


@pytest.mark.asyncio
async def test_staff_update_returns_reread_club(api_client: AsyncClient, fake_pool):
    record = club_record()
    fake_pool.on("WHERE clubs.id = $1", record, method="fetchrow")
    fake_pool.on("FROM club_staffs WHERE student_id", True, method="fetchval")
    token = jwt_helper.encode_access({"sub": str(uuid4())})
    fake_pool.on("FROM users", user_record(), method="fetchrow")

    response = await api_client.patch(
        f"/clubs/{record['id']}",
        json={"data": {"name": {"en-US": "Chess"}, "map_location": 4}, "fetch_level": "compact"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(record["id"])
    assert [call.query.split(" SET")[0] for call in fake_pool.writes] == ["UPDATE organizations", "UPDATE clubs"]


@pytest.mark.asyncio
async def test_invalid_bearer_token_is_unauthorized(api_client: AsyncClient):
    response = await api_client.patch(
        f"/clubs/{uuid4()}",
        json={"data": {"main_room": "101"}},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_join_conflict_is_409(api_client: AsyncClient, fake_pool):
    record = club_record()
    fake_pool.on("WHERE clubs.id = $1", record, method="fetchrow")
    fake_pool.on("SELECT COUNT(*) FROM club_members WHERE club_id", 1, method="fetchval")
    headers = login(fake_pool, user_record())

    response = await api_client.post(f"/clubs/{record['id']}/join", headers=headers)

    assert response.status_code == 409
    assert response.json()["error"]["error_type"] == "conflict"
    assert fake_pool.writes == []


@pytest.mark.asyncio
async def test_join_creates_pending_request(api_client: AsyncClient, fake_pool):
    record = club_record()
    fake_pool.on("WHERE clubs.id = $1", record, method="fetchrow")
    fake_pool.on("SELECT COUNT(*) FROM club_members WHERE club_id", 0, method="fetchval")
    fake_pool.on("INSERT INTO club_members", request_record(club_id=record["id"]), method="fetchrow")
    headers = login(fake_pool, user_record())

    response = await api_client.post(
        f"/clubs/{record['id']}/join", json={"fetch_level": "compact"}, headers=headers
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["club_id"] == str(record["id"])
    assert data["membership_status"] == "pending"


@pytest.mark.asyncio
async def test_teachers_cannot_join(api_client: AsyncClient, fake_pool):
    headers = login(fake_pool, user_record(role="teacher", student=None, teacher=3))

    response = await api_client.post(f"/clubs/{uuid4()}/join", headers=headers)

    assert response.status_code == 403
    assert fake_pool.writes == []


@pytest.mark.asyncio
async def test_add_contact_returns_club(api_client: AsyncClient, fake_pool):
    record = club_record()
    fake_pool.on("WHERE clubs.id = $1", record, method="fetchrow")
    fake_pool.on("FROM club_staffs WHERE student_id", True, method="fetchval")
    fake_pool.on(
        "INSERT INTO contacts",
        {
            "id": 11,
            "created_at": None,
            "name_th": None,
            "name_en": None,
            "value": "@chess",
            "type": "Line",
            "include_students": None,
            "include_teachers": None,
            "include_parents": None,
        },
        method="fetchrow",
    )
    headers = login(fake_pool, user_record())

    response = await api_client.post(
        f"/clubs/{record['id']}/contacts",
        json={"data": {"value": "@chess", "type": "line"}, "fetch_level": "id_only"},
        headers=headers,
    )

    assert response.status_code == 201
    assert response.json()["data"] == {"id": str(record["id"])}
    assert fake_pool.transactions == ["committed"]
