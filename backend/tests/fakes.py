"""In-memory stand-ins for the asyncpg pool and canned storage rows."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

from club_registry.domain.common.academic_year import current_academic_year


@dataclass
class Call:
	method: str
	query: str
	args: tuple


class FakeTransaction:
	def __init__(self, pool: "FakePool") -> None:
		self._pool = pool

	async def __aenter__(self) -> "FakeTransaction":
		self._pool.transactions.append("open")
		return self

	async def __aexit__(self, exc_type, exc, tb) -> bool:
		self._pool.transactions[-1] = "rolled_back" if exc_type else "committed"
		return False


class FakeConnection:
	def __init__(self, pool: "FakePool") -> None:
		self._pool = pool

	async def fetch(self, query: str, *args: Any):
		return self._pool.dispatch("fetch", query, args)

	async def fetchrow(self, query: str, *args: Any):
		return self._pool.dispatch("fetchrow", query, args)

	async def fetchval(self, query: str, *args: Any):
		return self._pool.dispatch("fetchval", query, args)

	async def execute(self, query: str, *args: Any):
		return self._pool.dispatch("execute", query, args)

	def transaction(self) -> FakeTransaction:
		return FakeTransaction(self._pool)


class _Acquire:
	def __init__(self, pool: "FakePool") -> None:
		self._pool = pool

	async def __aenter__(self) -> FakeConnection:
		return FakeConnection(self._pool)

	async def __aexit__(self, exc_type, exc, tb) -> bool:
		return False


_DEFAULTS = {"fetch": [], "fetchrow": None, "fetchval": None, "execute": "OK"}


class FakePool:
	"""Stand-in for an asyncpg pool.

	Statements are matched against registered SQL fragments (latest first)
	and every call is recorded so tests can count queries and writes.
	"""

	def __init__(self) -> None:
		self.routes: list[tuple[str, Optional[str], Any]] = []
		self.calls: list[Call] = []
		self.transactions: list[str] = []

	def on(self, fragment: str, result: Any, *, method: Optional[str] = None) -> "FakePool":
		self.routes.append((fragment, method, result))
		return self

	def acquire(self) -> _Acquire:
		return _Acquire(self)

	def dispatch(self, method: str, query: str, args: tuple) -> Any:
		normalised = " ".join(query.split())
		self.calls.append(Call(method, normalised, args))
		for fragment, route_method, result in reversed(self.routes):
			if route_method not in (None, method):
				continue
			if fragment in normalised:
				return result(*args) if callable(result) else result
		return _DEFAULTS[method]

	def queries(self, fragment: str = "") -> list[Call]:
		return [call for call in self.calls if fragment in call.query]

	@property
	def writes(self) -> list[Call]:
		return [call for call in self.calls if call.query.split(" ", 1)[0] in ("INSERT", "UPDATE", "DELETE")]


def user_record(*, role: str = "student", student: Optional[int] = 1, is_admin: bool = False, **overrides):
	record = {
		"id": uuid4(),
		"email": "student@school.ac.th",
		"role": role,
		"student": student,
		"teacher": None,
		"onboarded": True,
		"is_admin": is_admin,
	}
	record.update(overrides)
	return record


def club_record(**overrides):
	record = {
		"id": uuid4(),
		"created_at": datetime(2024, 5, 20, tzinfo=timezone.utc),
		"organization_id": 7,
		"name_th": "ชมรมหมากรุก",
		"name_en": "Chess Club",
		"description_th": "เล่นหมากรุก",
		"description_en": "We play chess",
		"main_room": "4305",
		"logo_url": "https://cdn.example/chess.png",
		"background_color": "#112233",
		"accent_color": "#445566",
		"house": "felis",
		"map_location": 12,
	}
	record.update(overrides)
	return record


def student_record(student_id: int = 1, **overrides):
	record = {
		"id": student_id,
		"created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
		"std_id": f"{50000 + student_id}",
		"person_id": 100 + student_id,
		"prefix_th": "นาย",
		"prefix_en": "Mr.",
		"first_name_th": "สมชาย",
		"first_name_en": "Somchai",
		"last_name_th": "ใจดี",
		"last_name_en": "Jaidee",
		"middle_name_th": None,
		"middle_name_en": None,
		"nickname_th": "ชาย",
		"nickname_en": "Chai",
		"birthdate": date(2008, 1, 2),
		"profile": None,
		"contact_ids": [],
	}
	record.update(overrides)
	return record


def contact_record(contact_id: int = 1, **overrides):
	record = {
		"id": contact_id,
		"created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
		"name_th": "ไลน์ชมรม",
		"name_en": "Club LINE",
		"value": f"@club{contact_id}",
		"type": "Line",
		"include_students": True,
		"include_teachers": False,
		"include_parents": None,
	}
	record.update(overrides)
	return record


def classroom_record(classroom_id: int = 1, **overrides):
	record = {
		"id": classroom_id,
		"created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
		"number": 504,
		"year": current_academic_year(),
		"students": [1, 2],
		"advisors": [],
		"contacts": [],
		"subjects": [],
		"no_list": [2, 1],
	}
	record.update(overrides)
	return record


def request_record(*, club_id: UUID, student_id: int = 1, status: str = "pending", **overrides):
	record = {
		"id": uuid4(),
		"created_at": datetime(2024, 6, 1, tzinfo=timezone.utc),
		"club_id": club_id,
		"student_id": student_id,
		"year": current_academic_year(),
		"membership_status": status,
	}
	record.update(overrides)
	return record


def login(pool: FakePool, record: dict) -> dict[str, str]:
	"""Route the users lookup to ``record`` and return the dev auth header."""
	pool.on("FROM users", record, method="fetchrow")
	return {"X-User-Id": str(record["id"])}
