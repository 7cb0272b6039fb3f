"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, Summary


REQUEST_COUNTER = Counter(
	"club_registry_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"club_registry_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

POSTGRES_UP = Gauge("club_registry_postgres_up", "Postgres availability (1=up,0=down)")
POSTGRES_LATENCY = Summary("club_registry_postgres_latency_seconds", "Postgres ping latency (seconds)")

ENTITY_FETCHES = Counter(
	"club_registry_entity_fetch_total",
	"Entity views resolved by the projection layer",
	["entity", "fetch_level"],
)

JOIN_REQUESTS_CREATED = Counter(
	"club_registry_join_requests_created_total",
	"Club join requests submitted",
)

JOIN_REQUESTS_CONFLICTS = Counter(
	"club_registry_join_requests_conflict_total",
	"Club join requests rejected as duplicates",
)

JOIN_REQUESTS_DECIDED = Counter(
	"club_registry_join_requests_decided_total",
	"Club join requests approved or declined",
	["status"],
)

CLUB_UPDATES = Counter(
	"club_registry_club_updates_total",
	"Club partial updates applied",
	["result"],
)

CLUB_CONTACTS_CREATED = Counter(
	"club_registry_club_contacts_created_total",
	"Contacts attached to clubs",
)

AUTHZ_DENIED = Counter(
	"club_registry_authz_denied_total",
	"Requests rejected by the club staff check",
	["action"],
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def mark_postgres(ok: bool, *, latency_seconds: float | None = None) -> None:
	POSTGRES_UP.set(1 if ok else 0)
	if latency_seconds is not None:
		POSTGRES_LATENCY.observe(latency_seconds)


def inc_entity_fetch(entity: str, fetch_level: str) -> None:
	ENTITY_FETCHES.labels(entity=entity, fetch_level=fetch_level).inc()


def inc_join_request_created() -> None:
	JOIN_REQUESTS_CREATED.inc()


def inc_join_request_conflict() -> None:
	JOIN_REQUESTS_CONFLICTS.inc()


def inc_join_request_decided(status: str) -> None:
	JOIN_REQUESTS_DECIDED.labels(status=status).inc()


def inc_club_update(result: str) -> None:
	CLUB_UPDATES.labels(result=result).inc()


def inc_club_contact_created() -> None:
	CLUB_CONTACTS_CREATED.inc()


def inc_authz_denied(action: str) -> None:
	AUTHZ_DENIED.labels(action=action).inc()
