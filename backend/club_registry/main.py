"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from club_registry.api import classrooms, clubs, contacts, join_requests, ops, students
from club_registry.api.errors import install_error_handlers
from club_registry.infra import postgres
from club_registry.obs import init as obs_init
from club_registry.obs import logging as obs_logging
from club_registry.settings import settings

_log = obs_logging.get_logger("club_registry.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
	app.state.pool = await postgres.create_pool(settings)
	_log.info("postgres_pool_ready", extra={"max_size": settings.postgres_max_pool_size})
	try:
		yield
	finally:
		await postgres.close_pool(app.state.pool)
		app.state.pool = None


app = FastAPI(title="Club Registry API", version=settings.api_version, lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins:
	allow_origins = ["http://localhost:3000"] if settings.is_dev() else []

# Starlette disallows wildcard '*' with allow_credentials=True.
allow_credentials = "*" not in allow_origins

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=allow_credentials,
	allow_methods=["*"],
	allow_headers=["*"],
)
obs_init(app)

app.include_router(ops.router, tags=["ops"])
app.include_router(clubs.router, tags=["clubs"])
app.include_router(join_requests.router, tags=["join_requests"])
app.include_router(students.router, tags=["students"])
app.include_router(contacts.router, tags=["contacts"])
app.include_router(classrooms.router, tags=["classrooms"])
