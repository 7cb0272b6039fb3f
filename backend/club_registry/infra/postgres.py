"""AsyncPG pool management for the backend.

The pool lives on ``app.state.pool`` for the lifetime of the application and
is handed to data-access code explicitly; nothing below keeps a module-level
reference to it.
"""

from __future__ import annotations

import asyncpg
from fastapi import Request

from club_registry.settings import Settings


async def create_pool(config: Settings) -> asyncpg.Pool:
	# Force 127.0.0.1 instead of localhost to avoid IPv6 resolution surprises
	dsn = config.postgres_url.replace("localhost", "127.0.0.1")
	return await asyncpg.create_pool(
		dsn=dsn,
		min_size=config.postgres_min_pool_size,
		max_size=config.postgres_max_pool_size,
		command_timeout=config.postgres_command_timeout,
	)


async def close_pool(pool: asyncpg.Pool | None) -> None:
	if pool is not None:
		await pool.close()


def get_pool(request: Request) -> asyncpg.Pool:
	"""FastAPI dependency returning the pool attached during startup."""
	pool = getattr(request.app.state, "pool", None)
	if pool is None:
		raise RuntimeError("postgres pool is not initialised")
	return pool
