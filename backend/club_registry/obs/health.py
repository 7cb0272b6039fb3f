"""Database reachability probe backing ``/health-check``."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Dict

import asyncpg

from club_registry.obs import metrics

LOGGER = logging.getLogger(__name__)


async def _select_one(pool: asyncpg.Pool) -> None:
	async with pool.acquire() as conn:
		await conn.execute("SELECT 1")


async def postgres_status(pool: asyncpg.Pool, timeout: float = 0.5) -> Dict[str, Any]:
	start = perf_counter()
	try:
		await asyncio.wait_for(_select_one(pool), timeout=timeout)
	except Exception as exc:  # noqa: BLE001
		metrics.mark_postgres(False)
		LOGGER.warning("Postgres health query failed", exc_info=True)
		return {"ok": False, "error": str(exc) or type(exc).__name__}
	latency = perf_counter() - start
	metrics.mark_postgres(True, latency_seconds=latency)
	return {"ok": True, "latency_ms": round(latency * 1000, 2)}


async def health_check(pool: asyncpg.Pool) -> Dict[str, Any]:
	status = await postgres_status(pool)
	return {
		"server_time": datetime.now(timezone.utc).isoformat(),
		"database_connection": status["ok"],
		"database_response_time": status.get("latency_ms"),
	}
