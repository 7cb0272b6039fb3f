"""Request instrumentation: correlation id, Prometheus timings and one access log line."""

from __future__ import annotations

import time
from uuid import UUID, uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from club_registry.obs import logging as obs_logging
from club_registry.obs import metrics
from club_registry.settings import settings

REQUEST_ID_HEADER = "X-Request-Id"


def _route_template(request: Request) -> str:
	# only resolved once the router has matched, i.e. after call_next
	route = request.scope.get("route")
	path = getattr(route, "path", None)
	return path or request.url.path


def _client_request_id(request: Request) -> str | None:
	header = request.headers.get(REQUEST_ID_HEADER)
	if not header:
		return None
	try:
		return str(UUID(header))
	except ValueError:
		return None


def _request_id(request: Request) -> str:
	request_id = getattr(request.state, "request_id", None)
	if not request_id:
		request_id = _client_request_id(request) or str(uuid4())
		request.state.request_id = request_id
	return request_id


class ObservabilityMiddleware(BaseHTTPMiddleware):
	"""Bind the correlation id for the request and record its outcome."""

	def __init__(self, app, *, enabled: bool = True) -> None:
		super().__init__(app)
		self._enabled = enabled
		self._logger = obs_logging.get_logger("club_registry.http")

	async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
		if not (settings.obs_enabled and self._enabled):
			return await call_next(request)

		request_id = _request_id(request)
		tokens = obs_logging.bind_context(
			request_id=request_id,
			route=request.url.path,
			client_ip=request.client.host if request.client else None,
		)
		start = time.perf_counter()
		status_code = 500
		try:
			response = await call_next(request)
			status_code = response.status_code
			response.headers.setdefault(REQUEST_ID_HEADER, request_id)
			return response
		finally:
			elapsed = time.perf_counter() - start
			route = _route_template(request)
			metrics.observe_request(route, request.method, status_code, elapsed)
			level = self._logger.error if status_code >= 500 else self._logger.info
			level(
				"http_request",
				extra={
					"status": status_code,
					"method": request.method,
					"route_template": route,
					"fetch_level": request.query_params.get("fetch_level"),
					"latency_ms": round(elapsed * 1000, 3),
				},
			)
			obs_logging.reset_context(tokens)


def install(app, *, enabled: bool = True) -> None:
	app.add_middleware(ObservabilityMiddleware, enabled=enabled)
