"""Operations endpoints: greeting, health check, metrics and the caller's identity."""

from __future__ import annotations

from typing import Optional

import asyncpg
from fastapi import APIRouter, Depends, Header, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from club_registry.api.envelope import respond
from club_registry.domain.common.exceptions import ForbiddenError
from club_registry.infra.auth import AuthenticatedUser, get_current_user
from club_registry.infra.postgres import get_pool
from club_registry.obs import health
from club_registry.settings import settings

router = APIRouter(prefix="", tags=["ops"])


def _resolve_token(x_admin_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
	if x_admin_token:
		return x_admin_token
	if authorization and authorization.lower().startswith("bearer "):
		return authorization.split(" ", 1)[1]
	return None


async def require_metrics_access(
	x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
	authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> None:
	if settings.obs_metrics_public:
		return
	token = settings.obs_admin_token
	if not token:
		# Fail closed: with no token configured nobody may scrape.
		raise ForbiddenError("admin_token_not_configured")
	if _resolve_token(x_admin_token, authorization) != token:
		raise ForbiddenError()


@router.get("/")
async def index() -> dict[str, str]:
	return {"message": f"{settings.service_name} {settings.api_version}"}


@router.get("/health-check")
async def health_check_endpoint(pool: asyncpg.Pool = Depends(get_pool)):
	return respond(await health.health_check(pool))


@router.get("/metrics", dependencies=[Depends(require_metrics_access)])
async def metrics_endpoint() -> Response:
	return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/me")
async def me_endpoint(auth_user: AuthenticatedUser = Depends(get_current_user)):
	return respond(
		{
			"id": str(auth_user.id),
			"email": auth_user.email,
			"role": auth_user.role.value,
			"student_id": auth_user.student_id,
			"teacher_id": auth_user.teacher_id,
			"onboarded": auth_user.onboarded,
			"is_admin": auth_user.is_admin,
		}
	)
