"""Authentication helpers for FastAPI endpoints.

A bearer JWT resolves to a ``users`` row. In development a raw
``X-User-Id`` header is accepted instead so local tools can skip signing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import asyncpg
from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import InvalidTokenError

from club_registry.domain.common.exceptions import ForbiddenError, UnauthorizedError
from club_registry.domain.identity.models import UserRole, UserTable
from club_registry.infra import jwt as jwt_helper
from club_registry.infra.postgres import get_pool
from club_registry.obs import logging as obs_logging
from club_registry.settings import settings


@dataclass(slots=True)
class AuthenticatedUser:
	id: UUID
	role: UserRole
	student_id: Optional[int] = None
	teacher_id: Optional[int] = None
	email: Optional[str] = None
	onboarded: bool = False
	is_admin: bool = False

	def has_role(self, role: UserRole) -> bool:
		return self.role is role

	@classmethod
	def from_row(cls, row: UserTable) -> "AuthenticatedUser":
		return cls(
			id=row.id,
			role=row.role,
			student_id=row.student,
			teacher_id=row.teacher,
			email=row.email,
			onboarded=row.onboarded,
			is_admin=row.is_admin,
		)


_bearer_scheme = HTTPBearer(auto_error=False)


def _subject_from_token(token: str) -> UUID:
	try:
		payload = jwt_helper.decode_access(token)
		return UUID(str(payload["sub"]))
	except (InvalidTokenError, ValueError, KeyError) as exc:
		raise UnauthorizedError("invalid_token") from exc


async def load_user(pool: asyncpg.Pool, user_id: UUID) -> AuthenticatedUser:
	row = await UserTable.get_by_id(pool, user_id)
	if row is None:
		raise UnauthorizedError("unknown user")
	user = AuthenticatedUser.from_row(row)
	obs_logging.bind_user(str(user.id))
	return user


async def get_current_user(
	pool: asyncpg.Pool = Depends(get_pool),
	x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
	credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> AuthenticatedUser:
	"""Resolve the authenticated user.

	In development a bare ``X-User-Id`` header is honoured; everywhere else a
	valid bearer JWT is required.
	"""
	if credentials and credentials.scheme.lower() == "bearer":
		return await load_user(pool, _subject_from_token(credentials.credentials))

	if settings.is_dev() and x_user_id:
		try:
			user_id = UUID(x_user_id.strip())
		except ValueError as exc:
			raise UnauthorizedError("invalid X-User-Id") from exc
		return await load_user(pool, user_id)

	raise UnauthorizedError()


async def get_current_student(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
	if user.has_role(UserRole.STUDENT) and user.student_id is not None:
		return user
	raise ForbiddenError("user is not a student")
