"""Error taxonomy shared by every registry service."""

from __future__ import annotations

from fastapi import status


class RegistryError(Exception):
	"""Base class for errors rendered as the API error envelope."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	error_type: str = "bad_request"
	detail: str = "bad request"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail


class BadRequestError(RegistryError):
	"""Malformed envelope, missing payload, or an invalid enum target."""


class UnauthorizedError(RegistryError):
	"""Missing, invalid or expired bearer token."""

	status_code = status.HTTP_401_UNAUTHORIZED
	error_type = "unauthorized"
	detail = "invalid or missing bearer token"


class ForbiddenError(RegistryError):
	"""Authenticated, but not allowed to act on this resource."""

	status_code = status.HTTP_403_FORBIDDEN
	error_type = "forbidden"
	detail = "forbidden"


class NotFoundError(RegistryError):
	"""Thrown when an id does not resolve to a row."""

	status_code = status.HTTP_404_NOT_FOUND
	error_type = "entity_not_found"
	detail = "entity not found"


class ConflictError(RegistryError):
	"""Raised when a uniqueness rule would be broken (e.g. duplicate join)."""

	status_code = status.HTTP_409_CONFLICT
	error_type = "conflict"
	detail = "conflict"


class InternalServerError(RegistryError):
	"""Storage failure or a broken internal invariant."""

	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
	error_type = "internal_server_error"
	detail = "internal server error"
