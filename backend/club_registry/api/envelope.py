"""Request envelope decoding and response envelope rendering.

GET routes carry the envelope in the query string using bracket notation,
e.g. ``filter[data][house]=felis&sorting[by][]=name_th&pagination[p]=2``.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from math import ceil
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import parse_qsl

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from club_registry.domain.common.exceptions import BadRequestError
from club_registry.domain.common.schemas import Metadata, PaginationMeta, ResponseEnvelope
from club_registry.settings import settings

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)

_KEY_HEAD = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_KEY_PART = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list[str]:
    match = _KEY_HEAD.match(key)
    if not match:
        return [key]
    head, rest = match.groups()
    return [head, *_KEY_PART.findall(rest)]


def _assign(root: dict[str, Any], parts: list[str], value: str) -> None:
    node = root
    for index, part in enumerate(parts):
        if part == "":
            part = str(len(node))
        if index == len(parts) - 1:
            existing = node.get(part)
            if existing is None or isinstance(existing, dict):
                node[part] = value
            elif isinstance(existing, list):
                existing.append(value)
            else:
                node[part] = [existing, value]
            return
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child


def _listify(value: Any) -> Any:
    if isinstance(value, dict):
        converted = {key: _listify(item) for key, item in value.items()}
        if converted and all(key.isdigit() for key in converted):
            return [converted[key] for key in sorted(converted, key=int)]
        return converted
    return value


def parse_nested_query(query: str) -> dict[str, Any]:
    """Decode a bracket-notation query string into nested dicts and lists.

    ``a[]`` and ``a[0]`` build lists, ``a[b]`` builds objects, and a plain key
    repeated several times collects its values into a list. Blank values are
    dropped.
    """
    root: dict[str, Any] = {}
    for key, value in parse_qsl(query):
        _assign(root, _split_key(key), value)
    return _listify(root)


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "invalid request"


def validate_envelope(model: type[EnvelopeT], payload: Any) -> EnvelopeT:
    try:
        return model.model_validate(payload or {})
    except ValidationError as exc:
        raise BadRequestError(_describe(exc)) from exc


def query_envelope(model: type[EnvelopeT]) -> Callable[[Request], EnvelopeT]:
    """Dependency decoding ``model`` from the query string."""

    async def _dependency(request: Request) -> EnvelopeT:
        return validate_envelope(model, parse_nested_query(request.url.query))

    return _dependency


def pagination_meta(request: Request, page: int, size: int, total: int) -> PaginationMeta:
    last_page = max(1, ceil(total / size)) if size else 1

    def link(number: int) -> str:
        return str(request.url.include_query_params(**{"pagination[p]": number, "pagination[size]": size}))

    return PaginationMeta(
        first=link(1),
        last=link(last_page),
        next=link(page + 1) if page < last_page else None,
        prev=link(page - 1) if page > 1 else None,
        size=size,
        total=total,
    )


def respond(
    data: Any,
    *,
    pagination: Optional[PaginationMeta] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    envelope = ResponseEnvelope(
        api_version=settings.api_version,
        data=data,
        meta=Metadata(timestamp=datetime.now(timezone.utc), pagination=pagination),
    )
    return JSONResponse(content=envelope.to_json(), status_code=status_code)
