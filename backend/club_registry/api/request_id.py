"""Request ID helper for endpoints and error handlers."""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from fastapi import Request

from club_registry.obs import logging as obs_logging

REQUEST_ID_ATTR = "request_id"


def get_request_id(request: Optional[Request] = None) -> str:
    """Return the id bound by the observability middleware, minting one if none is bound.

    ``request.state`` survives after the logging context has been reset, so it
    is checked first for handlers that run outside the middleware. A minted id
    is stored back on the request so the error body and header agree.
    """
    if request is not None:
        rid = getattr(request.state, REQUEST_ID_ATTR, None)
        if rid:
            return str(rid)
    rid = obs_logging.current_request_id() or str(uuid4())
    if request is not None:
        setattr(request.state, REQUEST_ID_ATTR, rid)
    return rid
