"""API Dependencies - service lookup and anonymous caller resolution.

Invariants:
    - get_service returns the one WhisprService built by the app lifespan
    - Caller id precedence: X-Whispr-Id header, then user_id query param, then body

Design Decisions:
    - Service lives on app.state: tests override it with dependency_overrides
      or by assigning app.state.service, no module-level singleton
"""

from fastapi import Header, Query, Request

from whispr.core.errors import MissingCallerIdError
from whispr.services.whispr_service import WhisprService


def get_service(request: Request) -> WhisprService:
    return request.app.state.service


def optional_caller_id(
    x_whispr_id: str | None = Header(None, max_length=128),
    user_id: str | None = Query(None, max_length=128),
) -> str | None:
    for candidate in (x_whispr_id, user_id):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def require_caller_id(*candidates: str | None) -> str:
    """First non-empty id among candidates, or MissingCallerIdError."""
    for candidate in candidates:
        if candidate:
            return candidate
    raise MissingCallerIdError()
