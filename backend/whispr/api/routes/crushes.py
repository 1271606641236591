"""Crush Routes - send, list, reveal and delete anonymous crushes.

Invariants:
    - Listing is scoped to the caller: crushes are only visible to their sender
    - Duplicate (sender, alias) pairs are rejected with 400 CONTENT_REJECTED
    - Reveal is idempotent: a second reveal returns the same crush
"""

from fastapi import APIRouter, Depends, Response, status

from whispr.api.dependencies import get_service, optional_caller_id, require_caller_id
from whispr.core.errors import ContentRejectedError, ResourceNotFoundError
from whispr.core.store_snapshot import crush_to_dict
from whispr.schemas.content import CrushCreate
from whispr.services.whispr_service import WhisprService

router = APIRouter(prefix="/api/v1/crushes", tags=["crushes"])


@router.get("")
async def list_crushes(
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    return [crush_to_dict(c) for c in service.list_crushes(require_caller_id(caller))]


@router.post("", status_code=status.HTTP_201_CREATED)
async def send_crush(
    body: CrushCreate,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    crush = await service.send_crush(
        require_caller_id(caller, body.user_id), body.to_alias, body.message,
    )
    if crush is None:
        raise ContentRejectedError("Crush")
    return crush_to_dict(crush)


@router.post("/{crush_id}/reveal")
async def reveal_crush(
    crush_id: str,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    crush = await service.reveal_crush(crush_id, require_caller_id(caller))
    if crush is None:
        raise ResourceNotFoundError("Crush", crush_id)
    return crush_to_dict(crush)


@router.delete("/{crush_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crush(
    crush_id: str,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    if not await service.delete_crush(crush_id, require_caller_id(caller)):
        raise ResourceNotFoundError("Crush", crush_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
