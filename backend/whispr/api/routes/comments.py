"""Comment Routes - author-only comment deletion (creation lives under each parent)."""

from fastapi import APIRouter, Depends, Response, status

from whispr.api.dependencies import get_service, optional_caller_id, require_caller_id
from whispr.core.errors import ResourceNotFoundError
from whispr.services.whispr_service import WhisprService

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    if not await service.delete_comment(comment_id, require_caller_id(caller)):
        raise ResourceNotFoundError("Comment", comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
