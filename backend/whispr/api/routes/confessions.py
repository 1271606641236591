"""Confession Routes - feed listing, posting, deletion, reactions and comments.

Invariants:
    - Rejected creations -> 400 CONTENT_REJECTED; missing or foreign ids -> 404
    - Reactions during the cooldown window answer 200 with added=false
    - An unknown reaction kind is 400 VALIDATION_ERROR, even on an existing confession
    - List limits are clamped by the store, whatever the client sends
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from whispr.api.dependencies import get_service, optional_caller_id, require_caller_id
from whispr.core.domain_types import ParentType, SortMode
from whispr.core.errors import ContentRejectedError, ResourceNotFoundError
from whispr.core.store_snapshot import comment_to_dict, confession_to_dict
from whispr.schemas.content import CommentCreate, ConfessionCreate, ReactionToggle
from whispr.services.whispr_service import WhisprService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/confessions", tags=["confessions"])


@router.get("")
async def list_confessions(
    sort: str = Query(SortMode.RECENT.value),
    category: str | None = Query(None),
    limit: int | None = Query(None),
    service: WhisprService = Depends(get_service),
):
    items = service.list_confessions(sort=sort, category=category, limit=limit)
    return [confession_to_dict(c) for c in items]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_confession(
    body: ConfessionCreate,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    confession = await service.create_confession(
        author_id=require_caller_id(caller, body.user_id),
        content=body.content,
        category=body.category,
        author_alias=body.author_alias,
        author_avatar_index=body.author_avatar_index,
        is_after_dark=body.is_after_dark,
        media_url=body.media_url,
        media_type=body.media_type,
        media_thumbnail=body.media_thumbnail,
    )
    if confession is None:
        raise ContentRejectedError("Confession")
    return confession_to_dict(confession)


@router.delete("/{confession_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_confession(
    confession_id: str,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    if not await service.delete_confession(confession_id, require_caller_id(caller)):
        raise ResourceNotFoundError("Confession", confession_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{confession_id}/reactions")
async def toggle_reaction(
    confession_id: str,
    body: ReactionToggle,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    result = await service.toggle_reaction(
        confession_id,
        require_caller_id(caller, body.user_id),
        body.reaction_type.value,
    )
    if result.confession is None:
        raise ResourceNotFoundError("Confession", confession_id)
    return {"confession": confession_to_dict(result.confession), "added": result.added}


@router.get("/{confession_id}/comments")
async def list_confession_comments(
    confession_id: str,
    limit: int | None = Query(None),
    service: WhisprService = Depends(get_service),
):
    comments = service.list_comments(ParentType.CONFESSION, confession_id, limit)
    return [comment_to_dict(c) for c in comments]


@router.post("/{confession_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_confession_comment(
    confession_id: str,
    body: CommentCreate,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    comment = await service.create_comment(
        author_id=require_caller_id(caller, body.user_id),
        content=body.content,
        confession_id=confession_id,
        author_alias=body.author_alias,
        author_avatar_index=body.author_avatar_index,
    )
    if comment is None:
        raise ContentRejectedError("Comment")
    return comment_to_dict(comment)
