"""Market Routes - listings, sold toggling, deletion and listing comments."""

from fastapi import APIRouter, Body, Depends, Query, Response, status

from whispr.api.dependencies import get_service, optional_caller_id, require_caller_id
from whispr.core.domain_types import ParentType
from whispr.core.errors import ContentRejectedError, ResourceNotFoundError
from whispr.core.store_snapshot import comment_to_dict, market_item_to_dict
from whispr.schemas.content import CallerBody, CommentCreate, MarketItemCreate
from whispr.services.whispr_service import WhisprService

router = APIRouter(prefix="/api/v1/market", tags=["market"])


@router.get("")
async def list_market_items(
    category: str | None = Query(None),
    limit: int | None = Query(None),
    service: WhisprService = Depends(get_service),
):
    items = service.list_market_items(category=category, limit=limit)
    return [market_item_to_dict(i) for i in items]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_market_item(
    body: MarketItemCreate,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    item = await service.create_market_item(
        seller_id=require_caller_id(caller, body.user_id),
        title=body.title,
        description=body.description,
        price=body.price,
        category=body.category,
        condition=body.condition,
        seller_alias=body.seller_alias,
        seller_avatar_index=body.seller_avatar_index,
        image_urls=body.image_urls,
    )
    if item is None:
        raise ContentRejectedError("Market item")
    return market_item_to_dict(item)


@router.post("/{item_id}/toggle-sold")
async def toggle_sold(
    item_id: str,
    body: CallerBody | None = Body(None),
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    seller_id = require_caller_id(caller, body.user_id if body else None)
    item = await service.toggle_sold(item_id, seller_id)
    if item is None:
        raise ResourceNotFoundError("Market item", item_id)
    return market_item_to_dict(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_market_item(
    item_id: str,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    if not await service.delete_market_item(item_id, require_caller_id(caller)):
        raise ResourceNotFoundError("Market item", item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{item_id}/comments")
async def list_market_comments(
    item_id: str,
    limit: int | None = Query(None),
    service: WhisprService = Depends(get_service),
):
    comments = service.list_comments(ParentType.MARKET, item_id, limit)
    return [comment_to_dict(c) for c in comments]


@router.post("/{item_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_market_comment(
    item_id: str,
    body: CommentCreate,
    caller: str | None = Depends(optional_caller_id),
    service: WhisprService = Depends(get_service),
):
    comment = await service.create_comment(
        author_id=require_caller_id(caller, body.user_id),
        content=body.content,
        market_item_id=item_id,
        author_alias=body.author_alias,
        author_avatar_index=body.author_avatar_index,
    )
    if comment is None:
        raise ContentRejectedError("Comment")
    return comment_to_dict(comment)
