"""Profile Routes - self-issued anonymous profiles.

Invariants:
    - POST with a known id returns that profile unchanged (200); new profiles -> 201
    - Unknown profile ids -> 404 from the ledger's ResourceNotFoundError
"""

from fastapi import APIRouter, Body, Depends, Response, status

from whispr.api.dependencies import get_service
from whispr.core.errors import ResourceNotFoundError
from whispr.schemas.profile import ProfileCreate, ProfileResponse, ProfileUpdate
from whispr.services.whispr_service import WhisprService

router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    response: Response,
    body: ProfileCreate | None = Body(None),
    service: WhisprService = Depends(get_service),
):
    requested_id = body.id if body else None
    if requested_id and service.get_profile(requested_id):
        response.status_code = status.HTTP_200_OK
    profile = await service.create_profile(requested_id)
    return ProfileResponse.from_profile(profile)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str, service: WhisprService = Depends(get_service),
):
    profile = service.get_profile(profile_id)
    if profile is None:
        raise ResourceNotFoundError("Profile", profile_id)
    return ProfileResponse.from_profile(profile)


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    body: ProfileUpdate,
    service: WhisprService = Depends(get_service),
):
    profile = await service.update_profile(
        profile_id, alias=body.alias, avatar_index=body.avatar_index,
    )
    return ProfileResponse.from_profile(profile)


@router.post("/{profile_id}/regenerate", response_model=ProfileResponse)
async def regenerate_alias(
    profile_id: str, service: WhisprService = Depends(get_service),
):
    return ProfileResponse.from_profile(await service.regenerate_alias(profile_id))
