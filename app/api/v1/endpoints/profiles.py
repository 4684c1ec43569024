"""Profiles API: the caller's own profile and profile image."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import Response

from app.api.v1.dependencies import CurrentSession, get_profile_service
from app.application.services import ProfileService
from app.core.limiter import limit_upload, limit_writes
from app.schemas.profile import ProfileImageResponse, ProfileResponse, ProfileUpdateRequest

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    claims: CurrentSession,
    service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Return the caller's profile (age derived from dob where applicable)."""
    profile = await service.get_details(claims)
    return ProfileResponse.from_result(profile)


@router.put("/me", response_model=ProfileResponse)
@limit_writes
async def update_me(
    request: Request,
    body: ProfileUpdateRequest,
    claims: CurrentSession,
    service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Update name, phone, address, dob, gender or age (those the caller's role has)."""
    profile = await service.update_profile(claims, body.to_changes())
    return ProfileResponse.from_result(profile)


@router.get("/me/image")
async def get_my_image(
    claims: CurrentSession,
    service: Annotated[ProfileService, Depends(get_profile_service)],
) -> Response:
    """Return the caller's profile image bytes."""
    image = await service.get_profile_image(claims)
    return Response(content=image.data, media_type=image.content_type)


@router.put("/me/image", response_model=ProfileImageResponse)
@limit_upload
async def put_my_image(
    request: Request,
    claims: CurrentSession,
    service: Annotated[ProfileService, Depends(get_profile_service)],
    image: UploadFile = File(...),
):
    """Replace the caller's profile image (image/* only)."""
    data = await image.read()
    content_type = image.content_type or ""
    await service.set_profile_image(claims, data, content_type)
    return ProfileImageResponse(content_type=content_type, size=len(data))
