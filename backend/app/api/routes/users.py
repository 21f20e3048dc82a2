"""User Routes — registration, profile and account deletion for the calling user."""

import logging

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_user_id, get_user_service
from app.core.domain_types import UserId
from app.schemas.user import UserDeleted, UserProfile
from app.services.users import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_user(
    user_id: UserId = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    """Register the caller. 409 when already registered."""
    profile = await service.register(user_id)
    return {"success": True, "msg": "User registered", "data": UserProfile(**profile)}


@router.get("/me")
async def get_profile(
    user_id: UserId = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    profile = await service.profile(user_id)
    return {"success": True, "data": UserProfile(**profile)}


@router.delete("/me")
async def delete_user(
    user_id: UserId = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    """Delete the caller with all entries and settings."""
    deleted = await service.delete(user_id)
    return {"success": True, "msg": "User deleted", "data": UserDeleted(**deleted)}
