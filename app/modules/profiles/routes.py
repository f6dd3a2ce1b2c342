from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_session, require_admin, SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    session: SessionContext = Depends(get_session),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(session.user_id)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    session: SessionContext = Depends(get_session),
    service: ProfileService = Depends(get_profile_service)
):
    """Update own profile. Phone changes go through /phone-verification first."""
    return service.update_profile(session.user_id, profile_data)


@router.get("", response_model=List[ProfileResponse])
async def list_members(
    search: Optional[str] = None,
    session: SessionContext = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service)
):
    """Member profiles, admins excluded (admin)"""
    return service.list_members(search=search)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    session: SessionContext = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(user_id)


@router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    profile_data: ProfileUpdate,
    session: SessionContext = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service)
):
    """Update a member's profile (admin)"""
    return service.update_profile(user_id, profile_data)
