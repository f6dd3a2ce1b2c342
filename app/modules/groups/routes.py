from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.groups.models import GROUP_OPEN
from app.modules.groups.schemas import GroupQuotaResponse, GroupMemberResponse, RecomputeResponse
from app.modules.groups.service import GroupService
from app.core.dependencies import get_session, require_admin, SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.get("", response_model=List[GroupQuotaResponse])
async def list_groups(
    status: Optional[str] = None,
    session: SessionContext = Depends(get_session),
    service: GroupService = Depends(get_group_service)
):
    """List groups with quota totals. Members only see open groups."""
    if not session.is_admin:
        status = GROUP_OPEN
    return service.list_groups(status=status)


@router.get("/{group_id}", response_model=GroupQuotaResponse)
async def get_group(
    group_id: str,
    session: SessionContext = Depends(get_session),
    service: GroupService = Depends(get_group_service)
):
    """Group with pending/approved/paid totals and remaining capacity"""
    return service.get_group(group_id)


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
async def list_members(
    group_id: str,
    session: SessionContext = Depends(require_admin),
    service: GroupService = Depends(get_group_service)
):
    """Approved and paid members of a group (admin)"""
    return service.list_members(group_id)


@router.post("/{group_id}/recompute", response_model=RecomputeResponse)
async def recompute_group(
    group_id: str,
    session: SessionContext = Depends(require_admin),
    service: GroupService = Depends(get_group_service)
):
    """Recompute totals and status for a group (admin)"""
    return service.recompute(group_id)
