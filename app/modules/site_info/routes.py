from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.site_info.schemas import SiteInfo
from app.modules.site_info.service import SiteInfoService
from app.core.dependencies import require_admin, SessionContext
from supabase import Client

router = APIRouter(prefix="/site-info", tags=["site-info"])


def get_site_info_service(supabase: Client = Depends(get_supabase)) -> SiteInfoService:
    return SiteInfoService(supabase)


@router.get("", response_model=SiteInfo)
async def get_site_info(service: SiteInfoService = Depends(get_site_info_service)):
    """Public contact and business-hours details"""
    return service.get()


@router.put("", response_model=SiteInfo)
async def save_site_info(
    info: SiteInfo,
    session: SessionContext = Depends(require_admin),
    service: SiteInfoService = Depends(get_site_info_service)
):
    return service.save(info)
