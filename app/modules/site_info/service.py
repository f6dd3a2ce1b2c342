from supabase import Client
from app.modules.site_info.models import SITE_INFO_ID
from app.modules.site_info.schemas import SiteInfo
from fastapi import HTTPException


class SiteInfoService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get(self) -> SiteInfo:
        """Contact details; empty when the row has not been created yet"""
        try:
            result = self.supabase.table("site_info")\
                .select("*")\
                .eq("id", SITE_INFO_ID)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return SiteInfo(**result.data[0]) if result.data else SiteInfo()

    def save(self, info: SiteInfo) -> SiteInfo:
        try:
            result = self.supabase.table("site_info")\
                .upsert({"id": SITE_INFO_ID, **info.model_dump()})\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return SiteInfo(**result.data[0]) if result.data else info
