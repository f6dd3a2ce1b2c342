from datetime import datetime, timezone
from supabase import Client
from app.modules.auth.service import ADMIN_ROLE
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from typing import List, Optional
from fastapi import HTTPException


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get profile by user ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update profile fields that were supplied"""
        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        if profile_data.first_name is not None:
            update_data["first_name"] = profile_data.first_name
        if profile_data.last_name is not None:
            update_data["last_name"] = profile_data.last_name
        if profile_data.phone is not None:
            update_data["phone"] = profile_data.phone
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def list_members(self, search: Optional[str] = None) -> List[ProfileResponse]:
        """Non-admin profiles, newest first, optionally filtered by first/last name"""
        try:
            admins = self.supabase.table("user_roles")\
                .select("user_id")\
                .eq("role", ADMIN_ROLE)\
                .execute()
            admin_ids = {r["user_id"] for r in admins.data or []}
            result = self.supabase.table("profiles")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        profiles = [p for p in result.data or [] if p["id"] not in admin_ids]
        if search:
            term = search.lower()
            profiles = [
                p for p in profiles
                if term in (p.get("first_name") or "").lower() or term in (p.get("last_name") or "").lower()
            ]
        return [ProfileResponse(**p) for p in profiles]
