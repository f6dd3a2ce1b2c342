from supabase import Client
from app.config.settings import settings
from app.modules.groups import ledger
from app.modules.groups.lifecycle import GroupLifecycle, display_status
from app.modules.groups.models import REQUEST_APPROVED, REQUEST_PAID
from app.modules.groups.schemas import (
    GroupResponse, GroupQuotaResponse, GroupMemberResponse, RecomputeResponse
)
from typing import Dict, List, Optional
from fastapi import HTTPException


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.lifecycle = GroupLifecycle(supabase)

    def _with_quota(self, group: dict, summary: ledger.QuotaSummary) -> GroupQuotaResponse:
        return GroupQuotaResponse(
            **group,
            pending_total=summary.pending_total,
            approved_total=summary.approved_total,
            paid_total=summary.paid_total,
            remaining=summary.remaining,
            display_status=display_status(group, summary),
        )

    def list_groups(self, status: Optional[str] = None) -> List[GroupQuotaResponse]:
        """List groups, newest first, each with quota totals recomputed from join_requests"""
        try:
            query = self.supabase.table("groups").select("*")
            if status:
                query = query.eq("status", status)
            groups = query.order("created_at", desc=True).execute().data or []
            if not groups:
                return []
            rows = self.supabase.table("join_requests")\
                .select("group_id, status, contracts_requested")\
                .in_("group_id", [g["id"] for g in groups])\
                .execute().data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        rows_by_group: Dict[str, List[dict]] = {}
        for row in rows:
            rows_by_group.setdefault(row["group_id"], []).append(row)
        return [
            self._with_quota(
                g,
                ledger.summarize(rows_by_group.get(g["id"], []), g.get("max_members") or settings.group_capacity),
            )
            for g in groups
        ]

    def get_group(self, group_id: str) -> GroupQuotaResponse:
        group = self.lifecycle.get_group(group_id)
        return self._with_quota(group, self.lifecycle.summarize(group_id, group))

    def list_members(self, group_id: str) -> List[GroupMemberResponse]:
        """Approved (awaiting payment) and paid members of a group"""
        self.lifecycle.get_group(group_id)
        try:
            rows = self.supabase.table("join_requests")\
                .select("user_id, status, contracts_requested, updated_at")\
                .eq("group_id", group_id)\
                .in_("status", [REQUEST_APPROVED, REQUEST_PAID])\
                .execute().data or []
            user_ids = list({r["user_id"] for r in rows if r.get("user_id")})
            profiles: Dict[str, dict] = {}
            if user_ids:
                result = self.supabase.table("profiles")\
                    .select("id, first_name, last_name, phone")\
                    .in_("id", user_ids)\
                    .execute()
                profiles = {p["id"]: p for p in result.data or []}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        members = []
        for row in rows:
            profile = profiles.get(row["user_id"], {})
            qty = ledger.quantity(row)
            paid = row["status"] == REQUEST_PAID
            members.append(GroupMemberResponse(
                user_id=row["user_id"],
                first_name=profile.get("first_name"),
                last_name=profile.get("last_name"),
                phone=profile.get("phone"),
                contracts_requested=qty,
                paid=paid,
                paid_at=row.get("updated_at") if paid else None,
                payment_due=0 if paid else qty * settings.price_per_contract,
            ))
        return members

    def recompute(self, group_id: str) -> RecomputeResponse:
        """Re-run the lifecycle for a group; repairs state left stale by a partial failure"""
        self.lifecycle.recompute(group_id)
        opened = self.lifecycle.activate_if_complete(group_id)
        group = self.lifecycle.get_group(group_id)
        return RecomputeResponse(
            group=GroupResponse(**group),
            opened_group=GroupResponse(**opened) if opened else None,
        )
