import logging
from supabase import Client
from app.database.supabase_client import is_unique_violation
from app.modules.groups import ledger
from app.modules.groups.lifecycle import GroupLifecycle
from app.modules.groups.models import (
    GROUP_OPEN, JOIN_REQUEST_CONFLICT_KEY,
    REQUEST_APPROVED, REQUEST_PAID, REQUEST_PENDING, REQUEST_REJECTED
)
from app.modules.groups.schemas import GroupResponse
from app.modules.join_requests.schemas import (
    JoinRequestCreate, JoinRequestResponse, MyRequestsResponse, WorkflowResult
)
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

ALREADY_REQUESTED = "You already have a pending request for this group."


class JoinRequestService:
    """Member submissions plus the admin approve / reject / mark-paid workflow.

    Every workflow operation finishes by recomputing the group lifecycle, so the
    cached group totals and status follow each mutation.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.lifecycle = GroupLifecycle(supabase)

    def _find_row(self, user_id: str, group_id: str, status: str) -> Optional[dict]:
        result = self.supabase.table("join_requests")\
            .select("id, contracts_requested")\
            .eq("user_id", user_id)\
            .eq("group_id", group_id)\
            .eq("status", status)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _get_pending(self, request_id: str) -> dict:
        try:
            result = self.supabase.table("join_requests")\
                .select("id, user_id, group_id, status, contracts_requested")\
                .eq("id", request_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data or result.data[0].get("status") != REQUEST_PENDING:
            raise HTTPException(status_code=404, detail="Pending request not found")
        return result.data[0]

    def _merge_into(self, user_id: str, group_id: str, status: str, add_qty: int) -> int:
        """Add add_qty onto the (group, user, status) row, creating it if absent. Returns the new quantity."""
        existing = self._find_row(user_id, group_id, status)
        current = ledger.quantity(existing) if existing else 0
        merged = current + add_qty
        self.supabase.table("join_requests").upsert(
            {
                "user_id": user_id,
                "group_id": group_id,
                "status": status,
                "contracts_requested": merged,
            },
            on_conflict=JOIN_REQUEST_CONFLICT_KEY,
        ).execute()
        return merged

    def _hydrate(self, rows: List[dict]) -> List[JoinRequestResponse]:
        group_ids = list({r["group_id"] for r in rows if r.get("group_id")})
        user_ids = list({r["user_id"] for r in rows if r.get("user_id")})
        groups: Dict[str, dict] = {}
        profiles: Dict[str, dict] = {}
        if group_ids:
            result = self.supabase.table("groups")\
                .select("id, group_number, status")\
                .in_("id", group_ids)\
                .execute()
            groups = {g["id"]: g for g in result.data or []}
        if user_ids:
            result = self.supabase.table("profiles")\
                .select("id, first_name, last_name, phone")\
                .in_("id", user_ids)\
                .execute()
            profiles = {p["id"]: p for p in result.data or []}

        hydrated = []
        for row in rows:
            group = groups.get(row["group_id"], {})
            profile = profiles.get(row["user_id"], {})
            hydrated.append(JoinRequestResponse(
                **{**row, "contracts_requested": ledger.quantity(row)},
                group_number=group.get("group_number"),
                group_status=group.get("status"),
                first_name=profile.get("first_name"),
                last_name=profile.get("last_name"),
                phone=profile.get("phone"),
            ))
        return hydrated

    def submit(self, user_id: str, request_data: JoinRequestCreate) -> JoinRequestResponse:
        """Member asks for contract units in a group. Capacity is checked against ledger rows, not the cache."""
        group_id = request_data.group_id
        requested = request_data.contracts_requested
        group = self.lifecycle.get_group(group_id)
        if group.get("status") != GROUP_OPEN:
            raise HTTPException(status_code=400, detail="This group is not accepting new requests")
        try:
            if self._find_row(user_id, group_id, REQUEST_PENDING):
                raise HTTPException(status_code=409, detail=ALREADY_REQUESTED)

            summary = self.lifecycle.summarize(group_id, group)
            if requested > summary.remaining:
                raise HTTPException(
                    status_code=400,
                    detail=f"Only {summary.remaining} contract(s) remaining in this group"
                )

            result = self.supabase.table("join_requests").insert({
                "user_id": user_id,
                "group_id": group_id,
                "contracts_requested": requested,
                "status": REQUEST_PENDING,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to submit request")
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail=ALREADY_REQUESTED)
            raise HTTPException(status_code=500, detail=str(e))

        logger.info(f"Member {user_id} requested {requested} contract(s) in group {group.get('group_number')}")
        return self._hydrate(result.data)[0]

    def list_for_user(self, user_id: str) -> MyRequestsResponse:
        """A member's requests across groups plus their pending units per group"""
        try:
            rows = self.supabase.table("join_requests")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute().data or []
            return MyRequestsResponse(
                requests=self._hydrate(rows),
                pending_counts=ledger.pending_counts_by_group(rows),
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_requests(self, status: Optional[str] = None, group_id: Optional[str] = None) -> List[JoinRequestResponse]:
        """Admin listing, newest first"""
        try:
            query = self.supabase.table("join_requests").select("*")
            if status:
                query = query.eq("status", status)
            if group_id:
                query = query.eq("group_id", group_id)
            rows = query.order("created_at", desc=True).execute().data or []
            return self._hydrate(rows)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def approve(self, request_id: str) -> WorkflowResult:
        """Merge a pending request into the member's approved row, then recompute the group"""
        pending = self._get_pending(request_id)
        user_id, group_id = pending["user_id"], pending["group_id"]
        add_qty = ledger.quantity(pending)

        try:
            self._merge_into(user_id, group_id, REQUEST_APPROVED, add_qty)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        try:
            self.supabase.table("join_requests").delete().eq("id", request_id).execute()
        except Exception as e:
            logger.warning(f"Could not delete approved pending row {request_id}, marking rejected: {e}")
            try:
                self.supabase.table("join_requests")\
                    .update({"status": REQUEST_REJECTED})\
                    .eq("id", request_id)\
                    .execute()
            except Exception as inner:
                logger.error(f"Pending row {request_id} left in place after approval: {inner}")

        logger.info(f"Approved {add_qty} contract(s) for member {user_id} in group {group_id}")
        group = self.lifecycle.recompute(group_id)
        return WorkflowResult(
            message="Request approved successfully.",
            contracts=add_qty,
            group=GroupResponse(**group),
        )

    def reject(self, request_id: str) -> WorkflowResult:
        """Reject a pending request, keeping at most one rejected row per (member, group)"""
        pending = self._get_pending(request_id)
        user_id, group_id = pending["user_id"], pending["group_id"]

        try:
            if self._find_row(user_id, group_id, REQUEST_REJECTED):
                self.supabase.table("join_requests").delete().eq("id", request_id).execute()
            else:
                try:
                    self.supabase.table("join_requests")\
                        .update({"status": REQUEST_REJECTED})\
                        .eq("id", request_id)\
                        .execute()
                except Exception as e:
                    if not is_unique_violation(e):
                        raise
                    self.supabase.table("join_requests").delete().eq("id", request_id).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        logger.info(f"Rejected request {request_id} for member {user_id} in group {group_id}")
        group = self.lifecycle.recompute(group_id)
        return WorkflowResult(
            message="Request rejected.",
            contracts=ledger.quantity(pending),
            group=GroupResponse(**group),
        )

    def mark_paid(self, group_id: str, user_id: str) -> WorkflowResult:
        """Move a member's approved units to funds_deposited; may activate the group"""
        try:
            approved = self._find_row(user_id, group_id, REQUEST_APPROVED)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        approved_qty = ledger.quantity(approved) if approved else 0
        if not approved or approved_qty <= 0:
            raise HTTPException(status_code=400, detail="Nothing to mark as paid for this member.")

        try:
            self._merge_into(user_id, group_id, REQUEST_PAID, approved_qty)
            self.supabase.table("join_requests").delete().eq("id", approved["id"]).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        logger.info(f"Marked {approved_qty} contract(s) paid for member {user_id} in group {group_id}")
        self.lifecycle.recompute(group_id)
        opened = self.lifecycle.activate_if_complete(group_id)
        group = self.lifecycle.get_group(group_id)

        message = f"Marked {approved_qty} contract(s) as paid for member."
        if opened:
            message += f" Group activated. New group {opened['group_number']} opened."
        return WorkflowResult(
            message=message,
            contracts=approved_qty,
            group=GroupResponse(**group),
            opened_group=GroupResponse(**opened) if opened else None,
        )
