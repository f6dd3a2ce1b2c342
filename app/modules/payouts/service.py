import logging
from datetime import datetime, timezone
from supabase import Client
from app.config.settings import settings
from app.modules.groups import ledger
from app.modules.groups.models import REQUEST_APPROVED, REQUEST_PAID
from app.modules.payouts import calculator
from app.modules.payouts.schemas import (
    GroupPayoutResponse, HoldingResponse, HoldingsSummaryResponse
)
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class PayoutService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _load(self, user_id: str):
        rows = self.supabase.table("join_requests")\
            .select("id, group_id, status, contracts_requested, updated_at")\
            .eq("user_id", user_id)\
            .in_("status", [REQUEST_APPROVED, REQUEST_PAID])\
            .execute().data or []
        group_ids = list({r["group_id"] for r in rows})
        groups: Dict[str, dict] = {}
        group_rows: Dict[str, List[dict]] = {}
        if group_ids:
            result = self.supabase.table("groups")\
                .select("id, group_number, status, max_members")\
                .in_("id", group_ids)\
                .execute()
            groups = {g["id"]: g for g in result.data or []}
            result = self.supabase.table("join_requests")\
                .select("group_id, status, contracts_requested")\
                .in_("group_id", group_ids)\
                .execute()
            for row in result.data or []:
                group_rows.setdefault(row["group_id"], []).append(row)
        return rows, groups, group_rows

    def holdings(self, user_id: str, now: Optional[datetime] = None) -> HoldingsSummaryResponse:
        """Contracts a member holds per group and what their active holdings have paid out so far.

        The payout clock for a group starts at the member's latest funds_deposited
        timestamp there, and only runs once the group is fully funded.
        """
        now = now or datetime.now(timezone.utc)
        try:
            rows, groups, group_rows = self._load(user_id)
        except Exception as e:
            logger.error(f"Error loading holdings for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        complete: Dict[str, bool] = {}
        for gid in {r["group_id"] for r in rows}:
            group = groups.get(gid, {})
            summary = ledger.summarize(group_rows.get(gid, []), group.get("max_members") or settings.group_capacity)
            complete[gid] = summary.is_fully_funded

        holdings: List[HoldingResponse] = []
        paid_by_group: Dict[str, dict] = {}
        for row in rows:
            gid = row["group_id"]
            qty = ledger.quantity(row)
            paid = row["status"] == REQUEST_PAID
            holdings.append(HoldingResponse(
                group_id=gid,
                group_number=groups.get(gid, {}).get("group_number"),
                status=row["status"],
                contracts=qty,
                amount_paid=qty * settings.price_per_contract if paid else 0,
                payment_due=0 if paid else qty * settings.price_per_contract,
                active=complete.get(gid, False),
            ))
            if not paid or not complete.get(gid):
                continue
            entry = paid_by_group.setdefault(gid, {"qty": 0, "start": None})
            entry["qty"] += qty
            stamp = calculator.parse_timestamp(row.get("updated_at"))
            if stamp and (entry["start"] is None or stamp > entry["start"]):
                entry["start"] = stamp

        payouts: List[GroupPayoutResponse] = []
        for gid, entry in paid_by_group.items():
            plan = calculator.schedule(entry["qty"], entry["start"] or now, now)
            payouts.append(GroupPayoutResponse(
                group_id=gid,
                group_number=groups.get(gid, {}).get("group_number"),
                contracts=plan.contracts,
                activated_at=plan.activated_at,
                cycles_elapsed=plan.cycles_elapsed,
                monthly_payout=plan.monthly_payout,
                total_paid_to_date=plan.total_paid_to_date,
                next_payout_date=plan.next_payout_date,
            ))

        return HoldingsSummaryResponse(
            user_id=user_id,
            holdings=holdings,
            payouts=payouts,
            deposited_contracts=sum(h.contracts for h in holdings if h.status == REQUEST_PAID),
            active_contracts=sum(p.contracts for p in payouts),
            monthly_payout=sum(p.monthly_payout for p in payouts),
            total_payouts=sum(p.total_paid_to_date for p in payouts),
        )
