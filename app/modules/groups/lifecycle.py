"""
Group lifecycle: open -> locked -> active, plus the successor group spawned on activation.

Transitions are recomputed from join_requests after every approve, reject and
mark-paid. Nothing here runs in a transaction: a failure between the status
write and the successor insert is repaired by the next recompute on the group.
"""

import logging
import re
from typing import Iterable, List, Optional
from fastapi import HTTPException
from supabase import Client

from app.config.settings import settings
from app.modules.groups import ledger
from app.modules.groups.models import (
    GROUP_ACTIVE, GROUP_LOCKED, GROUP_OPEN, REQUEST_APPROVED, REQUEST_PAID
)

logger = logging.getLogger(__name__)

_TRAILING_DIGITS = re.compile(r"(\d+)$")


def next_group_number(labels: Iterable[Optional[str]], prefix: Optional[str] = None) -> str:
    """Max trailing integer across existing labels, plus one, zero-padded to five digits."""
    prefix = settings.group_number_prefix if prefix is None else prefix
    highest = 0
    for label in labels:
        match = _TRAILING_DIGITS.search(str(label or ""))
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}{highest + 1:05d}"


def _trailing_number(label: Optional[str]) -> Optional[int]:
    match = _TRAILING_DIGITS.search(str(label or ""))
    return int(match.group(1)) if match else None


def has_successor(group_number: Optional[str], labels: Iterable[Optional[str]]) -> bool:
    """True if some group is numbered after `group_number`."""
    own = _trailing_number(group_number) or 0
    return any((_trailing_number(label) or 0) > own for label in labels)


def display_status(group: dict, summary: ledger.QuotaSummary) -> str:
    """Admin-facing label for a group."""
    if group.get("status") == GROUP_ACTIVE or summary.is_fully_funded:
        return "Active-Open"
    if group.get("status") == GROUP_LOCKED:
        return "Inactive-Locked"
    return "Inactive-Open"


class GroupLifecycle:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_group(self, group_id: str) -> dict:
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Group not found")
        return result.data[0]

    def get_rows(self, group_id: str, statuses: Optional[List[str]] = None) -> List[dict]:
        try:
            query = self.supabase.table("join_requests")\
                .select("user_id, status, contracts_requested")\
                .eq("group_id", group_id)
            if statuses:
                query = query.in_("status", statuses)
            return query.execute().data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def summarize(self, group_id: str, group: Optional[dict] = None) -> ledger.QuotaSummary:
        group = group or self.get_group(group_id)
        max_members = group.get("max_members") or settings.group_capacity
        return ledger.summarize(self.get_rows(group_id), max_members)

    def recompute(self, group_id: str) -> dict:
        """Refresh total_members and flip open/locked. An active group keeps its status."""
        group = self.get_group(group_id)
        max_members = group.get("max_members") or settings.group_capacity
        rows = self.get_rows(group_id, [REQUEST_APPROVED, REQUEST_PAID])
        summary = ledger.summarize(rows, max_members)

        update = {"total_members": summary.committed_total}
        if group.get("status") != GROUP_ACTIVE:
            update["status"] = GROUP_LOCKED if summary.is_full else GROUP_OPEN
        try:
            result = self.supabase.table("groups")\
                .update(update)\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to refresh totals for group {group_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        new_status = update.get("status", group.get("status"))
        if new_status != group.get("status"):
            logger.info(
                f"Group {group.get('group_number')} {group.get('status')} -> {new_status} "
                f"({summary.committed_total}/{max_members} contracts)"
            )
        return result.data[0] if result.data else {**group, **update}

    def activate_if_complete(self, group_id: str) -> Optional[dict]:
        """Activate a fully funded group and open its successor. Returns the new group, if any.

        An already active group only gets a successor when none exists yet, so a
        rerun after a failed successor insert completes the activation.
        """
        group = self.get_group(group_id)
        max_members = group.get("max_members") or settings.group_capacity
        summary = ledger.summarize(self.get_rows(group_id), max_members)
        if not summary.is_fully_funded:
            return None

        labels = self._group_numbers()
        if group.get("status") == GROUP_ACTIVE:
            if has_successor(group.get("group_number"), labels):
                return None
            logger.warning(f"Group {group.get('group_number')} is active without a successor, opening one")
            return self.open_next_group(labels)

        try:
            self.supabase.table("groups")\
                .update({"status": GROUP_ACTIVE})\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to activate group {group_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Group {group.get('group_number')} activated with {summary.paid_total} paid contracts")
        return self.open_next_group(labels)

    def _group_numbers(self) -> List[Optional[str]]:
        try:
            result = self.supabase.table("groups")\
                .select("group_number")\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return [g.get("group_number") for g in result.data or []]

    def open_next_group(self, labels: Optional[List[Optional[str]]] = None) -> dict:
        if labels is None:
            labels = self._group_numbers()
        number = next_group_number(labels)
        try:
            result = self.supabase.table("groups").insert({
                "group_number": number,
                "status": GROUP_OPEN,
                "max_members": settings.group_capacity,
                "total_members": 0,
            }).execute()
        except Exception as e:
            logger.error(f"Failed to open successor group: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create group")
        logger.info(f"Opened new group {number}")
        return result.data[0]
