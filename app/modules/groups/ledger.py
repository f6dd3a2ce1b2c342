"""
Contract quota accounting over join_requests rows.

Pure functions: callers fetch the rows, these only sum them. groups.total_members
is a cache and is never read here.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

from app.modules.groups.models import REQUEST_APPROVED, REQUEST_PAID, REQUEST_PENDING


@dataclass(frozen=True)
class QuotaSummary:
    max_members: int
    pending_total: int = 0
    approved_total: int = 0
    paid_total: int = 0

    @property
    def committed_total(self) -> int:
        """Approved + paid units; what total_members caches."""
        return self.approved_total + self.paid_total

    @property
    def remaining(self) -> int:
        # pending reservations provisionally occupy capacity
        left = self.max_members - self.approved_total - self.paid_total - self.pending_total
        return max(left, 0)

    @property
    def is_full(self) -> bool:
        return self.committed_total >= self.max_members

    @property
    def is_fully_funded(self) -> bool:
        return self.paid_total >= self.max_members and self.approved_total == 0


def quantity(row: Mapping) -> int:
    """contracts_requested of a row; a missing quantity counts as one unit."""
    value = row.get("contracts_requested")
    if value is None:
        return 1
    return int(value)


def summarize(rows: Iterable[Mapping], max_members: int) -> QuotaSummary:
    totals = {REQUEST_PENDING: 0, REQUEST_APPROVED: 0, REQUEST_PAID: 0}
    for row in rows:
        status = row.get("status")
        if status in totals:
            totals[status] += quantity(row)
    return QuotaSummary(
        max_members=max_members,
        pending_total=totals[REQUEST_PENDING],
        approved_total=totals[REQUEST_APPROVED],
        paid_total=totals[REQUEST_PAID],
    )


def has_approved(rows: Iterable[Mapping]) -> bool:
    return any(row.get("status") == REQUEST_APPROVED for row in rows)


def totals_by_group(rows: Iterable[Mapping], status: str) -> Dict[str, int]:
    """Sum of contract units per group_id for a single status."""
    totals: Dict[str, int] = {}
    for row in rows:
        if row.get("status") != status:
            continue
        gid = row.get("group_id")
        totals[gid] = totals.get(gid, 0) + quantity(row)
    return totals


def pending_counts_by_group(rows: Iterable[Mapping]) -> Dict[str, int]:
    """A member's pending units per group (their "my pending count")."""
    return totals_by_group(rows, REQUEST_PENDING)
