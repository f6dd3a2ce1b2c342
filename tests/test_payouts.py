from datetime import datetime, timezone

from app.modules.payouts.service import PayoutService

NOW = datetime(2025, 3, 25, 12, 0, tzinfo=timezone.utc)


def _paid(supabase, group, user_id, qty, updated_at):
    supabase.seed(
        "join_requests", group_id=group["id"], user_id=user_id, status="funds_deposited",
        contracts_requested=qty, updated_at=updated_at,
    )


def test_active_holding_pays_from_latest_deposit(supabase):
    group = supabase.seed("groups", group_number="IPR00001", status="active", total_members=25, max_members=25)
    _paid(supabase, group, "member-1", 2, "2025-01-10T08:00:00+00:00")
    _paid(supabase, group, "member-2", 23, "2024-12-01T08:00:00+00:00")

    summary = PayoutService(supabase).holdings("member-1", now=NOW)

    assert summary.deposited_contracts == 2
    assert summary.active_contracts == 2
    [payout] = summary.payouts
    assert payout.cycles_elapsed == 2
    assert payout.monthly_payout == 3600
    assert payout.total_paid_to_date == 7200
    assert summary.total_payouts == 7200
    assert summary.holdings[0].amount_paid == 20000


def test_group_not_fully_funded_pays_nothing(supabase):
    group = supabase.seed("groups", group_number="IPR00001", status="locked", total_members=25, max_members=25)
    _paid(supabase, group, "member-1", 5, "2024-01-10T08:00:00+00:00")
    supabase.seed("join_requests", group_id=group["id"], user_id="member-2", status="approved", contracts_requested=20)

    summary = PayoutService(supabase).holdings("member-1", now=NOW)

    assert summary.payouts == []
    assert summary.total_payouts == 0
    assert summary.holdings[0].active is False


def test_approved_units_show_payment_due(supabase, open_group):
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-1", status="approved", contracts_requested=3)

    summary = PayoutService(supabase).holdings("member-1", now=NOW)

    [holding] = summary.holdings
    assert holding.payment_due == 30000
    assert holding.amount_paid == 0
    assert summary.deposited_contracts == 0
