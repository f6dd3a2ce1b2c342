import pytest

from fastapi import HTTPException

from app.modules.groups.lifecycle import GroupLifecycle, has_successor, next_group_number
from app.modules.groups.service import GroupService
from app.modules.join_requests.service import JoinRequestService

QUANTITIES = {"m1": 10, "m2": 8, "m3": 4, "m4": 3}


@pytest.fixture
def service(supabase):
    return JoinRequestService(supabase)


@pytest.fixture
def filled_group(supabase, open_group, service):
    """Group with four pending requests adding up to its capacity, all approved."""
    for user_id, qty in QUANTITIES.items():
        pending = supabase.seed(
            "join_requests", group_id=open_group["id"], user_id=user_id, status="pending", contracts_requested=qty
        )
        service.approve(pending["id"])
    return open_group


def _group(supabase, group_id):
    return supabase.rows("groups", id=group_id)[0]


def test_next_group_number_uses_highest_trailing_integer():
    assert next_group_number(["IPR00001", "IPR00007", "IPR00003"]) == "IPR00008"
    assert next_group_number(["legacy", None]) == "IPR00001"
    assert next_group_number([]) == "IPR00001"


def test_group_stays_open_until_capacity(supabase, open_group, service):
    pending = supabase.seed("join_requests", group_id=open_group["id"], user_id="m1", status="pending", contracts_requested=24)
    service.approve(pending["id"])

    group = _group(supabase, open_group["id"])
    assert group["status"] == "open"
    assert group["total_members"] == 24


def test_fourth_approval_locks_without_new_group(supabase, filled_group):
    group = _group(supabase, filled_group["id"])

    assert group["status"] == "locked"
    assert group["total_members"] == 25
    assert len(supabase.rows("groups")) == 1


def test_marking_everyone_paid_activates_and_opens_one_group(supabase, filled_group, service):
    results = [service.mark_paid(filled_group["id"], user_id) for user_id in QUANTITIES]

    assert all(r.opened_group is None for r in results[:-1])

    group = _group(supabase, filled_group["id"])
    assert group["status"] == "active"
    assert group["total_members"] == 25

    others = [g for g in supabase.rows("groups") if g["id"] != filled_group["id"]]
    assert len(others) == 1
    assert others[0]["group_number"] == "IPR00002"
    assert others[0]["status"] == "open"
    assert others[0]["total_members"] == 0
    assert results[-1].opened_group.group_number == "IPR00002"


def test_partial_payment_keeps_group_locked(supabase, filled_group, service):
    service.mark_paid(filled_group["id"], "m1")
    service.mark_paid(filled_group["id"], "m2")

    assert _group(supabase, filled_group["id"])["status"] == "locked"
    assert len(supabase.rows("groups")) == 1


def test_committed_units_never_exceed_capacity(supabase, filled_group, service):
    for user_id in QUANTITIES:
        service.mark_paid(filled_group["id"], user_id)
        rows = supabase.rows("join_requests", group_id=filled_group["id"])
        committed = sum(r["contracts_requested"] for r in rows if r["status"] in ("approved", "funds_deposited"))
        assert committed <= 25


def test_rerunning_activation_does_not_spawn_twice(supabase, filled_group, service):
    for user_id in QUANTITIES:
        service.mark_paid(filled_group["id"], user_id)

    lifecycle = GroupLifecycle(supabase)
    lifecycle.recompute(filled_group["id"])
    assert lifecycle.activate_if_complete(filled_group["id"]) is None
    assert len(supabase.rows("groups")) == 2
    assert _group(supabase, filled_group["id"])["status"] == "active"


def test_recompute_repairs_stale_status(supabase, open_group):
    supabase.seed("join_requests", group_id=open_group["id"], user_id="m1", status="funds_deposited", contracts_requested=25)

    lifecycle = GroupLifecycle(supabase)
    lifecycle.recompute(open_group["id"])
    opened = lifecycle.activate_if_complete(open_group["id"])

    assert _group(supabase, open_group["id"])["status"] == "active"
    assert opened["group_number"] == "IPR00002"


def test_has_successor_compares_trailing_numbers():
    assert has_successor("IPR00001", ["IPR00001", "IPR00002"])
    assert not has_successor("IPR00002", ["IPR00001", "IPR00002"])
    assert not has_successor("IPR00001", ["IPR00001", None, "legacy"])


def test_failed_successor_insert_is_repaired_by_recompute(supabase, filled_group, service):
    for user_id in ["m1", "m2", "m3"]:
        service.mark_paid(filled_group["id"], user_id)
    supabase.fail("groups", "insert")

    with pytest.raises(HTTPException):
        service.mark_paid(filled_group["id"], "m4")

    assert _group(supabase, filled_group["id"])["status"] == "active"
    assert len(supabase.rows("groups")) == 1

    supabase.failures.clear()
    repaired = GroupService(supabase).recompute(filled_group["id"])

    assert repaired.opened_group.group_number == "IPR00002"
    assert sorted(g["group_number"] for g in supabase.rows("groups")) == ["IPR00001", "IPR00002"]

    again = GroupService(supabase).recompute(filled_group["id"])
    assert again.opened_group is None
    assert len(supabase.rows("groups")) == 2
