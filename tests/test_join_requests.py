import pytest
from fastapi import HTTPException

from app.modules.join_requests.schemas import JoinRequestCreate
from app.modules.join_requests.service import JoinRequestService


@pytest.fixture
def service(supabase):
    return JoinRequestService(supabase)


def _pending(supabase, group, user_id, qty):
    return supabase.seed(
        "join_requests", group_id=group["id"], user_id=user_id, status="pending", contracts_requested=qty
    )


def test_submit_creates_pending_row(service, supabase, open_group):
    created = service.submit("member-1", JoinRequestCreate(group_id=open_group["id"], contracts_requested=3))

    assert created.status == "pending"
    assert created.contracts_requested == 3
    assert created.group_number == "IPR00001"
    assert len(supabase.rows("join_requests", user_id="member-1")) == 1


def test_submit_rejects_quantity_over_remaining(service, supabase, open_group):
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-2", status="approved", contracts_requested=20)
    _pending(supabase, open_group, "member-2", 3)

    with pytest.raises(HTTPException) as exc:
        service.submit("member-1", JoinRequestCreate(group_id=open_group["id"], contracts_requested=3))

    assert exc.value.status_code == 400
    assert "2 contract(s) remaining" in exc.value.detail
    assert supabase.rows("join_requests", user_id="member-1") == []


def test_submit_twice_is_already_requested(service, open_group):
    service.submit("member-1", JoinRequestCreate(group_id=open_group["id"], contracts_requested=1))

    with pytest.raises(HTTPException) as exc:
        service.submit("member-1", JoinRequestCreate(group_id=open_group["id"], contracts_requested=1))

    assert exc.value.status_code == 409


def test_submit_to_locked_group_refused(service, supabase):
    group = supabase.seed("groups", group_number="IPR00002", status="locked", total_members=25, max_members=25)

    with pytest.raises(HTTPException) as exc:
        service.submit("member-1", JoinRequestCreate(group_id=group["id"], contracts_requested=1))

    assert exc.value.status_code == 400


def test_approve_merges_into_existing_approved_row(service, supabase, open_group):
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-1", status="approved", contracts_requested=2)
    pending = _pending(supabase, open_group, "member-1", 3)

    result = service.approve(pending["id"])

    approved = supabase.rows("join_requests", user_id="member-1", status="approved")
    assert [r["contracts_requested"] for r in approved] == [5]
    assert supabase.rows("join_requests", id=pending["id"]) == []
    assert result.group.total_members == 5
    assert result.group.status == "open"


def test_approve_twice_is_not_found(service, supabase, open_group):
    pending = _pending(supabase, open_group, "member-1", 4)
    service.approve(pending["id"])

    with pytest.raises(HTTPException) as exc:
        service.approve(pending["id"])

    assert exc.value.status_code == 404
    approved = supabase.rows("join_requests", user_id="member-1", status="approved")
    assert approved[0]["contracts_requested"] == 4


def test_approve_falls_back_to_rejected_when_delete_blocked(service, supabase, open_group):
    pending = _pending(supabase, open_group, "member-1", 2)
    supabase.fail("join_requests", "delete")

    service.approve(pending["id"])

    assert supabase.rows("join_requests", id=pending["id"])[0]["status"] == "rejected"
    assert supabase.rows("join_requests", user_id="member-1", status="approved")[0]["contracts_requested"] == 2


def test_reject_flips_pending_row(service, supabase, open_group):
    pending = _pending(supabase, open_group, "member-1", 2)

    service.reject(pending["id"])

    assert supabase.rows("join_requests", id=pending["id"])[0]["status"] == "rejected"


def test_reject_collapses_into_existing_rejected_row(service, supabase, open_group):
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-1", status="rejected", contracts_requested=1)
    pending = _pending(supabase, open_group, "member-1", 2)

    service.reject(pending["id"])

    rows = supabase.rows("join_requests", user_id="member-1")
    assert [r["status"] for r in rows] == ["rejected"]


def test_mark_paid_requires_approved_contracts(service, open_group):
    with pytest.raises(HTTPException) as exc:
        service.mark_paid(open_group["id"], "member-1")

    assert exc.value.status_code == 400


def test_mark_paid_moves_units_to_funds_deposited(service, supabase, open_group):
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-1", status="funds_deposited", contracts_requested=1)
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-1", status="approved", contracts_requested=4)

    result = service.mark_paid(open_group["id"], "member-1")

    assert result.contracts == 4
    assert supabase.rows("join_requests", user_id="member-1", status="approved") == []
    paid = supabase.rows("join_requests", user_id="member-1", status="funds_deposited")
    assert [r["contracts_requested"] for r in paid] == [5]
    assert result.opened_group is None


def test_repeated_merge_adds_each_increment(service, supabase, open_group):
    # the (group, member, status) key cannot tell a retry from a new request: both add up
    first = _pending(supabase, open_group, "member-1", 2)
    service.approve(first["id"])
    second = _pending(supabase, open_group, "member-1", 3)
    service.approve(second["id"])

    approved = supabase.rows("join_requests", user_id="member-1", status="approved")
    assert [r["contracts_requested"] for r in approved] == [5]


def test_list_for_user_reports_pending_counts(service, supabase, open_group):
    _pending(supabase, open_group, "member-1", 3)
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-1", status="approved", contracts_requested=2)

    mine = service.list_for_user("member-1")

    assert mine.pending_counts == {open_group["id"]: 3}
    assert len(mine.requests) == 2


def test_mark_paid_counts_missing_quantity_as_one(service, supabase, open_group):
    supabase.seed("join_requests", group_id=open_group["id"], user_id="member-1", status="approved", contracts_requested=None)

    result = service.mark_paid(open_group["id"], "member-1")

    assert result.contracts == 1
    paid = supabase.rows("join_requests", user_id="member-1", status="funds_deposited")
    assert [r["contracts_requested"] for r in paid] == [1]
    assert supabase.rows("join_requests", user_id="member-1", status="approved") == []
