from app.modules.groups import ledger


def _row(status, qty, group_id="g1"):
    return {"group_id": group_id, "status": status, "contracts_requested": qty}


def test_summarize_sums_each_status():
    rows = [
        _row("pending", 3),
        _row("pending", 2),
        _row("approved", 10),
        _row("funds_deposited", 4),
        _row("rejected", 7),
    ]
    summary = ledger.summarize(rows, 25)
    assert summary.pending_total == 5
    assert summary.approved_total == 10
    assert summary.paid_total == 4
    assert summary.committed_total == 14


def test_pending_rows_reserve_capacity():
    summary = ledger.summarize([_row("approved", 20), _row("pending", 3)], 25)
    assert summary.remaining == 2


def test_remaining_never_negative():
    summary = ledger.summarize([_row("approved", 20), _row("pending", 9)], 25)
    assert summary.remaining == 0


def test_missing_quantity_counts_as_one():
    summary = ledger.summarize([{"status": "approved", "contracts_requested": None}], 25)
    assert summary.approved_total == 1


def test_full_and_fully_funded():
    locked = ledger.summarize([_row("approved", 5), _row("funds_deposited", 20)], 25)
    assert locked.is_full
    assert not locked.is_fully_funded

    funded = ledger.summarize([_row("funds_deposited", 25)], 25)
    assert funded.is_fully_funded


def test_pending_counts_by_group():
    rows = [_row("pending", 2, "g1"), _row("pending", 1, "g2"), _row("approved", 4, "g1")]
    assert ledger.pending_counts_by_group(rows) == {"g1": 2, "g2": 1}
