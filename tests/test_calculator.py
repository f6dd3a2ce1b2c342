from datetime import date, datetime, timedelta, timezone

import pytest

from app.modules.payouts import calculator

UTC = timezone.utc


def test_zero_cycles_at_activation():
    activated = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)
    assert calculator.cycles_elapsed(activated, activated) == 0


def test_cycle_not_counted_before_day_of_month():
    activated = datetime(2025, 1, 20, tzinfo=UTC)
    assert calculator.cycles_elapsed(activated, datetime(2025, 3, 19, tzinfo=UTC)) == 1
    assert calculator.cycles_elapsed(activated, datetime(2025, 3, 20, tzinfo=UTC)) == 2


def test_cycles_clamped_to_sixty():
    activated = datetime(2015, 1, 1, tzinfo=UTC)
    assert calculator.cycles_elapsed(activated, datetime(2025, 1, 1, tzinfo=UTC)) == 60


def test_now_before_activation_is_zero():
    activated = datetime(2025, 6, 1, tzinfo=UTC)
    assert calculator.cycles_elapsed(activated, datetime(2025, 1, 1, tzinfo=UTC)) == 0


def test_cycles_monotonic_in_now():
    activated = datetime(2024, 1, 31, tzinfo=UTC)
    previous = 0
    now = activated
    for _ in range(800):
        now += timedelta(days=3)
        current = calculator.cycles_elapsed(activated, now)
        assert current >= previous
        assert 0 <= current <= 60
        previous = current


def test_two_contracts_two_and_a_half_months():
    activated = datetime(2025, 1, 10, tzinfo=UTC)
    now = datetime(2025, 3, 25, tzinfo=UTC)
    plan = calculator.schedule(2, activated, now)
    assert plan.cycles_elapsed == 2
    assert plan.monthly_payout == 3600
    assert plan.total_paid_to_date == 7200


@pytest.mark.parametrize("activated, cycles, expected", [
    (datetime(2025, 1, 10, tzinfo=UTC), 2, date(2025, 4, 10)),
    (datetime(2025, 1, 31, tzinfo=UTC), 0, date(2025, 2, 28)),
    (datetime(2025, 11, 15, tzinfo=UTC), 1, date(2026, 1, 15)),
])
def test_next_payout_date(activated, cycles, expected):
    assert calculator.next_payout_date(activated, cycles) == expected


def test_no_next_payout_after_final_cycle():
    activated = datetime(2015, 1, 1, tzinfo=UTC)
    plan = calculator.schedule(1, activated, datetime(2025, 1, 1, tzinfo=UTC))
    assert plan.next_payout_date is None
    assert plan.total_paid_to_date == 1800 * 60


def test_parse_timestamp_accepts_postgrest_format():
    parsed = calculator.parse_timestamp("2025-01-10T08:30:00.123456+00:00")
    assert parsed == datetime(2025, 1, 10, 8, 30, 0, 123456, tzinfo=UTC)
    assert calculator.parse_timestamp("2025-01-10T08:30:00Z").tzinfo is not None
    assert calculator.parse_timestamp(None) is None
