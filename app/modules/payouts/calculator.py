"""
Monthly payout arithmetic for funded contract units.

A holding pays ``contracts * monthly_payout_per_contract`` once per completed
monthly cycle after its activation date, for at most ``max_payout_cycles`` cycles.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Union

from app.config.settings import settings

DateLike = Union[date, datetime]

PAYOUT_DAY_CAP = 28


def _as_utc(value: DateLike) -> DateLike:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc)
    return value


def parse_timestamp(value: Union[str, DateLike, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def months_between(start: DateLike, end: DateLike) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def cycles_elapsed(activation: DateLike, now: DateLike, max_cycles: Optional[int] = None) -> int:
    """Completed monthly cycles since activation, clamped to [0, max_cycles]."""
    max_cycles = settings.max_payout_cycles if max_cycles is None else max_cycles
    activation, now = _as_utc(activation), _as_utc(now)
    raw = months_between(activation, now)
    if now.day < activation.day:
        raw -= 1
    return max(0, min(max_cycles, raw))


def monthly_payout(contracts: int, rate: Optional[int] = None) -> int:
    rate = settings.monthly_payout_per_contract if rate is None else rate
    return contracts * rate


def next_payout_date(activation: DateLike, cycles: int) -> date:
    """First of the activation month plus cycles + 1 months, on the activation day capped at 28."""
    activation = _as_utc(activation)
    month_index = activation.month - 1 + cycles + 1
    year = activation.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(activation.day, PAYOUT_DAY_CAP))


@dataclass(frozen=True)
class PayoutSchedule:
    contracts: int
    activated_at: datetime
    cycles_elapsed: int
    monthly_payout: int
    total_paid_to_date: int
    next_payout_date: Optional[date]


def schedule(contracts: int, activated_at: datetime, now: datetime) -> PayoutSchedule:
    cycles = cycles_elapsed(activated_at, now)
    per_month = monthly_payout(contracts)
    upcoming = None
    if cycles < settings.max_payout_cycles:
        upcoming = next_payout_date(activated_at, cycles)
    return PayoutSchedule(
        contracts=contracts,
        activated_at=activated_at,
        cycles_elapsed=cycles,
        monthly_payout=per_month,
        total_paid_to_date=per_month * cycles,
        next_payout_date=upcoming,
    )
