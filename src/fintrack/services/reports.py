"""Reporting aggregations over the caller's transactions."""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from ..clock import utcnow
from ..domain.repositories import TransactionRepository
from ..errors import ValidationError
from ..models.enums import EntryType

DateLike = Union[date, datetime]

PERIODS = ("week", "month", "year")
WEEKDAY_LABELS = list(calendar.day_name)  # Monday..Sunday
MONTH_LABELS = list(calendar.month_name)[1:]  # January..December


def range_start(value: Optional[DateLike]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def range_end(value: Optional[DateLike]) -> Optional[datetime]:
    """Plain dates cover the whole day."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)


def period_bounds(period: str, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Return the inclusive [start, end] of the week/month/year containing ``now``."""

    if period not in PERIODS:
        raise ValidationError(
            "Period must be one of week, month or year",
            errors={"period": [f"Choose one of: {', '.join(PERIODS)}."]},
        )
    now = now or utcnow()
    today = now.date()
    if period == "week":
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=6)
    elif period == "month":
        first = today.replace(day=1)
        last = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    else:
        first = date(today.year, 1, 1)
        last = date(today.year, 12, 31)
    return datetime.combine(first, time.min), datetime.combine(last, time.max)


def _bucket_labels(period: str, start: datetime) -> list[str]:
    if period == "week":
        return list(WEEKDAY_LABELS)
    if period == "month":
        days = calendar.monthrange(start.year, start.month)[1]
        return [f"Day {day}" for day in range(1, days + 1)]
    return list(MONTH_LABELS)


def _bucket_label(period: str, moment: datetime) -> str:
    if period == "week":
        return WEEKDAY_LABELS[moment.weekday()]
    if period == "month":
        return f"Day {moment.day}"
    return MONTH_LABELS[moment.month - 1]


def get_summary(
    repo: TransactionRepository,
    *,
    user_id: int,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
) -> list[dict]:
    """Total amount per transaction type, optionally within an inclusive date range.

    Only types that occur in the range are reported, matching a group-by.
    """

    totals: dict[str, float] = {}
    for txn in repo.search(
        start_date=range_start(start_date), end_date=range_end(end_date), user_id=user_id
    ):
        totals[txn.transaction_type] = totals.get(txn.transaction_type, 0.0) + txn.amount
    return [
        {"type": txn_type, "totalAmount": round(totals[txn_type], 2)}
        for txn_type in EntryType.values()
        if txn_type in totals
    ]


def get_bar_chart_series(
    repo: TransactionRepository,
    *,
    user_id: int,
    period: str,
    now: Optional[datetime] = None,
) -> list[dict]:
    """Income/expense buckets for the current week, month or year.

    Returns an ordered list of single-key mappings, e.g.
    ``[{"Monday": {"income": 0, "expense": 0}}, ...]``. Every bucket of the
    period is present, empty ones stay at zero.
    """

    start, end = period_bounds(period, now)
    labels = _bucket_labels(period, start)
    buckets: dict[str, dict[str, float]] = {
        label: {"income": 0, "expense": 0} for label in labels
    }

    for txn in repo.search(start_date=start, end_date=end, user_id=user_id):
        key = "expense" if txn.is_expense else "income"
        bucket = buckets[_bucket_label(period, txn.created_at)]
        bucket[key] = round(bucket[key] + txn.amount, 2)

    return [{label: buckets[label]} for label in labels]


def get_category_breakdown(
    repo: TransactionRepository,
    *,
    user_id: int,
    transaction_type: str = EntryType.EXPENSE.value,
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
) -> list[dict]:
    """Totals per category for one transaction type, largest first."""

    if transaction_type not in EntryType.values():
        raise ValidationError(
            'Type must be either "Income" or "Expense"',
            errors={"type": ['Must be either "Income" or "Expense".']},
        )

    totals: dict[int, float] = defaultdict(float)
    names: dict[int, str] = {}
    for txn in repo.search(
        start_date=range_start(start_date),
        end_date=range_end(end_date),
        transaction_type=transaction_type,
        user_id=user_id,
    ):
        totals[txn.category_id] += txn.amount
        if txn.category is not None:
            names[txn.category_id] = txn.category.name

    rows = [
        {
            "category_id": category_id,
            "name": names.get(category_id, "Uncategorized"),
            "amount": round(amount, 2),
        }
        for category_id, amount in totals.items()
    ]
    rows.sort(key=lambda row: row["amount"], reverse=True)
    return rows
