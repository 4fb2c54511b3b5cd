"""
Aggregation Engine

Period totals (week / month / year around a reference instant) and
per-category summaries.

Boundaries are local calendar boundaries, inclusive at both ends. The
end of a day is 23:59:59.999999, the last instant representable at
microsecond resolution.

Transfers move money between the user's own accounts; they are never
counted as income or expense.
"""

import calendar
from collections.abc import Iterable
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Optional, Union

from money_manager.models.ledger import (
    Period,
    PeriodTotals,
    Transaction,
    TransactionType,
    to_local_naive,
)


END_OF_DAY = time(23, 59, 59, 999999)


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), END_OF_DAY)


def period_range(
    period: Union[Period, str],
    now: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """
    Inclusive (start, end) of the calendar period containing `now`.

    Weeks run Monday to Sunday; on a Sunday the week started six days
    earlier.
    """
    period = Period(period)
    now = to_local_naive(now) if now is not None else datetime.now()

    if period == Period.MONTH:
        last_day = calendar.monthrange(now.year, now.month)[1]
        return (
            datetime(now.year, now.month, 1),
            datetime.combine(now.date().replace(day=last_day), END_OF_DAY),
        )

    if period == Period.YEAR:
        return (
            datetime(now.year, 1, 1),
            datetime.combine(now.date().replace(month=12, day=31), END_OF_DAY),
        )

    # datetime.weekday(): Monday == 0 ... Sunday == 6
    week_start = start_of_day(now) - timedelta(days=now.weekday())
    return week_start, end_of_day(week_start + timedelta(days=6))


def period_totals(
    transactions: Iterable[Transaction],
    period: Union[Period, str],
    now: Optional[datetime] = None,
) -> PeriodTotals:
    """Sum income and expense falling inside the period containing `now`."""
    start, end = period_range(period, now)
    income = Decimal("0")
    expense = Decimal("0")

    for tx in transactions:
        if not start <= tx.occurred_at <= end:
            continue
        if tx.type == TransactionType.INCOME:
            income += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            expense += tx.amount

    return PeriodTotals(
        period=Period(period),
        start=start,
        end=end,
        income=income,
        expense=expense,
    )


def category_summary(
    transactions: Iterable[Transaction],
) -> dict[tuple[TransactionType, str], Decimal]:
    """
    Total amount per (type, category), transfers excluded.

    Pass an already filtered set to summarise a view of the ledger.
    """
    summary: dict[tuple[TransactionType, str], Decimal] = {}
    for tx in transactions:
        if tx.type == TransactionType.TRANSFER:
            continue
        key = (TransactionType(tx.type), tx.category)
        summary[key] = summary.get(key, Decimal("0")) + tx.amount
    return summary
