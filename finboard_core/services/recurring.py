from __future__ import annotations

import dataclasses
import datetime as dt
import math
from typing import Dict, Iterable, List, Optional

from finboard_core.domain.amounts import magnitude
from finboard_core.domain.models import (
    INCOME,
    CategoryFlow,
    MonthBucket,
    RecurringEntry,
    RecurringSummary,
    RecurringTotals,
)
from finboard_core.services.bucketing import month_key


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def active_entries(entries: Iterable[RecurringEntry]) -> List[RecurringEntry]:
    return [e for e in entries if e.active]


def recurring_totals(entries: Iterable[RecurringEntry]) -> RecurringTotals:
    income = 0.0
    expense = 0.0
    for entry in active_entries(entries):
        if entry.kind == INCOME:
            income += magnitude(entry.amount)
        else:
            expense += magnitude(entry.amount)
    return RecurringTotals(income=income, expense=expense)


def inject_recurring(
    buckets: Dict[str, MonthBucket],
    totals: RecurringTotals,
    today: Optional[dt.date] = None,
) -> Dict[str, MonthBucket]:
    """
    Add the standing monthly amounts to the current month only.
    Returns a new mapping; the input buckets are left untouched.
    """
    today = today or dt.date.today()
    result = {key: dataclasses.replace(bucket) for key, bucket in buckets.items()}
    if totals.is_empty():
        return result

    key = month_key(today)
    current = result.setdefault(key, MonthBucket(month=key))
    current.income += totals.income
    current.expense += totals.expense
    return {k: result[k] for k in sorted(result)}


def summarize_recurring(entries: Iterable[RecurringEntry]) -> RecurringSummary:
    active = active_entries(entries)
    totals = recurring_totals(active)

    average_day = None
    if active:
        average_day = _round_half_up(sum(e.day_of_month for e in active) / len(active))

    stability_index = 0
    if totals.income + totals.expense > 0:
        raw = (totals.income / (totals.expense or 1)) * 35 + len(active) * 5
        stability_index = min(100, _round_half_up(raw))

    grouped: Dict[str, CategoryFlow] = {}
    for entry in active:
        flow = grouped.setdefault(entry.category, CategoryFlow(category=entry.category))
        if entry.kind == INCOME:
            flow.income += magnitude(entry.amount)
        else:
            flow.expense += magnitude(entry.amount)

    return RecurringSummary(
        totals=totals,
        active_count=len(active),
        average_day=average_day,
        stability_index=stability_index,
        by_category=list(grouped.values()),
    )
