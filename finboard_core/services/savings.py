from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional, Sequence

from finboard_core.domain.amounts import to_finite
from finboard_core.domain.models import (
    MonthBucket,
    RecurringEntry,
    RecurringTotals,
    SavingsBaseline,
    SavingsSummary,
    Transaction,
)
from finboard_core.services import bucketing, periods, recurring as recurring_service
from finboard_core.services.projection import DEFAULT_HORIZONS


def baseline_amount(baseline: Optional[SavingsBaseline]) -> float:
    if baseline is None:
        return 0.0
    return to_finite(baseline.amount)


def best_month(months: Sequence[MonthBucket]) -> Optional[str]:
    """Month with the highest savings; the earliest one wins a tie."""
    if not months:
        return None
    best = months[0]
    for bucket in months[1:]:
        if bucket.savings > best.savings:
            best = bucket
    return best.month


def top_months(months: Sequence[MonthBucket], limit: int = 3) -> List[MonthBucket]:
    return sorted(months, key=lambda b: b.savings, reverse=True)[:limit]


def savings_projection(months: Sequence[MonthBucket], horizons: Sequence[int] = DEFAULT_HORIZONS) -> Dict[int, float]:
    average = sum(b.savings for b in months) / len(months) if months else 0.0
    return {h: average * h for h in horizons}


def summarize_months(
    months: List[MonthBucket],
    baseline: Optional[SavingsBaseline] = None,
    recurring_totals: Optional[RecurringTotals] = None,
    horizons: Sequence[int] = DEFAULT_HORIZONS,
) -> SavingsSummary:
    total_savings = sum(b.savings for b in months)
    total_income = sum(b.income for b in months)
    avg_rate = total_savings / total_income * 100 if total_income > 0 else 0.0
    return SavingsSummary(
        months=months,
        total_savings=total_savings,
        total_income=total_income,
        avg_savings_rate=avg_rate,
        best_month=best_month(months),
        top_months=top_months(months),
        projection=savings_projection(months, horizons),
        baseline=baseline_amount(baseline),
        recurring=recurring_totals or RecurringTotals(),
    )


def summarize_savings(
    transactions: Sequence[Transaction],
    recurring: Sequence[RecurringEntry] = (),
    period: str = "1y",
    today: Optional[dt.date] = None,
    baseline: Optional[SavingsBaseline] = None,
    horizons: Sequence[int] = DEFAULT_HORIZONS,
) -> SavingsSummary:
    today = today or dt.date.today()
    window = periods.resolve_period(period, today)
    filtered = periods.filter_period(periods.up_to(transactions, today), window)

    totals = recurring_service.recurring_totals(recurring)
    buckets = recurring_service.inject_recurring(bucketing.bucket_by_month(filtered), totals, today)
    return summarize_months(list(buckets.values()), baseline, totals, horizons)
