from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional, Sequence, Tuple

from finboard_core.domain.amounts import magnitude
from finboard_core.domain.models import (
    INCOME,
    OverviewSummary,
    RecurringEntry,
    SavingsBaseline,
    Transaction,
)
from finboard_core.services import periods
from finboard_core.services.recurring import recurring_totals
from finboard_core.services.savings import baseline_amount

ROLLING_MONTHS = 12


def _totals(transactions: Iterable[Transaction]) -> Tuple[float, float]:
    income = 0.0
    expense = 0.0
    for tx in transactions:
        if tx.kind == INCOME:
            income += magnitude(tx.amount)
        else:
            expense += magnitude(tx.amount)
    return income, expense


def _signed(tx: Transaction) -> float:
    value = magnitude(tx.amount)
    return value if tx.kind == INCOME else -value


def summarize_overview(
    transactions: Sequence[Transaction],
    recurring: Sequence[RecurringEntry] = (),
    baseline: Optional[SavingsBaseline] = None,
    today: Optional[dt.date] = None,
) -> OverviewSummary:
    """
    Headline figures for the dashboard:
    - all-time totals up to today, plus the standing recurring amounts
    - current month [month start, next month start) bounded by today
    - previous calendar month, for the delta display
    - signed movement over the trailing 12 months (current month included)
    """
    today = today or dt.date.today()
    current_start = periods.month_start(today)
    next_start = periods.shift_month_start(today, 1)
    previous_start = periods.shift_month_start(today, -1)
    rolling_start = periods.shift_month_start(today, -(ROLLING_MONTHS - 1))

    history = periods.up_to(transactions, today)
    current = [t for t in history if current_start <= t.date < next_start]
    previous = [t for t in history if previous_start <= t.date < current_start]
    rolling = [t for t in history if t.date >= rolling_start]

    total_income, total_expense = _totals(history)
    monthly_income, monthly_expense = _totals(current)
    previous_income, previous_expense = _totals(previous)
    fixed = recurring_totals(recurring)
    base = baseline_amount(baseline)

    monthly_income += fixed.income
    monthly_expense += fixed.expense
    monthly_net = monthly_income - monthly_expense

    return OverviewSummary(
        total_income=total_income + fixed.income,
        total_expense=total_expense + fixed.expense,
        balance=(total_income - total_expense) + fixed.net + base,
        monthly_income=monthly_income,
        monthly_expense=monthly_expense,
        previous_monthly_income=previous_income,
        previous_monthly_expense=previous_expense,
        recurring_income=fixed.income,
        recurring_expense=fixed.expense,
        rolling_movement=sum(_signed(t) for t in rolling) + fixed.net,
        baseline=base,
        current_reserves=base + monthly_net,
    )
