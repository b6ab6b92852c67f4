from __future__ import annotations

import calendar
import datetime as dt
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from finboard_core.domain.amounts import magnitude, to_finite
from finboard_core.domain.models import EXPENSE, BillingCycle, Card, CardMetrics, Transaction


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1


def clamp_day(year: int, month: int, day: int) -> dt.date:
    """Day-of-month anchor, clamped to the month's last day (31 in Feb -> 28/29)."""
    last = calendar.monthrange(year, month)[1]
    return dt.date(year, month, min(max(int(day), 1), last))


def billing_cycle(closing_day: int, due_day: int, today: Optional[dt.date] = None) -> BillingCycle:
    """
    Statement cycle for a card:
    - cycle_end is the most recent closing date on or before today.
    - cycle_start is the day after the closing date one month earlier.
    - next_due_date falls on due_day in the month after cycle_end.
    """
    today = today or dt.date.today()

    reference = clamp_day(today.year, today.month, closing_day)
    if today >= reference:
        cycle_end = reference
    else:
        year, month = shift_month(today.year, today.month, -1)
        cycle_end = clamp_day(year, month, closing_day)

    year, month = shift_month(cycle_end.year, cycle_end.month, -1)
    cycle_start = clamp_day(year, month, closing_day) + dt.timedelta(days=1)

    year, month = shift_month(cycle_end.year, cycle_end.month, 1)
    next_due_date = clamp_day(year, month, due_day)

    return BillingCycle(cycle_start=cycle_start, cycle_end=cycle_end, next_due_date=next_due_date)


def card_metrics(card: Card, transactions: Iterable[Transaction], today: Optional[dt.date] = None) -> CardMetrics:
    today = today or dt.date.today()
    cycle = billing_cycle(card.closing_day, card.due_day, today)

    in_cycle = [
        tx
        for tx in transactions
        if tx.card_id == card.id
        and tx.kind == EXPENSE
        and cycle.cycle_start <= tx.date <= cycle.cycle_end
    ]
    spent = sum(magnitude(tx.amount) for tx in in_cycle)

    utilization = None
    remaining = None
    limit = to_finite(card.credit_limit) if card.credit_limit is not None else 0.0
    if limit > 0:
        utilization = min(1.0, spent / limit)
        remaining = max(0.0, limit - spent)

    return CardMetrics(
        card_id=card.id,
        cycle=cycle,
        spent_in_cycle=spent,
        utilization=utilization,
        remaining_limit=remaining,
        transactions_count=len(in_cycle),
        days_until_due=(cycle.next_due_date - today).days,
    )


def all_card_metrics(
    cards: Sequence[Card],
    transactions: Sequence[Transaction],
    today: Optional[dt.date] = None,
) -> Dict[str, CardMetrics]:
    return {card.id: card_metrics(card, transactions, today) for card in cards}


def rank_by_utilization(cards: Sequence[Card], metrics: Dict[str, CardMetrics]) -> List[Card]:
    def utilization(card: Card) -> float:
        m = metrics.get(card.id)
        return (m.utilization or 0.0) if m else 0.0

    return sorted(cards, key=utilization, reverse=True)
