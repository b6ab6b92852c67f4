from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from finboard_core.domain.amounts import magnitude
from finboard_core.domain.models import (
    EXPENSE,
    INCOME,
    Card,
    CardSpend,
    CategoryTotal,
    MonthBucket,
    RecurringEntry,
    Transaction,
)


def month_key(date: dt.date) -> str:
    return f"{date.year:04d}-{date.month:02d}"


def bucket_by_month(transactions: Iterable[Transaction]) -> Dict[str, MonthBucket]:
    """
    Sum income and expense per calendar month.
    - Keys are "YYYY-MM", in chronological order.
    - Months without transactions are not synthesized.
    """
    rows = [
        {"date": t.date, "amount": magnitude(t.amount), "kind": t.kind}
        for t in transactions
    ]
    if not rows:
        return {}

    df = pd.DataFrame(rows)
    df["month"] = pd.to_datetime(df["date"]).dt.to_period("M")
    monthly = df.groupby(["month", "kind"])["amount"].sum().unstack(fill_value=0.0)

    buckets: Dict[str, MonthBucket] = {}
    for period, row in monthly.iterrows():
        key = str(period)
        buckets[key] = MonthBucket(
            month=key,
            income=float(row.get(INCOME, 0.0)),
            expense=float(row.get(EXPENSE, 0.0)),
        )
    return buckets


def recent_buckets(buckets: Dict[str, MonthBucket], limit: int = 12) -> List[MonthBucket]:
    ordered = [buckets[key] for key in sorted(buckets)]
    if limit <= 0:
        return []
    return ordered[-limit:]


def category_breakdown(
    transactions: Iterable[Transaction],
    recurring: Iterable[RecurringEntry] = (),
) -> List[CategoryTotal]:
    totals: Dict[str, float] = {}
    for tx in transactions:
        if tx.kind != EXPENSE:
            continue
        totals[tx.category] = totals.get(tx.category, 0.0) + magnitude(tx.amount)
    for entry in recurring:
        if not entry.active or entry.kind != EXPENSE:
            continue
        totals[entry.category] = totals.get(entry.category, 0.0) + magnitude(entry.amount)
    return [CategoryTotal(name=name, value=value) for name, value in totals.items()]


def card_spend(transactions: Iterable[Transaction], cards: Sequence[Card]) -> List[CardSpend]:
    """Expense totals per known card, in order of first spend."""
    by_id = {card.id: card for card in cards}
    totals: Dict[str, float] = {}
    for tx in transactions:
        if tx.kind != EXPENSE or not tx.card_id or tx.card_id not in by_id:
            continue
        totals[tx.card_id] = totals.get(tx.card_id, 0.0) + magnitude(tx.amount)
    return [CardSpend(card_id=cid, name=by_id[cid].nickname, value=value) for cid, value in totals.items()]
