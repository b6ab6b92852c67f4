from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional

import pandas as pd

from finboard_core.domain.models import PeriodRange, Transaction

# Anything not listed here ("all" included) means the whole history.
PERIOD_OFFSETS = {
    "3m": pd.DateOffset(months=3),
    "6m": pd.DateOffset(months=6),
    "1y": pd.DateOffset(years=1),
    "2y": pd.DateOffset(years=2),
}
EPOCH = dt.date(2000, 1, 1)


def resolve_period(token: str, today: Optional[dt.date] = None) -> PeriodRange:
    today = today or dt.date.today()
    offset = PERIOD_OFFSETS.get(token)
    if offset is None:
        start = EPOCH
    else:
        start = (pd.Timestamp(today) - offset).date()
    return PeriodRange(token=token, start=start, end=today)


def up_to(transactions: Iterable[Transaction], today: dt.date) -> List[Transaction]:
    """Drop future-dated transactions."""
    return [t for t in transactions if t.date <= today]


def filter_period(transactions: Iterable[Transaction], period: PeriodRange) -> List[Transaction]:
    return [t for t in transactions if period.contains(t.date)]


def month_start(date: dt.date) -> dt.date:
    return dt.date(date.year, date.month, 1)


def shift_month_start(date: dt.date, months: int) -> dt.date:
    return (pd.Period(month_start(date), freq="M") + months).to_timestamp().date()
