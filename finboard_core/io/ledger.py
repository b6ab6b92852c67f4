from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Callable, List, Optional, Set, TypeVar

import pandas as pd

from finboard_core.domain.amounts import parse_amount
from finboard_core.domain.errors import InvalidAmount
from finboard_core.domain.models import Card, Investment, RecurringEntry, Transaction, normalize_kind

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSACTION_COLUMNS = {"id", "date", "kind", "category", "amount"}
RECURRING_COLUMNS = {"id", "kind", "category", "amount", "day_of_month"}
CARD_COLUMNS = {"id", "nickname", "closing_day", "due_day"}
INVESTMENT_COLUMNS = {"id", "name", "amount", "expected_return", "start_date"}

_TRUE = {"1", "true", "yes", "y", "t", "sim"}


def _read_rows(csv_path: str | Path, required: Set[str], name: str, build: Callable[[dict], T]) -> List[T]:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    # everything as text; numbers go through parse_amount so bad values are reported
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in {name} CSV: {missing}")

    records: List[T] = []
    for idx, row in enumerate(df.to_dict(orient="records"), start=2):
        try:
            records.append(build(row))
        except InvalidAmount as exc:
            raise InvalidAmount(exc.raw, f"{name} CSV line {idx}") from exc
        except ValueError as exc:
            raise ValueError(f"{name} CSV line {idx}: {exc}") from exc
    logger.debug("Loaded %d %s rows from %s", len(records), name, path)
    return records


def _optional(row: dict, key: str) -> Optional[str]:
    value = str(row.get(key, "") or "").strip()
    return value or None


def _date(raw: str) -> dt.date:
    ts = pd.to_datetime(raw)
    if pd.isna(ts):
        raise ValueError(f"Missing date in row: {raw!r}")
    return ts.date()


def _int(raw: str) -> int:
    return int(parse_amount(raw))


def _day(raw: str, field: str) -> int:
    day = _int(raw)
    if not 1 <= day <= 31:
        raise ValueError(f"{field} must be between 1 and 31, got {raw!r}")
    return day


def _flag(raw: str, default: bool = True) -> bool:
    txt = str(raw).strip().lower()
    if not txt:
        return default
    return txt in _TRUE


def load_transactions(csv_path: str | Path) -> List[Transaction]:
    def build(row: dict) -> Transaction:
        total = _optional(row, "installment_total")
        index = _optional(row, "installment_index")
        return Transaction(
            id=str(row["id"]),
            kind=normalize_kind(row["kind"]),
            category=str(row["category"]),
            amount=parse_amount(row["amount"]),
            date=_date(row["date"]),
            card_id=_optional(row, "card_id"),
            description=str(row.get("description", "") or ""),
            installment_group_id=_optional(row, "installment_group_id"),
            installment_index=_int(index) if index else None,
            installment_total=_int(total) if total else None,
        )

    return _read_rows(csv_path, TRANSACTION_COLUMNS, "transactions", build)


def load_recurring(csv_path: str | Path) -> List[RecurringEntry]:
    def build(row: dict) -> RecurringEntry:
        return RecurringEntry(
            id=str(row["id"]),
            kind=normalize_kind(row["kind"]),
            category=str(row["category"]),
            amount=parse_amount(row["amount"]),
            day_of_month=_day(row["day_of_month"], "day_of_month"),
            active=_flag(row.get("active", "")),
            description=str(row.get("description", "") or ""),
        )

    return _read_rows(csv_path, RECURRING_COLUMNS, "recurring", build)


def load_cards(csv_path: str | Path) -> List[Card]:
    def build(row: dict) -> Card:
        limit = _optional(row, "credit_limit")
        return Card(
            id=str(row["id"]),
            nickname=str(row["nickname"]),
            brand=_optional(row, "brand") or "nubank",
            credit_limit=parse_amount(limit) if limit else None,
            closing_day=_day(row["closing_day"], "closing_day"),
            due_day=_day(row["due_day"], "due_day"),
            network=_optional(row, "network"),
        )

    return _read_rows(csv_path, CARD_COLUMNS, "cards", build)


def load_investments(csv_path: str | Path) -> List[Investment]:
    def build(row: dict) -> Investment:
        amount = parse_amount(row["amount"])
        if amount <= 0:
            raise InvalidAmount(row["amount"], "invested amount must be positive")
        return Investment(
            id=str(row["id"]),
            name=str(row["name"]),
            amount=amount,
            expected_return=parse_amount(row["expected_return"]),
            start_date=_date(row["start_date"]),
            risk_level=_optional(row, "risk_level") or "moderado",
            category=_optional(row, "category") or "Renda Fixa",
            broker=_optional(row, "broker"),
        )

    return _read_rows(csv_path, INVESTMENT_COLUMNS, "investments", build)
