import datetime as dt

import pytest

from finboard_core.domain.models import Card, MonthBucket, RecurringEntry, RecurringTotals, Transaction
from finboard_core.services.bucketing import (
    bucket_by_month,
    card_spend,
    category_breakdown,
    month_key,
    recent_buckets,
)
from finboard_core.services.recurring import inject_recurring, recurring_totals, summarize_recurring


def _tx(day: dt.date, kind: str, amount: float, category: str = "Outro", card_id=None, tx_id: str = "t") -> Transaction:
    return Transaction(id=tx_id, kind=kind, category=category, amount=amount, date=day, card_id=card_id)


def _entry(kind: str, amount: float, category: str = "Outro", day: int = 1, active: bool = True) -> RecurringEntry:
    return RecurringEntry(id=f"{kind}-{category}", kind=kind, category=category, amount=amount, day_of_month=day, active=active)


def test_bucket_by_month_sums_per_type():
    buckets = bucket_by_month(
        [
            _tx(dt.date(2024, 1, 10), "income", 1000),
            _tx(dt.date(2024, 1, 15), "expense", 400),
        ]
    )
    assert list(buckets) == ["2024-01"]
    january = buckets["2024-01"]
    assert january.income == pytest.approx(1000)
    assert january.expense == pytest.approx(400)
    assert january.savings == pytest.approx(600)
    assert january.savings_rate == pytest.approx(60.0)


def test_bucket_by_month_is_chronological_and_leaves_gaps():
    buckets = bucket_by_month(
        [
            _tx(dt.date(2024, 3, 1), "expense", 10),
            _tx(dt.date(2023, 12, 31), "income", 20),
            _tx(dt.date(2024, 1, 2), "expense", 5),
        ]
    )
    assert list(buckets) == ["2023-12", "2024-01", "2024-03"]
    assert buckets["2023-12"].expense == 0
    assert buckets["2024-01"].income == 0


def test_bucketing_uses_magnitudes_and_preserves_totals():
    txs = [
        _tx(dt.date(2024, 1, 3), "income", 120.5),
        _tx(dt.date(2024, 1, 9), "expense", -30.25),
        _tx(dt.date(2024, 2, 1), "expense", 99.99),
        _tx(dt.date(2024, 4, 30), "income", 10),
        _tx(dt.date(2024, 4, 30), "expense", float("nan")),
    ]
    buckets = bucket_by_month(txs)
    net = sum(b.income for b in buckets.values()) - sum(b.expense for b in buckets.values())
    assert buckets["2024-01"].expense == pytest.approx(30.25)
    assert net == pytest.approx(120.5 + 10 - 30.25 - 99.99)


def test_bucket_by_month_empty():
    assert bucket_by_month([]) == {}


def test_recent_buckets_keeps_last_twelve():
    buckets = {month_key(dt.date(2023, m, 1)): MonthBucket(month=month_key(dt.date(2023, m, 1))) for m in range(1, 13)}
    buckets["2024-01"] = MonthBucket(month="2024-01")
    recent = recent_buckets(buckets, 12)
    assert len(recent) == 12
    assert recent[0].month == "2023-02"
    assert recent[-1].month == "2024-01"


def test_recurring_totals_only_counts_active_entries():
    totals = recurring_totals(
        [
            _entry("income", 2000),
            _entry("expense", 500),
            _entry("expense", 80, active=False),
        ]
    )
    assert totals.income == pytest.approx(2000)
    assert totals.expense == pytest.approx(500)


def test_inject_recurring_synthesizes_current_month():
    buckets = bucket_by_month([_tx(dt.date(2024, 2, 10), "income", 100)])
    result = inject_recurring(buckets, RecurringTotals(income=2000, expense=500), today=dt.date(2024, 3, 5))
    assert list(result) == ["2024-02", "2024-03"]
    assert result["2024-03"].income == pytest.approx(2000)
    assert result["2024-03"].expense == pytest.approx(500)
    # the historical month and the input mapping are untouched
    assert result["2024-02"].income == pytest.approx(100)
    assert "2024-03" not in buckets


def test_inject_recurring_adds_once_to_existing_month():
    buckets = bucket_by_month([_tx(dt.date(2024, 3, 1), "expense", 50)])
    result = inject_recurring(buckets, RecurringTotals(income=10, expense=5), today=dt.date(2024, 3, 31))
    assert result["2024-03"].income == pytest.approx(10)
    assert result["2024-03"].expense == pytest.approx(55)
    assert buckets["2024-03"].expense == pytest.approx(50)


def test_inject_recurring_skips_when_nothing_recurring():
    result = inject_recurring({}, RecurringTotals(), today=dt.date(2024, 3, 5))
    assert result == {}


def test_category_breakdown_includes_active_recurring_expenses():
    txs = [
        _tx(dt.date(2024, 1, 1), "expense", 40, "Lazer"),
        _tx(dt.date(2024, 1, 2), "income", 1000, "Salário"),
        _tx(dt.date(2024, 1, 3), "expense", 60, "Alimentação"),
        _tx(dt.date(2024, 1, 4), "expense", 10, "Lazer"),
    ]
    recurring = [_entry("expense", 500, "Aluguel"), _entry("expense", 5, "Lazer"), _entry("expense", 9, "Gym", active=False)]
    result = category_breakdown(txs, recurring)
    assert [(c.name, c.value) for c in result] == [("Lazer", 55.0), ("Alimentação", 60.0), ("Aluguel", 500.0)]


def test_card_spend_ignores_unknown_cards_and_income():
    cards = [Card(id="c1", nickname="Roxinho"), Card(id="c2", nickname="Magalu")]
    txs = [
        _tx(dt.date(2024, 1, 1), "expense", 40, card_id="c2"),
        _tx(dt.date(2024, 1, 2), "expense", 60, card_id="c1"),
        _tx(dt.date(2024, 1, 3), "expense", 15, card_id="c2"),
        _tx(dt.date(2024, 1, 4), "expense", 99, card_id="gone"),
        _tx(dt.date(2024, 1, 5), "income", 99, card_id="c1"),
        _tx(dt.date(2024, 1, 6), "expense", 7),
    ]
    result = card_spend(txs, cards)
    assert [(c.card_id, c.name, c.value) for c in result] == [("c2", "Magalu", 55.0), ("c1", "Roxinho", 60.0)]


def test_summarize_recurring_metrics():
    summary = summarize_recurring(
        [
            _entry("income", 2000, "Salário", day=5),
            _entry("expense", 500, "Aluguel", day=10),
            _entry("expense", 80, "Lazer", day=28, active=False),
        ]
    )
    assert summary.active_count == 2
    assert summary.average_day == 8
    assert summary.stability_index == 100
    assert summary.net == pytest.approx(1500)
    assert [(f.category, f.income, f.expense) for f in summary.by_category] == [
        ("Salário", 2000.0, 0.0),
        ("Aluguel", 0.0, 500.0),
    ]


def test_summarize_recurring_without_active_entries():
    summary = summarize_recurring([_entry("income", 100, active=False)])
    assert summary.active_count == 0
    assert summary.average_day is None
    assert summary.stability_index == 0
    assert summary.by_category == []


def test_stability_index_with_only_expenses():
    summary = summarize_recurring([_entry("expense", 300, "Aluguel")])
    # income 0 -> 0 * 35 + 1 entry * 5
    assert summary.stability_index == 5


def test_mixed_case_kind_keeps_its_direction():
    income = _tx(dt.date(2024, 2, 5), " Income ", 1000)
    assert income.kind == "income"
    buckets = bucket_by_month([income])
    assert (buckets["2024-02"].income, buckets["2024-02"].expense) == (1000.0, 0.0)

    entry = _entry("EXPENSE", 300)
    assert recurring_totals([entry]) == RecurringTotals(income=0.0, expense=300.0)


@pytest.mark.parametrize("kind", ["transfer", "", "receita"])
def test_unknown_kind_is_rejected_on_records(kind):
    with pytest.raises(ValueError, match="Unknown kind"):
        _tx(dt.date(2024, 2, 5), kind, 10)
    with pytest.raises(ValueError, match="Unknown kind"):
        _entry(kind, 10)
