from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from typing import Any, Optional

from finboard_core.domain.models import DashboardInputs, DashboardOptions, DashboardReport
from finboard_core.services import billing, bucketing, overview, periods, projection, savings
from finboard_core.services import recurring as recurring_service

logger = logging.getLogger(__name__)


def aggregate(
    inputs: DashboardInputs,
    period: Optional[str] = None,
    today: Optional[dt.date] = None,
    options: Optional[DashboardOptions] = None,
) -> DashboardReport:
    """Run every aggregation over one snapshot of the user's records."""
    options = options or DashboardOptions()
    today = today or dt.date.today()
    period = period or options.default_period

    window = periods.resolve_period(period, today)
    filtered = periods.filter_period(periods.up_to(inputs.transactions, today), window)
    logger.debug(
        "Aggregating %d of %d transactions for period %s (%s..%s)",
        len(filtered),
        len(inputs.transactions),
        period,
        window.start,
        window.end,
    )

    totals = recurring_service.recurring_totals(inputs.recurring)
    buckets = recurring_service.inject_recurring(bucketing.bucket_by_month(filtered), totals, today)
    horizons = options.projection_horizons

    return DashboardReport(
        period=window,
        today=today,
        trends=bucketing.recent_buckets(buckets, options.trend_window),
        categories=bucketing.category_breakdown(filtered, inputs.recurring),
        card_spend=bucketing.card_spend(filtered, inputs.cards),
        card_metrics=billing.all_card_metrics(inputs.cards, inputs.transactions, today),
        recurring=recurring_service.summarize_recurring(inputs.recurring),
        savings=savings.summarize_months(list(buckets.values()), inputs.baseline, totals, horizons),
        portfolio=projection.summarize_portfolio(inputs.investments, horizons, options.risk_levels),
        overview=overview.summarize_overview(inputs.transactions, inputs.recurring, inputs.baseline, today),
    )


def _jsonable(value: Any) -> Any:
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _bucket_to_dict(bucket) -> dict:
    return {
        "month": bucket.month,
        "income": bucket.income,
        "expense": bucket.expense,
        "net": bucket.net,
        "savings": bucket.savings,
        "savings_rate": bucket.savings_rate,
    }


def report_to_dict(report: DashboardReport) -> dict:
    """Plain structured values, ready for json.dump. No display formatting."""
    savings_summary = report.savings
    summary = report.overview
    return {
        "today": report.today.isoformat(),
        "period": _jsonable(dataclasses.asdict(report.period)),
        "trends": [_bucket_to_dict(b) for b in report.trends],
        "categories": [dataclasses.asdict(c) for c in report.categories],
        "card_spend": [dataclasses.asdict(c) for c in report.card_spend],
        "card_metrics": {cid: _jsonable(dataclasses.asdict(m)) for cid, m in report.card_metrics.items()},
        "recurring": {
            **_jsonable(dataclasses.asdict(report.recurring)),
            "net": report.recurring.net,
        },
        "savings": {
            "months": [_bucket_to_dict(b) for b in savings_summary.months],
            "total_savings": savings_summary.total_savings,
            "total_income": savings_summary.total_income,
            "avg_savings_rate": savings_summary.avg_savings_rate,
            "best_month": savings_summary.best_month,
            "top_months": [_bucket_to_dict(b) for b in savings_summary.top_months],
            "projection": _jsonable(savings_summary.projection),
            "baseline": savings_summary.baseline,
            "display_total_savings": savings_summary.display_total_savings,
            "recurring_income": savings_summary.recurring.income,
            "recurring_expense": savings_summary.recurring.expense,
        },
        "portfolio": _jsonable(dataclasses.asdict(report.portfolio)),
        "overview": {
            **dataclasses.asdict(summary),
            "monthly_net": summary.monthly_net,
            "income_delta": summary.income_delta,
            "expense_delta": summary.expense_delta,
        },
    }
