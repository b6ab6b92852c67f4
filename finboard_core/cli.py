from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from finboard_core.domain.errors import FinboardError
from finboard_core.domain.models import CardMetrics, DashboardInputs, DashboardOptions, DashboardReport, MonthBucket
from finboard_core.io import config as config_io
from finboard_core.services import billing, pipeline, projection

app = typer.Typer(help="Personal finance dashboard: trends, savings, cards and investments.")
console = Console()

DATA_HELP = "Directory with transactions.csv, recurring.csv, cards.csv, investments.csv, baseline.json"
TODAY_HELP = "Reference date (YYYY-MM-DD); defaults to today"
PERIOD_HELP = "Period: 3m|6m|1y|2y|all (defaults to options.json or 1y)"


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """Finboard CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def _parse_today(raw: Optional[str]) -> dt.date:
    if not raw:
        return dt.date.today()
    try:
        return dt.date.fromisoformat(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid date {raw!r}; expected YYYY-MM-DD") from exc


def _load(data: Path) -> Tuple[DashboardInputs, DashboardOptions]:
    try:
        return config_io.load_inputs(data), config_io.load_directory_options(data)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Not found: {exc}") from exc
    except (FinboardError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_report(data: Path, period: Optional[str], today: Optional[str]) -> DashboardReport:
    inputs, options = _load(data)
    return pipeline.aggregate(inputs, period, _parse_today(today), options)


def _money(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def _pct(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:.1f}%"


def _due_label(metrics: CardMetrics) -> str:
    return f"{metrics.cycle.next_due_date.isoformat()} ({metrics.days_until_due:+d}d)"


def _month_table(title: str, months: Iterable[MonthBucket]) -> Table:
    table = Table(title=title)
    table.add_column("Month")
    table.add_column("Income", justify="right")
    table.add_column("Expense", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Savings rate", justify="right")
    for bucket in months:
        table.add_row(
            bucket.month,
            _money(bucket.income),
            _money(bucket.expense),
            _money(bucket.net),
            _pct(bucket.savings_rate),
        )
    return table


@app.command()
def overview(
    data: Path = typer.Option(..., help=DATA_HELP),
    today: Optional[str] = typer.Option(None, help=TODAY_HELP),
):
    """Balance, current month and rolling 12-month movement."""
    report = _build_report(data, None, today)
    summary = report.overview

    table = Table(title=f"Overview ({report.today.isoformat()})", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Balance", _money(summary.balance))
    table.add_row("Total income", _money(summary.total_income))
    table.add_row("Total expense", _money(summary.total_expense))
    table.add_row("Month income", f"{_money(summary.monthly_income)} ({summary.income_delta:+,.2f})")
    table.add_row("Month expense", f"{_money(summary.monthly_expense)} ({summary.expense_delta:+,.2f})")
    table.add_row("Month net", _money(summary.monthly_net))
    table.add_row("Recurring net", _money(summary.recurring_income - summary.recurring_expense))
    table.add_row("Rolling 12m movement", _money(summary.rolling_movement))
    table.add_row("Baseline", _money(summary.baseline))
    table.add_row("Current reserves", _money(summary.current_reserves))
    console.print(table)


@app.command()
def trends(
    data: Path = typer.Option(..., help=DATA_HELP),
    period: Optional[str] = typer.Option(None, help=PERIOD_HELP),
    today: Optional[str] = typer.Option(None, help=TODAY_HELP),
):
    """Monthly income/expense for the most recent months of the period."""
    report = _build_report(data, period, today)
    console.print(_month_table(f"Monthly trend ({report.period.token})", report.trends))


@app.command()
def savings(
    data: Path = typer.Option(..., help=DATA_HELP),
    period: Optional[str] = typer.Option(None, help=PERIOD_HELP),
    today: Optional[str] = typer.Option(None, help=TODAY_HELP),
):
    """Savings per month, savings rate and best months."""
    report = _build_report(data, period, today)
    summary = report.savings
    console.print(_month_table(f"Savings ({report.period.token})", summary.months))
    console.print(f"Total savings: [bold]{_money(summary.display_total_savings)}[/bold] "
                  f"(period {_money(summary.total_savings)} + baseline {_money(summary.baseline)})")
    console.print(f"Average savings rate: {_pct(summary.avg_savings_rate)}")
    console.print(f"Best month: {summary.best_month or '-'}")
    for months, value in summary.projection.items():
        console.print(f"  {months:>2} months at current pace: {_money(value)}")


@app.command()
def cards(
    data: Path = typer.Option(..., help=DATA_HELP),
    today: Optional[str] = typer.Option(None, help=TODAY_HELP),
):
    """Current billing cycle, spend and utilization per card."""
    inputs, options = _load(data)
    report = pipeline.aggregate(inputs, None, _parse_today(today), options)

    table = Table(title="Cards")
    table.add_column("Card")
    table.add_column("Network")
    table.add_column("Cycle")
    table.add_column("Due", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Utilization", justify="right")
    table.add_column("Available", justify="right")
    table.add_column("Tx", justify="right")
    for card in billing.rank_by_utilization(inputs.cards, report.card_metrics):
        m = report.card_metrics[card.id]
        table.add_row(
            card.nickname,
            options.card_network(card) or "-",
            f"{m.cycle.cycle_start.isoformat()} → {m.cycle.cycle_end.isoformat()}",
            _due_label(m),
            _money(m.spent_in_cycle),
            _pct(m.utilization * 100) if m.utilization is not None else "-",
            _money(m.remaining_limit),
            str(m.transactions_count),
        )
    console.print(table)


@app.command()
def investments(
    data: Path = typer.Option(..., help=DATA_HELP),
):
    """Invested capital, weighted return and compound projections."""
    inputs, options = _load(data)
    portfolio = projection.summarize_portfolio(inputs.investments, options.projection_horizons, options.risk_levels)

    table = Table(title="Investments")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    for months in options.projection_horizons:
        table.add_column(f"{months}m", justify="right")
    for item in portfolio.investments:
        table.add_row(
            item.name,
            item.category,
            _money(item.amount),
            *[_money(item.projections[m]) for m in options.projection_horizons],
        )
    console.print(table)
    console.print(f"Total invested: {_money(portfolio.total_invested)}")
    console.print(f"Weighted average return: {_pct(portfolio.weighted_average_return)} a.a.")
    console.print(f"Projected 12-month gain: {_money(portfolio.projected_gain_12m)}")
    for level, value in portfolio.risk_allocation.items():
        console.print(f"  {level}: {_money(value)}")


@app.command()
def categories(
    data: Path = typer.Option(..., help=DATA_HELP),
    period: Optional[str] = typer.Option(None, help=PERIOD_HELP),
    today: Optional[str] = typer.Option(None, help=TODAY_HELP),
):
    """Expenses per category (recurring expenses included)."""
    report = _build_report(data, period, today)
    table = Table(title=f"Expenses by category ({report.period.token})")
    table.add_column("Category")
    table.add_column("Total", justify="right")
    for item in sorted(report.categories, key=lambda c: c.value, reverse=True):
        table.add_row(item.name, _money(item.value))
    console.print(table)

    if report.card_spend:
        cards_table = Table(title="Expenses by card")
        cards_table.add_column("Card")
        cards_table.add_column("Total", justify="right")
        for item in report.card_spend:
            cards_table.add_row(item.name, _money(item.value))
        console.print(cards_table)


@app.command()
def recurring(
    data: Path = typer.Option(..., help=DATA_HELP),
):
    """Active recurring income and expenses."""
    inputs, options = _load(data)
    report = pipeline.aggregate(inputs, None, None, options)
    summary = report.recurring

    table = Table(title="Recurring by category")
    table.add_column("Category")
    table.add_column("Income", justify="right")
    table.add_column("Expense", justify="right")
    for flow in summary.by_category:
        table.add_row(flow.category, _money(flow.income), _money(flow.expense))
    console.print(table)
    console.print(f"Monthly net: {_money(summary.net)} across {summary.active_count} active entries")
    console.print(f"Average day: {summary.average_day if summary.average_day is not None else '-'}")
    console.print(f"Stability index: {summary.stability_index}")


@app.command("options")
def show_options(
    data: Path = typer.Option(..., help=DATA_HELP),
):
    """Configured categories, payment methods, bill types and card presets."""
    _, options = _load(data)

    lists = Table(title="Categories")
    lists.add_column("Group")
    lists.add_column("Values")
    lists.add_row("Income", ", ".join(options.income_categories))
    lists.add_row("Expense", ", ".join(options.expense_categories))
    lists.add_row("Investment", ", ".join(options.investment_categories))
    lists.add_row("Risk levels", ", ".join(options.risk_levels))
    console.print(lists)

    for title, pairs in (("Payment methods", options.payment_methods), ("Bill types", options.bill_types)):
        table = Table(title=title)
        table.add_column("Value")
        table.add_column("Label")
        for value, label in pairs:
            table.add_row(value, label)
        console.print(table)

    presets = Table(title="Card presets")
    presets.add_column("Brand")
    presets.add_column("Label")
    presets.add_column("Network")
    for brand, preset in options.card_presets.items():
        presets.add_row(brand, preset.label, preset.network)
    console.print(presets)
    console.print(
        f"Default period: {options.default_period}; trend window: {options.trend_window} months; "
        f"projection horizons: {', '.join(str(m) for m in options.projection_horizons)}"
    )


@app.command()
def report(
    data: Path = typer.Option(..., help=DATA_HELP),
    period: Optional[str] = typer.Option(None, help=PERIOD_HELP),
    today: Optional[str] = typer.Option(None, help=TODAY_HELP),
    out: Optional[Path] = typer.Option(None, help="Output path for the report JSON"),
):
    """Full dashboard report as JSON."""
    payload = pipeline.report_to_dict(_build_report(data, period, today))
    if out:
        _save_json(out, payload)
        typer.echo(f"Report written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def project(
    principal: float = typer.Option(..., help="Amount invested"),
    rate: float = typer.Option(..., help="Expected annual return, in percent"),
    months: int = typer.Option(12, help="Months to project"),
):
    """Future value with monthly compounding."""
    value = projection.future_value(principal, rate, months)
    typer.echo(f"{value:.2f}")


if __name__ == "__main__":
    app()
