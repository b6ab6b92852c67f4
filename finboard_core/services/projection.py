from __future__ import annotations

from typing import Dict, Sequence

import numpy as np

from finboard_core.domain.amounts import magnitude, to_finite
from finboard_core.domain.models import Investment, InvestmentProjection, PortfolioSummary

DEFAULT_HORIZONS = (3, 6, 12, 24, 36)
DEFAULT_RISK_LEVELS = ("conservador", "moderado", "arrojado")


def future_value(principal: float, annual_rate_percent: float, months: int) -> float:
    """Monthly compounding: principal * (1 + rate/12/100) ** months."""
    monthly_rate = annual_rate_percent / 12 / 100
    return float(principal * np.power(1 + monthly_rate, months))


def project_investment(investment: Investment, horizons: Sequence[int] = DEFAULT_HORIZONS) -> InvestmentProjection:
    principal = magnitude(investment.amount)
    rate = to_finite(investment.expected_return)
    return InvestmentProjection(
        investment_id=investment.id,
        name=investment.name,
        category=investment.category,
        amount=principal,
        projections={months: future_value(principal, rate, months) for months in horizons},
    )


def weighted_average_return(investments: Sequence[Investment]) -> float:
    if not investments:
        return 0.0
    amounts = np.array([magnitude(inv.amount) for inv in investments], dtype=float)
    rates = np.array([to_finite(inv.expected_return) for inv in investments], dtype=float)
    total = amounts.sum()
    if total <= 0:
        return 0.0
    return float(np.dot(amounts, rates) / total)


def projected_gain(investments: Sequence[Investment], months: int = 12) -> float:
    projected = sum(
        future_value(magnitude(inv.amount), to_finite(inv.expected_return), months) for inv in investments
    )
    invested = sum(magnitude(inv.amount) for inv in investments)
    return projected - invested


def risk_allocation(
    investments: Sequence[Investment],
    risk_levels: Sequence[str] = DEFAULT_RISK_LEVELS,
) -> Dict[str, float]:
    allocation = {level: 0.0 for level in risk_levels}
    for inv in investments:
        if inv.risk_level in allocation:
            allocation[inv.risk_level] += magnitude(inv.amount)
    return allocation


def summarize_portfolio(
    investments: Sequence[Investment],
    horizons: Sequence[int] = DEFAULT_HORIZONS,
    risk_levels: Sequence[str] = DEFAULT_RISK_LEVELS,
) -> PortfolioSummary:
    projections = [project_investment(inv, horizons) for inv in investments]
    horizon_totals = {months: sum(p.projections[months] for p in projections) for months in horizons}
    return PortfolioSummary(
        total_invested=sum(p.amount for p in projections),
        weighted_average_return=weighted_average_return(investments),
        projected_gain_12m=projected_gain(investments, 12),
        horizon_totals=horizon_totals,
        risk_allocation=risk_allocation(investments, risk_levels),
        investments=projections,
    )
