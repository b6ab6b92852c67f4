import datetime as dt

import pytest

from finboard_core.domain.models import Investment
from finboard_core.services.projection import (
    future_value,
    project_investment,
    projected_gain,
    risk_allocation,
    summarize_portfolio,
    weighted_average_return,
)


def _inv(inv_id: str, amount: float, rate: float, risk: str = "moderado") -> Investment:
    return Investment(
        id=inv_id,
        name=inv_id.upper(),
        amount=amount,
        expected_return=rate,
        start_date=dt.date(2024, 1, 1),
        risk_level=risk,
    )


def test_future_value_twelve_percent_for_a_year():
    assert future_value(10000, 12, 12) == pytest.approx(11268.25, abs=0.01)


@pytest.mark.parametrize("principal, rate", [(0, 5), (1234.56, 12), (10, -3), (500, 0)])
def test_future_value_zero_months_is_identity(principal, rate):
    assert future_value(principal, rate, 0) == pytest.approx(principal)


def test_project_investment_horizons():
    projection = project_investment(_inv("cdb", 10000, 12))
    assert list(projection.projections) == [3, 6, 12, 24, 36]
    assert projection.projections[12] == pytest.approx(11268.25, abs=0.01)
    assert projection.projections[3] < projection.projections[6] < projection.projections[36]


def test_weighted_average_return():
    investments = [_inv("a", 10000, 12), _inv("b", 5000, 6)]
    assert weighted_average_return(investments) == pytest.approx(10.0)


def test_weighted_average_return_without_principal():
    assert weighted_average_return([]) == 0.0
    assert weighted_average_return([_inv("a", 0, 12)]) == 0.0


def test_weighted_average_return_within_rate_bounds():
    investments = [_inv("a", 300, 4.5), _inv("b", 1200, 13.25), _inv("c", 75.5, -2), _inv("d", 40, 9)]
    avg = weighted_average_return(investments)
    rates = [inv.expected_return for inv in investments]
    assert min(rates) <= avg <= max(rates)


def test_projected_gain_over_twelve_months():
    investments = [_inv("a", 10000, 12), _inv("b", 5000, 6)]
    expected = future_value(10000, 12, 12) + future_value(5000, 6, 12) - 15000
    assert projected_gain(investments) == pytest.approx(expected)
    assert projected_gain([]) == 0.0


def test_risk_allocation_keeps_level_order():
    investments = [_inv("a", 100, 5, "arrojado"), _inv("b", 50, 5, "conservador"), _inv("c", 25, 5, "arrojado")]
    assert risk_allocation(investments) == {"conservador": 50.0, "moderado": 0.0, "arrojado": 125.0}


def test_summarize_portfolio():
    investments = [_inv("a", 10000, 12, "conservador"), _inv("b", 5000, 6, "arrojado")]
    summary = summarize_portfolio(investments)
    assert summary.total_invested == pytest.approx(15000)
    assert summary.weighted_average_return == pytest.approx(10.0)
    assert summary.horizon_totals[12] == pytest.approx(future_value(10000, 12, 12) + future_value(5000, 6, 12))
    assert summary.projected_gain_12m == pytest.approx(summary.horizon_totals[12] - 15000)
    assert [p.investment_id for p in summary.investments] == ["a", "b"]


def test_summarize_empty_portfolio():
    summary = summarize_portfolio([])
    assert summary.total_invested == 0
    assert summary.weighted_average_return == 0.0
    assert summary.projected_gain_12m == 0.0
    assert summary.horizon_totals == {3: 0, 6: 0, 12: 0, 24: 0, 36: 0}
