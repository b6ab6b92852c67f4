from finboard_core.domain.errors import FinboardError, InvalidAmount  # noqa: F401
from finboard_core.domain.models import (  # noqa: F401
    EXPENSE,
    INCOME,
    BillingCycle,
    Card,
    CardMetrics,
    CardPreset,
    CardSpend,
    CategoryFlow,
    CategoryTotal,
    DashboardInputs,
    DashboardOptions,
    DashboardReport,
    Investment,
    InvestmentProjection,
    MonthBucket,
    OverviewSummary,
    PeriodRange,
    PortfolioSummary,
    RecurringEntry,
    RecurringSummary,
    RecurringTotals,
    SavingsBaseline,
    SavingsSummary,
    Transaction,
    normalize_kind,
)

__all__ = [
    "EXPENSE",
    "INCOME",
    "BillingCycle",
    "Card",
    "CardMetrics",
    "CardPreset",
    "CardSpend",
    "CategoryFlow",
    "CategoryTotal",
    "DashboardInputs",
    "DashboardOptions",
    "DashboardReport",
    "FinboardError",
    "InvalidAmount",
    "Investment",
    "InvestmentProjection",
    "MonthBucket",
    "OverviewSummary",
    "PeriodRange",
    "PortfolioSummary",
    "RecurringEntry",
    "RecurringSummary",
    "RecurringTotals",
    "SavingsBaseline",
    "SavingsSummary",
    "Transaction",
    "normalize_kind",
]
