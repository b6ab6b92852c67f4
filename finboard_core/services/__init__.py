from finboard_core.services.billing import billing_cycle, card_metrics  # noqa: F401
from finboard_core.services.bucketing import bucket_by_month, category_breakdown  # noqa: F401
from finboard_core.services.installments import expand_installments  # noqa: F401
from finboard_core.services.overview import summarize_overview  # noqa: F401
from finboard_core.services.periods import filter_period, resolve_period  # noqa: F401
from finboard_core.services.pipeline import aggregate, report_to_dict  # noqa: F401
from finboard_core.services.projection import future_value, summarize_portfolio  # noqa: F401
from finboard_core.services.recurring import inject_recurring, recurring_totals  # noqa: F401
from finboard_core.services.savings import summarize_savings  # noqa: F401

__all__ = [
    "aggregate",
    "billing_cycle",
    "bucket_by_month",
    "card_metrics",
    "category_breakdown",
    "expand_installments",
    "filter_period",
    "future_value",
    "inject_recurring",
    "recurring_totals",
    "report_to_dict",
    "resolve_period",
    "summarize_overview",
    "summarize_portfolio",
    "summarize_savings",
]
