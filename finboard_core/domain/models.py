from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Dict, List, Optional, Tuple

INCOME = "income"
EXPENSE = "expense"


def normalize_kind(raw: str) -> str:
    kind = str(raw).strip().lower()
    if kind not in (INCOME, EXPENSE):
        raise ValueError(f"Unknown kind {raw!r}; expected 'income' or 'expense'")
    return kind


@dataclasses.dataclass(frozen=True)
class Transaction:
    id: str
    kind: str  # "income" or "expense"
    category: str
    amount: float
    date: dt.date
    card_id: Optional[str] = None
    description: str = ""
    installment_group_id: Optional[str] = None
    installment_index: Optional[int] = None
    installment_total: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", normalize_kind(self.kind))


@dataclasses.dataclass(frozen=True)
class RecurringEntry:
    id: str
    kind: str
    category: str
    amount: float
    day_of_month: int
    active: bool = True
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "kind", normalize_kind(self.kind))


@dataclasses.dataclass(frozen=True)
class Card:
    id: str
    nickname: str
    brand: str = "nubank"
    credit_limit: Optional[float] = None
    closing_day: int = 5
    due_day: int = 15
    network: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Investment:
    id: str
    name: str
    amount: float
    expected_return: float  # annual, in percent
    start_date: dt.date
    risk_level: str = "moderado"
    category: str = "Renda Fixa"
    broker: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class SavingsBaseline:
    user_id: str
    amount: float


@dataclasses.dataclass(frozen=True)
class PeriodRange:
    token: str
    start: dt.date
    end: dt.date

    def contains(self, date: dt.date) -> bool:
        return self.start <= date <= self.end


@dataclasses.dataclass
class MonthBucket:
    month: str  # "YYYY-MM"
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense

    @property
    def savings(self) -> float:
        return self.net

    @property
    def savings_rate(self) -> float:
        if self.income > 0:
            return self.savings / self.income * 100
        return 0.0


@dataclasses.dataclass(frozen=True)
class RecurringTotals:
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense

    def is_empty(self) -> bool:
        return self.income == 0 and self.expense == 0


@dataclasses.dataclass
class CategoryFlow:
    category: str
    income: float = 0.0
    expense: float = 0.0


@dataclasses.dataclass
class RecurringSummary:
    totals: RecurringTotals
    active_count: int
    average_day: Optional[int]
    stability_index: int
    by_category: List[CategoryFlow]

    @property
    def net(self) -> float:
        return self.totals.net


@dataclasses.dataclass(frozen=True)
class CategoryTotal:
    name: str
    value: float


@dataclasses.dataclass(frozen=True)
class CardSpend:
    card_id: str
    name: str
    value: float


@dataclasses.dataclass(frozen=True)
class BillingCycle:
    cycle_start: dt.date
    cycle_end: dt.date
    next_due_date: dt.date


@dataclasses.dataclass
class CardMetrics:
    card_id: str
    cycle: BillingCycle
    spent_in_cycle: float
    utilization: Optional[float]  # 0..1, None without a credit limit
    remaining_limit: Optional[float]
    transactions_count: int
    days_until_due: int


@dataclasses.dataclass
class InvestmentProjection:
    investment_id: str
    name: str
    category: str
    amount: float
    projections: Dict[int, float]  # horizon in months -> future value


@dataclasses.dataclass
class PortfolioSummary:
    total_invested: float
    weighted_average_return: float
    projected_gain_12m: float
    horizon_totals: Dict[int, float]
    risk_allocation: Dict[str, float]
    investments: List[InvestmentProjection]


@dataclasses.dataclass
class SavingsSummary:
    months: List[MonthBucket]
    total_savings: float
    total_income: float
    avg_savings_rate: float
    best_month: Optional[str]
    top_months: List[MonthBucket]
    projection: Dict[int, float]
    baseline: float
    recurring: RecurringTotals

    @property
    def display_total_savings(self) -> float:
        return self.total_savings + self.baseline


@dataclasses.dataclass
class OverviewSummary:
    total_income: float
    total_expense: float
    balance: float
    monthly_income: float
    monthly_expense: float
    previous_monthly_income: float
    previous_monthly_expense: float
    recurring_income: float
    recurring_expense: float
    rolling_movement: float
    baseline: float
    current_reserves: float

    @property
    def monthly_net(self) -> float:
        return self.monthly_income - self.monthly_expense

    @property
    def income_delta(self) -> float:
        return self.monthly_income - self.previous_monthly_income

    @property
    def expense_delta(self) -> float:
        return self.monthly_expense - self.previous_monthly_expense


@dataclasses.dataclass(frozen=True)
class CardPreset:
    label: str
    network: str


@dataclasses.dataclass(frozen=True)
class DashboardOptions:
    income_categories: Tuple[str, ...] = ("Salário", "Aluguel", "Aposentadoria", "Freelance", "Bônus", "Outro")
    expense_categories: Tuple[str, ...] = (
        "Alimentação",
        "Transporte",
        "Utilities",
        "Saúde",
        "Educação",
        "Lazer",
        "Outro",
    )
    payment_methods: Tuple[Tuple[str, str], ...] = (
        ("pix", "PIX"),
        ("cartao_credito", "Cartão de Crédito"),
        ("cartao_debito", "Cartão de Débito"),
        ("transferencia", "Transferência"),
        ("dinheiro", "Dinheiro"),
        ("outro", "Outro"),
    )
    bill_types: Tuple[Tuple[str, str], ...] = (
        ("light", "Energia elétrica"),
        ("water", "Água / Saneamento"),
        ("internet", "Internet / Telefonia"),
        ("gas", "Gás"),
        ("condominium", "Condomínio"),
        ("other", "Outra conta mensal"),
    )
    card_presets: Dict[str, CardPreset] = dataclasses.field(
        default_factory=lambda: {
            "nubank": CardPreset("Nubank Roxo", "Mastercard"),
            "magalu": CardPreset("Magalu", "Visa"),
            "renner": CardPreset("Cartão Renner", "Visa"),
            "visa-signature": CardPreset("Visa Signature", "Visa"),
            "mastercard-black": CardPreset("Mastercard Black", "Mastercard"),
        }
    )
    investment_categories: Tuple[str, ...] = (
        "Renda Fixa",
        "Ações",
        "Fundos Imobiliários",
        "ETF",
        "Cripto",
        "Poupança",
        "Previdência",
        "Outro",
    )
    risk_levels: Tuple[str, ...] = ("conservador", "moderado", "arrojado")
    projection_horizons: Tuple[int, ...] = (3, 6, 12, 24, 36)
    default_period: str = "1y"
    trend_window: int = 12

    def card_network(self, card: Card) -> Optional[str]:
        """The card's own network, else the one of its brand preset."""
        if card.network:
            return card.network
        preset = self.card_presets.get(card.brand)
        return preset.network if preset else None


@dataclasses.dataclass
class DashboardInputs:
    transactions: List[Transaction] = dataclasses.field(default_factory=list)
    recurring: List[RecurringEntry] = dataclasses.field(default_factory=list)
    cards: List[Card] = dataclasses.field(default_factory=list)
    investments: List[Investment] = dataclasses.field(default_factory=list)
    baseline: Optional[SavingsBaseline] = None


@dataclasses.dataclass
class DashboardReport:
    period: PeriodRange
    today: dt.date
    trends: List[MonthBucket]
    categories: List[CategoryTotal]
    card_spend: List[CardSpend]
    card_metrics: Dict[str, CardMetrics]
    recurring: RecurringSummary
    savings: SavingsSummary
    portfolio: PortfolioSummary
    overview: OverviewSummary
