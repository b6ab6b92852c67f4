from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from finboard_core.domain.amounts import parse_amount
from finboard_core.domain.errors import InvalidAmount
from finboard_core.domain.models import CardPreset, DashboardInputs, DashboardOptions, SavingsBaseline
from finboard_core.io import ledger

logger = logging.getLogger(__name__)

TRANSACTIONS_FILE = "transactions.csv"
RECURRING_FILE = "recurring.csv"
CARDS_FILE = "cards.csv"
INVESTMENTS_FILE = "investments.csv"
BASELINE_FILE = "baseline.json"
OPTIONS_FILE = "options.json"


def _strings(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return tuple(str(v) for v in value)


def _pairs(value: Any) -> Tuple[Tuple[str, str], ...]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return tuple((str(item["value"]), str(item["label"])) for item in value)


def _presets(value: Any) -> Dict[str, CardPreset]:
    return {str(name): CardPreset(label=str(p["label"]), network=str(p["network"])) for name, p in value.items()}


def _horizons(value: Any) -> Tuple[int, ...]:
    return tuple(int(m) for m in _strings(value))


OPTION_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "income_categories": _strings,
    "expense_categories": _strings,
    "investment_categories": _strings,
    "risk_levels": _strings,
    "payment_methods": _pairs,
    "bill_types": _pairs,
    "card_presets": _presets,
    "projection_horizons": _horizons,
    "default_period": str,
    "trend_window": int,
}


def load_baseline(path: str | Path) -> Optional[SavingsBaseline]:
    """A missing or unusable baseline means 0, never an error."""
    p = Path(path)
    if not p.exists():
        return None
    data = _read_json(p)
    if not isinstance(data, dict):
        logger.warning("Ignoring savings baseline in %s: expected a JSON object", p)
        return None
    try:
        amount = parse_amount(data.get("amount"))
    except InvalidAmount:
        logger.warning("Ignoring savings baseline with invalid amount in %s", p)
        return None
    return SavingsBaseline(user_id=str(data.get("user_id", "")), amount=amount)


def load_options(path: str | Path) -> DashboardOptions:
    """Overlay the keys present in an options file on the defaults."""
    data = _read_json(path)
    raw = (data.get("options", data) if isinstance(data, dict) else data) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Options file {path} must hold a JSON object")

    overrides: Dict[str, Any] = {}
    for key, value in raw.items():
        parse = OPTION_PARSERS.get(key)
        if parse is None:
            logger.debug("Ignoring unknown option %r in %s", key, path)
            continue
        try:
            overrides[key] = parse(value)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid option {key!r} in {path}: {exc!r}") from exc

    return dataclasses.replace(DashboardOptions(), **overrides)


def load_inputs(directory: str | Path) -> DashboardInputs:
    """Read whichever record files exist in a data directory."""
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(root)

    inputs = DashboardInputs(baseline=load_baseline(root / BASELINE_FILE))
    if (root / TRANSACTIONS_FILE).exists():
        inputs.transactions = ledger.load_transactions(root / TRANSACTIONS_FILE)
    if (root / RECURRING_FILE).exists():
        inputs.recurring = ledger.load_recurring(root / RECURRING_FILE)
    if (root / CARDS_FILE).exists():
        inputs.cards = ledger.load_cards(root / CARDS_FILE)
    if (root / INVESTMENTS_FILE).exists():
        inputs.investments = ledger.load_investments(root / INVESTMENTS_FILE)
    return inputs


def load_directory_options(directory: str | Path) -> DashboardOptions:
    path = Path(directory) / OPTIONS_FILE
    if path.exists():
        return load_options(path)
    return DashboardOptions()


def _read_json(path: str | Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
