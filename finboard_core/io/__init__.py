from finboard_core.io.ledger import (  # noqa: F401
    load_cards,
    load_investments,
    load_recurring,
    load_transactions,
)
from finboard_core.io.config import (  # noqa: F401
    load_baseline,
    load_directory_options,
    load_inputs,
    load_options,
)

__all__ = [
    "load_baseline",
    "load_cards",
    "load_directory_options",
    "load_inputs",
    "load_investments",
    "load_options",
    "load_recurring",
    "load_transactions",
]
