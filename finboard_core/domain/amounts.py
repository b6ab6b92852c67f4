from __future__ import annotations

import logging
import math
from typing import Any

from finboard_core.domain.errors import InvalidAmount

logger = logging.getLogger(__name__)


def parse_amount(raw: Any) -> float:
    """
    Parse a user supplied amount into a finite float.

    Accepts numbers, "15000.00" and the pt-BR form "15.000,00" (dots group
    thousands when a comma is present). Raises InvalidAmount otherwise.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidAmount(raw, "missing")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        txt = str(raw).strip()
        if not txt:
            raise InvalidAmount(raw, "empty")
        if "," in txt:
            txt = txt.replace(".", "").replace(",", ".")
        txt = "".join(txt.split())
        try:
            value = float(txt)
        except ValueError as exc:
            raise InvalidAmount(raw, "unparseable") from exc
    if not math.isfinite(value):
        raise InvalidAmount(raw)
    return value


def to_finite(value: Any) -> float:
    """Signed float, or 0.0 when the value cannot be used in an aggregate."""
    try:
        return parse_amount(value)
    except InvalidAmount:
        logger.warning("Ignoring invalid amount %r (treated as 0)", value)
        return 0.0


def magnitude(value: Any) -> float:
    # direction comes from the record kind, never from the stored sign
    return abs(to_finite(value))
