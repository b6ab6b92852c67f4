from __future__ import annotations

from typing import Any


class FinboardError(Exception):
    """Base class for errors raised by finboard_core."""


class InvalidAmount(FinboardError, ValueError):
    def __init__(self, raw: Any, reason: str = "not a finite number"):
        self.raw = raw
        super().__init__(f"Invalid amount {raw!r}: {reason}")
