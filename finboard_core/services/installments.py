from __future__ import annotations

import dataclasses
import uuid
from typing import List, Optional

from finboard_core.domain.models import Transaction
from finboard_core.services.billing import shift_month, clamp_day


def expand_installments(template: Transaction, count: int, group_id: Optional[str] = None) -> List[Transaction]:
    """
    Split a purchase into monthly installments.

    Every installment carries the template amount; dates advance one month at
    a time from the template date, clamped to the end of shorter months.
    """
    if count <= 1:
        return [template]

    group_id = group_id or uuid.uuid4().hex
    prefix = f"{template.description} • " if template.description else ""
    installments: List[Transaction] = []
    for index in range(count):
        year, month = shift_month(template.date.year, template.date.month, index)
        installments.append(
            dataclasses.replace(
                template,
                id=f"{template.id}-{index + 1}",
                date=clamp_day(year, month, template.date.day),
                description=f"{prefix}Parcela {index + 1}/{count}",
                installment_group_id=group_id,
                installment_index=index + 1,
                installment_total=count,
            )
        )
    return installments
