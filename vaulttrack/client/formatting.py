"""Display helpers for amounts and dates."""

from __future__ import annotations

from datetime import date

RUPEE = "₹"


def _group_indian(digits: str) -> str:
    # Last three digits form one group, the rest are grouped in pairs: 12,34,567.
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_inr(value: float) -> str:
    """Format ``value`` as whole rupees with Indian digit grouping."""

    rounded = int(round(float(value)))
    sign = "-" if rounded < 0 else ""
    return f"{sign}{RUPEE}{_group_indian(str(abs(rounded)))}"


def format_date(value: date | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


__all__ = ["RUPEE", "format_date", "format_inr"]
