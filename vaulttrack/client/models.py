"""Client-side value objects mirroring the expense wire format."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping

CATEGORIES: tuple[str, ...] = (
    "Food",
    "Travel",
    "Bills",
    "Shopping",
    "Health",
    "Entertainment",
    "Other",
)
DEFAULT_CATEGORY = "Food"


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _parse_datetime(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class Expense:
    """An expense as returned by the API."""

    id: str
    title: str
    amount: float
    category: str
    description: str = ""
    date: date | None = None
    created_at: datetime | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Expense":
        """Build an expense from its JSON representation.

        Raises:
            ValueError: If the payload lacks an identifier or a numeric amount.
        """

        expense_id = payload.get("id") or payload.get("_id")
        if not expense_id:
            raise ValueError("Expense payload has no identifier")
        try:
            amount = float(payload.get("amount"))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Expense {expense_id} has a non-numeric amount") from exc
        return cls(
            id=str(expense_id),
            title=str(payload.get("title", "")),
            amount=amount,
            category=str(payload.get("category", "")),
            description=str(payload.get("description") or ""),
            date=_parse_date(payload.get("date")),
            created_at=_parse_datetime(payload.get("createdAt")),
        )

    @property
    def display_date(self) -> date | None:
        """The date shown to the user, falling back to the creation day."""

        if self.date is not None:
            return self.date
        return self.created_at.date() if self.created_at is not None else None


@dataclass(frozen=True)
class ExpenseDraft:
    """The add-expense form as the user is filling it in."""

    title: str = ""
    amount: float | None = None
    category: str = DEFAULT_CATEGORY
    date: date = field(default_factory=date.today)
    description: str = ""

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.title.strip():
            missing.append("title")
        if self.amount is None:
            missing.append("amount")
        return missing

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title.strip(),
            "amount": self.amount,
            "category": self.category,
            "date": self.date.isoformat(),
            "description": self.description,
        }


__all__ = ["CATEGORIES", "DEFAULT_CATEGORY", "Expense", "ExpenseDraft"]
