"""Immutable application state for the expense client.

Every change goes through one of the transition functions below; each takes
the current :class:`AppState` and returns a new one. The derived values
(totals, remaining budget, usage percentage) are plain functions recomputed
from the state whenever they are read.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Literal

from .models import Expense, ExpenseDraft

DEFAULT_BUDGET: float = 50000.0

UsageLevel = Literal["ok", "warning", "danger"]

_DRAFT_FIELDS = frozenset({"title", "amount", "category", "date", "description"})


@dataclass(frozen=True)
class AppState:
    expenses: tuple[Expense, ...] = ()
    draft: ExpenseDraft = field(default_factory=ExpenseDraft)
    budget: float = DEFAULT_BUDGET
    loading: bool = False
    submitting: bool = False
    pending_deletes: frozenset[str] = frozenset()
    dark_mode: bool = True
    error: str | None = None

    @property
    def total_spent(self) -> float:
        return total_spent(self.expenses)

    @property
    def remaining(self) -> float:
        return remaining(self.budget, self.expenses)

    @property
    def spend_percentage(self) -> float:
        return spend_percentage(self.total_spent, self.budget)

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0

    @property
    def usage_level(self) -> UsageLevel:
        return usage_level(self.spend_percentage)


def total_spent(expenses: Iterable[Expense]) -> float:
    return sum((expense.amount for expense in expenses), 0.0)


def remaining(budget: float, expenses: Iterable[Expense]) -> float:
    """Budget left after ``expenses``; negative when over budget."""

    return budget - total_spent(expenses)


def spend_percentage(spent: float, budget: float) -> float:
    """Share of ``budget`` consumed, clamped to 100.

    A budget of zero (or less) has no meaningful share, so the result is
    ``0.0`` in that case; over-spending is reported by ``remaining`` instead.
    """

    if budget <= 0:
        return 0.0
    return max(0.0, min(100.0, spent / budget * 100.0))


def usage_level(percentage: float) -> UsageLevel:
    if percentage > 90:
        return "danger"
    if percentage > 70:
        return "warning"
    return "ok"


def validate_budget(value: Any) -> float:
    try:
        budget = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Budget must be a number, got {value!r}") from exc
    if not math.isfinite(budget) or budget < 0:
        raise ValueError(f"Budget must be a finite, non-negative number, got {value!r}")
    return budget


# -- transitions -------------------------------------------------------------


def fetch_started(state: AppState) -> AppState:
    return replace(state, loading=True)


def fetch_succeeded(state: AppState, expenses: Iterable[Expense]) -> AppState:
    return replace(state, expenses=tuple(expenses), loading=False, error=None)


def insert_started(state: AppState) -> AppState:
    return replace(state, submitting=True)


def insert_succeeded(state: AppState, expense: Expense) -> AppState:
    draft = replace(state.draft, title="", amount=None, description="")
    return replace(
        state,
        expenses=(expense,) + state.expenses,
        draft=draft,
        submitting=False,
        error=None,
    )


def delete_started(state: AppState, expense_id: str) -> AppState:
    return replace(state, pending_deletes=state.pending_deletes | {expense_id})


def delete_succeeded(state: AppState, expense_id: str) -> AppState:
    return replace(
        state,
        expenses=tuple(expense for expense in state.expenses if expense.id != expense_id),
        pending_deletes=state.pending_deletes - {expense_id},
        error=None,
    )


def request_failed(state: AppState, message: str, *, expense_id: str | None = None) -> AppState:
    """Record a failed call; the expense list is left as it was."""

    pending = state.pending_deletes - {expense_id} if expense_id else state.pending_deletes
    return replace(
        state,
        loading=False,
        submitting=False,
        pending_deletes=pending,
        error=message,
    )


def form_edited(state: AppState, **changes: Any) -> AppState:
    unknown = set(changes) - _DRAFT_FIELDS
    if unknown:
        raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")
    return replace(state, draft=replace(state.draft, **changes))


def budget_edited(state: AppState, value: Any) -> AppState:
    return replace(state, budget=validate_budget(value))


def theme_toggled(state: AppState) -> AppState:
    return replace(state, dark_mode=not state.dark_mode)


def error_dismissed(state: AppState) -> AppState:
    return replace(state, error=None)


__all__ = [
    "AppState",
    "DEFAULT_BUDGET",
    "budget_edited",
    "delete_started",
    "delete_succeeded",
    "error_dismissed",
    "fetch_started",
    "fetch_succeeded",
    "form_edited",
    "insert_started",
    "insert_succeeded",
    "remaining",
    "request_failed",
    "spend_percentage",
    "theme_toggled",
    "total_spent",
    "usage_level",
    "validate_budget",
]
