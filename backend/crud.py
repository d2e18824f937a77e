"""Expense store operations for the expense tracking backend."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, List, Union

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas

LOG = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "date": models.Expense.date,
    "createdAt": models.Expense.created_at,
}


class StoreError(RuntimeError):
    """Base class for failures raised by the expense store."""


class ExpenseValidationError(StoreError):
    """Raised when the store rejects the shape of an expense."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ExpenseNotFoundError(StoreError):
    """Raised when an expense cannot be located in the database."""

    def __init__(self, expense_id: str) -> None:
        super().__init__(f"Expense {expense_id} not found")
        self.expense_id = expense_id


class StoreUnavailableError(StoreError):
    """Raised when the underlying database fails."""


@contextmanager
def _store_call(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        LOG.error("Store failure while trying to %s: %s", action, exc)
        raise StoreUnavailableError(f"Unable to {action}") from exc


def _validate(fields: Union[schemas.ExpenseCreate, Mapping[str, Any]]) -> schemas.ExpenseCreate:
    if isinstance(fields, schemas.ExpenseCreate):
        return fields
    try:
        return schemas.ExpenseCreate.model_validate(dict(fields))
    except ValidationError as exc:
        raise ExpenseValidationError(
            "Invalid expense payload",
            exc.errors(include_url=False, include_context=False),
        ) from exc


def create_expense(
    session: Session,
    fields: Union[schemas.ExpenseCreate, Mapping[str, Any]],
) -> models.Expense:
    expense_in = _validate(fields)
    data = expense_in.model_dump()
    expense = models.Expense(
        id=models.new_expense_id(),
        created_at=models.utcnow(),
        title=data["title"],
        amount=data["amount"],
        category=data["category"],
        description=data["description"] or "",
    )
    expense.date = data["date"] or expense.created_at.date()
    session.add(expense)
    with _store_call("insert expense"):
        try:
            session.flush()
        except IntegrityError as exc:  # pragma: no cover - schema validation runs first
            raise ExpenseValidationError("Expense rejected by the store") from exc
        session.commit()
        session.refresh(expense)
    LOG.info("Created expense %s", expense.id, extra={"expense_id": expense.id})
    return expense


def list_expenses(
    session: Session,
    sort_key: str = "date",
    direction: str = "desc",
) -> List[models.Expense]:
    if sort_key not in _SORT_COLUMNS:
        raise ExpenseValidationError(
            f"Unsupported sort key {sort_key!r}; expected one of {', '.join(schemas.SORT_KEYS)}"
        )
    if direction not in schemas.SORT_DIRECTIONS:
        raise ExpenseValidationError(
            f"Unsupported sort direction {direction!r}; expected one of {', '.join(schemas.SORT_DIRECTIONS)}"
        )

    columns = [_SORT_COLUMNS[sort_key], models.Expense.created_at, models.Expense.id]
    if direction == "desc":
        ordering = [column.desc() for column in columns]
    else:
        ordering = [column.asc() for column in columns]
    stmt = select(models.Expense).order_by(*ordering)
    with _store_call("list expenses"):
        return list(session.scalars(stmt))


def get_expense(session: Session, expense_id: str) -> models.Expense:
    with _store_call("load expense"):
        expense = session.get(models.Expense, expense_id)
    if expense is None:
        raise ExpenseNotFoundError(expense_id)
    return expense


def delete_expense(session: Session, expense_id: str) -> str:
    expense = get_expense(session, expense_id)
    with _store_call("delete expense"):
        session.delete(expense)
        session.commit()
    LOG.info("Deleted expense %s", expense_id, extra={"expense_id": expense_id})
    return expense_id
