from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from backend import crud, schemas


def test_create_expense_assigns_identifier_and_timestamp(db_session):
    expense = crud.create_expense(
        db_session,
        schemas.ExpenseCreate(title="Coffee", amount=150, category="Food"),
    )
    assert expense.id
    assert len(expense.id) == 32
    assert expense.created_at is not None
    assert expense.description == ""
    assert expense.date == expense.created_at.date()


def test_create_expense_accepts_plain_mapping(db_session):
    expense = crud.create_expense(
        db_session,
        {"title": "  Train  ", "amount": "45.5", "category": "Travel", "date": "2024-03-02"},
    )
    assert expense.title == "Train"
    assert expense.amount == pytest.approx(45.5)
    assert expense.date == date(2024, 3, 2)


def test_create_expense_accepts_free_text_category(db_session):
    expense = crud.create_expense(db_session, {"title": "Gift", "amount": 20, "category": "gifts"})
    assert expense.category == "gifts"


def test_create_expense_turns_null_description_into_blank(db_session):
    expense = crud.create_expense(
        db_session,
        {"title": "Book", "amount": 12, "category": "Other", "description": None},
    )
    assert expense.description == ""


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"amount": 10, "category": "Food"}, "title"),
        ({"title": "   ", "amount": 10, "category": "Food"}, "title"),
        ({"title": "Lunch", "category": "Food"}, "amount"),
        ({"title": "Lunch", "amount": -1, "category": "Food"}, "amount"),
        ({"title": "Lunch", "amount": "ten", "category": "Food"}, "amount"),
        ({"title": "Lunch", "amount": True, "category": "Food"}, "amount"),
        ({"title": "Lunch", "amount": 10}, "category"),
    ],
)
def test_create_expense_rejects_invalid_payload(db_session, payload, field):
    with pytest.raises(crud.ExpenseValidationError) as excinfo:
        crud.create_expense(db_session, payload)
    assert any(error["loc"][0] == field for error in excinfo.value.errors)
    assert crud.list_expenses(db_session) == []


def test_insert_then_list_contains_record_once(db_session):
    created = crud.create_expense(db_session, {"title": "Lunch", "amount": 12, "category": "Food"})
    listed = [expense.id for expense in crud.list_expenses(db_session)]
    assert listed.count(created.id) == 1


def test_list_expenses_orders_most_recent_first(db_session):
    crud.create_expense(db_session, {"title": "Old", "amount": 1, "category": "Other", "date": "2024-01-01"})
    crud.create_expense(db_session, {"title": "New", "amount": 2, "category": "Other", "date": "2024-02-01"})
    crud.create_expense(db_session, {"title": "Mid", "amount": 3, "category": "Other", "date": "2024-01-15"})

    titles = [expense.title for expense in crud.list_expenses(db_session)]
    assert titles == ["New", "Mid", "Old"]

    ascending = [expense.title for expense in crud.list_expenses(db_session, direction="asc")]
    assert ascending == ["Old", "Mid", "New"]


def test_list_expenses_can_sort_by_creation_time(db_session):
    first = crud.create_expense(db_session, {"title": "First", "amount": 1, "category": "Other", "date": "2024-05-01"})
    second = crud.create_expense(db_session, {"title": "Second", "amount": 1, "category": "Other", "date": "2023-05-01"})
    first.created_at = first.created_at.replace(year=2020)
    db_session.flush()

    ids = [expense.id for expense in crud.list_expenses(db_session, sort_key="createdAt")]
    assert ids == [second.id, first.id]


def test_list_expenses_rejects_unknown_sort(db_session):
    with pytest.raises(crud.ExpenseValidationError):
        crud.list_expenses(db_session, sort_key="amount")
    with pytest.raises(crud.ExpenseValidationError):
        crud.list_expenses(db_session, direction="sideways")


def test_delete_expense_removes_record(db_session):
    expense = crud.create_expense(db_session, {"title": "Taxi", "amount": 300, "category": "Travel"})
    assert crud.delete_expense(db_session, expense.id) == expense.id

    assert expense.id not in [item.id for item in crud.list_expenses(db_session)]
    with pytest.raises(crud.ExpenseNotFoundError):
        crud.get_expense(db_session, expense.id)


def test_delete_missing_expense_signals_not_found(db_session):
    crud.create_expense(db_session, {"title": "Rent", "amount": 1000, "category": "Bills"})
    before = [item.id for item in crud.list_expenses(db_session)]

    with pytest.raises(crud.ExpenseNotFoundError) as excinfo:
        crud.delete_expense(db_session, "does-not-exist")

    assert excinfo.value.expense_id == "does-not-exist"
    assert [item.id for item in crud.list_expenses(db_session)] == before


def test_database_failures_surface_as_store_unavailable(db_session, monkeypatch):
    def broken_scalars(*_args, **_kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "scalars", broken_scalars)
    with pytest.raises(crud.StoreUnavailableError):
        crud.list_expenses(db_session)
