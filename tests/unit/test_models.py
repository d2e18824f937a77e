from __future__ import annotations

from datetime import date, datetime

import pytest

from vaulttrack.client.models import DEFAULT_CATEGORY, Expense, ExpenseDraft


def test_from_payload_reads_wire_format() -> None:
    expense = Expense.from_payload(
        {
            "id": "abc",
            "title": "Rent",
            "amount": "12000",
            "category": "Bills",
            "description": None,
            "date": "2024-02-01",
            "createdAt": "2024-02-01T08:00:00Z",
        }
    )
    assert expense.amount == pytest.approx(12000.0)
    assert expense.description == ""
    assert expense.date == date(2024, 2, 1)
    assert expense.created_at is not None and expense.created_at.hour == 8


def test_from_payload_accepts_document_style_id() -> None:
    expense = Expense.from_payload({"_id": "mongo-1", "title": "x", "amount": 1, "category": "Food"})
    assert expense.id == "mongo-1"


def test_from_payload_rejects_non_numeric_amount() -> None:
    with pytest.raises(ValueError, match="non-numeric"):
        Expense.from_payload({"id": "a", "title": "x", "amount": "lots", "category": "Food"})


def test_display_date_falls_back_to_creation_day() -> None:
    expense = Expense("a", "x", 1.0, "Food", created_at=datetime(2024, 5, 6, 23, 59))
    assert expense.display_date == date(2024, 5, 6)
    assert Expense("b", "y", 1.0, "Food").display_date is None


def test_draft_reports_missing_fields() -> None:
    draft = ExpenseDraft()
    assert draft.category == DEFAULT_CATEGORY
    assert draft.missing_fields() == ["title", "amount"]
    assert ExpenseDraft(title="  ", amount=0).missing_fields() == ["title"]


def test_draft_payload_trims_title_and_serialises_date() -> None:
    draft = ExpenseDraft(title="  Taxi ", amount=0, category="Travel", date=date(2024, 1, 31))
    assert draft.to_payload() == {
        "title": "Taxi",
        "amount": 0,
        "category": "Travel",
        "date": "2024-01-31",
        "description": "",
    }
