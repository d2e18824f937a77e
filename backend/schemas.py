"""Pydantic schemas for serialising expense tracking data."""
from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CATEGORIES = ("Food", "Travel", "Bills", "Shopping", "Health", "Entertainment", "Other")
SORT_KEYS = ("date", "createdAt")
SORT_DIRECTIONS = ("desc", "asc")


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ExpenseBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    category: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field("", max_length=2000)
    date: Optional[date_type] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _reject_boolean_amount(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("amount must be a number, not a boolean")
        return value


class ExpenseCreate(ExpenseBase):
    @field_validator("description")
    @classmethod
    def _blank_description(cls, value: Optional[str]) -> str:
        return value or ""


class ExpenseRead(ORMModel):
    id: str
    title: str
    amount: float
    category: str
    description: str
    date: date_type
    created_at: datetime = Field(..., serialization_alias="createdAt")


class DeleteResult(BaseModel):
    deleted: bool = True
    id: str
    message: str = "Expense removed"


class ErrorRead(BaseModel):
    detail: str
    errors: Optional[list] = None
