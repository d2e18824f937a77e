"""SQLAlchemy models for the expense tracking backend."""
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, String, Text

from .database import Base


def new_expense_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Expense(Base):
    __tablename__ = "expenses"

    id: str = Column(String(32), primary_key=True, default=new_expense_id)
    title: str = Column(String(200), nullable=False)
    amount: float = Column(Float, nullable=False)
    category: str = Column(String(50), nullable=False, index=True)
    description: str = Column(Text, nullable=False, default="")
    date: date = Column(Date, nullable=False, index=True)
    created_at: datetime = Column(DateTime, nullable=False, default=utcnow, index=True)
