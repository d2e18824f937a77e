"""Expense client: HTTP access, application state and category aggregation."""

from .api import DEFAULT_API_URL, ExpenseApiClient, resolve_api_url
from .chart import ChartData, aggregate_by_category, render_pie_chart
from .controller import BUDGET_KEY, ExpenseController
from .errors import (
    ApiError,
    ClientError,
    ExpenseNotFoundError,
    InvalidExpenseError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
)
from .formatting import format_date, format_inr
from .models import CATEGORIES, Expense, ExpenseDraft
from .state import AppState

__all__ = [
    "ApiError",
    "AppState",
    "BUDGET_KEY",
    "CATEGORIES",
    "ChartData",
    "ClientError",
    "DEFAULT_API_URL",
    "Expense",
    "ExpenseApiClient",
    "ExpenseController",
    "ExpenseDraft",
    "ExpenseNotFoundError",
    "InvalidExpenseError",
    "NetworkError",
    "RequestTimeoutError",
    "ServerError",
    "aggregate_by_category",
    "format_date",
    "format_inr",
    "render_pie_chart",
    "resolve_api_url",
]
