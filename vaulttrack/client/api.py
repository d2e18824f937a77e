"""HTTP client for the VaultTrack expense API."""

from __future__ import annotations

import logging
import os
from typing import Any, Final, List, Mapping
from urllib.parse import urlsplit

import requests

from .errors import (
    ApiError,
    ExpenseNotFoundError,
    InvalidExpenseError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
)
from .models import Expense

LOG = logging.getLogger(__name__)

DEFAULT_API_URL: Final[str] = "http://localhost:5000/api/expenses"
API_URL_ENV: Final[str] = "VAULTTRACK_API_URL"
TIMEOUT_ENV: Final[str] = "VAULTTRACK_TIMEOUT"
DEFAULT_TIMEOUT: Final[float] = 5.0


def resolve_api_url(raw: str | None = None) -> str:
    """Return the API base URL without a trailing slash.

    The explicit argument wins, then ``VAULTTRACK_API_URL``, then the local
    development default.
    """

    candidate = (raw or os.environ.get(API_URL_ENV) or DEFAULT_API_URL).strip()
    return candidate.rstrip("/") or DEFAULT_API_URL


def resolve_timeout(raw: float | str | None = None) -> float:
    value = raw if raw is not None else os.environ.get(TIMEOUT_ENV)
    if value in (None, ""):
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        LOG.warning("Ignoring invalid timeout %r; using %.1fs", value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_TIMEOUT


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class ExpenseApiClient:
    """Thin wrapper around ``requests`` speaking the expense REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = resolve_api_url(base_url)
        self.timeout = resolve_timeout(timeout)
        self._session = session or requests.Session()

    def _request(self, method: str, url: str, payload: Mapping[str, Any] | None = None) -> requests.Response:
        try:
            response = self._session.request(method, url, json=payload, timeout=self.timeout)
        except requests.Timeout as exc:
            LOG.warning("%s %s timed out after %.1fs", method, url, self.timeout)
            raise RequestTimeoutError(f"The server did not answer within {self.timeout:g}s") from exc
        except requests.RequestException as exc:
            LOG.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Could not reach the server: {exc}") from exc

        if response.ok:
            return response

        message = _error_message(response)
        LOG.warning("%s %s -> %s: %s", method, url, response.status_code, message)
        if response.status_code == 400:
            raise InvalidExpenseError(response.status_code, message)
        if response.status_code == 404:
            raise ExpenseNotFoundError(response.status_code, message)
        if response.status_code >= 500:
            raise ServerError(response.status_code, message)
        raise ApiError(response.status_code, message)

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, "The server sent an unreadable response") from exc

    def list_expenses(self) -> List[Expense]:
        payload = self._json(self._request("GET", self.base_url))
        if not isinstance(payload, list):
            raise ApiError(200, "Expected a list of expenses")
        try:
            return [Expense.from_payload(item) for item in payload]
        except ValueError as exc:
            raise ApiError(200, str(exc)) from exc

    def create_expense(self, payload: Mapping[str, Any]) -> Expense:
        body = self._json(self._request("POST", self.base_url, payload))
        if not isinstance(body, dict):
            raise ApiError(201, "Expected the created expense")
        try:
            return Expense.from_payload(body)
        except ValueError as exc:
            raise ApiError(201, str(exc)) from exc

    def delete_expense(self, expense_id: str) -> None:
        self._request("DELETE", f"{self.base_url}/{expense_id}")

    def health(self) -> bool:
        parts = urlsplit(self.base_url)
        root = f"{parts.scheme}://{parts.netloc}"
        try:
            self._request("GET", f"{root}/health")
        except (ApiError, NetworkError, RequestTimeoutError):
            return False
        return True


__all__ = ["DEFAULT_API_URL", "ExpenseApiClient", "resolve_api_url", "resolve_timeout"]
