from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from vaulttrack.client import api as api_module
from vaulttrack.client.api import ExpenseApiClient, resolve_api_url, resolve_timeout
from vaulttrack.client.errors import (
    ApiError,
    ExpenseNotFoundError,
    InvalidExpenseError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
)

BASE = "http://api.test/api/expenses"


def _response(status: int, body: Any = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = b"" if body is None else json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Replays canned responses (or raises canned exceptions) in order."""

    def __init__(self, *outcomes: requests.Response | Exception) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, json: Any = None, timeout: float | None = None):
        self.calls.append({"method": method, "url": url, "json": json, "timeout": timeout})
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _record(**overrides: Any) -> dict[str, Any]:
    payload = {
        "id": "a1",
        "title": "Coffee",
        "amount": 150,
        "category": "Food",
        "description": "",
        "date": "2024-03-01",
        "createdAt": "2024-03-01T09:30:00",
    }
    payload.update(overrides)
    return payload


def test_resolve_api_url_strips_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_api_url("http://host:5000/api/expenses/") == "http://host:5000/api/expenses"
    monkeypatch.setenv(api_module.API_URL_ENV, "http://env.test/api/expenses//")
    assert resolve_api_url() == "http://env.test/api/expenses"


def test_resolve_api_url_defaults_to_local_server() -> None:
    assert resolve_api_url() == api_module.DEFAULT_API_URL


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 5.0), ("2.5", 2.5), ("bogus", 5.0), (0, 5.0), (-1, 5.0), (10, 10.0)],
)
def test_resolve_timeout(raw: Any, expected: float) -> None:
    assert resolve_timeout(raw) == pytest.approx(expected)


def test_list_expenses_parses_records_and_sends_timeout() -> None:
    session = FakeSession(_response(200, [_record(), _record(id="b2", amount="99.5")]))
    client = ExpenseApiClient(BASE + "/", timeout=3, session=session)

    expenses = client.list_expenses()

    assert [expense.id for expense in expenses] == ["a1", "b2"]
    assert expenses[1].amount == pytest.approx(99.5)
    assert session.calls == [{"method": "GET", "url": BASE, "json": None, "timeout": 3.0}]


def test_create_expense_posts_payload() -> None:
    session = FakeSession(_response(201, _record(id="new")))
    client = ExpenseApiClient(BASE, session=session)
    payload = {"title": "Coffee", "amount": 150, "category": "Food"}

    expense = client.create_expense(payload)

    assert expense.id == "new"
    assert session.calls[0]["method"] == "POST"
    assert session.calls[0]["json"] == payload


def test_delete_expense_targets_record_url() -> None:
    session = FakeSession(_response(200, {"deleted": True, "id": "a1"}))
    ExpenseApiClient(BASE, session=session).delete_expense("a1")
    assert session.calls[0]["method"] == "DELETE"
    assert session.calls[0]["url"] == f"{BASE}/a1"


@pytest.mark.parametrize(
    ("status", "error_type"),
    [
        (400, InvalidExpenseError),
        (404, ExpenseNotFoundError),
        (500, ServerError),
        (503, ServerError),
        (409, ApiError),
    ],
)
def test_http_errors_map_to_typed_exceptions(status: int, error_type: type[ApiError]) -> None:
    session = FakeSession(_response(status, {"detail": "nope"}))
    client = ExpenseApiClient(BASE, session=session)

    with pytest.raises(error_type) as excinfo:
        client.list_expenses()

    assert excinfo.value.status_code == status
    assert str(excinfo.value) == "nope"


def test_error_without_json_body_uses_status() -> None:
    session = FakeSession(_response(500))
    with pytest.raises(ServerError, match="HTTP 500"):
        ExpenseApiClient(BASE, session=session).list_expenses()


def test_timeout_maps_to_request_timeout_error() -> None:
    session = FakeSession(requests.Timeout("slow"))
    client = ExpenseApiClient(BASE, timeout=1, session=session)
    with pytest.raises(RequestTimeoutError):
        client.list_expenses()


def test_connection_failure_maps_to_network_error() -> None:
    session = FakeSession(requests.ConnectionError("refused"))
    with pytest.raises(NetworkError, match="Could not reach the server"):
        ExpenseApiClient(BASE, session=session).create_expense({"title": "x", "amount": 1})


def test_malformed_list_payload_is_rejected() -> None:
    session = FakeSession(_response(200, {"not": "a list"}))
    with pytest.raises(ApiError):
        ExpenseApiClient(BASE, session=session).list_expenses()


def test_record_without_id_is_rejected() -> None:
    session = FakeSession(_response(200, [{"title": "x", "amount": 1, "category": "Food"}]))
    with pytest.raises(ApiError, match="identifier"):
        ExpenseApiClient(BASE, session=session).list_expenses()


def test_health_checks_server_root() -> None:
    session = FakeSession(_response(200, {"status": "ok"}), requests.ConnectionError("down"))
    client = ExpenseApiClient("http://api.test:5000/api/expenses", session=session)

    assert client.health() is True
    assert client.health() is False
    assert session.calls[0]["url"] == "http://api.test:5000/health"


def test_health_uses_server_root_for_any_base_path() -> None:
    session = FakeSession(_response(200, {"status": "ok"}))
    client = ExpenseApiClient("http://host.test/expenses", session=session)

    assert client.health() is True
    assert session.calls[0]["url"] == "http://host.test/health"
