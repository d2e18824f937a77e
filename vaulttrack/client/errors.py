"""Failures raised by the VaultTrack HTTP client."""

from __future__ import annotations


class ClientError(RuntimeError):
    """Base class for every failure talking to the expense API."""


class NetworkError(ClientError):
    """The API could not be reached or the transport failed."""


class RequestTimeoutError(ClientError):
    """The API did not answer within the configured timeout."""


class ApiError(ClientError):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidExpenseError(ApiError):
    """The API rejected the submitted expense (HTTP 400)."""


class ExpenseNotFoundError(ApiError):
    """The targeted expense does not exist (HTTP 404)."""


class ServerError(ApiError):
    """The API failed internally (HTTP 5xx)."""


__all__ = [
    "ApiError",
    "ClientError",
    "ExpenseNotFoundError",
    "InvalidExpenseError",
    "NetworkError",
    "RequestTimeoutError",
    "ServerError",
]
