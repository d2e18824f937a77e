"""Orchestrates the expense client: API calls, state transitions, budget persistence."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from vaulttrack.infra.settings import SettingsStore

from . import state as st
from .errors import ClientError, ExpenseNotFoundError
from .models import Expense

LOG = logging.getLogger(__name__)

BUDGET_KEY = "totalBudget"

Listener = Callable[[st.AppState], None]


class ExpenseApi(Protocol):
    def list_expenses(self) -> list[Expense]: ...

    def create_expense(self, payload: dict[str, Any]) -> Expense: ...

    def delete_expense(self, expense_id: str) -> None: ...


class ExpenseController:
    """Own the client's :class:`~vaulttrack.client.state.AppState`.

    The list mirrors the server order (most recent first). After a successful
    insert the server's record is prepended and after a successful delete the
    id is dropped locally; there is no periodic re-fetch, so changes made by
    another client only show up after :meth:`resync`.
    """

    def __init__(
        self,
        api: ExpenseApi,
        settings: SettingsStore,
        *,
        budget_key: str = BUDGET_KEY,
        default_budget: float = st.DEFAULT_BUDGET,
    ) -> None:
        self._api = api
        self._settings = settings
        self._budget_key = budget_key
        self._default_budget = default_budget
        self._listeners: list[Listener] = []
        self.state = st.AppState(budget=default_budget)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change; returns an unsubscribe hook."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _apply(self, new_state: st.AppState) -> st.AppState:
        self.state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    # ------------------------------------------------------------------
    def start(self) -> st.AppState:
        self._apply(st.budget_edited(self.state, self.load_budget()))
        return self.refresh()

    def load_budget(self) -> float:
        stored = self._settings.get(self._budget_key)
        if stored is None:
            return self._default_budget
        try:
            return st.validate_budget(stored)
        except ValueError as exc:
            LOG.warning("Ignoring stored budget %r: %s", stored, exc)
            return self._default_budget

    def refresh(self) -> st.AppState:
        """Fetch the full list from the server and replace the local copy."""

        self._apply(st.fetch_started(self.state))
        try:
            expenses = self._api.list_expenses()
        except ClientError as exc:
            LOG.error("Error fetching expenses: %s", exc)
            return self._apply(st.request_failed(self.state, f"Could not load expenses: {exc}"))
        LOG.debug("Fetched %d expenses", len(expenses))
        return self._apply(st.fetch_succeeded(self.state, expenses))

    resync = refresh

    def edit_form(self, **changes: Any) -> st.AppState:
        return self._apply(st.form_edited(self.state, **changes))

    def submit(self) -> Expense | None:
        """Send the current draft; returns the stored expense or ``None``."""

        if self.state.submitting:
            LOG.debug("Submit ignored: a previous submit is still in flight")
            return None
        missing = self.state.draft.missing_fields()
        if missing:
            self._apply(st.request_failed(self.state, f"Please fill in: {', '.join(missing)}"))
            return None

        self._apply(st.insert_started(self.state))
        try:
            expense = self._api.create_expense(self.state.draft.to_payload())
        except ClientError as exc:
            LOG.error("Error adding expense: %s", exc)
            self._apply(st.request_failed(self.state, f"Could not save expense: {exc}"))
            return None
        self._apply(st.insert_succeeded(self.state, expense))
        return expense

    def delete(self, expense_id: str) -> bool:
        if expense_id in self.state.pending_deletes:
            LOG.debug("Delete of %s ignored: already in flight", expense_id)
            return False

        self._apply(st.delete_started(self.state, expense_id))
        try:
            self._api.delete_expense(expense_id)
        except ExpenseNotFoundError:
            LOG.info("Expense %s was already removed on the server", expense_id)
        except ClientError as exc:
            LOG.error("Error deleting expense %s: %s", expense_id, exc)
            self._apply(
                st.request_failed(self.state, f"Could not delete expense: {exc}", expense_id=expense_id)
            )
            return False
        self._apply(st.delete_succeeded(self.state, expense_id))
        return True

    def set_budget(self, value: Any) -> st.AppState:
        """Update the budget and persist it; raises ``ValueError`` for bad input."""

        new_state = self._apply(st.budget_edited(self.state, value))
        self._settings.set(self._budget_key, new_state.budget)
        return new_state

    def toggle_theme(self) -> st.AppState:
        return self._apply(st.theme_toggled(self.state))

    def dismiss_error(self) -> st.AppState:
        return self._apply(st.error_dismissed(self.state))


__all__ = ["BUDGET_KEY", "ExpenseApi", "ExpenseController"]
