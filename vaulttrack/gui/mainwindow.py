"""Main dashboard window: stats cards, add form, category chart and history."""

from __future__ import annotations

import logging
from typing import Any

from PySide6 import QtCore, QtGui, QtWidgets

from vaulttrack.client.chart import aggregate_by_category, render_pie_chart
from vaulttrack.client.controller import ExpenseController
from vaulttrack.client.formatting import format_date, format_inr
from vaulttrack.client.models import CATEGORIES
from vaulttrack.client.state import AppState

from .ui.theme import apply_tokens, level_color, load_tokens

LOG = logging.getLogger(__name__)

_HISTORY_COLUMNS = ("Date", "Title", "Category", "Amount", "")


class ExpenseMainWindow(QtWidgets.QMainWindow):
    """Single-page dashboard driven entirely by :class:`ExpenseController` state."""

    def __init__(
        self,
        *,
        controller: ExpenseController,
        app: Any = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._app = app
        self._chart_key: tuple[Any, ...] | None = None
        self._dark_mode: bool | None = None

        self.setWindowTitle("VaultTrack")
        self.resize(1200, 820)

        self._build_ui()
        self._connect_signals()
        self._unsubscribe = controller.subscribe(self._render)
        self._render(controller.state)
        controller.start()

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(24, 16, 24, 16)
        layout.setSpacing(16)

        header = QtWidgets.QHBoxLayout()
        title = QtWidgets.QLabel("VaultTrack")
        title.setObjectName("StatValue")
        subtitle = QtWidgets.QLabel("Personal expense tracker")
        subtitle.setObjectName("Muted")
        self._resync_button = QtWidgets.QPushButton("Resync")
        self._theme_button = QtWidgets.QPushButton()
        header.addWidget(title)
        header.addWidget(subtitle)
        header.addStretch()
        header.addWidget(self._resync_button)
        header.addWidget(self._theme_button)
        layout.addLayout(header)

        error_row = QtWidgets.QHBoxLayout()
        self._error_label = QtWidgets.QLabel()
        self._error_label.setObjectName("ErrorBanner")
        self._error_label.setWordWrap(True)
        self._dismiss_button = QtWidgets.QPushButton("Dismiss")
        error_row.addWidget(self._error_label, 1)
        error_row.addWidget(self._dismiss_button)
        self._error_row = QtWidgets.QWidget()
        self._error_row.setLayout(error_row)
        layout.addWidget(self._error_row)

        layout.addLayout(self._build_stats())

        body = QtWidgets.QHBoxLayout()
        body.addWidget(self._build_form(), 1)
        self._chart_label = QtWidgets.QLabel()
        self._chart_label.setAlignment(QtCore.Qt.AlignCenter)
        self._chart_label.setMinimumSize(360, 360)
        chart_box = QtWidgets.QGroupBox("Visual Analytics")
        chart_layout = QtWidgets.QVBoxLayout(chart_box)
        chart_layout.addWidget(self._chart_label)
        body.addWidget(chart_box, 1)
        layout.addLayout(body)

        history_box = QtWidgets.QGroupBox("Transaction History")
        history_layout = QtWidgets.QVBoxLayout(history_box)
        self._table = QtWidgets.QTableWidget(0, len(_HISTORY_COLUMNS))
        self._table.setHorizontalHeaderLabels(list(_HISTORY_COLUMNS))
        self._table.horizontalHeader().setStretchLastSection(True)
        self._table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self._table.setSelectionBehavior(QtWidgets.QTableWidget.SelectRows)
        self._empty_label = QtWidgets.QLabel("No transactions yet")
        self._empty_label.setObjectName("Muted")
        self._empty_label.setAlignment(QtCore.Qt.AlignCenter)
        history_layout.addWidget(self._table)
        history_layout.addWidget(self._empty_label)
        layout.addWidget(history_box, 1)

        self.setCentralWidget(central)

    def _build_stats(self) -> QtWidgets.QHBoxLayout:
        row = QtWidgets.QHBoxLayout()

        spent_box = QtWidgets.QGroupBox("Total Spent")
        spent_layout = QtWidgets.QVBoxLayout(spent_box)
        self._spent_label = QtWidgets.QLabel()
        self._spent_label.setObjectName("StatValue")
        spent_layout.addWidget(self._spent_label)
        row.addWidget(spent_box)

        budget_box = QtWidgets.QGroupBox("Monthly Budget")
        budget_layout = QtWidgets.QVBoxLayout(budget_box)
        self._budget_spin = QtWidgets.QDoubleSpinBox()
        self._budget_spin.setRange(0, 1_000_000_000)
        self._budget_spin.setDecimals(0)
        self._budget_spin.setSingleStep(1000)
        self._budget_spin.setPrefix("₹")
        self._budget_spin.setKeyboardTracking(False)
        self._remaining_label = QtWidgets.QLabel()
        budget_layout.addWidget(self._budget_spin)
        budget_layout.addWidget(self._remaining_label)
        row.addWidget(budget_box)

        usage_box = QtWidgets.QGroupBox("Budget Used")
        usage_layout = QtWidgets.QVBoxLayout(usage_box)
        self._usage_label = QtWidgets.QLabel()
        self._usage_label.setObjectName("StatValue")
        self._usage_bar = QtWidgets.QProgressBar()
        self._usage_bar.setRange(0, 100)
        self._usage_bar.setTextVisible(False)
        usage_layout.addWidget(self._usage_label)
        usage_layout.addWidget(self._usage_bar)
        row.addWidget(usage_box)
        return row

    def _build_form(self) -> QtWidgets.QGroupBox:
        box = QtWidgets.QGroupBox("Add Expense")
        form = QtWidgets.QFormLayout(box)

        self._title_edit = QtWidgets.QLineEdit()
        self._title_edit.setPlaceholderText("e.g. Groceries")
        self._title_edit.setMaxLength(200)
        self._amount_edit = QtWidgets.QLineEdit()
        self._amount_edit.setPlaceholderText("0")
        self._amount_edit.setValidator(QtGui.QDoubleValidator(0.0, 1e12, 2, self._amount_edit))
        self._category_combo = QtWidgets.QComboBox()
        self._category_combo.setEditable(True)
        self._category_combo.addItems(list(CATEGORIES))
        self._date_edit = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self._date_edit.setCalendarPopup(True)
        self._description_edit = QtWidgets.QLineEdit()
        self._description_edit.setPlaceholderText("Optional notes")
        self._add_button = QtWidgets.QPushButton("Add Expense")

        form.addRow("Title", self._title_edit)
        form.addRow("Amount (₹)", self._amount_edit)
        form.addRow("Category", self._category_combo)
        form.addRow("Date", self._date_edit)
        form.addRow("Description", self._description_edit)
        form.addRow(self._add_button)
        return box

    def _connect_signals(self) -> None:
        self._resync_button.clicked.connect(self._controller.resync)
        self._theme_button.clicked.connect(self._controller.toggle_theme)
        self._dismiss_button.clicked.connect(self._controller.dismiss_error)
        self._add_button.clicked.connect(self._controller.submit)
        self._budget_spin.valueChanged.connect(self._on_budget_changed)
        self._title_edit.textEdited.connect(lambda text: self._controller.edit_form(title=text))
        self._amount_edit.textEdited.connect(self._on_amount_edited)
        self._category_combo.currentTextChanged.connect(
            lambda text: self._controller.edit_form(category=text)
        )
        self._date_edit.dateChanged.connect(
            lambda value: self._controller.edit_form(date=value.toPython())
        )
        self._description_edit.textEdited.connect(
            lambda text: self._controller.edit_form(description=text)
        )

    # ------------------------------------------------------------------
    def _on_amount_edited(self, text: str) -> None:
        try:
            amount = float(text) if text.strip() else None
        except ValueError:
            amount = None
        self._controller.edit_form(amount=amount)

    def _on_budget_changed(self, value: float) -> None:
        if value == self._controller.state.budget:
            return
        try:
            self._controller.set_budget(value)
        except ValueError as exc:
            LOG.warning("Budget rejected: %s", exc)

    def _delete(self, expense_id: str) -> None:
        self._controller.delete(expense_id)

    # ------------------------------------------------------------------
    def _render(self, state: AppState) -> None:
        tokens = load_tokens(state.dark_mode)
        if state.dark_mode != self._dark_mode:
            self._dark_mode = state.dark_mode
            target = self._app or self
            target.setStyleSheet(apply_tokens(state.dark_mode))
        self._theme_button.setText("Light mode" if state.dark_mode else "Dark mode")

        self._error_row.setVisible(bool(state.error))
        self._error_label.setText(state.error or "")

        self._spent_label.setText(format_inr(state.total_spent))
        self._budget_spin.blockSignals(True)
        self._budget_spin.setValue(state.budget)
        self._budget_spin.blockSignals(False)
        remaining_color = tokens["color.danger"] if state.is_over_budget else tokens["color.muted"]
        self._remaining_label.setText(f"Remaining: {format_inr(state.remaining)}")
        self._remaining_label.setStyleSheet(f"color: {remaining_color};")

        percentage = state.spend_percentage
        color = level_color(state.usage_level, tokens)
        self._usage_label.setText(f"{percentage:.1f}%")
        self._usage_label.setStyleSheet(f"color: {color};")
        self._usage_bar.setValue(int(round(percentage)))
        self._usage_bar.setStyleSheet(f"QProgressBar::chunk {{ background-color: {color}; }}")

        self._sync_form(state)
        self._add_button.setEnabled(not state.submitting)
        self._add_button.setText("Saving..." if state.submitting else "Add Expense")
        self._resync_button.setEnabled(not state.loading)

        self._render_history(state)
        self._render_chart(state)

    def _sync_form(self, state: AppState) -> None:
        draft = state.draft
        if self._title_edit.text() != draft.title:
            self._title_edit.setText(draft.title)
        if draft.amount is None and self._amount_edit.text():
            self._amount_edit.clear()
        if self._description_edit.text() != draft.description:
            self._description_edit.setText(draft.description)

    def _render_history(self, state: AppState) -> None:
        self._table.setRowCount(0)
        for expense in state.expenses:
            row = self._table.rowCount()
            self._table.insertRow(row)
            self._table.setItem(row, 0, QtWidgets.QTableWidgetItem(format_date(expense.display_date)))
            title_item = QtWidgets.QTableWidgetItem(expense.title)
            if expense.description:
                title_item.setToolTip(expense.description)
            self._table.setItem(row, 1, title_item)
            self._table.setItem(row, 2, QtWidgets.QTableWidgetItem(expense.category))
            amount_item = QtWidgets.QTableWidgetItem(format_inr(expense.amount))
            amount_item.setTextAlignment(QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
            self._table.setItem(row, 3, amount_item)

            button = QtWidgets.QPushButton("Delete")
            button.setObjectName("DangerButton")
            button.setEnabled(expense.id not in state.pending_deletes)
            button.clicked.connect(lambda _checked=False, eid=expense.id: self._delete(eid))
            self._table.setCellWidget(row, 4, button)
        self._empty_label.setVisible(not state.expenses)

    def _render_chart(self, state: AppState) -> None:
        key = (tuple((e.category, e.amount) for e in state.expenses), state.dark_mode)
        if key == self._chart_key:
            return
        self._chart_key = key

        chart = aggregate_by_category(state.expenses)
        if not chart.has_data or chart.total <= 0:
            self._chart_label.clear()
            self._chart_label.setText(chart.message or "Nothing to chart yet")
            return
        path = render_pie_chart(chart, dark_mode=state.dark_mode)
        pixmap = QtGui.QPixmap(str(path))
        self._chart_label.setPixmap(
            pixmap.scaled(
                self._chart_label.size(),
                QtCore.Qt.KeepAspectRatio,
                QtCore.Qt.SmoothTransformation,
            )
        )

    # ------------------------------------------------------------------
    def closeEvent(self, event: Any) -> None:  # noqa: N802 - Qt override
        self._unsubscribe()
        super().closeEvent(event)


__all__ = ["ExpenseMainWindow"]
