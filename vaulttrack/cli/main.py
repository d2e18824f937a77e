"""Command-line interface for the VaultTrack server and expense client."""

from __future__ import annotations

import argparse
import math
import sys
from datetime import date, datetime
from pathlib import Path

from vaulttrack.client.api import ExpenseApiClient
from vaulttrack.client.chart import aggregate_by_category, render_pie_chart
from vaulttrack.client.controller import ExpenseController
from vaulttrack.client.errors import ClientError
from vaulttrack.client.formatting import format_date, format_inr
from vaulttrack.client.models import DEFAULT_CATEGORY, ExpenseDraft
from vaulttrack.infra.settings import JsonFileSettingsStore
from vaulttrack.logging import configure_cli_logging

DESCRIPTION = "VaultTrack personal expense tracker"
PREFIX = "[vaulttrack]"


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:  # pragma: no cover - argparse validation
        raise argparse.ArgumentTypeError("Expected YYYY-MM-DD date format") from exc


def _parse_amount(value: str) -> float:
    try:
        amount = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Amount must be a number, got {value!r}") from exc
    if not math.isfinite(amount):
        raise argparse.ArgumentTypeError(f"Amount must be a finite number, got {value!r}")
    if amount < 0:
        raise argparse.ArgumentTypeError("Amount must not be negative")
    return amount


def _add_serve_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    serve = subparsers.add_parser("serve", help="Run the expense API server")
    serve.add_argument("--host", help="Interface to bind (default: VAULTTRACK_HOST)")
    serve.add_argument("--port", type=int, help="Port to listen on (default: VAULTTRACK_PORT)")
    serve.add_argument("--reload", action="store_true", help="Restart on source changes")


def _add_list_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    subparsers.add_parser("list", help="Print every expense, most recent first")


def _add_add_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    add = subparsers.add_parser("add", help="Record a new expense")
    add.add_argument("title", help="Short label, e.g. Groceries")
    add.add_argument("amount", type=_parse_amount, help="Amount in rupees")
    add.add_argument("--category", default=DEFAULT_CATEGORY, help="Category label")
    add.add_argument("--date", type=_parse_date, help="Expense date (YYYY-MM-DD, default today)")
    add.add_argument("--description", default="", help="Optional notes")


def _add_delete_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    delete = subparsers.add_parser("delete", help="Remove an expense by id")
    delete.add_argument("expense_id", help="Identifier printed by `list`")


def _add_summary_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    summary = subparsers.add_parser("summary", help="Show totals, budget usage and categories")
    summary.add_argument(
        "--chart",
        type=Path,
        help="Also save the category pie chart as PNG at this path",
    )
    summary.add_argument(
        "--dark",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Render the chart on a dark background",
    )


def _add_budget_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    budget = subparsers.add_parser("budget", help="Show or change the stored budget")
    budget.add_argument("value", nargs="?", help="New budget in rupees")


def _add_gui_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    gui = subparsers.add_parser("gui", help="Open the desktop dashboard")
    gui.add_argument("--no-exec", action="store_true", help=argparse.SUPPRESS)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vaulttrack", description=DESCRIPTION)
    parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Mirror logs to artifacts/logs/vaulttrack.log in JSON format",
    )
    parser.add_argument("--api-url", help="Expense API base URL (default: VAULTTRACK_API_URL)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--settings", type=Path, help="Settings file holding the budget")
    sub = parser.add_subparsers(dest="cmd", required=True)
    _add_serve_subparser(sub)
    _add_list_subparser(sub)
    _add_add_subparser(sub)
    _add_delete_subparser(sub)
    _add_summary_subparser(sub)
    _add_budget_subparser(sub)
    _add_gui_subparser(sub)
    return parser


def _api(args: argparse.Namespace) -> ExpenseApiClient:
    return ExpenseApiClient(args.api_url, timeout=args.timeout)


def _controller(args: argparse.Namespace) -> ExpenseController:
    return ExpenseController(_api(args), JsonFileSettingsStore(args.settings))


def _handle_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from backend.config import settings

    host = args.host or settings.host
    port = args.port or settings.port
    print(f"{PREFIX} serving on http://{host}:{port}/api/expenses")
    uvicorn.run("backend.server:app", host=host, port=port, reload=bool(args.reload))
    return 0


def _handle_list(args: argparse.Namespace) -> int:
    expenses = _api(args).list_expenses()
    print(f"{PREFIX} {len(expenses)} expenses")
    for expense in expenses:
        print(
            f"  {format_date(expense.display_date)}  {expense.title:<24}  "
            f"{expense.category:<14}  {format_inr(expense.amount):>12}  {expense.id}"
        )
    return 0


def _handle_add(args: argparse.Namespace) -> int:
    draft = ExpenseDraft(
        title=args.title,
        amount=args.amount,
        category=args.category,
        date=args.date or date.today(),
        description=args.description,
    )
    missing = draft.missing_fields()
    if missing:
        print(f"{PREFIX} missing required fields: {', '.join(missing)}", file=sys.stderr)
        return 1
    expense = _api(args).create_expense(draft.to_payload())
    print(f"{PREFIX} added {expense.id} {expense.title} {format_inr(expense.amount)}")
    return 0


def _handle_delete(args: argparse.Namespace) -> int:
    _api(args).delete_expense(args.expense_id)
    print(f"{PREFIX} deleted {args.expense_id}")
    return 0


def _handle_summary(args: argparse.Namespace) -> int:
    controller = _controller(args)
    state = controller.start()
    if state.error:
        print(f"{PREFIX} error: {state.error}", file=sys.stderr)
        return 1
    print(f"{PREFIX} total spent {format_inr(state.total_spent)}")
    print(f"{PREFIX} budget {format_inr(state.budget)}")
    print(f"{PREFIX} remaining {format_inr(state.remaining)}")
    print(f"{PREFIX} used {state.spend_percentage:.1f}% ({state.usage_level})")
    chart = aggregate_by_category(state.expenses)
    if not chart.has_data:
        print(f"{PREFIX} {chart.message}")
        return 0
    for item in chart.slices:
        print(f"  {item.category:<14}  {format_inr(item.total):>12}")
    if args.chart is not None:
        try:
            path = render_pie_chart(chart, args.chart, dark_mode=args.dark)
        except ValueError as exc:
            print(f"{PREFIX} chart skipped: {exc}")
        else:
            print(f"{PREFIX} chart written to {path}")
    return 0


def _handle_budget(args: argparse.Namespace) -> int:
    settings = JsonFileSettingsStore(args.settings)
    controller = ExpenseController(_api(args), settings)
    if args.value is None:
        budget = controller.load_budget()
        print(f"{PREFIX} budget {format_inr(budget)} ({settings.path})")
        return 0
    try:
        state = controller.set_budget(args.value)
    except ValueError as exc:
        print(f"{PREFIX} {exc}", file=sys.stderr)
        return 1
    print(f"{PREFIX} budget set to {format_inr(state.budget)}")
    return 0


def _handle_gui(args: argparse.Namespace) -> int:
    from vaulttrack.gui import launch_gui

    config = {
        "api_url": args.api_url,
        "timeout": args.timeout,
        "settings_path": args.settings,
    }
    if not launch_gui(config, auto_exec=not args.no_exec):
        print(f"{PREFIX} GUI unavailable: install the `gui` extra", file=sys.stderr)
        return 1
    return 0


_HANDLERS = {
    "serve": _handle_serve,
    "list": _handle_list,
    "add": _handle_add,
    "delete": _handle_delete,
    "summary": _handle_summary,
    "budget": _handle_budget,
    "gui": _handle_gui,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(json_logs=bool(args.json_logs))
    try:
        return _HANDLERS[args.cmd](args)
    except ClientError as exc:
        print(f"{PREFIX} error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation
    sys.exit(main())
