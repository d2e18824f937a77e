"""Category breakdown of the expense list and its pie-chart rendering."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

import matplotlib
import matplotlib.pyplot as plt

from vaulttrack.infra.paths import report_path

from .models import Expense

__all__ = [
    "COLORS",
    "NO_DATA_MESSAGE",
    "CategoryTotal",
    "ChartData",
    "aggregate_by_category",
    "render_pie_chart",
]

matplotlib.use("Agg", force=True)

COLORS: tuple[str, ...] = ("#8884d8", "#82ca9d", "#ffc658", "#ff8042", "#0088FE", "#00C49F")
NO_DATA_MESSAGE = "Add expenses to see the chart"


class CategoryTotal(NamedTuple):
    category: str
    total: float


@dataclass(frozen=True)
class ChartData:
    """Per-category totals, or an explicit no-data marker for an empty list."""

    slices: tuple[CategoryTotal, ...] = ()

    @property
    def has_data(self) -> bool:
        return bool(self.slices)

    @property
    def message(self) -> str | None:
        return None if self.has_data else NO_DATA_MESSAGE

    @property
    def total(self) -> float:
        return sum((item.total for item in self.slices), 0.0)

    def as_dict(self) -> dict[str, float]:
        return {item.category: item.total for item in self.slices}


def aggregate_by_category(expenses: Iterable[Expense]) -> ChartData:
    """Sum amounts per category, keeping the order categories first appear in.

    Categories are compared exactly, so ``Food`` and ``food`` are distinct.
    """

    totals: dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return ChartData(tuple(CategoryTotal(category, total) for category, total in totals.items()))


def _resolve_path(path: Path | str | None, filename: str) -> Path:
    if path is None:
        return report_path(filename)
    path_obj = Path(path)
    if path_obj.is_dir():
        return path_obj / filename
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    return path_obj


def render_pie_chart(
    chart: ChartData,
    path: Path | str | None = None,
    *,
    dark_mode: bool = True,
    title: str | None = "Visual Analytics",
) -> Path:
    """Draw ``chart`` as a donut chart and save it as PNG.

    Args:
      chart: Aggregated category totals.
      path: Output file or directory; defaults to ``artifacts/reports``.
      dark_mode: Use light text on a dark background.
      title: Optional chart title.

    Raises:
      ValueError: If ``chart`` holds no data.
    """

    if not chart.has_data:
        raise ValueError(NO_DATA_MESSAGE)
    if chart.total <= 0:
        raise ValueError("All categories total zero; nothing to draw")

    output = _resolve_path(path, "expenses_by_category.png")
    background = "#1f2937" if dark_mode else "#ffffff"
    foreground = "#ffffff" if dark_mode else "#111827"

    labels = [item.category for item in chart.slices]
    values = [item.total for item in chart.slices]
    colors = [COLORS[index % len(COLORS)] for index in range(len(values))]

    fig, ax = plt.subplots(figsize=(5, 5), facecolor=background)
    try:
        ax.set_facecolor(background)
        ax.pie(
            values,
            labels=labels,
            colors=colors,
            startangle=90,
            counterclock=False,
            wedgeprops={"width": 0.35, "edgecolor": background, "linewidth": 3},
            textprops={"color": foreground},
        )
        ax.set_aspect("equal")
        if title:
            ax.set_title(title, color=foreground)
        fig.tight_layout()
        fig.savefig(output, dpi=120, facecolor=background)
    finally:
        plt.close(fig)
    return output
