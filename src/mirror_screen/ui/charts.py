"""Terminal line-chart rendering for forecast series."""

from __future__ import annotations

from collections.abc import Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

BLOCKS = "▁▂▃▄▅▆▇█"


def spark_levels(values: Sequence[float]) -> list[int]:
    """Scale values onto block-glyph indices; a flat series sits at the bottom."""
    if not values:
        return []
    low = min(values)
    high = max(values)
    span = high - low
    if span == 0:
        return [0 for _ in values]
    top = len(BLOCKS) - 1
    return [round((value - low) / span * top) for value in values]


def _format_value(value: float) -> str:
    return f"{value:g}"


def render_line_chart(
    *,
    title: str,
    values: Sequence[float],
    labels: Sequence[str],
    suffix: str,
) -> Panel:
    """Render one series as a column per point: value, glyph, x-axis label."""
    if not values:
        return Panel(Text("No data", style="dim"), title=title, border_style="white")

    table = Table.grid(padding=(0, 1))
    for _ in values:
        table.add_column(justify="center", min_width=5)
    table.add_row(*(Text(f"{_format_value(v)}{suffix}", style="bold") for v in values))
    table.add_row(*(Text(BLOCKS[level] * 3, style="white") for level in spark_levels(values)))
    table.add_row(*(Text(label, style="dim") for label in labels))
    return Panel(table, title=title, border_style="white")
