"""
Display helpers for estimate tables.
"""

from __future__ import annotations

from typing import Optional

import polars as pl
from rich.console import Console
from rich.table import Table


def estimate_table(
    df: pl.DataFrame,
    title: str = "",
    max_rows: int = 20,
    precision: int = 4,
) -> Table:
    """
    Build a Rich table from an estimate DataFrame.

    Numeric columns are right aligned; nulls (unsampled groups) show as "-".

    Parameters
    ----------
    df : pl.DataFrame
        Result of an estimation function.
    title : str, optional
        Table title.
    max_rows : int, optional
        Maximum rows to include. Defaults to 20.
    precision : int, optional
        Decimal places for floating point numbers. Defaults to 4.

    Returns
    -------
    rich.table.Table
    """
    table = Table(title=title or None, show_header=True, header_style="bold cyan")

    for col in df.columns:
        table.add_column(col, justify="right" if df[col].dtype.is_numeric() else "left")

    for row in df.head(max_rows).iter_rows():
        formatted_row = []
        for val in row:
            if val is None:
                formatted_row.append("-")
            elif isinstance(val, float):
                formatted_row.append(f"{val:,.{precision}f}")
            elif isinstance(val, int):
                formatted_row.append(f"{val:,}")
            else:
                formatted_row.append(str(val))
        table.add_row(*formatted_row)

    return table


def display_estimate(
    df: pl.DataFrame,
    title: str = "",
    max_rows: int = 20,
    precision: int = 4,
    console: Optional[Console] = None,
) -> None:
    """
    Print an estimate DataFrame as a Rich table.

    Example
    -------
    >>> result = density(dataset, level="stratum")
    >>> display_estimate(result, title="Red grouper density by stratum")
    """
    console = console or Console()
    console.print(estimate_table(df, title, max_rows, precision))

    if len(df) > max_rows:
        console.print(f"[dim]... showing {max_rows} of {len(df)} rows[/dim]")
