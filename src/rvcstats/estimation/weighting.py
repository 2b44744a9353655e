"""
Stratum expansion weights.

Each sampled station stands for ``wh = NTOT / n`` stations of its stratum.
When-present statistics use ``wh_m = NMTOT / nm`` over the stations where
the species was seen.
"""

from __future__ import annotations

import polars as pl

from ..core.exceptions import DivisionUndefined, InvalidDatasetError
from .constants import NMTOT, NTOT


def stratum_weight(total: float, sampled: int) -> float:
    """Expansion weight of one station: ``total / sampled``."""
    if sampled == 0:
        raise DivisionUndefined([{"total": total}])
    if total < sampled:
        raise InvalidDatasetError(f"frame size {total} is smaller than sample size {sampled}")
    return total / sampled


def compute_weights(
    strata: pl.DataFrame, keys: list[str], when_present: bool = False
) -> pl.DataFrame:
    """
    Add ``wh`` (and ``wh_m`` when requested) to per-stratum sample sizes.

    Parameters
    ----------
    strata : pl.DataFrame
        One row per stratum with NTOT, n and, in when-present mode, NMTOT
        and nm.
    keys : list[str]
        Columns identifying a stratum, used in error messages.
    when_present : bool
        Also compute ``wh_m = NMTOT / nm``.

    Raises
    ------
    DivisionUndefined
        If a stratum has zero sampled (or present) stations.
    InvalidDatasetError
        If the frame size is smaller than the sample size.
    """
    pairs = [(NTOT, "n", "wh")]
    if when_present:
        pairs.append((NMTOT, "nm", "wh_m"))

    for total_col, size_col, _ in pairs:
        empty = strata.filter(pl.col(size_col) == 0)
        if not empty.is_empty():
            raise DivisionUndefined(empty.select(keys).unique().to_dicts(), size_col)
        short = strata.filter(pl.col(total_col) < pl.col(size_col))
        if not short.is_empty():
            raise InvalidDatasetError(
                f"{total_col} < {size_col} for strata: "
                f"{short.select(keys).unique().to_dicts()}"
            )

    return strata.with_columns(
        [
            (pl.col(total_col).cast(pl.Float64) / pl.col(size_col)).alias(weight_col)
            for total_col, size_col, weight_col in pairs
        ]
    )
