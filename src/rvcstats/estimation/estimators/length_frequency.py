"""
Length frequency estimation.

Each station's lengths are summarised by their minimum, median and maximum
and represented by a triangular distribution on [min, max] with its mode at
the median. The distribution spreads the station count over length bins:

    y_bin = NUM × (F(upper) - F(lower))

Bin densities are then estimated exactly like density, giving a frequency
curve over length for every output group. A station whose lengths are all
equal puts its whole count in the bin holding that length.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Sequence

import numpy as np
import polars as pl
from scipy import stats

from ...core.dataset import SurveyDataset
from ...core.exceptions import InvalidDatasetError
from ..base import BaseEstimator
from ..constants import LEN, LENGTH, NUM, VALUE

logger = logging.getLogger(__name__)


def default_length_bins(lengths: pl.Series) -> np.ndarray:
    """1 cm bins covering every recorded length."""
    flat = lengths.explode().drop_nulls()
    if flat.is_empty():
        raise InvalidDatasetError(
            "No lengths recorded in sample_data; pass length_bins explicitly"
        )
    lower = math.floor(flat.min())
    upper = math.floor(flat.max()) + 1
    return np.arange(lower, upper + 1, dtype=float)


def triangular_bin_probabilities(
    low: np.ndarray, mode: np.ndarray, high: np.ndarray, edges: np.ndarray
) -> np.ndarray:
    """
    Probability mass of a triangular distribution in each bin.

    Parameters
    ----------
    low, mode, high : np.ndarray
        Per-station minimum, median and maximum length. NaN rows yield zeros.
    edges : np.ndarray
        Increasing bin edges; bins are ``[edges[i], edges[i+1])``.

    Returns
    -------
    np.ndarray
        Array of shape (stations, bins).
    """
    low = np.asarray(low, dtype=float)[:, None]
    mode = np.asarray(mode, dtype=float)[:, None]
    high = np.asarray(high, dtype=float)[:, None]
    edges = np.asarray(edges, dtype=float)[None, :]

    spread = high - low
    point = spread == 0
    scale = np.where(point, 1.0, spread)
    c = np.where(point, 0.5, (mode - low) / scale)

    with np.errstate(invalid="ignore"):
        cdf = stats.triang.cdf(edges, c, loc=low, scale=scale)
    step = (edges > low).astype(float)
    cdf = np.where(point, step, cdf)

    probs = np.diff(cdf, axis=1)
    return np.nan_to_num(probs, nan=0.0)


class LengthFrequencyEstimator(BaseEstimator):
    """Expected density per length bin."""

    statistic = "length_frequency"

    def get_required_columns(self) -> list[str]:
        cols = super().get_required_columns()
        if LEN not in cols:
            cols.append(LEN)
        return cols

    def get_group_columns(self) -> list[str]:
        return super().get_group_columns() + [LENGTH]

    def calculate_values(self, data: pl.LazyFrame) -> pl.LazyFrame:
        sample = data.collect()

        unmeasured = sample.filter((pl.col(NUM) > 0) & (pl.col(LEN).list.len() == 0))
        if not unmeasured.is_empty():
            raise InvalidDatasetError(
                f"{len(unmeasured)} station(s) counted fish without recording lengths; "
                f"cannot fit length frequencies"
            )

        if self.config.length_bins is not None:
            edges = np.asarray(self.config.length_bins, dtype=float)
        else:
            edges = default_length_bins(sample[LEN])
        logger.debug(f"Length frequency over {len(edges) - 1} bins")

        summary = sample.select(
            pl.col(LEN).list.min().cast(pl.Float64).alias("low"),
            pl.col(LEN).list.median().cast(pl.Float64).alias("mode"),
            pl.col(LEN).list.max().cast(pl.Float64).alias("high"),
        )
        probs = triangular_bin_probabilities(
            summary["low"].fill_null(np.nan).to_numpy(),
            summary["mode"].fill_null(np.nan).to_numpy(),
            summary["high"].fill_null(np.nan).to_numpy(),
            edges,
        )

        lowers = edges[:-1].tolist()
        return (
            sample.drop(LEN)
            .with_columns(
                pl.Series("_p", probs.tolist(), dtype=pl.List(pl.Float64)),
                pl.Series(LENGTH, [lowers] * len(sample), dtype=pl.List(pl.Float64)),
            )
            .explode([LENGTH, "_p"])
            .with_columns((pl.col(NUM).cast(pl.Float64) * pl.col("_p")).alias(VALUE))
            .drop("_p")
            .lazy()
        )


def length_frequency(
    dataset: SurveyDataset,
    level: str = "domain",
    when_present: bool = False,
    merge_protected: bool = True,
    length_bins: Optional[Sequence[float]] = None,
    length_class: Optional[Any] = None,
) -> pl.DataFrame:
    """
    Estimate a length frequency curve.

    Parameters
    ----------
    dataset : SurveyDataset
        Filtered RVC tables; sample_data must carry LEN.
    level : {'domain', 'stratum'}, default 'domain'
        Aggregation level.
    when_present : bool, default False
        Condition on stations where the species was observed.
    merge_protected : bool, default True
        Pool protected and unprotected strata.
    length_bins : sequence of float, optional
        Bin edges in cm. Defaults to 1 cm bins over the recorded lengths.
    length_class : float, str or mapping, optional
        Breakpoint splitting the curve by length class.

    Returns
    -------
    pl.DataFrame
        One row per group and bin, with ``length`` (bin lower edge) and
        ``frequency``.
    """
    config = {
        "level": level,
        "when_present": when_present,
        "merge_protected": merge_protected,
        "length_bins": list(length_bins) if length_bins is not None else None,
        "length_class": length_class,
    }
    return LengthFrequencyEstimator(dataset, config).estimate()
