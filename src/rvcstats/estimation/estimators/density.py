"""
Density estimation.

Mean number of individuals per station (177 m²), stratified by
NTOT-weighted station totals.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import polars as pl

from ...core.dataset import SurveyDataset
from ..base import BaseEstimator
from ..constants import NUM, VALUE


class DensityEstimator(BaseEstimator):
    """Station density; with when_present, density where the species was seen."""

    statistic = "density"

    def calculate_values(self, data: pl.LazyFrame) -> pl.LazyFrame:
        return data.with_columns(pl.col(NUM).cast(pl.Float64).alias(VALUE))


def density(
    dataset: SurveyDataset,
    level: str = "domain",
    when_present: bool = False,
    merge_protected: bool = True,
    length_class: Optional[Any] = None,
) -> pl.DataFrame:
    """
    Estimate density per station.

    Parameters
    ----------
    dataset : SurveyDataset
        Filtered RVC tables.
    level : {'domain', 'stratum'}, default 'domain'
        Pool all strata, or report one row per stratum.
    when_present : bool, default False
        Average only stations where the species was observed, weighted by
        NMTOT.
    merge_protected : bool, default True
        Pool protected and unprotected strata.
    length_class : float, str or mapping, optional
        Breakpoint (cm, or 'lc'/'lm') splitting the estimate in two
        length classes.

    Returns
    -------
    pl.DataFrame
        One row per species and year (and stratum, protection status, length
        class) with NTOT, n, nm, density, var and se.

    Examples
    --------
    >>> density(dataset, level="stratum", merge_protected=False)
    """
    config: Mapping[str, Any] = {
        "level": level,
        "when_present": when_present,
        "merge_protected": merge_protected,
        "length_class": length_class,
    }
    return DensityEstimator(dataset, config).estimate()
