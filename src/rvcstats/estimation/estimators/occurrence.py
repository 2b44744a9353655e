"""
Occurrence estimation.

Proportion of stations where a species was observed.
"""

from __future__ import annotations

from typing import Any, Optional

import polars as pl

from ...core.dataset import SurveyDataset
from ..aggregation import VarianceFn
from ..base import BaseEstimator
from ..constants import NUM, VALUE
from ..variance import binomial_station_variance


class OccurrenceEstimator(BaseEstimator):
    """Presence indicator per station, with binomial variance."""

    statistic = "occurrence"

    def variance_fn(self) -> VarianceFn:
        return binomial_station_variance

    def calculate_values(self, data: pl.LazyFrame) -> pl.LazyFrame:
        return data.with_columns((pl.col(NUM) > 0).cast(pl.Float64).alias(VALUE))


def occurrence(
    dataset: SurveyDataset,
    level: str = "domain",
    merge_protected: bool = True,
    length_class: Optional[Any] = None,
) -> pl.DataFrame:
    """
    Estimate the proportion of stations occupied by each species.

    Parameters
    ----------
    dataset : SurveyDataset
        Filtered RVC tables.
    level : {'domain', 'stratum'}, default 'domain'
        Aggregation level.
    merge_protected : bool, default True
        Pool protected and unprotected strata.
    length_class : float, str or mapping, optional
        Breakpoint splitting occurrence by length class.

    Returns
    -------
    pl.DataFrame
        Estimates with an ``occurrence`` column.

    Notes
    -----
    There is no ``when_present`` option: restricted to occupied stations the
    proportion would always be 1.
    """
    config = {
        "level": level,
        "merge_protected": merge_protected,
        "length_class": length_class,
    }
    return OccurrenceEstimator(dataset, config).estimate()
