"""
Abundance estimation.

Total number of individuals in the stratum or domain: station counts
expanded by NTOT, without dividing back to a per-station rate.
"""

from __future__ import annotations

from typing import Any, Optional

import polars as pl

from ...core.dataset import SurveyDataset
from .density import DensityEstimator


class AbundanceEstimator(DensityEstimator):
    """Extrapolated population total."""

    statistic = "abundance"
    per_station = False


def abundance(
    dataset: SurveyDataset,
    level: str = "domain",
    when_present: bool = False,
    merge_protected: bool = True,
    length_class: Optional[Any] = None,
) -> pl.DataFrame:
    """
    Estimate total abundance.

    Abundance is additive: the domain estimate equals the sum of the stratum
    estimates.

    Parameters
    ----------
    dataset : SurveyDataset
        Filtered RVC tables.
    level : {'domain', 'stratum'}, default 'domain'
        Aggregation level.
    when_present : bool, default False
        Expand only stations where the species was observed, weighted by
        NMTOT.
    merge_protected : bool, default True
        Pool protected and unprotected strata.
    length_class : float, str or mapping, optional
        Breakpoint (cm, or 'lc'/'lm') splitting the total in two length
        classes.

    Returns
    -------
    pl.DataFrame
        Estimates with an ``abundance`` column.
    """
    config = {
        "level": level,
        "when_present": when_present,
        "merge_protected": merge_protected,
        "length_class": length_class,
    }
    return AbundanceEstimator(dataset, config).estimate()
