"""
Single entry point for all statistics.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import polars as pl

from ..core.dataset import SurveyDataset
from .base import BaseEstimator
from .estimators import (
    AbundanceEstimator,
    BiomassEstimator,
    DensityEstimator,
    LengthFrequencyEstimator,
    OccurrenceEstimator,
)
from .growth import GrowthParameterMap

ESTIMATORS: dict[str, type[BaseEstimator]] = {
    "density": DensityEstimator,
    "occurrence": OccurrenceEstimator,
    "abundance": AbundanceEstimator,
    "biomass": BiomassEstimator,
    "length_frequency": LengthFrequencyEstimator,
}


def get_stat(
    dataset: SurveyDataset,
    stat: str,
    level: str = "domain",
    when_present: bool = False,
    merge_protected: bool = True,
    growth_parameters: Optional[GrowthParameterMap] = None,
    length_class: Optional[Any] = None,
    length_bins: Optional[Sequence[float]] = None,
) -> pl.DataFrame:
    """
    Compute a statistic from an RVC dataset.

    Parameters
    ----------
    dataset : SurveyDataset
        Filtered RVC tables.
    stat : {'density', 'occurrence', 'abundance', 'biomass', 'length_frequency'}
        Statistic to estimate.
    level : {'domain', 'stratum'}, default 'domain'
        Aggregation level.
    when_present : bool, default False
        Condition on stations where the species was observed. Not accepted
        for occurrence, whose when-present estimate is identically 1.
    merge_protected : bool, default True
        Pool protected and unprotected strata.
    growth_parameters : mapping, optional
        ``{species: (a, b)}`` for biomass.
    length_class : float, str or mapping, optional
        Length class breakpoint (cm, or 'lc'/'lm').
    length_bins : sequence of float, optional
        Bin edges for length_frequency.

    Returns
    -------
    pl.DataFrame
        Estimate table.

    Raises
    ------
    ValueError
        If ``stat`` is unknown.
    pydantic.ValidationError
        If a parameter is invalid, including ``when_present=True`` with
        ``stat="occurrence"``.

    Examples
    --------
    >>> get_stat(dataset, "density", level="stratum")
    >>> get_stat(dataset, "biomass", growth_parameters={"EPI MORI": (1e-5, 3.0)})
    """
    if stat not in ESTIMATORS:
        raise ValueError(f"stat must be one of {sorted(ESTIMATORS)}, got {stat!r}")

    config = {
        "level": level,
        "when_present": when_present,
        "merge_protected": merge_protected,
        "growth_parameters": growth_parameters,
        "length_class": length_class,
        "length_bins": list(length_bins) if length_bins is not None else None,
    }
    return ESTIMATORS[stat](dataset, config).estimate()
