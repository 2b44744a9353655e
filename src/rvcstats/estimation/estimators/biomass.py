"""
Biomass estimation.

Each measured individual is converted to mass with its species' allometric
growth parameters, ``a * length^b``, and summed into a station total before
weighting. The station totals are then estimated like density.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import polars as pl

from ...core.dataset import SurveyDataset
from ..base import BaseEstimator
from ..constants import LEN, SPECIES
from ..growth import GrowthParameterMap, resolve_growth_parameters, station_biomass


class BiomassEstimator(BaseEstimator):
    """Mean biomass per station."""

    statistic = "biomass"

    def get_required_columns(self) -> list[str]:
        cols = super().get_required_columns()
        if LEN not in cols:
            cols.append(LEN)
        return cols

    def calculate_values(self, data: pl.LazyFrame) -> pl.LazyFrame:
        sample = data.collect()
        species = sorted(sample[SPECIES].unique().to_list())
        params = resolve_growth_parameters(
            species, self.config.growth_parameters, self.dataset.lhp_data
        )
        return station_biomass(sample, params).lazy()


def biomass(
    dataset: SurveyDataset,
    level: str = "domain",
    when_present: bool = False,
    merge_protected: bool = True,
    growth_parameters: Optional[GrowthParameterMap] = None,
    length_class: Optional[Any] = None,
) -> pl.DataFrame:
    """
    Estimate biomass per station.

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
    growth_parameters : mapping, optional
        ``{species: (a, b)}``. Species without an entry fall back to WLEN_A
        and WLEN_B in lhp_data.
    length_class : float, str or mapping, optional
        Breakpoint splitting biomass by length class.

    Returns
    -------
    pl.DataFrame
        Estimates with a ``biomass`` column.

    Raises
    ------
    MissingGrowthParameters
        If a species has neither caller nor life history parameters.
    """
    config: Mapping[str, Any] = {
        "level": level,
        "when_present": when_present,
        "merge_protected": merge_protected,
        "growth_parameters": growth_parameters,
        "length_class": length_class,
    }
    return BiomassEstimator(dataset, config).estimate()
