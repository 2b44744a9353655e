"""
Base estimator workflow.

Every statistic follows the same steps:

    prepare_data      validate tables, partition by length class
    calculate_values  station value ``y`` for the statistic
    aggregate         weighted grouped reduction at stratum or domain level

Subclasses only supply ``calculate_values`` and, where the statistic needs
it, a different variance contribution or ``per_station = False``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import polars as pl

from ..core.dataset import SurveyDataset
from ..core.exceptions import InvalidDatasetError
from .aggregation import VarianceFn, weighted_grouped_reduction
from .config import EstimatorConfig
from .constants import (
    LEN,
    LENGTH_CLASS,
    NUM,
    PRESENT,
    REGION,
    REQUIRED_SAMPLE_COLUMNS,
    SPECIES,
    STAT_COLUMNS,
    STATION,
    VALUE,
)
from .length_class import partition_by_length, resolve_breakpoints
from .variance import stratified_station_variance

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """Estimates together with the station data they were computed from."""

    results: pl.DataFrame
    station_data: pl.DataFrame
    group_cols: list[str]


class BaseEstimator(ABC):
    """Template for RVC statistic estimators."""

    statistic: str = ""
    per_station: bool = True

    def __init__(self, dataset: SurveyDataset, config: Optional[Mapping[str, Any]] = None):
        self.dataset = dataset
        self.config = EstimatorConfig.from_dict({**(config or {}), "stat": self.statistic})

    @property
    def value_name(self) -> str:
        return STAT_COLUMNS[self.statistic]

    def variance_fn(self) -> VarianceFn:
        return stratified_station_variance

    def get_required_columns(self) -> list[str]:
        cols = list(REQUIRED_SAMPLE_COLUMNS)
        if self.config.length_class is not None:
            cols.append(LEN)
        if REGION in self.dataset.sample_data.columns:
            cols.append(REGION)
        return cols

    def get_group_columns(self) -> list[str]:
        cols = [SPECIES]
        if self.config.length_class is not None:
            cols.append(LENGTH_CLASS)
        return cols

    def prepare_data(self) -> pl.DataFrame:
        """Validate the dataset and return the sample rows to estimate from."""
        self.dataset.validate()
        if self.config.when_present and not self.dataset.has_nmtot:
            raise InvalidDatasetError("when_present statistics require NMTOT in stratum_data")

        cols = self.get_required_columns()
        missing = [c for c in cols if c not in self.dataset.sample_data.columns]
        if missing:
            raise InvalidDatasetError(
                f"{self.statistic} requires sample_data columns: {missing}"
            )
        sample = self.dataset.sample_data.select(cols)

        if self.config.length_class is not None:
            breakpoints = resolve_breakpoints(
                self.config.length_class, self.dataset.species(), self.dataset.lhp_data
            )
            sample = partition_by_length(sample, breakpoints)
            logger.debug(f"Partitioned {len(breakpoints)} species into length classes")

        return sample.with_columns((pl.col(NUM) > 0).alias(PRESENT))

    @abstractmethod
    def calculate_values(self, data: pl.LazyFrame) -> pl.LazyFrame:
        """Add the station value column ``y``."""

    def aggregate(self, stations: pl.DataFrame) -> AggregationResult:
        keys = self.dataset.stratum_keys
        group_cols = self.get_group_columns()
        station_cols = keys + [c for c in group_cols if c not in keys] + [STATION, VALUE, PRESENT]
        stations = stations.select(station_cols)

        results = weighted_grouped_reduction(
            stations,
            self.dataset.stratum_data,
            keys,
            group_cols,
            self.value_name,
            variance_fn=self.variance_fn(),
            level=self.config.level,
            merge_protected=self.config.merge_protected,
            when_present=self.config.when_present,
            per_station=self.per_station,
        )
        return AggregationResult(results=results, station_data=stations, group_cols=group_cols)

    def estimate(self) -> pl.DataFrame:
        """Run the full workflow and return the estimate table."""
        logger.debug(
            f"Estimating {self.statistic} at {self.config.level} level "
            f"(when_present={self.config.when_present}, "
            f"merge_protected={self.config.merge_protected})"
        )
        sample = self.prepare_data()
        stations = self.calculate_values(sample.lazy()).collect()
        return self.aggregate(stations).results
