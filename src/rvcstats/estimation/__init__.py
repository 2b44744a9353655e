"""
Design-based estimation for stratified RVC surveys.
"""

from .api import ESTIMATORS, get_stat
from .base import AggregationResult, BaseEstimator
from .config import EstimatorConfig
from .estimators import (
    AbundanceEstimator,
    BiomassEstimator,
    DensityEstimator,
    LengthFrequencyEstimator,
    OccurrenceEstimator,
    abundance,
    biomass,
    density,
    length_frequency,
    occurrence,
)
from .growth import GrowthParameters, individual_mass
from .length_class import LengthBreakpoint, LifeHistoryReference, partition_by_length

__all__ = [
    "ESTIMATORS",
    "AbundanceEstimator",
    "AggregationResult",
    "BaseEstimator",
    "BiomassEstimator",
    "DensityEstimator",
    "EstimatorConfig",
    "GrowthParameters",
    "LengthBreakpoint",
    "LengthFrequencyEstimator",
    "LifeHistoryReference",
    "OccurrenceEstimator",
    "abundance",
    "biomass",
    "density",
    "get_stat",
    "individual_mass",
    "length_frequency",
    "occurrence",
    "partition_by_length",
]
