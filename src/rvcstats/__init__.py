"""
rvcstats: design-based statistics for Reef Visual Census surveys.

Estimates density, occurrence, abundance, biomass and length frequency from
stratified station samples, by stratum or pooled over the survey domain.
"""

from .estimation import (
    EstimatorConfig,
    GrowthParameters,
    abundance,
    biomass,
    density,
    get_stat,
    length_frequency,
    occurrence,
)
from .core import (
    DivisionUndefined,
    EmptyGroup,
    InvalidDatasetError,
    MissingGrowthParameters,
    MissingStratumMetadata,
    MultipleRegionsError,
    RVCStatsError,
    SurveyDataset,
    UnresolvableLengthClass,
)

__version__ = "0.3.0"

__all__ = [
    "DivisionUndefined",
    "EmptyGroup",
    "EstimatorConfig",
    "GrowthParameters",
    "InvalidDatasetError",
    "MissingGrowthParameters",
    "MissingStratumMetadata",
    "MultipleRegionsError",
    "RVCStatsError",
    "SurveyDataset",
    "UnresolvableLengthClass",
    "abundance",
    "biomass",
    "density",
    "get_stat",
    "length_frequency",
    "occurrence",
]
