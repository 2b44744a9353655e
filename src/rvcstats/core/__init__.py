"""Core data structures and exceptions."""

from .dataset import SurveyDataset
from .exceptions import (
    DivisionUndefined,
    EmptyGroup,
    InvalidDatasetError,
    MissingGrowthParameters,
    MissingStratumMetadata,
    MultipleRegionsError,
    RVCStatsError,
    UnresolvableLengthClass,
)

__all__ = [
    "DivisionUndefined",
    "EmptyGroup",
    "InvalidDatasetError",
    "MissingGrowthParameters",
    "MissingStratumMetadata",
    "MultipleRegionsError",
    "RVCStatsError",
    "SurveyDataset",
    "UnresolvableLengthClass",
]
