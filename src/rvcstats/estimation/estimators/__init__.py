"""
Statistic estimators.

Each module provides an estimator class and a function of the same name as
the statistic.
"""

from .abundance import AbundanceEstimator, abundance
from .biomass import BiomassEstimator, biomass
from .density import DensityEstimator, density
from .length_frequency import LengthFrequencyEstimator, length_frequency
from .occurrence import OccurrenceEstimator, occurrence

__all__ = [
    "AbundanceEstimator",
    "BiomassEstimator",
    "DensityEstimator",
    "LengthFrequencyEstimator",
    "OccurrenceEstimator",
    "abundance",
    "biomass",
    "density",
    "length_frequency",
    "occurrence",
]
