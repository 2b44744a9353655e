"""
Exceptions raised by rvcstats.

Every error here describes a deterministic data-completeness problem. None
of them are retried; the remedy is always caller-supplied data or
parameters.
"""

from __future__ import annotations

from typing import Iterable, Optional


class RVCStatsError(Exception):
    """Base class for all rvcstats errors."""


class InvalidDatasetError(RVCStatsError):
    """Input tables do not match the expected schema or invariants."""


class MultipleRegionsError(InvalidDatasetError):
    """Sample data spans more than one region."""

    def __init__(self, regions: Iterable[str]):
        self.regions = sorted(str(r) for r in regions)
        super().__init__(
            f"Only one region can be estimated at a time, found: "
            f"{', '.join(self.regions)}. Select a single region before "
            f"computing statistics."
        )


class MissingStratumMetadata(RVCStatsError):
    """Sample data references a stratum absent from the stratum table."""

    def __init__(self, missing_keys: list[dict]):
        self.missing_keys = missing_keys
        shown = "; ".join(
            ", ".join(f"{k}={v}" for k, v in key.items()) for key in missing_keys[:5]
        )
        more = f" (and {len(missing_keys) - 5} more)" if len(missing_keys) > 5 else ""
        super().__init__(
            f"No stratum_data row for {len(missing_keys)} sampled stratum key(s): "
            f"{shown}{more}. Every sampled stratum needs NTOT."
        )


class DivisionUndefined(RVCStatsError):
    """A weight was requested for a stratum with no sampled stations."""

    def __init__(self, strata: list[dict], sample_col: str = "n"):
        self.strata = strata
        shown = "; ".join(
            ", ".join(f"{k}={v}" for k, v in key.items()) for key in strata[:5]
        )
        super().__init__(
            f"Stratum weight undefined where {sample_col} = 0: {shown}. "
            f"Exclude unsampled strata before weighting."
        )


class MissingGrowthParameters(RVCStatsError):
    """Biomass requested for species without allometric growth parameters."""

    def __init__(self, species: Iterable[str]):
        self.species = sorted(species)
        super().__init__(
            f"No growth parameters (a, b) for species: {', '.join(self.species)}. "
            f"Pass growth_parameters={{species: (a, b)}} or supply lhp_data "
            f"with WLEN_A and WLEN_B."
        )


class UnresolvableLengthClass(RVCStatsError):
    """A keyword length class could not be resolved from life-history data."""

    def __init__(self, species: str, key: str, reason: Optional[str] = None):
        self.species = species
        self.key = key
        detail = reason or "no life-history row"
        super().__init__(
            f"Cannot resolve length class '{key}' for {species}: {detail}. "
            f"Pass a numeric breakpoint instead."
        )


class EmptyGroup(RVCStatsError):
    """An output group would have a zero sampling-frame total."""

    def __init__(self, groups: list[dict], total_col: str = "NTOT"):
        self.groups = groups
        shown = "; ".join(
            ", ".join(f"{k}={v}" for k, v in key.items()) for key in groups[:5]
        )
        super().__init__(f"Cannot report groups with {total_col} = 0: {shown}")
