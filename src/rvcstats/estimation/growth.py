"""
Allometric growth parameters and biomass conversion.

Mass of an individual fish is ``a * length^b``. Parameters come from the
caller first, then from the life history table (WLEN_A, WLEN_B).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

import numpy as np
import polars as pl
from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import InvalidDatasetError, MissingGrowthParameters
from .constants import LEN, NUM, SPECIES, VALUE, WLEN_A, WLEN_B

logger = logging.getLogger(__name__)


class GrowthParameters(BaseModel):
    """Allometric length-weight coefficients for one species."""

    model_config = ConfigDict(frozen=True)

    a: float = Field(gt=0)
    b: float

    @classmethod
    def parse(cls, value: Any) -> "GrowthParameters":
        if isinstance(value, GrowthParameters):
            return value
        if isinstance(value, Mapping):
            return cls(**value)
        a, b = value
        return cls(a=a, b=b)

    @classmethod
    def from_mapping(
        cls, mapping: Optional[Mapping[str, Any]]
    ) -> dict[str, "GrowthParameters"]:
        """Validate a ``{species: (a, b)}`` mapping eagerly."""
        if not mapping:
            return {}
        return {str(species): cls.parse(params) for species, params in mapping.items()}


GrowthParameterMap = Mapping[str, Union[GrowthParameters, tuple, Mapping[str, float]]]


def individual_mass(length, params: GrowthParameters):
    """Mass of individuals of the given length(s): ``a * length^b``."""
    return params.a * np.power(length, params.b)


def resolve_growth_parameters(
    species: list[str],
    supplied: Optional[Mapping[str, GrowthParameters]],
    lhp_data: Optional[pl.DataFrame],
) -> dict[str, GrowthParameters]:
    """
    Find (a, b) for every requested species.

    Caller-supplied parameters take precedence over life history data.

    Raises
    ------
    MissingGrowthParameters
        If any species has no resolvable parameters.
    """
    supplied = dict(supplied or {})
    resolved: dict[str, GrowthParameters] = {}
    missing = []

    lhp_rows = {}
    if lhp_data is not None:
        lhp_rows = {row[SPECIES]: row for row in lhp_data.iter_rows(named=True)}

    for spc in species:
        if spc in supplied:
            resolved[spc] = supplied[spc]
            continue
        row = lhp_rows.get(spc)
        if row is None or row.get(WLEN_A) is None or row.get(WLEN_B) is None:
            missing.append(spc)
            continue
        resolved[spc] = GrowthParameters(a=row[WLEN_A], b=row[WLEN_B])
        logger.debug(f"Using life history growth parameters for {spc}")

    if missing:
        raise MissingGrowthParameters(missing)
    return resolved


def station_biomass(
    sample: pl.DataFrame, params: Mapping[str, GrowthParameters]
) -> pl.DataFrame:
    """
    Add the per-station biomass column ``y``.

    Each measured individual is converted to mass before summing. When fewer
    lengths were recorded than fish counted, the measured mean mass is scaled
    up to ``NUM`` individuals.

    Raises
    ------
    InvalidDatasetError
        If LEN is missing or a station counted fish without lengths.
    """
    if LEN not in sample.columns:
        raise InvalidDatasetError("biomass requires a LEN column of individual lengths")

    measured = pl.col(LEN).list.len().fill_null(0)
    unmeasured = sample.filter((pl.col(NUM) > 0) & (measured == 0))
    if not unmeasured.is_empty():
        raise InvalidDatasetError(
            f"{len(unmeasured)} station(s) counted fish without recording lengths; "
            f"biomass cannot be computed"
        )

    uncovered = [s for s in sample[SPECIES].unique().to_list() if s not in params]
    if uncovered:
        raise MissingGrowthParameters(uncovered)

    indexed = sample.with_row_index("_row")
    parts = []
    for spc, p in params.items():
        rows = indexed.filter(pl.col(SPECIES) == spc)
        if rows.is_empty():
            continue
        mass = pl.col(LEN).list.eval(p.a * pl.element().cast(pl.Float64).pow(p.b)).list.sum()
        parts.append(
            rows.with_columns(
                pl.when(pl.col(NUM) > 0)
                .then(mass * pl.col(NUM) / measured)
                .otherwise(0.0)
                .cast(pl.Float64)
                .alias(VALUE)
            )
        )

    if not parts:
        return sample.clear().with_columns(pl.lit(None, dtype=pl.Float64).alias(VALUE))
    return pl.concat(parts, how="vertical").sort("_row").drop("_row")
